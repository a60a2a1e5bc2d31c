import asyncio
import logging
import signal
import sys

import sentry_sdk

from revenue_bot.bot import RevenueBot
from revenue_bot.core.config import Settings, get_settings
from revenue_bot.core.deps import build_services
from revenue_bot.core.logging import setup_logging

logger = logging.getLogger(__name__)


def init_sentry(settings: Settings) -> None:
    if not settings.SENTRY_DSN:
        return
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        environment=settings.APP_ENV,
        send_default_pii=False,
    )
    logger.info("Sentry initialized")


async def run_bot(settings: Settings) -> None:
    bot = RevenueBot(build_services(settings))

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, lambda s=sig: asyncio.create_task(_shutdown(bot, s)))

    async with bot:
        await bot.start(settings.DISCORD_BOT_TOKEN)


async def _shutdown(bot: RevenueBot, sig: signal.Signals) -> None:
    logger.info("Received %s, shutting down gracefully...", sig.name)
    await bot.close()


def main() -> None:
    setup_logging()
    settings = get_settings()

    missing = settings.missing_required()
    if missing:
        logger.error("Missing required environment variables: %s", ", ".join(missing))
        sys.exit(1)

    init_sentry(settings)
    logger.info("Starting revenue bot (env=%s, UTC%+d)", settings.APP_ENV, settings.TIMEZONE_OFFSET_HOURS)
    asyncio.run(run_bot(settings))
    logger.info("Bot stopped")


if __name__ == "__main__":
    main()
