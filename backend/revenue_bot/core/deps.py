"""Long-lived clients shared by every command.

Built once in ``main()`` and attached to the bot; commands reach them via
``interaction.client.services``.
"""
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from revenue_bot.core.config import Settings
from revenue_bot.db.session import build_engine, build_sessionmaker, session_scope
from revenue_bot.services.stripe_gateway import StripeGateway


@dataclass
class BotServices:
    settings: Settings
    stripe: StripeGateway
    engine: AsyncEngine
    sessionmaker: async_sessionmaker[AsyncSession]

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        async with session_scope(self.sessionmaker) as db:
            yield db

    async def close(self) -> None:
        await self.engine.dispose()


def build_services(settings: Settings) -> BotServices:
    engine = build_engine(settings)
    return BotServices(
        settings=settings,
        stripe=StripeGateway(settings.STRIPE_SECRET_KEY, settings.STRIPE_API_VERSION),
        engine=engine,
        sessionmaker=build_sessionmaker(engine),
    )
