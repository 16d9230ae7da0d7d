"""Application container holding process-wide resources."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from marketplace.core.cache import TTLCache
from marketplace.core.config import Settings
from marketplace.core.errors import MarketplaceError
from marketplace.core.rate_limit import RateLimiter
from marketplace.infrastructure.database import Database
from marketplace.infrastructure.storage import ImageStore, LocalImageStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ApplicationContainer:
    settings: Settings
    database: Database
    cache: TTLCache
    image_store: ImageStore
    rate_limiter: RateLimiter = field(default_factory=RateLimiter)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ApplicationContainer":
        return cls(
            settings=settings,
            database=Database(settings.database),
            cache=TTLCache(ttl_seconds=settings.cache.ttl_seconds, max_entries=settings.cache.max_entries),
            image_store=LocalImageStore.from_settings(settings.storage),
        )

    async def startup(self) -> None:
        if self.settings.database.auto_create:
            await self.database.create_all()
        await self.bootstrap_admin()
        logger.info("%s started (%s)", self.settings.project_name, self.settings.environment)

    async def shutdown(self) -> None:
        self.cache.clear()
        await self.database.dispose()

    async def bootstrap_admin(self) -> None:
        """Create the configured administrator account when it does not exist yet."""
        security = self.settings.security
        if not security.bootstrap_admin_email or not security.bootstrap_admin_password:
            return

        from marketplace.modules.users import ROLE_ADMIN, UserCreateInput, UserService

        async with self.database.transaction() as session:
            service = UserService.with_session(session, password_rounds=security.bcrypt_rounds)
            existing = await service.find_by_email(security.bootstrap_admin_email)
            if existing is not None:
                return
            try:
                admin = await service.register(
                    UserCreateInput(
                        name=security.bootstrap_admin_name,
                        email=security.bootstrap_admin_email,
                        password=security.bootstrap_admin_password,
                        role=ROLE_ADMIN,
                    )
                )
            except MarketplaceError as exc:
                logger.error("Admin bootstrap failed: %s", exc.message)
                raise
        logger.info("Bootstrapped administrator %s", admin.email)


__all__ = ["ApplicationContainer"]
