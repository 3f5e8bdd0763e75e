"""
Manager Auth Service

Dashboard managers log in with a username and password stored as-is.
Credentials are compared by exact, case-sensitive equality.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.models import Manager

logger = logging.getLogger(__name__)


class ManagerAuthService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _find(self, username: str, password: str) -> Optional[Manager]:
        result = await self.db.execute(
            select(Manager)
            .where(Manager.username == username, Manager.password == password)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def login(self, username: str, password: str) -> bool:
        manager = await self._find(username, password)
        if manager is None:
            logger.info(f"Rejected login for '{username}'")
            return False
        return True

    async def change_credentials(
        self,
        current_user: str,
        current_password: str,
        new_user: str,
        new_password: str,
    ) -> bool:
        """
        Replace username and password of the matching manager in place.

        The new username is not checked against other accounts.
        """
        manager = await self._find(current_user, current_password)
        if manager is None:
            return False

        manager.username = new_user
        manager.password = new_password
        await self.db.commit()

        logger.info(f"Manager credentials changed ('{current_user}' -> '{new_user}')")
        return True

    async def create_manager(self, username: str, password: str) -> Manager:
        """Add a manager account. Used by the seeding script, not the API."""
        manager = Manager(username=username, password=password)
        self.db.add(manager)
        await self.db.commit()
        await self.db.refresh(manager)
        return manager
