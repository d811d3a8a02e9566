"""
User Repository Interface.
Defines specific data access operations for Users.
"""

from typing import Optional

from employee_manager.domain.models.user import User
from employee_manager.domain.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Interface for User-specific operations."""

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get the user registered with an email address."""
        ...

    async def get_by_username_or_email(self, username: str, email: str) -> Optional[User]:
        """Get any user whose username or email matches."""
        ...
