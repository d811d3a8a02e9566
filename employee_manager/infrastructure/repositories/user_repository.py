"""
MongoDB Implementation of User Repository.
"""

from typing import TYPE_CHECKING, Optional

from employee_manager.domain.models.user import COLLECTION, User
from employee_manager.domain.repositories.user_repository import UserRepository
from employee_manager.infrastructure.repositories.base_repository import MongoRepository

if TYPE_CHECKING:
    from employee_manager.infrastructure.database import MongoStore


class MongoUserRepository(MongoRepository[User], UserRepository):
    """User repository implementation using MongoDB."""

    collection_name = COLLECTION
    entity_name = "User"

    def __init__(self, store: "MongoStore"):
        super().__init__(store, User)

    async def get_by_email(self, email: str) -> Optional[User]:
        return await self.find_one({"email": email})

    async def get_by_username_or_email(self, username: str, email: str) -> Optional[User]:
        return await self.find_one({"$or": [{"email": email}, {"username": username}]})
