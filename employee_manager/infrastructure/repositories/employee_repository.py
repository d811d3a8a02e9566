"""
MongoDB Implementation of Employee Repository.
"""

import re
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from employee_manager.domain.models.employee import COLLECTION, Employee
from employee_manager.domain.repositories.employee_repository import EmployeeRepository
from employee_manager.infrastructure.repositories.base_repository import MongoRepository, to_object_id

if TYPE_CHECKING:
    from employee_manager.infrastructure.database import MongoStore


def contains_ignore_case(term: str) -> Dict[str, str]:
    """Literal substring match; regex metacharacters in the term are escaped."""
    return {"$regex": re.escape(term), "$options": "i"}


class MongoEmployeeRepository(MongoRepository[Employee], EmployeeRepository):
    """Employee repository implementation using MongoDB."""

    collection_name = COLLECTION
    entity_name = "Employee"

    def __init__(self, store: "MongoStore"):
        super().__init__(store, Employee)

    async def get_by_email(self, email: str, exclude_id: Optional[str] = None) -> Optional[Employee]:
        query: Dict[str, Any] = {"email": email}
        excluded = to_object_id(exclude_id) if exclude_id else None
        if excluded is not None:
            query["_id"] = {"$ne": excluded}
        return await self.find_one(query)

    async def search(self, department: Optional[str] = None, position: Optional[str] = None) -> List[Employee]:
        query: Dict[str, Any] = {}
        if department:
            query["department"] = contains_ignore_case(department)
        if position:
            query["position"] = contains_ignore_case(position)
        return await self.find_many(query)
