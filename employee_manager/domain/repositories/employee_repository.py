"""
Employee Repository Interface.
Defines specific data access operations for Employees.
"""

from typing import List, Optional

from employee_manager.domain.models.employee import Employee
from employee_manager.domain.repositories.base import BaseRepository


class EmployeeRepository(BaseRepository[Employee]):
    """Interface for Employee-specific operations.

    `list` and `search` return newest records first.
    """

    async def get_by_email(self, email: str, exclude_id: Optional[str] = None) -> Optional[Employee]:
        """Get the employee using an email address, optionally ignoring one record."""
        ...

    async def search(self, department: Optional[str] = None, position: Optional[str] = None) -> List[Employee]:
        """Case-insensitive substring match on department and/or position."""
        ...
