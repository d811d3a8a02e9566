"""
API Dependencies.
Everything a handler needs is reached through the store and settings held
on `app.state`; nothing is module-global.
"""

from fastapi import Depends, Request

from employee_manager.application.services.auth_service import AuthService
from employee_manager.application.services.employee_service import EmployeeService
from employee_manager.config import Settings
from employee_manager.domain.repositories.employee_repository import EmployeeRepository
from employee_manager.domain.repositories.user_repository import UserRepository
from employee_manager.infrastructure.file_storage import PictureStorage


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request):
    return request.app.state.store


def get_picture_storage(request: Request) -> PictureStorage:
    return request.app.state.pictures


def get_user_repository(store=Depends(get_store)) -> UserRepository:
    """Get user repository instance."""
    return store.users()


def get_employee_repository(store=Depends(get_store)) -> EmployeeRepository:
    """Get employee repository instance."""
    return store.employees()


def get_auth_service(
    users: UserRepository = Depends(get_user_repository),
    settings: Settings = Depends(get_app_settings),
) -> AuthService:
    return AuthService(users, settings)


def get_employee_service(
    employees: EmployeeRepository = Depends(get_employee_repository),
    pictures: PictureStorage = Depends(get_picture_storage),
) -> EmployeeService:
    return EmployeeService(employees, pictures)
