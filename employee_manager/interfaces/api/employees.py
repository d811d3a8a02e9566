"""Employee API routes: CRUD and search, all behind a bearer token."""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from employee_manager.application.services.employee_service import EmployeeService
from employee_manager.domain.schemas.employee import EmployeeRead, EmployeeResponse, MessageResponse
from employee_manager.interfaces.api.deps import get_current_user_id
from employee_manager.interfaces.deps import get_employee_service

router = APIRouter(
    prefix="/employees",
    tags=["Employees"],
    dependencies=[Depends(get_current_user_id)],
)


def _form(
    first_name: Optional[str],
    last_name: Optional[str],
    email: Optional[str],
    phone_number: Optional[str],
    department: Optional[str],
    position: Optional[str],
    salary: Optional[str],
    date_of_joining: Optional[str],
) -> Dict[str, Any]:
    return {
        "firstName": first_name,
        "lastName": last_name,
        "email": email,
        "phoneNumber": phone_number,
        "department": department,
        "position": position,
        "salary": salary,
        "dateOfJoining": date_of_joining,
    }


def _picture(upload: Optional[UploadFile]) -> Optional[UploadFile]:
    # Browsers submit an empty part when no file was chosen
    if upload is None or not upload.filename:
        return None
    return upload


@router.post("", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(
    first_name: Optional[str] = Form(None, alias="firstName"),
    last_name: Optional[str] = Form(None, alias="lastName"),
    email: Optional[str] = Form(None),
    phone_number: Optional[str] = Form(None, alias="phoneNumber"),
    department: Optional[str] = Form(None),
    position: Optional[str] = Form(None),
    salary: Optional[str] = Form(None),
    date_of_joining: Optional[str] = Form(None, alias="dateOfJoining"),
    profile_picture: Optional[UploadFile] = File(None, alias="profilePicture"),
    service: EmployeeService = Depends(get_employee_service),
):
    form = _form(first_name, last_name, email, phone_number, department, position, salary, date_of_joining)
    employee = await service.create(form, _picture(profile_picture))
    return EmployeeResponse(
        message="Employee created successfully",
        employee=EmployeeRead.model_validate(employee),
    )


@router.get("", response_model=List[EmployeeRead])
async def list_employees(service: EmployeeService = Depends(get_employee_service)):
    """All employees, most recently created first."""
    return [EmployeeRead.model_validate(e) for e in await service.list_all()]


@router.get("/search", response_model=List[EmployeeRead])
async def search_employees(
    department: Optional[str] = Query(None),
    position: Optional[str] = Query(None),
    service: EmployeeService = Depends(get_employee_service),
):
    """Search by department and/or position (case-insensitive, partial match)."""
    employees = await service.search(department=department, position=position)
    return [EmployeeRead.model_validate(e) for e in employees]


@router.get("/{employee_id}", response_model=EmployeeRead)
async def get_employee(employee_id: str, service: EmployeeService = Depends(get_employee_service)):
    return EmployeeRead.model_validate(await service.get(employee_id))


@router.put("/{employee_id}", response_model=EmployeeResponse)
async def update_employee(
    employee_id: str,
    first_name: Optional[str] = Form(None, alias="firstName"),
    last_name: Optional[str] = Form(None, alias="lastName"),
    email: Optional[str] = Form(None),
    phone_number: Optional[str] = Form(None, alias="phoneNumber"),
    department: Optional[str] = Form(None),
    position: Optional[str] = Form(None),
    salary: Optional[str] = Form(None),
    date_of_joining: Optional[str] = Form(None, alias="dateOfJoining"),
    profile_picture: Optional[UploadFile] = File(None, alias="profilePicture"),
    service: EmployeeService = Depends(get_employee_service),
):
    form = _form(first_name, last_name, email, phone_number, department, position, salary, date_of_joining)
    employee = await service.update(employee_id, form, _picture(profile_picture))
    return EmployeeResponse(
        message="Employee updated successfully",
        employee=EmployeeRead.model_validate(employee),
    )


@router.delete("/{employee_id}", response_model=MessageResponse)
async def delete_employee(employee_id: str, service: EmployeeService = Depends(get_employee_service)):
    await service.delete(employee_id)
    return MessageResponse(message="Employee deleted successfully")
