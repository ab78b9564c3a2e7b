"""
Shared API dependencies.
Contains reusable dependency functions for FastAPI endpoints.
"""

from typing import Annotated

from fastapi import Depends
from sqlmodel import Session

from app.core.database import get_session
from app.core.employee_index import EmployeeIndexService, employee_index_service
from app.core.employee_service import EmployeeService, employee_service


def get_employee_service() -> EmployeeService:
    return employee_service


def get_employee_index_service() -> EmployeeIndexService:
    return employee_index_service


# Database session dependency
# Use this type annotation in route handlers to get automatic session injection
SessionDep = Annotated[Session, Depends(get_session)]

EmployeeServiceDep = Annotated[EmployeeService, Depends(get_employee_service)]
EmployeeIndexDep = Annotated[EmployeeIndexService, Depends(get_employee_index_service)]
