"""
Employee database model and schemas for the Employee Management Service.

The employee table is the system of record. Username and id never change
after creation; phone number uniqueness is enforced by the writer at
insert time.
"""

from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Callable, Optional

from pydantic import BaseModel
from pydantic import Field as PydanticField
from sqlmodel import Field, SQLModel

from app.core.exceptions import BadRequestError


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class EmployeeStatus(str, Enum):
    """Employment status of an employee."""

    ACTIVE = "active"
    ON_LEAVE = "on_leave"
    SUSPENDED = "suspended"
    TERMINATED = "terminated"


class EmployeeBase(SQLModel):
    """Mutable attributes shared by the table model and request schemas."""

    phone_number: str = Field(index=True, max_length=32)
    first_name: Optional[str] = Field(default=None, max_length=255)
    last_name: Optional[str] = Field(default=None, max_length=255)
    email: Optional[str] = Field(default=None, max_length=255)
    department: Optional[str] = Field(default=None, max_length=255, index=True)
    job_title: Optional[str] = Field(default=None, max_length=255)
    age: Optional[int] = Field(default=None, ge=0)
    salary: Optional[Decimal] = Field(default=None, max_digits=12, decimal_places=2)
    joining_date: Optional[date] = Field(default=None)
    status: str = Field(default=EmployeeStatus.ACTIVE.value, max_length=50)


# Database Model


class Employee(EmployeeBase, table=True):
    """ORM model for the employee table."""

    __tablename__ = "employee"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(index=True, unique=True, max_length=255)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


# Request/Response Schemas


class EmployeeCreate(EmployeeBase):
    """Schema for creating an employee."""

    username: str = Field(min_length=1, max_length=255)

    class Config:
        json_schema_extra = {
            "example": {
                "username": "jdoe",
                "phone_number": "555-0100",
                "first_name": "John",
                "last_name": "Doe",
                "email": "john.doe@company.com",
                "department": "Engineering",
                "job_title": "Software Engineer",
                "age": 31,
                "salary": "85000.00",
                "joining_date": "2024-01-15",
            }
        }


class EmployeeUpdate(EmployeeBase):
    """
    Schema for a full update of an employee.

    username and id are accepted only so that an attempted change can be
    rejected; they are never written.
    """

    id: Optional[int] = None
    username: Optional[str] = None


class EmployeePublic(EmployeeBase):
    """Public schema for employee responses."""

    id: int
    username: str
    created_at: datetime
    updated_at: datetime


# Bulk update directives


class AcceptedField(str, Enum):
    """Fields that may be changed through a bulk update."""

    FIRST_NAME = "first_name"
    LAST_NAME = "last_name"
    EMAIL = "email"
    PHONE_NUMBER = "phone_number"
    DEPARTMENT = "department"
    JOB_TITLE = "job_title"
    AGE = "age"
    SALARY = "salary"
    JOINING_DATE = "joining_date"
    STATUS = "status"

    def parse(self, value: str):
        """Parse a raw string into the attribute's type."""
        parser = _ACCEPTED_FIELD_PARSERS.get(self, str.strip)
        try:
            return parser(value)
        except (ValueError, InvalidOperation) as e:
            raise BadRequestError(
                f"Invalid value '{value}' for field {self.value}"
            ) from e

    def process_value(self, employee: Employee, value: str) -> None:
        """Parse the raw value and assign it to the employee in place."""
        setattr(employee, self.value, self.parse(value))


def _parse_status(value: str) -> str:
    return EmployeeStatus(value.strip().lower()).value


def _parse_salary(value: str) -> Decimal:
    return Decimal(value.strip()).quantize(Decimal("0.01"))


_ACCEPTED_FIELD_PARSERS: dict[AcceptedField, Callable[[str], object]] = {
    AcceptedField.AGE: lambda value: int(value.strip()),
    AcceptedField.SALARY: _parse_salary,
    AcceptedField.JOINING_DATE: lambda value: date.fromisoformat(value.strip()),
    AcceptedField.STATUS: _parse_status,
}


class BulkEmployeeUpdate(BaseModel):
    """Apply the same field directives to a batch of employees."""

    employee_ids: list[int] = PydanticField(min_length=1)
    accepted_fields: dict[AcceptedField, str] = PydanticField(min_length=1)
