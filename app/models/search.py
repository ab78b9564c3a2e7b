"""
Search index documents and filter expressions.

EmployeeDocument is the projection of an employee stored in the search
index. FilterEmployee describes a query as operator -> field -> raw values;
each EmployeeField knows how to convert raw values into the type the index
compares natively.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Optional

from pydantic import BaseModel, Field

from app.core.exceptions import BadRequestError
from app.models.employee import Employee


class FilterOperator(str, Enum):
    """Comparison operators supported by the filter DSL."""

    EQUAL = "EQUAL"
    GREATER = "GREATER"
    LESS = "LESS"


def _to_iso_date(value: str) -> str:
    return date.fromisoformat(value.strip()).isoformat()


class EmployeeField(str, Enum):
    """Searchable document fields."""

    ID = "id"
    USERNAME = "username"
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

    @property
    def field_name(self) -> str:
        return self.value

    @property
    def index_type(self) -> str:
        return _FIELD_TYPES.get(self, ("keyword", str))[0]

    def convert(self, values: list[str]) -> list[Any]:
        """Convert raw values into the index's native comparable type."""
        converter: Callable[[str], Any] = _FIELD_TYPES.get(self, ("keyword", str))[1]
        try:
            return [converter(value) for value in values]
        except ValueError as e:
            raise BadRequestError(
                f"Invalid value for field {self.field_name}: {values}"
            ) from e


_FIELD_TYPES: dict[EmployeeField, tuple[str, Callable[[str], Any]]] = {
    EmployeeField.ID: ("long", int),
    EmployeeField.AGE: ("integer", int),
    EmployeeField.SALARY: ("double", float),
    EmployeeField.JOINING_DATE: ("date", _to_iso_date),
}


class FilterEmployee(BaseModel):
    """Structured filter: operator -> field -> list of raw values."""

    filter_map: dict[FilterOperator, dict[EmployeeField, list[str]]] = Field(
        default_factory=dict
    )

    class Config:
        json_schema_extra = {
            "example": {
                "filter_map": {
                    "EQUAL": {"department": ["Engineering", "Finance"]},
                    "GREATER": {"age": ["30"]},
                }
            }
        }


class EmployeeDocument(BaseModel):
    """Search index projection of an employee, keyed by id."""

    id: int
    username: str
    phone_number: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    department: Optional[str] = None
    job_title: Optional[str] = None
    age: Optional[int] = None
    salary: Optional[float] = None
    joining_date: Optional[date] = None
    status: Optional[str] = None

    @classmethod
    def from_employee(cls, employee: Employee) -> "EmployeeDocument":
        data = employee.model_dump(
            include=set(cls.model_fields), exclude_none=False
        )
        if isinstance(data.get("salary"), Decimal):
            data["salary"] = float(data["salary"])
        return cls(**data)
