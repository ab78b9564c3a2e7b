"""
Database models and schemas module.
Contains all SQLModel table definitions and Pydantic schemas.
"""

from app.models.employee import (
    AcceptedField,
    BulkEmployeeUpdate,
    Employee,
    EmployeeCreate,
    EmployeePublic,
    EmployeeStatus,
    EmployeeUpdate,
)
from app.models.search import (
    EmployeeDocument,
    EmployeeField,
    FilterEmployee,
    FilterOperator,
)

__all__ = [
    "Employee",
    "EmployeeCreate",
    "EmployeeUpdate",
    "EmployeePublic",
    "EmployeeStatus",
    "AcceptedField",
    "BulkEmployeeUpdate",
    "EmployeeDocument",
    "EmployeeField",
    "FilterEmployee",
    "FilterOperator",
]
