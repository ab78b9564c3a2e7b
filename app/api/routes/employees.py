"""
Employee endpoints.

Thin HTTP surface over the employee record writer and the search index
service. Domain errors are rendered by the exception handler in app.main.
"""

from fastapi import APIRouter

from app.api.dependencies import EmployeeIndexDep, EmployeeServiceDep, SessionDep
from app.core.exceptions import IndexUnavailableError
from app.core.logging import get_logger
from app.models.employee import (
    BulkEmployeeUpdate,
    Employee,
    EmployeeCreate,
    EmployeePublic,
    EmployeeUpdate,
)
from app.models.search import EmployeeDocument, FilterEmployee

logger = get_logger(__name__)

router = APIRouter(
    prefix="/employees",
    tags=["employees"],
    responses={404: {"description": "Employee not found"}},
)


@router.post("", response_model=EmployeePublic, status_code=201)
async def create_employee(
    payload: EmployeeCreate,
    session: SessionDep,
    service: EmployeeServiceDep,
) -> Employee:
    """
    Create an employee.

    Raises:
        409 if the phone number or username is already taken
    """
    logger.info(f"Create employee requested for username {payload.username}")
    return await service.create(session, payload)


@router.patch("/bulk", response_model=list[EmployeePublic])
async def bulk_update_employees(
    payload: BulkEmployeeUpdate,
    session: SessionDep,
    service: EmployeeServiceDep,
) -> list[Employee]:
    """
    Apply accepted field values to a batch of employees.

    Raises:
        400 on duplicate ids or invalid values, 404 if any id is missing
    """
    return await service.bulk_apply_fields(
        session, payload.employee_ids, payload.accepted_fields
    )


@router.post("/documents", status_code=201)
async def index_employee_document(
    document: EmployeeDocument, index: EmployeeIndexDep
) -> dict[str, str]:
    """
    Index (or re-index) an employee document.

    Raises:
        503 if the search backend did not accept the document
    """
    result = await index.upsert(document)
    if not result.ok:
        raise IndexUnavailableError(result.error.message)
    return {"id": result.value}


@router.post("/documents/search", response_model=list[EmployeeDocument])
async def search_employee_documents(
    filter_employee: FilterEmployee, index: EmployeeIndexDep
) -> list[EmployeeDocument]:
    """
    Search employee documents with a filter expression.

    Raises:
        400 for invalid filters, 503 if the search backend is unavailable
    """
    result = await index.search(filter_employee)
    if not result.ok:
        raise IndexUnavailableError(result.error.message)
    return result.value


@router.post("/{employee_id}/document", status_code=201)
async def index_stored_employee(
    employee_id: int,
    session: SessionDep,
    service: EmployeeServiceDep,
    index: EmployeeIndexDep,
) -> dict[str, str]:
    """
    Index the current database state of an employee.

    Raises:
        404 if the employee does not exist, 503 if the index rejected it
    """
    employee = service.get_by_identity(session, employee_id)
    result = await index.upsert(EmployeeDocument.from_employee(employee))
    if not result.ok:
        raise IndexUnavailableError(result.error.message)
    return {"id": result.value}


@router.get("/{username}", response_model=EmployeePublic)
def get_employee_by_username(
    username: str, session: SessionDep, service: EmployeeServiceDep
) -> Employee:
    """Get an employee by username."""
    return service.get_by_username(session, username)


@router.put("/{employee_id}", response_model=EmployeePublic)
async def update_employee(
    employee_id: int,
    payload: EmployeeUpdate,
    session: SessionDep,
    service: EmployeeServiceDep,
) -> Employee:
    """
    Replace the mutable fields of an employee.

    Raises:
        400 if username or id would change, 404 if the employee does not exist
    """
    return await service.update_by_identity(session, employee_id, payload)
