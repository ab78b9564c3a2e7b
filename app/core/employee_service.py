"""
Employee record writer for the Employee Management Service.

All writes run inside a SERIALIZABLE transaction. Each successful write
is followed by exactly one change event per affected record; events are
published after commit and their delivery is not part of the transaction.
"""

from typing import Optional

from sqlmodel import Session, select

from app.core.change_publisher import ChangePublisher, change_publisher
from app.core.database import serializable_transaction
from app.core.events import EntityType, OperationType
from app.core.exceptions import BadRequestError, ConflictError, NotFoundError
from app.core.logging import get_logger
from app.models.employee import (
    AcceptedField,
    Employee,
    EmployeeCreate,
    EmployeeUpdate,
    utc_now,
)

logger = get_logger(__name__)

IMMUTABLE_FIELDS = {"id", "username", "created_at"}


class EmployeeService:
    """
    Service for creating and updating employee records.

    Enforces the identity invariants: phone number is unique at insert time,
    username and id never change after creation.
    """

    def __init__(self, publisher: ChangePublisher = change_publisher):
        self.publisher = publisher

    @staticmethod
    def find_by_phone_number(session: Session, phone_number: str) -> Optional[Employee]:
        statement = select(Employee).where(Employee.phone_number == phone_number)
        return session.exec(statement).first()

    @staticmethod
    def find_by_username(session: Session, username: str) -> Optional[Employee]:
        statement = select(Employee).where(Employee.username == username)
        return session.exec(statement).first()

    async def create(self, session: Session, payload: EmployeeCreate) -> Employee:
        """
        Create a new employee.

        Args:
            session: Database session
            payload: Employee data

        Returns:
            The persisted employee with its assigned id

        Raises:
            ConflictError: if the phone number (or username) is already taken
        """
        with serializable_transaction(session):
            if self.find_by_phone_number(session, payload.phone_number):
                logger.warning(
                    f"Create rejected, phone number {payload.phone_number} already in use"
                )
                raise ConflictError(
                    "Employee already exists, choose a different phone Number"
                )

            employee = Employee.model_validate(payload)
            session.add(employee)
            session.flush()

        session.refresh(employee)
        logger.info(f"Created employee {employee.id} ({employee.username})")

        await self.publisher.publish(
            EntityType.EMPLOYEE, OperationType.CREATE, employee
        )
        return employee

    def get_by_username(self, session: Session, username: str) -> Employee:
        """
        Look up an employee by username.

        Not transactional: may observe data older than an in-flight write.

        Raises:
            NotFoundError: if no employee has this username
        """
        employee = self.find_by_username(session, username)
        if employee is None:
            raise NotFoundError(f"Employee with UserName {username} doesn't exists.")
        return employee

    def get_by_identity(self, session: Session, employee_id: int) -> Employee:
        """
        Look up an employee by id.

        Raises:
            NotFoundError: if no employee has this id
        """
        employee = session.get(Employee, employee_id)
        if employee is None:
            raise NotFoundError(f"Employee with Id {employee_id} doesn't exists.")
        return employee

    async def update_by_identity(
        self, session: Session, employee_id: int, payload: EmployeeUpdate
    ) -> Employee:
        """
        Overwrite all mutable fields of an existing employee.

        Username and id are kept from the stored record. Supplying either with
        a different value is rejected rather than ignored.

        Raises:
            NotFoundError: if no employee has this id
            BadRequestError: if the payload tries to change username or id
        """
        with serializable_transaction(session):
            employee = session.get(Employee, employee_id)
            if employee is None:
                raise NotFoundError(f"Employee with Id {employee_id} doesn't exists.")

            username_changed = (
                payload.username is not None and payload.username != employee.username
            )
            id_changed = payload.id is not None and payload.id != employee.id
            if username_changed or id_changed:
                logger.warning(
                    f"Update rejected for employee {employee_id}, "
                    f"attempted to change username or id"
                )
                raise BadRequestError("Cannot update username or id")

            # Full overwrite; unset optional fields are cleared
            for field, value in payload.model_dump(exclude=IMMUTABLE_FIELDS).items():
                setattr(employee, field, value)
            employee.updated_at = utc_now()
            session.add(employee)

        session.refresh(employee)
        logger.info(f"Updated employee {employee.id}")

        await self.publisher.publish(
            EntityType.EMPLOYEE, OperationType.UPDATE, employee
        )
        return employee

    async def bulk_apply_fields(
        self,
        session: Session,
        employee_ids: list[int],
        accepted_fields: dict[AcceptedField, str],
    ) -> list[Employee]:
        """
        Apply the same field directives to several employees.

        The batch is all-or-nothing: the first missing id or unparseable
        value rolls back every change. Uniqueness of the written values
        (e.g. phone number) is not re-checked.

        Returns:
            The updated employees, in the order of employee_ids

        Raises:
            BadRequestError: on duplicate ids or an invalid field value
            NotFoundError: if any id does not exist
        """
        if len(employee_ids) != len(set(employee_ids)):
            raise BadRequestError("Duplicate employee ids exist")

        updated: list[Employee] = []
        with serializable_transaction(session):
            for employee_id in employee_ids:
                employee = session.get(Employee, employee_id)
                if employee is None:
                    raise NotFoundError(
                        f"Employee with Id {employee_id} doesn't exists."
                    )

                for field, value in accepted_fields.items():
                    field.process_value(employee, value)
                employee.updated_at = utc_now()
                session.add(employee)
                updated.append(employee)

        for employee in updated:
            session.refresh(employee)
        logger.info(
            f"Bulk updated {len(updated)} employees, "
            f"fields: {[field.value for field in accepted_fields]}"
        )

        for employee in updated:
            await self.publisher.publish(
                EntityType.EMPLOYEE, OperationType.UPDATE, employee
            )
        return updated


# Create singleton instance
employee_service = EmployeeService()
