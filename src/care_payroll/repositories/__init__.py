"""Persistence port implementations."""

from care_payroll.repositories.sqlalchemy_store import SqlAlchemyPayrollStore

__all__ = ["SqlAlchemyPayrollStore"]
