from .base import PayrollRepository
from .sqlalchemy_repository import SQLAlchemyPayrollRepository
from .memory_repository import InMemoryPayrollRepository

__all__ = [
    "PayrollRepository",
    "SQLAlchemyPayrollRepository",
    "InMemoryPayrollRepository",
]
