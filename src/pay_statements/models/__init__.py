"""SQLAlchemy ORM models."""

from pay_statements.models.base import Base, TimestampMixin
from pay_statements.models.contractor import ContractorRow
from pay_statements.models.statement import PayStatementItemRow, PayStatementRow

__all__ = [
    "Base",
    "ContractorRow",
    "PayStatementItemRow",
    "PayStatementRow",
    "TimestampMixin",
]
