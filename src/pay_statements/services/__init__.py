"""Statement services."""

from pay_statements.services.contractor_directory import (
    ContractorDirectory,
    InMemoryContractorDirectory,
    SqlContractorDirectory,
)
from pay_statements.services.state_machine import (
    InvalidTransitionError,
    StatementStateMachine,
    StatementStatus,
)
from pay_statements.services.statement_service import StatementAssembler, StatementDraft
from pay_statements.services.statement_store import (
    LocalStatementStore,
    SqlStatementStore,
    StatementStore,
)

__all__ = [
    "ContractorDirectory",
    "InMemoryContractorDirectory",
    "InvalidTransitionError",
    "LocalStatementStore",
    "SqlContractorDirectory",
    "SqlStatementStore",
    "StatementAssembler",
    "StatementDraft",
    "StatementStateMachine",
    "StatementStatus",
    "StatementStore",
]
