# polling/outcome.py
from dataclasses import dataclass, field
from enum import Enum

from functions.get_results import ResultPage
from polling.errors import QueryCancelledError, QueryFailedError, QueryPollError


class OutcomeKind(str, Enum):
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"
    FATAL = "FATAL"


@dataclass(frozen=True)
class Outcome:
    """Single terminal report for one execution id. FAILED/CANCELLED are results, not exceptions."""

    kind: OutcomeKind
    execution_id: str
    page: ResultPage | None = None
    diagnostics: dict = field(default_factory=dict)
    error: str | None = None
    status_calls: int = 0

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.SUCCEEDED

    @property
    def rows(self) -> list[dict]:
        return list(self.page.rows) if self.page is not None else []

    def raise_for_outcome(self) -> "Outcome":
        if self.kind is OutcomeKind.SUCCEEDED:
            return self
        if self.kind is OutcomeKind.FAILED:
            reason = self.diagnostics.get("StateChangeReason", "Unknown")
            raise QueryFailedError(
                f"Athena query FAILED. Reason: {reason} (QueryExecutionId={self.execution_id})",
                self.execution_id, self.diagnostics,
            )
        if self.kind is OutcomeKind.CANCELLED:
            raise QueryCancelledError(
                f"Athena query CANCELLED (QueryExecutionId={self.execution_id})",
                self.execution_id, self.diagnostics,
            )
        raise QueryPollError(
            f"Athena polling aborted: {self.error} (QueryExecutionId={self.execution_id})",
            self.execution_id, self.diagnostics,
        )
