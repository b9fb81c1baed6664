# polling/poll_loop.py
# Tick bookkeeping shared by the async poller and the blocking wait_for_query().
from botocore.exceptions import BotoCoreError, ClientError

from functions.get_execution_status import ExecutionStatus
from functions.get_results import MAX_PAGE_SIZE, ResultPage
from polling.outcome import Outcome, OutcomeKind
from polling.states import Action, ActionKind, QueryState, next_action

TRANSIENT_ERRORS = (ClientError, BotoCoreError)
DEFAULT_INTERVAL_MS = 1000


def validate_poll_args(execution_id: str, interval_ms: int, max_attempts: int | None,
                       max_transient_errors: int, page_size: int | None = None) -> None:
    if not isinstance(execution_id, str) or not execution_id.strip():
        raise ValueError("execution_id must be a non-empty string")
    if interval_ms <= 0:
        raise ValueError(f"interval_ms must be positive, got {interval_ms}")
    if max_attempts is not None and max_attempts <= 0:
        raise ValueError(f"max_attempts must be positive, got {max_attempts}")
    if max_transient_errors < 0:
        raise ValueError(f"max_transient_errors must be >= 0, got {max_transient_errors}")
    if page_size is not None and not 0 < page_size <= MAX_PAGE_SIZE:
        raise ValueError(f"page_size must be in 1..{MAX_PAGE_SIZE}, got {page_size}")


class PollLoop:
    def __init__(self, execution_id: str, max_attempts: int | None = None, max_transient_errors: int = 3):
        self.execution_id = execution_id
        self.max_attempts = max_attempts
        self.max_transient_errors = max_transient_errors
        self.status_calls = 0
        self.transient_errors = 0
        self.last_status: ExecutionStatus | None = None

    def begin_tick(self) -> None:
        self.status_calls += 1

    def on_status_error(self, exc: Exception) -> Outcome | None:
        """Count a failed status call; FATAL outcome once the consecutive budget is spent."""
        self.transient_errors += 1
        print(f"[poll] status call {self.status_calls} failed for {self.execution_id}: {exc} "
              f"({self.transient_errors}/{self.max_transient_errors} retries)")
        if self.transient_errors > self.max_transient_errors:
            return self.fatal(f"status check failed {self.transient_errors} times in a row: {exc}")
        return self.exhausted()

    def on_status(self, status: ExecutionStatus) -> tuple[Action, Outcome | None]:
        self.transient_errors = 0
        self.last_status = status
        action = next_action(status)
        if action.kind is ActionKind.CONTINUE:
            return action, self.exhausted()
        if action.kind is ActionKind.FETCH_RESULTS:
            return action, None
        if action.state is None:
            return action, self.fatal(action.reason)
        kind = OutcomeKind.FAILED if action.state is QueryState.FAILED else OutcomeKind.CANCELLED
        return action, self._outcome(kind)

    def exhausted(self) -> Outcome | None:
        if self.max_attempts is not None and self.status_calls >= self.max_attempts:
            return self.fatal(f"no terminal state after {self.status_calls} status calls")
        return None

    def succeeded(self, page: ResultPage | None) -> Outcome:
        return self._outcome(OutcomeKind.SUCCEEDED, page=page)

    def fatal(self, error: str) -> Outcome:
        return self._outcome(OutcomeKind.FATAL, error=error)

    def _outcome(self, kind: OutcomeKind, page: ResultPage | None = None, error: str | None = None) -> Outcome:
        diagnostics = dict(self.last_status.diagnostics) if self.last_status else {}
        print(f"[poll] {self.execution_id} -> {kind.value} after {self.status_calls} status calls"
              + (f": {error}" if error else ""))
        return Outcome(
            kind=kind,
            execution_id=self.execution_id,
            page=page,
            diagnostics=diagnostics,
            error=error,
            status_calls=self.status_calls,
        )
