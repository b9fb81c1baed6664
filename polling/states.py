# polling/states.py
# Pure decision step: latest status -> next action. No I/O, no timers.
from dataclasses import dataclass
from enum import Enum

from functions.get_execution_status import ExecutionStatus


class QueryState(str, Enum):
    QUEUED = "QUEUED"
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"

    @classmethod
    def parse(cls, value) -> "QueryState | None":
        try:
            return cls(value)
        except ValueError:
            return None

    @property
    def terminal(self) -> bool:
        return self in TERMINAL_STATES


TERMINAL_STATES = frozenset({QueryState.SUCCEEDED, QueryState.FAILED, QueryState.CANCELLED})


class ActionKind(Enum):
    CONTINUE = "continue"
    FETCH_RESULTS = "fetch_results"
    STOP = "stop"


@dataclass(frozen=True)
class Action:
    kind: ActionKind
    state: QueryState | None = None
    reason: str = ""


def next_action(status: ExecutionStatus) -> Action:
    state = QueryState.parse(status.state)
    if state is None:
        return Action(ActionKind.STOP, None, f"unrecognised execution state: {status.state!r}")
    if state in (QueryState.QUEUED, QueryState.RUNNING):
        return Action(ActionKind.CONTINUE, state)
    if state is QueryState.SUCCEEDED:
        return Action(ActionKind.FETCH_RESULTS, state)
    return Action(ActionKind.STOP, state, status.diagnostics.get("StateChangeReason", ""))
