# polling/wait_for_query.py
import time
from typing import Callable

from functions.get_execution_status import get_execution_status
from functions.get_results import MAX_PAGE_SIZE, get_results
from polling.outcome import Outcome
from polling.poll_loop import DEFAULT_INTERVAL_MS, TRANSIENT_ERRORS, PollLoop, validate_poll_args
from polling.states import ActionKind


def wait_for_query(client, execution_id: str, interval_ms: int = DEFAULT_INTERVAL_MS, *,
                   page_size: int = MAX_PAGE_SIZE, fetch_results: bool = True,
                   max_attempts: int | None = None, max_transient_errors: int = 3,
                   sleep: Callable[[float], None] | None = None) -> Outcome:
    """Blocking twin of poll_until_complete() for plain scripts."""
    validate_poll_args(execution_id, interval_ms, max_attempts, max_transient_errors,
                       page_size if fetch_results else None)
    sleep = sleep or time.sleep
    loop = PollLoop(execution_id, max_attempts=max_attempts, max_transient_errors=max_transient_errors)

    # Wait for completion
    while True:
        sleep(interval_ms / 1000.0)
        loop.begin_tick()
        try:
            status = get_execution_status(client, execution_id)
        except TRANSIENT_ERRORS as e:
            outcome = loop.on_status_error(e)
            if outcome is not None:
                return outcome
            continue

        action, outcome = loop.on_status(status)
        if outcome is not None:
            return outcome
        if action.kind is ActionKind.FETCH_RESULTS:
            break

    if not fetch_results:
        return loop.succeeded(None)
    try:
        page = get_results(client, execution_id, page_size)
    except TRANSIENT_ERRORS as e:
        return loop.fatal(f"result fetch failed: {e}")
    return loop.succeeded(page)
