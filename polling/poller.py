# polling/poller.py
# Cooperative, timer-driven poller: one asyncio task per execution id, one status call per tick.
import asyncio
from typing import Awaitable, Callable

from functions.get_execution_status import get_execution_status
from functions.get_results import MAX_PAGE_SIZE, get_results
from polling.outcome import Outcome
from polling.poll_loop import DEFAULT_INTERVAL_MS, TRANSIENT_ERRORS, PollLoop, validate_poll_args
from polling.states import ActionKind


class PollHandle:
    """
    Owns the repeating timer (the asyncio task) for one execution id.
    cancel() is idempotent; the outcome is reported at most once.
    """

    def __init__(self, execution_id: str, on_outcome: Callable[[Outcome], None] | None = None):
        self.execution_id = execution_id
        self._on_outcome = on_outcome
        self._task: asyncio.Task | None = None
        self._outcome: Outcome | None = None

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def outcome(self) -> Outcome | None:
        return self._outcome

    def cancel(self) -> bool:
        if not self.active:
            return False
        self._task.cancel()
        print(f"[poll] polling cancelled for {self.execution_id}")
        return True

    async def wait(self) -> Outcome:
        if self._task is None:
            raise RuntimeError("polling has not been started")
        return await self._task

    def _start(self, coro: Awaitable[Outcome]) -> "PollHandle":
        self._task = asyncio.create_task(coro)
        return self

    def _report(self, outcome: Outcome) -> Outcome:
        if self._outcome is None:
            self._outcome = outcome
            if self._on_outcome is not None:
                self._on_outcome(outcome)
        return self._outcome


async def _ticks(handle: PollHandle, client, loop: PollLoop, interval_s: float, page_size: int,
                 fetch_results: bool, sleep: Callable[[float], Awaitable[None]]) -> Outcome:
    while True:
        await sleep(interval_s)
        loop.begin_tick()
        try:
            status = await asyncio.to_thread(get_execution_status, client, handle.execution_id)
        except TRANSIENT_ERRORS as e:
            outcome = loop.on_status_error(e)
            if outcome is not None:
                return handle._report(outcome)
            continue

        action, outcome = loop.on_status(status)
        if outcome is not None:
            return handle._report(outcome)
        if action.kind is not ActionKind.FETCH_RESULTS:
            continue

        if not fetch_results:
            return handle._report(loop.succeeded(None))
        try:
            page = await asyncio.to_thread(get_results, client, handle.execution_id, page_size)
        except TRANSIENT_ERRORS as e:
            return handle._report(loop.fatal(f"result fetch failed: {e}"))
        return handle._report(loop.succeeded(page))


async def _drive(handle: PollHandle, client, loop: PollLoop, interval_s: float, page_size: int,
                 fetch_results: bool, sleep: Callable[[float], Awaitable[None]]) -> Outcome:
    try:
        return await _ticks(handle, client, loop, interval_s, page_size, fetch_results, sleep)
    except Exception as e:
        # anything outside the transient set still ends polling with one FATAL report
        handle._report(loop.fatal(f"{type(e).__name__}: {e}"))
        raise


def start_polling(client, execution_id: str, interval_ms: int = DEFAULT_INTERVAL_MS, *,
                  page_size: int = MAX_PAGE_SIZE, fetch_results: bool = True,
                  max_attempts: int | None = None, max_transient_errors: int = 3,
                  on_outcome: Callable[[Outcome], None] | None = None,
                  sleep: Callable[[float], Awaitable[None]] = asyncio.sleep) -> PollHandle:
    """
    Start the poll task on the running event loop and return its handle.
    on_outcome fires once with the terminal or FATAL outcome. An unexpected
    error is reported as FATAL and then re-raised from handle.wait().
    """
    validate_poll_args(execution_id, interval_ms, max_attempts, max_transient_errors,
                       page_size if fetch_results else None)
    handle = PollHandle(execution_id, on_outcome=on_outcome)
    loop = PollLoop(execution_id, max_attempts=max_attempts, max_transient_errors=max_transient_errors)
    return handle._start(_drive(handle, client, loop, interval_ms / 1000.0, page_size, fetch_results, sleep))


async def poll_until_complete(client, execution_id: str, interval_ms: int = DEFAULT_INTERVAL_MS,
                              **kwargs) -> Outcome:
    handle = start_polling(client, execution_id, interval_ms, **kwargs)
    try:
        return await handle.wait()
    finally:
        handle.cancel()
