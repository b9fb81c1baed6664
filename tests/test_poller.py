import asyncio

import pytest

from polling.errors import QueryCancelledError, QueryFailedError, QueryPollError
from polling.outcome import OutcomeKind
from polling.poller import poll_until_complete, start_polling
from tests.fakes import EXEC_ID, client_error


@pytest.mark.asyncio
async def test_queued_running_succeeded(make_client, fake_sleep, sleeps):
    client = make_client(["QUEUED", "RUNNING", "SUCCEEDED"])
    reports = []

    handle = start_polling(client, EXEC_ID, 1000, sleep=fake_sleep, on_outcome=reports.append)
    outcome = await handle.wait()

    assert outcome.kind is OutcomeKind.SUCCEEDED
    assert outcome.rows == [{"id": "1"}, {"id": "2"}]
    assert client.status_calls == 3
    assert client.result_calls == 1
    assert sleeps == [1.0, 1.0, 1.0]
    assert reports == [outcome]
    assert not handle.active


@pytest.mark.asyncio
async def test_results_fetched_after_succeeded_status(make_client, fake_sleep):
    client = make_client(["QUEUED"] * 5 + ["RUNNING"] * 4 + ["SUCCEEDED"])
    await poll_until_complete(client, EXEC_ID, 250, sleep=fake_sleep)

    names = [c[0] for c in client.calls]
    assert names.count("get_query_results") == 1
    assert names[-1] == "get_query_results"
    assert names[-2] == "get_query_execution"
    assert client.calls[-1][1]["MaxResults"] == 1000


@pytest.mark.asyncio
async def test_failed_passes_diagnostics(make_client, fake_sleep):
    client = make_client(["QUEUED", {"State": "FAILED", "StateChangeReason": "TABLE_NOT_FOUND: albums"}])
    outcome = await poll_until_complete(client, EXEC_ID, sleep=fake_sleep)

    assert outcome.kind is OutcomeKind.FAILED
    assert outcome.diagnostics["StateChangeReason"] == "TABLE_NOT_FOUND: albums"
    assert client.status_calls == 2
    assert client.result_calls == 0
    with pytest.raises(QueryFailedError, match="TABLE_NOT_FOUND"):
        outcome.raise_for_outcome()


@pytest.mark.asyncio
async def test_cancelled(make_client, fake_sleep):
    client = make_client(["RUNNING", "RUNNING", "CANCELLED"])
    outcome = await poll_until_complete(client, EXEC_ID, sleep=fake_sleep)

    assert outcome.kind is OutcomeKind.CANCELLED
    assert client.status_calls == 3
    assert client.result_calls == 0
    with pytest.raises(QueryCancelledError):
        outcome.raise_for_outcome()


@pytest.mark.asyncio
async def test_missing_state_is_fatal(make_client, fake_sleep):
    client = make_client([None, "SUCCEEDED"])
    handle = start_polling(client, EXEC_ID, sleep=fake_sleep)
    outcome = await handle.wait()

    assert outcome.kind is OutcomeKind.FATAL
    assert client.status_calls == 1
    assert client.result_calls == 0
    assert not handle.active
    with pytest.raises(QueryPollError):
        outcome.raise_for_outcome()


@pytest.mark.asyncio
async def test_cancel_after_terminal_is_noop(make_client, fake_sleep):
    client = make_client(["SUCCEEDED"])
    reports = []
    handle = start_polling(client, EXEC_ID, sleep=fake_sleep, on_outcome=reports.append)
    await handle.wait()

    assert handle.cancel() is False
    assert handle.cancel() is False
    assert len(reports) == 1
    assert client.status_calls == 1


@pytest.mark.asyncio
async def test_external_cancel_stops_ticks(make_client):
    client = make_client([])  # RUNNING forever
    reports = []
    handle = start_polling(client, EXEC_ID, 1, on_outcome=reports.append)
    while client.status_calls < 2:
        await asyncio.sleep(0.005)

    assert handle.cancel() is True
    with pytest.raises(asyncio.CancelledError):
        await handle.wait()
    # let a status call already handed to the worker thread land
    await asyncio.sleep(0.05)
    calls = client.status_calls
    await asyncio.sleep(0.05)

    assert client.status_calls == calls
    assert handle.cancel() is False
    assert reports == []


@pytest.mark.asyncio
async def test_transient_errors_are_retried(make_client, fake_sleep):
    client = make_client([client_error(), client_error(), "RUNNING", "SUCCEEDED"])
    outcome = await poll_until_complete(client, EXEC_ID, sleep=fake_sleep, max_transient_errors=2)

    assert outcome.ok
    assert client.status_calls == 4


@pytest.mark.asyncio
async def test_transient_errors_escalate_to_fatal(make_client, fake_sleep):
    client = make_client([client_error()] * 3 + ["SUCCEEDED"])
    outcome = await poll_until_complete(client, EXEC_ID, sleep=fake_sleep, max_transient_errors=2)

    assert outcome.kind is OutcomeKind.FATAL
    assert "3 times" in outcome.error
    assert client.status_calls == 3
    assert client.result_calls == 0


@pytest.mark.asyncio
async def test_max_attempts_bounds_polling(make_client, fake_sleep):
    client = make_client(["QUEUED"] * 10)
    outcome = await poll_until_complete(client, EXEC_ID, sleep=fake_sleep, max_attempts=4)

    assert outcome.kind is OutcomeKind.FATAL
    assert client.status_calls == 4


@pytest.mark.asyncio
async def test_skip_result_fetch(make_client, fake_sleep):
    client = make_client(["SUCCEEDED"])
    outcome = await poll_until_complete(client, EXEC_ID, sleep=fake_sleep, fetch_results=False)

    assert outcome.ok
    assert outcome.page is None
    assert client.result_calls == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("execution_id,interval_ms", [("", 1000), ("   ", 1000), (EXEC_ID, 0), (EXEC_ID, -5)])
async def test_invalid_arguments(make_client, execution_id, interval_ms):
    with pytest.raises(ValueError):
        start_polling(make_client([]), execution_id, interval_ms)


@pytest.mark.asyncio
@pytest.mark.parametrize("page_size", [0, 5000])
async def test_bad_page_size_rejected_before_polling(make_client, fake_sleep, page_size):
    client = make_client(["RUNNING", "SUCCEEDED"])
    reports = []
    with pytest.raises(ValueError, match="page_size"):
        start_polling(client, EXEC_ID, 1000, page_size=page_size, sleep=fake_sleep,
                      on_outcome=reports.append)

    assert client.status_calls == 0
    assert reports == []


@pytest.mark.asyncio
async def test_page_size_ignored_when_results_skipped(make_client, fake_sleep):
    client = make_client(["SUCCEEDED"])
    outcome = await poll_until_complete(client, EXEC_ID, sleep=fake_sleep, page_size=0, fetch_results=False)
    assert outcome.ok


@pytest.mark.asyncio
async def test_unexpected_error_reported_as_fatal(make_client, fake_sleep):
    client = make_client([])

    def malformed(QueryExecutionId):
        client.calls.append(("get_query_execution", QueryExecutionId))
        return {"QueryExecution": {"Status": "SUCCEEDED"}}

    client.get_query_execution = malformed
    reports = []
    handle = start_polling(client, EXEC_ID, sleep=fake_sleep, on_outcome=reports.append)

    with pytest.raises(AttributeError):
        await handle.wait()
    assert len(reports) == 1
    assert reports[0].kind is OutcomeKind.FATAL
    assert "AttributeError" in reports[0].error
    assert handle.outcome is reports[0]
    assert client.status_calls == 1
    assert client.result_calls == 0
    assert not handle.active
