import pandas as pd
import pytest

from clients.athena_express import AthenaExpress, ExpressConfig
from functions.get_results import ResultPage
from functions.run_athena import page_to_frame, run_athena
from tests.fakes import FakeAthenaClient


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    monkeypatch.setattr("polling.wait_for_query.time.sleep", lambda s: None)


def test_run_athena_returns_frame():
    client = FakeAthenaClient(["RUNNING", "SUCCEEDED"], columns=("id", "title"),
                              rows=[["1", "Abbey Road"], ["2", None]], next_tokens=["t1", None])
    athena = AthenaExpress(ExpressConfig(athena_client=client, pagination=1))
    df = run_athena("SELECT id, title FROM albums", athena)

    assert list(df.columns) == ["id", "title"]
    assert len(df) == 4
    assert client.result_calls == 2


def test_run_athena_ddl_skips_results():
    client = FakeAthenaClient(["SUCCEEDED"])
    df = run_athena("CREATE EXTERNAL TABLE x (id int)", AthenaExpress(ExpressConfig(athena_client=client)),
                    expect_result=False)
    assert df.empty
    assert client.result_calls == 0


def test_page_to_frame():
    page = ResultPage(execution_id="q", columns=["id"], rows=[{"id": "7"}])
    pd.testing.assert_frame_equal(page_to_frame(page), pd.DataFrame([{"id": "7"}]))
    assert page_to_frame(None).empty
