# functions/run_athena.py
import pandas as pd

from clients.athena_express import AthenaExpress
from functions.get_results import ResultPage


def page_to_frame(page: ResultPage | None) -> pd.DataFrame:
    if page is None:
        return pd.DataFrame()
    return pd.DataFrame(page.rows, columns=page.columns)


def run_athena(sql: str, athena: AthenaExpress, expect_result: bool = True) -> pd.DataFrame:
    """Run sql through the wrapper and return every row as a DataFrame (empty for DDL)."""
    if not expect_result:
        athena.with_options(skip_results=True).query(sql)
        return pd.DataFrame()

    res = athena.with_options(format_json=True, ignore_empty=False, pagination=0).query(sql)
    items = res.get("Items", [])
    df = pd.DataFrame(items)
    print(f"[athena] {res['QueryExecutionId']} rows: {len(df)}")
    return df
