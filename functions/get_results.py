# functions/get_results.py
from dataclasses import dataclass, field

MAX_PAGE_SIZE = 1000


@dataclass(frozen=True)
class ResultPage:
    execution_id: str
    columns: list[str]
    rows: list[dict]
    raw_rows: list[dict] = field(default_factory=list)
    next_token: str | None = None


def _row_values(row: dict) -> list:
    return [d.get("VarCharValue") for d in row.get("Data", [])]


def get_results(client, execution_id: str, max_rows: int = MAX_PAGE_SIZE,
                next_token: str | None = None) -> ResultPage:
    """
    Exactly one GetQueryResults call bounded to max_rows.
    On the first page (no next_token) the header row is dropped.
    """
    if not 0 < max_rows <= MAX_PAGE_SIZE:
        raise ValueError(f"max_rows must be in 1..{MAX_PAGE_SIZE}, got {max_rows}")

    kwargs = {"QueryExecutionId": execution_id, "MaxResults": max_rows}
    if next_token:
        kwargs["NextToken"] = next_token
    res = client.get_query_results(**kwargs)

    result_set = res.get("ResultSet", {})
    info = result_set.get("ResultSetMetadata", {}).get("ColumnInfo", [])
    cols = [c.get("Label") or c.get("Name") for c in info]
    raw_rows = result_set.get("Rows", [])

    # header row mirrors the column labels on the first page of a SELECT
    body = raw_rows
    if not next_token and raw_rows and cols and _row_values(raw_rows[0]) == cols:
        body = raw_rows[1:]

    rows = [dict(zip(cols, _row_values(r))) for r in body]
    return ResultPage(
        execution_id=execution_id,
        columns=cols,
        rows=rows,
        raw_rows=body,
        next_token=res.get("NextToken"),
    )
