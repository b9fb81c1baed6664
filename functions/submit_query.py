# functions/submit_query.py
from dataclasses import dataclass, field

from botocore.exceptions import BotoCoreError, ClientError

from polling.errors import QuerySubmissionError


@dataclass(frozen=True)
class QueryContext:
    database: str | None = None
    catalog: str | None = None
    workgroup: str | None = None
    encryption: dict = field(default_factory=dict)


def submit_query(client, sql: str, result_location: str | None, context: QueryContext) -> str:
    """
    StartQueryExecution and return the QueryExecutionId.
    result_location may be None when the workgroup enforces its own output location.
    """
    if not sql or not sql.strip():
        raise ValueError("sql must be a non-empty string")

    params = {"QueryString": sql}
    exec_ctx = {}
    if context.database:
        exec_ctx["Database"] = context.database
    if context.catalog:
        exec_ctx["Catalog"] = context.catalog
    if exec_ctx:
        params["QueryExecutionContext"] = exec_ctx
    if context.workgroup:
        params["WorkGroup"] = context.workgroup

    result_cfg = {}
    if result_location:
        result_cfg["OutputLocation"] = result_location
    if context.encryption:
        result_cfg["EncryptionConfiguration"] = dict(context.encryption)
    if result_cfg:
        params["ResultConfiguration"] = result_cfg

    try:
        resp = client.start_query_execution(**params)
    except (ClientError, BotoCoreError) as e:
        raise QuerySubmissionError(f"Athena submission failed: {e}") from e

    qid = resp.get("QueryExecutionId")
    if not qid:
        raise QuerySubmissionError(f"Athena returned no QueryExecutionId: {resp}")
    print(f"[athena] submitted QueryExecutionId={qid}")
    return qid
