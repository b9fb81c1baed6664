# functions/get_execution_status.py
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ExecutionStatus:
    execution_id: str
    state: str | None
    diagnostics: dict = field(default_factory=dict)
    raw: dict = field(default_factory=dict)


def get_execution_status(client, execution_id: str) -> ExecutionStatus:
    """One GetQueryExecution round trip. A payload without a state gives state=None."""
    qe = client.get_query_execution(QueryExecutionId=execution_id).get("QueryExecution") or {}
    status = qe.get("Status") or {}

    diagnostics = {}
    for key in ("StateChangeReason", "AthenaError"):
        if status.get(key):
            diagnostics[key] = status[key]
    if qe.get("Statistics"):
        diagnostics["Statistics"] = qe["Statistics"]
    output = (qe.get("ResultConfiguration") or {}).get("OutputLocation")
    if output:
        diagnostics["OutputLocation"] = output

    return ExecutionStatus(
        execution_id=execution_id,
        state=status.get("State"),
        diagnostics=diagnostics,
        raw=qe,
    )
