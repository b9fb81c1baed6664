# clients/athena_express.py
# Convenience wrapper: one call submits, waits and returns a results dict.
import re
from dataclasses import dataclass, field, replace
from typing import Any

from functions.get_results import MAX_PAGE_SIZE, get_results
from functions.submit_query import QueryContext, submit_query
from polling.wait_for_query import wait_for_query
from settings.env_config import EnvConfig

EXECUTION_ID_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)

# Statistics fields passed through from GetQueryExecution when get_stats is on
STAT_FIELDS = (
    "DataScannedInBytes",
    "EngineExecutionTimeInMillis",
    "TotalExecutionTimeInMillis",
    "QueryQueueTimeInMillis",
    "QueryPlanningTimeInMillis",
    "ServiceProcessingTimeInMillis",
)


@dataclass(frozen=True)
class ExpressConfig:
    athena_client: Any
    s3: str | None = None
    db: str | None = None
    catalog: str | None = None
    workgroup: str = "primary"
    format_json: bool = True
    get_stats: bool = False
    ignore_empty: bool = True
    retry_ms: int = 200
    encryption: dict = field(default_factory=dict)
    skip_results: bool = False
    wait_for_results: bool = True
    pagination: int = 0   # 0 = fetch every page
    page_size: int = MAX_PAGE_SIZE   # rows per GetQueryResults call when pagination is 0
    max_poll_attempts: int | None = None
    max_transient_errors: int = 3

    @classmethod
    def from_env_config(cls, cfg: EnvConfig, athena_client) -> "ExpressConfig":
        return cls(
            athena_client=athena_client,
            s3=cfg.result_location,
            db=cfg.database,
            catalog=cfg.catalog,
            workgroup=cfg.workgroup,
            format_json=cfg.format_json,
            get_stats=cfg.get_stats,
            ignore_empty=cfg.ignore_empty,
            retry_ms=cfg.retry_ms,
            encryption=dict(cfg.encryption),
            page_size=cfg.page_size,
            max_poll_attempts=cfg.max_poll_attempts,
            max_transient_errors=cfg.max_transient_errors,
        )

    def describe(self) -> dict:
        out = {k: v for k, v in self.__dict__.items() if k != "athena_client"}
        out["athena_client"] = "<IGNORED>"
        return out


def is_execution_id(value: str) -> bool:
    return bool(EXECUTION_ID_RE.match(value.strip()))


def _check_pagination(pagination: int) -> int:
    if pagination < 0 or pagination > MAX_PAGE_SIZE:
        raise ValueError(f"pagination must be in 0..{MAX_PAGE_SIZE}, got {pagination}")
    return pagination


class AthenaExpress:
    def __init__(self, config: ExpressConfig):
        if config.athena_client is None:
            raise ValueError("athena_client is required")
        _check_pagination(config.pagination)
        if not 0 < config.page_size <= MAX_PAGE_SIZE:
            raise ValueError(f"page_size must be in 1..{MAX_PAGE_SIZE}, got {config.page_size}")
        self.config = config
        self.client = config.athena_client

    def _normalize(self, query) -> dict:
        if isinstance(query, str):
            if is_execution_id(query):
                return {"QueryExecutionId": query.strip()}
            return {"sql": query}
        if isinstance(query, dict):
            if not query.get("sql") and not query.get("QueryExecutionId"):
                raise ValueError("query object needs 'sql' or 'QueryExecutionId'")
            q = dict(query)
            if q.get("pagination") is not None:
                q["pagination"] = _check_pagination(int(q["pagination"]))
            return q
        raise TypeError(f"query must be a SQL string, execution id or dict, got {type(query).__name__}")

    def query(self, query) -> dict:
        """
        Run a SQL string / query dict, or pick up an existing QueryExecutionId.
        Returns {"QueryExecutionId", "Items", "Count", "NextToken", ...}.
        """
        q = self._normalize(query)
        cfg = self.config
        qid = q.get("QueryExecutionId")

        if not qid:
            ctx = QueryContext(
                database=q.get("db") or cfg.db,
                catalog=q.get("catalog") or cfg.catalog,
                workgroup=cfg.workgroup,
                encryption=cfg.encryption,
            )
            qid = submit_query(self.client, q["sql"], cfg.s3, ctx)
            if not cfg.wait_for_results:
                return {"QueryExecutionId": qid}

        # NextToken given: the query already finished, fetch the next page directly
        if q.get("NextToken"):
            out = {"QueryExecutionId": qid}
            out.update(self._collect(qid, int(q.get("pagination") or cfg.pagination), q["NextToken"]))
            return out

        outcome = wait_for_query(
            self.client, qid, cfg.retry_ms,
            fetch_results=False,
            max_attempts=cfg.max_poll_attempts,
            max_transient_errors=cfg.max_transient_errors,
        )
        outcome.raise_for_outcome()

        out: dict = {"QueryExecutionId": qid}
        if outcome.diagnostics.get("OutputLocation"):
            out["S3Location"] = outcome.diagnostics["OutputLocation"]
        if cfg.get_stats:
            stats = outcome.diagnostics.get("Statistics", {})
            out.update({k: stats[k] for k in STAT_FIELDS if k in stats})
        if cfg.skip_results:
            return out

        out.update(self._collect(qid, int(q.get("pagination") or cfg.pagination), None))
        return out

    def _collect(self, qid: str, pagination: int, next_token: str | None) -> dict:
        page_size = pagination or self.config.page_size
        items: list = []
        token = next_token
        while True:
            page = get_results(self.client, qid, page_size, next_token=token)
            items.extend(self._format(page))
            token = page.next_token
            # with pagination set, hand back one page and its token
            if pagination or not token:
                break
        return {"Items": items, "Count": len(items), "NextToken": token}

    def _format(self, page) -> list:
        if not self.config.format_json:
            return list(page.raw_rows)
        if not self.config.ignore_empty:
            return [dict(r) for r in page.rows]
        return [{k: v for k, v in r.items() if v not in (None, "")} for r in page.rows]

    def with_options(self, **changes) -> "AthenaExpress":
        return AthenaExpress(replace(self.config, **changes))
