# main_sdk.py
# Run TEST_QUERY straight through the boto3 Athena client and the async poller.
#   python main_sdk.py [--env path/to/.env]
# -------------------------------------------------
# 0) Load env before anything reads os.environ
from settings.load_env_file import env_path_from_argv, load_env_file

load_env_file(env_path_from_argv())

# -------------------------------------------------
# 1) Imports that depend on env
import asyncio

from functions.run_athena import page_to_frame
from functions.submit_query import QueryContext, submit_query
from polling.outcome import Outcome
from polling.poller import poll_until_complete
from settings.aws_config import AwsConfig, build_athena_client, describe
from settings.env_config import EnvConfig

TEST_QUERY = "SELECT id FROM albums LIMIT 10;"


async def run(cfg: EnvConfig, client) -> Outcome:
    qid = submit_query(
        client,
        TEST_QUERY,
        cfg.result_location,
        QueryContext(database=cfg.database, catalog=cfg.catalog,
                     workgroup=cfg.workgroup, encryption=cfg.encryption),
    )
    return await poll_until_complete(
        client, qid, cfg.retry_ms,
        page_size=cfg.page_size,
        max_attempts=cfg.max_poll_attempts,
        max_transient_errors=cfg.max_transient_errors,
    )


def main() -> Outcome:
    cfg = EnvConfig.from_env()
    aws_cfg = AwsConfig.from_env_config(cfg)
    print("[cfg] AWS config", describe(aws_cfg))
    print(f"[cfg] DB={cfg.database} CATALOG={cfg.catalog} WORKGROUP={cfg.workgroup} OUT={cfg.result_location}")

    outcome = asyncio.run(run(cfg, build_athena_client(aws_cfg)))
    if outcome.ok:
        df = page_to_frame(outcome.page)
        print(df.to_string(index=False))
        print(f"[done] {len(df)} rows from {outcome.execution_id}")
    else:
        print(f"[done] {outcome.kind.value} {outcome.execution_id}: "
              f"{outcome.error or outcome.diagnostics.get('StateChangeReason', '')}")
    return outcome


# -------------------------------------------------
# 2) Local run
if __name__ == "__main__":
    main()
