# main.py
# Run TEST_QUERY through the convenience wrapper.
#   python main.py [--env path/to/.env]
# -------------------------------------------------
# 0) Load env before anything reads os.environ
from settings.load_env_file import env_path_from_argv, load_env_file

load_env_file(env_path_from_argv())

# -------------------------------------------------
# 1) Imports that depend on env
import json

from clients.athena_express import AthenaExpress, ExpressConfig
from polling.errors import AthenaQueryError
from settings.aws_config import AwsConfig, build_athena_client, describe
from settings.env_config import EnvConfig

TEST_QUERY = """
 SELECT id FROM albums LIMIT 10;
"""


def build_athena() -> AthenaExpress:
    cfg = EnvConfig.from_env()
    aws_cfg = AwsConfig.from_env_config(cfg)
    print("[cfg] AWS config", describe(aws_cfg))

    express_cfg = ExpressConfig.from_env_config(cfg, build_athena_client(aws_cfg))
    print("[cfg] configuring athena client with parameters:", express_cfg.describe())
    return AthenaExpress(express_cfg)


def run_test_query(athena: AthenaExpress) -> dict | None:
    try:
        results = athena.query(TEST_QUERY)
        print(json.dumps(results, indent=2, default=str))
        return results
    except AthenaQueryError as e:
        print(f"[athena] error in run_test_query(): {e}")
        return None


def main():
    run_test_query(build_athena())


# -------------------------------------------------
# 2) Local run
if __name__ == "__main__":
    try:
        main()
    except Exception as e:
        print(f"[main] error in main(): {e}")
        raise
