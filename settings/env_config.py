# settings/env_config.py
# Read lazily via EnvConfig.from_env() so load_env_file() can run first.
import os
from dataclasses import dataclass, field

from settings.load_env_file import env_flag, env_int

DEFAULT_REGION       = "us-west-2"
DEFAULT_CATALOG      = "AwsDataCatalog"
DEFAULT_DB           = "default"
DEFAULT_WORKGROUP    = "primary"
DEFAULT_RETRY_MS     = 200
DEFAULT_PAGE_SIZE    = 1000   # GetQueryResults MaxResults ceiling
DEFAULT_MAX_TRANSIENT_ERRORS = 3


@dataclass(frozen=True)
class EnvConfig:
    region: str = DEFAULT_REGION
    catalog: str = DEFAULT_CATALOG
    database: str = DEFAULT_DB
    result_location: str | None = None
    access_key_id: str | None = None
    secret_access_key: str | None = None
    session_token: str | None = None
    proxy_url: str | None = None
    format_json: bool = True
    get_stats: bool = True
    ignore_empty: bool = False
    workgroup: str = DEFAULT_WORKGROUP
    retry_ms: int = DEFAULT_RETRY_MS
    page_size: int = DEFAULT_PAGE_SIZE
    max_poll_attempts: int | None = None
    max_transient_errors: int = DEFAULT_MAX_TRANSIENT_ERRORS
    encryption: dict = field(default_factory=dict)

    @classmethod
    def from_env(cls) -> "EnvConfig":
        """Build the config from AWS_* environment variables."""
        env = os.environ
        retry_ms = env_int("AWS_ATHENA_OPTION_RETRY_MS", DEFAULT_RETRY_MS)
        if retry_ms <= 0:
            raise ValueError(f"AWS_ATHENA_OPTION_RETRY_MS must be positive, got {retry_ms}")
        page_size = env_int("AWS_ATHENA_OPTION_PAGE_SIZE", DEFAULT_PAGE_SIZE)
        if not 0 < page_size <= DEFAULT_PAGE_SIZE:
            raise ValueError(f"AWS_ATHENA_OPTION_PAGE_SIZE must be in 1..{DEFAULT_PAGE_SIZE}, got {page_size}")

        encryption = {}
        if env.get("AWS_ATHENA_OPTION_ENCRYPTION_OPTION"):
            encryption["EncryptionOption"] = env["AWS_ATHENA_OPTION_ENCRYPTION_OPTION"]
            if env.get("AWS_ATHENA_OPTION_ENCRYPTION_KMS_KEY"):
                encryption["KmsKey"] = env["AWS_ATHENA_OPTION_ENCRYPTION_KMS_KEY"]

        return cls(
            region=env.get("AWS_DEFAULT_REGION") or DEFAULT_REGION,
            catalog=env.get("AWS_ATHENA_CATALOG_NAME") or DEFAULT_CATALOG,
            database=env.get("AWS_ATHENA_DB_NAME") or DEFAULT_DB,
            result_location=env.get("AWS_S3_RESULT_BUCKET_ADDRESS") or None,
            access_key_id=env.get("AWS_ACCESS_KEY_ID") or None,
            secret_access_key=env.get("AWS_SECRET_ACCESS_KEY") or None,
            session_token=env.get("AWS_SESSION_TOKEN") or None,
            proxy_url=env.get("AWS_OPTION_HTTP_OPTIONS_PROXY_URL") or None,
            format_json=env_flag("AWS_ATHENA_OPTION_FORMAT_JSON", True),
            get_stats=env_flag("AWS_ATHENA_OPTION_GET_QUERY_STATS", True),
            ignore_empty=env_flag("AWS_ATHENA_OPTION_IGNORE_EMPTY_FIELDS", False),
            workgroup=env.get("AWS_ATHENA_OPTION_WORKGROUP") or DEFAULT_WORKGROUP,
            retry_ms=retry_ms,
            page_size=page_size,
            max_poll_attempts=env_int("AWS_ATHENA_OPTION_MAX_POLL_ATTEMPTS", None),
            max_transient_errors=env_int("AWS_ATHENA_OPTION_MAX_TRANSIENT_ERRORS", DEFAULT_MAX_TRANSIENT_ERRORS),
            encryption=encryption,
        )
