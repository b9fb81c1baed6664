# settings/aws_config.py
# Explicit client context: built once at startup and passed down, never a process-wide SDK config.
from dataclasses import dataclass

import boto3
from botocore.config import Config

from settings.env_config import EnvConfig


@dataclass(frozen=True)
class AwsConfig:
    region: str
    access_key_id: str | None = None
    secret_access_key: str | None = None
    session_token: str | None = None
    proxy_url: str | None = None

    @classmethod
    def from_env_config(cls, cfg: EnvConfig) -> "AwsConfig":
        return cls(
            region=cfg.region,
            access_key_id=cfg.access_key_id,
            secret_access_key=cfg.secret_access_key,
            session_token=cfg.session_token,
            proxy_url=cfg.proxy_url,
        )


def _mask(value: str | None) -> str | None:
    if not value:
        return value
    return value[:4] + "****" if len(value) > 8 else "****"


def describe(aws_config: AwsConfig) -> dict:
    """Printable view of the config with secrets masked."""
    out = {
        "region": aws_config.region,
        "accessKeyId": _mask(aws_config.access_key_id),
        "secretAccessKey": "****" if aws_config.secret_access_key else None,
    }
    if aws_config.session_token:
        out["sessionToken"] = "****"
    if aws_config.proxy_url:
        out["httpOptions"] = {"proxy": aws_config.proxy_url}
    return out


def build_session(aws_config: AwsConfig) -> boto3.Session:
    kwargs = {"region_name": aws_config.region}
    if aws_config.access_key_id and aws_config.secret_access_key:
        kwargs["aws_access_key_id"] = aws_config.access_key_id
        kwargs["aws_secret_access_key"] = aws_config.secret_access_key
        # session token only rides along with explicit keys
        if aws_config.session_token:
            kwargs["aws_session_token"] = aws_config.session_token
    return boto3.Session(**kwargs)


def build_client_config(aws_config: AwsConfig) -> Config:
    kwargs = {"retries": {"mode": "standard"}}
    if aws_config.proxy_url:
        kwargs["proxies"] = {"http": aws_config.proxy_url, "https": aws_config.proxy_url}
    return Config(**kwargs)


def build_athena_client(aws_config: AwsConfig, session: boto3.Session | None = None):
    session = session or build_session(aws_config)
    return session.client("athena", config=build_client_config(aws_config))
