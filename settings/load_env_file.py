# settings/load_env_file.py
import os
import sys
from pathlib import Path

from dotenv import load_dotenv


def load_env_file(path: str = ".env") -> bool:
    """Load KEY=VALUE .env into os.environ via python-dotenv. Process env wins."""
    if not Path(path).exists():
        print(f"[env] {path} not found; relying on process env")
        return False
    load_dotenv(dotenv_path=path, override=False)
    print(f"[env] loaded {path} via python-dotenv")
    return True


def env_path_from_argv(argv: list[str] | None = None, default: str = ".env") -> str:
    # support: python main.py --env other.env
    argv = sys.argv if argv is None else argv
    if "--env" in argv:
        i = argv.index("--env")
        if i + 1 < len(argv):
            return argv[i + 1]
    return default


def env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    return raw.lower() in ("true", "1", "yes", "on")


def env_int(name: str, default: int | None) -> int | None:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
