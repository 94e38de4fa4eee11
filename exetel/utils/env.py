from __future__ import annotations

import os
from pathlib import Path


def load_env_file_if_present(path: str | Path = ".env", override: bool = False) -> dict[str, str]:
    """Read KEY=VALUE pairs from a .env file into ``os.environ``.

    Keeps credentials and endpoint overrides out of the shell history without
    pulling in python-dotenv. Blank lines and ``#`` comments are skipped, an
    optional ``export`` prefix is accepted and surrounding quotes are removed.
    Existing environment variables win unless ``override`` is set.

    Returns the pairs read from the file, whether or not they were applied.
    """
    env_path = Path(path)
    loaded: dict[str, str] = {}
    if not env_path.is_file():
        return loaded

    for raw_line in env_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        if line.startswith("export "):
            line = line[len("export ") :]
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
            value = value[1:-1]
        if override or key not in os.environ:
            os.environ[key] = value
        loaded[key] = value
    return loaded


def env_setting(key: str, default: str | None = None) -> str | None:
    """Return a non-empty environment value, or ``default``."""
    value = os.getenv(key)
    return value if value else default
