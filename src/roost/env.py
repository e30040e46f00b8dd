"""``.env`` file loading.

Reads ``KEY=VALUE`` lines into ``os.environ`` so ``AppConfig.from_env()``
can pick them up. Variables already present in the environment win.
"""

import os
from collections.abc import MutableMapping
from pathlib import Path


def parse_env(text: str) -> dict[str, str]:
    """Parse the contents of a ``.env`` file.

    Blank lines and ``#`` comments are skipped, an optional ``export``
    prefix is accepted, and matching single or double quotes around the
    value are stripped.
    """
    values: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export ") :].lstrip()
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        if key:
            values[key] = value
    return values


def load_env(
    path: str | Path = ".env",
    environ: MutableMapping[str, str] | None = None,
) -> dict[str, str]:
    """Load *path* into *environ* (``os.environ`` by default).

    Returns the parsed values. A missing file is not an error.
    """
    target = os.environ if environ is None else environ
    env_path = Path(path)
    if not env_path.is_file():
        return {}
    values = parse_env(env_path.read_text(encoding="utf-8"))
    for key, value in values.items():
        target.setdefault(key, value)
    return values


def env_flag(value: str | None, default: bool = False) -> bool:
    """Interpret ``true``/``1``/``yes``/``on`` as True."""
    if value is None:
        return default
    return value.strip().lower() in ("true", "1", "yes", "on")
