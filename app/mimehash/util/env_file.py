"""Read-only ``.env`` file reader."""

from __future__ import annotations

from pathlib import Path


class EnvFile:
    """Parses ``KEY=VALUE`` lines from a dotenv file.

    Blank lines and ``#`` comments are ignored, an optional ``export``
    prefix is stripped, and values wrapped in matching single or double
    quotes are unquoted.  A missing file reads as empty.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def read(self, key: str) -> str:
        return self.read_all().get(key, "")

    def read_all(self) -> dict[str, str]:
        if not self.path.is_file():
            return {}
        values: dict[str, str] = {}
        for raw in self.path.read_text(encoding="utf-8").splitlines():
            line = raw.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            if line.startswith("export "):
                line = line[len("export "):].lstrip()
            key, _, value = line.partition("=")
            values[key.strip()] = _unquote(value.strip())
        return values


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value
