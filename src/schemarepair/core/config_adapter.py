"""Sources the schema-repair settings are read from: process env, then a .env file."""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Protocol


class ConfigSource(Protocol):
    def get(self, key: str) -> str | None: ...


def parse_dotenv_line(raw_line: str) -> tuple[str, str] | None:
    """Split one ``.env`` line into ``(key, value)``; comments and junk give None.

    Accepts an ``export`` prefix and a single pair of matching quotes around
    the value, which is what the platform's env generators emit.
    """
    line = raw_line.strip()
    if not line or line.startswith("#"):
        return None
    key, sep, value = line.partition("=")
    if not sep:
        return None
    key = key.removeprefix("export ").strip()
    if not key:
        return None
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        value = value[1:-1]
    return key, value


@dataclass(slots=True)
class EnvConfigSource:
    prefix: str = ""

    def get(self, key: str) -> str | None:
        return os.environ.get(self.prefix + key)


@dataclass(slots=True)
class DotEnvConfigSource:
    """Reads ``path`` once, on first lookup; a missing file yields no values."""

    path: Path = Path(".env")
    _values: dict[str, str] | None = field(default=None, init=False)

    def values(self) -> dict[str, str]:
        if self._values is None:
            try:
                text = self.path.read_text(encoding="utf-8")
            except FileNotFoundError:
                text = ""
            pairs = (parse_dotenv_line(line) for line in text.splitlines())
            self._values = dict(pair for pair in pairs if pair is not None)
        return self._values

    def get(self, key: str) -> str | None:
        return self.values().get(key)


@dataclass(slots=True)
class ConfigAdapter:
    """First source holding a key wins."""

    sources: tuple[ConfigSource, ...]

    def get(self, key: str, default: str | None = None) -> str | None:
        return next(
            (value for value in (s.get(key) for s in self.sources) if value is not None),
            default,
        )
