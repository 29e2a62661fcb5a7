from pathlib import Path
import sys

import pytest

# Ensure the src layout is importable without an editable install
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from schemarepair.core import config as cfg  # noqa: E402
from schemarepair.core import settings  # noqa: E402

CONFIG_KEYS = ["SCHEMA_PATH", "SCHEMA_REPAIR_RULES", "SCHEMA_REPAIR_BACKUP", "LOG_LEVEL"]


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    # Keep a developer's real .env out of the test run.
    monkeypatch.setenv("DOTENV_PATH", "tests/.env.DO_NOT_USE")
    for key in CONFIG_KEYS:
        monkeypatch.delenv(key, raising=False)
    cfg._config_adapter.cache_clear()  # type: ignore[attr-defined]
    settings.get_repair_settings.cache_clear()  # type: ignore[attr-defined]
    yield
    cfg._config_adapter.cache_clear()  # type: ignore[attr-defined]
    settings.get_repair_settings.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture
def schema_file(tmp_path: Path):
    def _write(text: str, name: str = "schema.prisma") -> Path:
        path = tmp_path / name
        path.write_bytes(text.encode("utf-8"))
        return path

    return _write
