from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


import pytest

from propshape import server
from propshape.common import logger
from propshape.config import ENV_VARS, CONFIG_ENV_VAR


@pytest.fixture(autouse=True)
def _isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    for env_var in [*ENV_VARS.values(), CONFIG_ENV_VAR]:
        monkeypatch.delenv(env_var, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(server, "_server_settings", None)
    logger(level="DEBUG", format_type="simple", use_indentation=True, use_colors=False, reset=True)
    yield


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    return tmp_path / "out"
