import sys
from pathlib import Path

# Ensure the project root is on sys.path so `algebra`, `linalg` and `workspace` are importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Point the workspace store at a fresh temporary directory."""
    from workspace import storage

    monkeypatch.setattr(storage, "_DATA_DIR", str(tmp_path))
    monkeypatch.setattr(storage, "_DATA_FILE", str(tmp_path / "exactsolver.json"))
    return tmp_path
