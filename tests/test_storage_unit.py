import json
from fractions import Fraction
from pathlib import Path
from types import SimpleNamespace

import pytest

from algebra.errors import InvalidArgumentError
from linalg.matrix import Matrix
from linalg.vector import Vector
from workspace import storage
from workspace.result import MatrixResult, ScalarResult, TextResult, VectorResult


def _configure_tmp_db(monkeypatch, tmp_path: Path) -> Path:
    data_dir = tmp_path / "data"
    data_file = data_dir / "exactsolver.json"
    monkeypatch.setattr(storage, "_DATA_DIR", str(data_dir))
    monkeypatch.setattr(storage, "_DATA_FILE", str(data_file))
    return data_file


def test_settings_get_and_save(monkeypatch, tmp_path: Path) -> None:
    _configure_tmp_db(monkeypatch, tmp_path)

    settings = storage.get_settings()
    assert settings["expansion_strategy"] in {"first_row", "optimal"}
    assert settings["show_steps"] is False

    storage.save_settings({"expansion_strategy": "optimal", "show_steps": True})
    assert storage.get_settings()["expansion_strategy"] == "optimal"
    assert storage.get_settings()["show_steps"] is True
    # Keys missing from the saved object fall back to the defaults
    assert storage.get_settings()["history_limit"] == 200


def test_history_add_get_clear_and_limit(monkeypatch, tmp_path: Path) -> None:
    _configure_tmp_db(monkeypatch, tmp_path)

    for i in range(205):
        storage.add_history(f"solve x + {i} = 0", f"x = {-i}")

    history = storage.get_history()
    assert len(history) == 200
    assert history[0]["command"] == "solve x + 204 = 0"
    assert "id" in history[0]

    storage.clear_history()
    assert storage.get_history() == []


def test_history_limit_setting(monkeypatch, tmp_path: Path) -> None:
    _configure_tmp_db(monkeypatch, tmp_path)
    storage.save_settings({"history_limit": 3})

    for i in range(5):
        storage.add_history(f"factor x^{i}", "x")
    assert len(storage.get_history()) == 3


def test_history_pin(monkeypatch, tmp_path: Path) -> None:
    _configure_tmp_db(monkeypatch, tmp_path)

    rid = storage.add_history("solve x = 1", "x = 1")
    storage.add_history("solve x = 2", "x = 2")

    # Pin the older entry: it moves to the top
    new_state = storage.toggle_pin(rid)
    assert new_state is True
    history = storage.get_history()
    assert history[0]["id"] == rid
    assert history[0]["pinned"] is True

    # Unpin
    new_state = storage.toggle_pin(rid)
    assert new_state is False
    assert [r["command"] for r in storage.get_history()] == ["solve x = 2", "solve x = 1"]
    assert "archived" not in history[0]


def test_resolve_history_id(monkeypatch, tmp_path: Path) -> None:
    _configure_tmp_db(monkeypatch, tmp_path)
    ids = iter(["abc123", "abd456"])
    monkeypatch.setattr(storage.uuid, "uuid4", lambda: SimpleNamespace(hex=next(ids)))
    storage.add_history("factor x^2", "x^2")
    storage.add_history("factor x^3", "x^3")

    assert storage.resolve_history_id("abc") == "abc123"
    assert storage.resolve_history_id(" abd456 ") == "abd456"
    with pytest.raises(InvalidArgumentError, match="matches 2"):
        storage.resolve_history_id("ab")
    with pytest.raises(KeyError):
        storage.resolve_history_id("zz")
    with pytest.raises(KeyError):
        storage.resolve_history_id("")


def test_toggle_unknown_id(monkeypatch, tmp_path: Path) -> None:
    _configure_tmp_db(monkeypatch, tmp_path)
    with pytest.raises(KeyError):
        storage.toggle_pin("missing")


def test_delete_history_item(monkeypatch, tmp_path: Path) -> None:
    _configure_tmp_db(monkeypatch, tmp_path)

    rid1 = storage.add_history("solve x = 1", "x = 1")
    rid2 = storage.add_history("solve y = 2", "y = 2")

    storage.delete_history_item(rid1)
    history = storage.get_history()
    assert len(history) == 1
    assert history[0]["id"] == rid2


class TestVariables:
    def test_save_and_load_each_kind(self, monkeypatch, tmp_path: Path) -> None:
        _configure_tmp_db(monkeypatch, tmp_path)

        storage.save_variable("A", Matrix.parse("[1, 2; 3, 4]"))
        storage.save_variable("v", Vector([1, "1/2"]))
        storage.save_variable("d", Fraction(-2))
        storage.save_variable("note", "x = 3, x = 2")

        assert storage.load_variable("A") == MatrixResult(Matrix.parse("[1, 2; 3, 4]"))
        assert storage.load_variable("v") == VectorResult(Vector([1, "1/2"]))
        assert storage.load_variable("d") == ScalarResult(Fraction(-2))
        assert storage.load_variable("note") == TextResult("x = 3, x = 2")
        assert storage.list_variables() == ["A", "d", "note", "v"]

    def test_overwrite_and_delete(self, monkeypatch, tmp_path: Path) -> None:
        _configure_tmp_db(monkeypatch, tmp_path)

        storage.save_variable("x", 1)
        storage.save_variable("x", 2)
        assert storage.load_variable("x") == ScalarResult(Fraction(2))
        assert storage.delete_variable("x") is True
        assert storage.delete_variable("x") is False
        with pytest.raises(KeyError):
            storage.load_variable("x")

    def test_invalid_name(self, monkeypatch, tmp_path: Path) -> None:
        _configure_tmp_db(monkeypatch, tmp_path)
        with pytest.raises(InvalidArgumentError, match="not a valid name"):
            storage.save_variable("2bad", 1)

    def test_stored_as_serialized_text(self, monkeypatch, tmp_path: Path) -> None:
        data_file = _configure_tmp_db(monkeypatch, tmp_path)
        storage.save_variable("A", Matrix.parse("[1, 2; 3, 4]"))
        content = json.loads(data_file.read_text(encoding="utf-8"))
        assert content["variables"]["A"] == "MATRIX|2|2|1|2|3|4"


def test_export_and_import_workspace(monkeypatch, tmp_path: Path) -> None:
    _configure_tmp_db(monkeypatch, tmp_path)
    storage.save_variable("A", Matrix.parse("[1, 2; 3, 4]"))
    storage.save_variable("note", "two\nlines | and a bar")
    export_file = tmp_path / "workspace.txt"

    assert storage.export_workspace(str(export_file)) == 2
    storage.clear_all_data()
    assert storage.list_variables() == []

    assert storage.import_workspace(str(export_file)) == 2
    assert storage.load_variable("note") == TextResult("two\nlines | and a bar")
    assert storage.load_variable("A") == MatrixResult(Matrix.parse("[1, 2; 3, 4]"))


def test_export_result_csv(monkeypatch, tmp_path: Path) -> None:
    _configure_tmp_db(monkeypatch, tmp_path)
    storage.save_variable("A", Matrix.parse("[1, 1/2; 3, 4]"))
    out = tmp_path / "A.csv"

    storage.export_result_csv("A", str(out))
    assert out.read_text(encoding="utf-8") == "1,1/2\n3,4\n"
    with pytest.raises(KeyError):
        storage.export_result_csv("missing", str(tmp_path / "missing.csv"))
    assert not (tmp_path / "missing.csv").exists()


def test_import_rejects_malformed_lines(monkeypatch, tmp_path: Path) -> None:
    _configure_tmp_db(monkeypatch, tmp_path)
    bad = tmp_path / "bad.txt"
    bad.write_text("no-separator-here\n", encoding="utf-8")
    with pytest.raises(InvalidArgumentError, match="Line 1"):
        storage.import_workspace(str(bad))


def test_clear_all_data(monkeypatch, tmp_path: Path) -> None:
    _configure_tmp_db(monkeypatch, tmp_path)

    storage.save_settings({"expansion_strategy": "optimal"})
    storage.add_history("solve x = 1", "x = 1")
    storage.save_variable("a", 1)
    storage.clear_all_data()

    assert storage.get_settings()["expansion_strategy"] == "first_row"
    assert storage.get_history() == []
    assert storage.list_variables() == []


def test_load_db_handles_invalid_json(monkeypatch, tmp_path: Path) -> None:
    data_file = _configure_tmp_db(monkeypatch, tmp_path)
    data_file.parent.mkdir(parents=True, exist_ok=True)
    data_file.write_text("{not-json", encoding="utf-8")

    db = storage._load_db()
    assert "settings" in db
    assert "history" in db
    assert "variables" in db


def test_load_db_ignores_unknown_keys_and_wrong_types(monkeypatch, tmp_path: Path) -> None:
    data_file = _configure_tmp_db(monkeypatch, tmp_path)
    data_file.parent.mkdir(parents=True, exist_ok=True)
    data_file.write_text(json.dumps({"history": "oops", "extra": 1}), encoding="utf-8")

    db = storage._load_db()
    assert db["history"] == []
    assert "extra" not in db


def test_save_db_persists_content(monkeypatch, tmp_path: Path) -> None:
    data_file = _configure_tmp_db(monkeypatch, tmp_path)
    storage._save_db({"settings": {"log_level": "DEBUG"}, "variables": {}, "history": []})
    content = json.loads(data_file.read_text(encoding="utf-8"))
    assert content["settings"]["log_level"] == "DEBUG"
