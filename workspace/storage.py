"""
ExactSolver — Local JSON storage for saved results, history, and settings.

Data is persisted in ``<project>/data/exactsolver.json`` unless the
``EXACTSOLVER_DATA_DIR`` environment variable points somewhere else.
Saved results are stored in their serialized one-line form.
"""

import json
import os
import re
import time
import uuid
from datetime import datetime

from algebra.errors import InvalidArgumentError
from workspace.result import Result, deserialize_result, result_to_csv, serialize_result, to_result

_DATA_DIR = os.environ.get(
    "EXACTSOLVER_DATA_DIR",
    os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "data"),
)
_DATA_FILE = os.path.join(_DATA_DIR, "exactsolver.json")

_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# ── Default settings ────────────────────────────────────────────────────
DEFAULT_SETTINGS = {
    "show_steps": False,              # print step histories in the CLI
    "log_level": "WARNING",
    "history_limit": 200,
    "expansion_strategy": "first_row",  # or "optimal"
}


def _ensure_dir() -> None:
    os.makedirs(_DATA_DIR, exist_ok=True)


def _empty_db() -> dict:
    return {"settings": dict(DEFAULT_SETTINGS), "variables": {}, "history": []}


def _load_db() -> dict:
    _ensure_dir()
    db = _empty_db()
    if os.path.exists(_DATA_FILE):
        try:
            with open(_DATA_FILE, "r", encoding="utf-8") as f:
                loaded = json.load(f)
        except (json.JSONDecodeError, OSError):
            return db
        if isinstance(loaded, dict):
            for key in db:
                if isinstance(loaded.get(key), type(db[key])):
                    db[key] = loaded[key]
    return db


def _save_db(db: dict) -> None:
    _ensure_dir()
    with open(_DATA_FILE, "w", encoding="utf-8") as f:
        json.dump(db, f, indent=2, ensure_ascii=False)


# ── Settings ─────────────────────────────────────────────────────────────

def get_settings() -> dict:
    """Return settings merged over the defaults so new keys are always present."""
    merged = dict(DEFAULT_SETTINGS)
    merged.update(_load_db()["settings"])
    return merged


def save_settings(settings: dict) -> None:
    db = _load_db()
    db["settings"] = settings
    _save_db(db)


# ── Saved results ────────────────────────────────────────────────────────

def _check_name(name: str) -> str:
    name = name.strip()
    if not _NAME_RE.match(name):
        raise InvalidArgumentError(
            f"'{name}' is not a valid name; use letters, digits and '_' and start with a letter."
        )
    return name


def save_variable(name: str, value) -> None:
    """Store *value* (a result or a plain Matrix/Vector/Fraction/str) under *name*."""
    name = _check_name(name)
    db = _load_db()
    db["variables"][name] = serialize_result(to_result(value))
    _save_db(db)


def load_variable(name: str) -> Result:
    """Raises KeyError when nothing is saved under *name*."""
    serialized = _load_db()["variables"].get(name.strip())
    if serialized is None:
        raise KeyError(name)
    return deserialize_result(serialized)


def delete_variable(name: str) -> bool:
    db = _load_db()
    removed = db["variables"].pop(name.strip(), None) is not None
    if removed:
        _save_db(db)
    return removed


def list_variables() -> list[str]:
    return sorted(_load_db()["variables"])


# ── History ──────────────────────────────────────────────────────────────

def add_history(command: str, answer: str) -> str:
    """Record a command and its answer (newest first). Returns the record id."""
    db = _load_db()
    record = {
        "id": uuid.uuid4().hex,
        "command": command,
        "answer": answer,
        "timestamp": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        "epoch": time.time(),
        "pinned": False,
    }
    db["history"].insert(0, record)
    limit = int(get_settings().get("history_limit", DEFAULT_SETTINGS["history_limit"]))
    db["history"] = db["history"][:limit]
    _save_db(db)
    return record["id"]


def get_history() -> list[dict]:
    """History, pinned entries first, then newest first."""
    return sorted(_load_db()["history"], key=lambda r: not r.get("pinned", False))


def resolve_history_id(prefix: str) -> str:
    """The full id of the one record whose id starts with *prefix*.

    Raises KeyError when none matches and InvalidArgumentError when the
    prefix is ambiguous.
    """
    prefix = prefix.strip()
    matches = [r["id"] for r in _load_db()["history"] if prefix and r["id"].startswith(prefix)]
    if not matches:
        raise KeyError(prefix)
    if len(matches) > 1:
        raise InvalidArgumentError(f"'{prefix}' matches {len(matches)} history entries.")
    return matches[0]


def toggle_pin(record_id: str) -> bool:
    """Flip the pinned flag; returns the new state."""
    db = _load_db()
    for record in db["history"]:
        if record["id"] == record_id:
            record["pinned"] = not record.get("pinned", False)
            _save_db(db)
            return record["pinned"]
    raise KeyError(record_id)


def delete_history_item(record_id: str) -> None:
    db = _load_db()
    db["history"] = [r for r in db["history"] if r["id"] != record_id]
    _save_db(db)


def clear_history() -> None:
    db = _load_db()
    db["history"] = []
    _save_db(db)


# ── Whole workspace ─────────────────────────────────────────────────────

def export_workspace(path: str) -> int:
    """Write saved results to *path*, one ``name<TAB>record`` line each.

    Returns the number of results written.
    """
    variables = _load_db()["variables"]
    with open(path, "w", encoding="utf-8") as f:
        for name in sorted(variables):
            f.write(f"{name}\t{variables[name]}\n")
    return len(variables)


def export_result_csv(name: str, path: str) -> None:
    """Write the result saved under *name* to *path* as CSV.

    Raises KeyError when nothing is saved under *name*.
    """
    text = result_to_csv(load_variable(name))
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)


def import_workspace(path: str) -> int:
    """Load results written by :func:`export_workspace`; existing names are replaced."""
    db = _load_db()
    count = 0
    with open(path, "r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.rstrip("\n")
            if not line.strip():
                continue
            name, sep, serialized = line.partition("\t")
            if not sep:
                raise InvalidArgumentError(f"Line {lineno} of {path} has no name separator.")
            deserialize_result(serialized)  # validate before storing
            db["variables"][_check_name(name)] = serialized
            count += 1
    _save_db(db)
    return count


def clear_all_data() -> None:
    _save_db(_empty_db())
