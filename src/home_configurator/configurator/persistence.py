"""
Module: configurator.persistence

Purpose:
    Persists each model's selection in a JSON key-value store file,
    one key per model (`customizerSelections_<modelId>`). Reads and
    writes hold a portalocker lock so several windows can share a store.

Key Classes:
    - SelectionStore: load/save/clear per model

Key Functions:
    - storage_key(): Store key for a model id
    - locked_file(): Locked open of the store file

Dependencies:
    - portalocker: Cross-platform file locking

Used By:
    - configurator.session: Restore at start, save after every change
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Generator, Union

import portalocker

from home_configurator.core.models.selection import SelectionState
from home_configurator.core.utils.serialization import (
    deserialize_selection,
    selection_from_json,
    serialize_selection,
)

logger = logging.getLogger(__name__)

STORAGE_KEY_PREFIX = "customizerSelections_"


def storage_key(model_id: int) -> str:
    return f"{STORAGE_KEY_PREFIX}{model_id}"


@contextmanager
def locked_file(
    path: Path,
    mode: str = "r",
    lock_type: int = portalocker.LOCK_EX,
) -> Generator:
    """
    Open `path` with a lock held for the lifetime of the context.

    Example:
        >>> with locked_file(path, "r", portalocker.LOCK_SH) as f:
        ...     data = f.read()
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    if not path.exists():
        path.touch()

    with open(path, mode, encoding="utf-8") as f:
        portalocker.lock(f, lock_type)
        try:
            yield f
        finally:
            portalocker.unlock(f)


def _read_store(f, path: Path) -> Dict[str, Any]:
    try:
        content = f.read()
    except UnicodeDecodeError as e:
        logger.warning(f"Selection store {path.name} is not UTF-8, starting empty: {e}")
        return {}
    return _parse_store(content, path)


def _parse_store(content: str, path: Path) -> Dict[str, Any]:
    if not content.strip():
        return {}
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        logger.warning(f"Selection store {path.name} is corrupt, starting empty: {e}")
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Selection store {path.name} is not an object, starting empty")
        return {}
    return data


class SelectionStore:
    """
    JSON file of persisted selections, keyed by model.

    Anything unreadable is logged and treated as absent, so a damaged
    store never blocks a session from starting.

    Example:
        >>> store = SelectionStore(Path("~/.home_configurator/selections.json").expanduser())
        >>> store.save(3, selection)
        >>> store.load(3) == selection
        True
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def load(self, model_id: int) -> SelectionState:
        """Stored selection for a model; empty if absent or malformed."""
        if not self.path.exists():
            return SelectionState()
        with locked_file(self.path, "r", portalocker.LOCK_SH) as f:
            data = _read_store(f, self.path)

        value = data.get(storage_key(model_id))
        if isinstance(value, str):
            # Stored as a JSON string, the way browser local storage holds it
            return selection_from_json(value)
        return deserialize_selection(value)

    def save(self, model_id: int, selection: SelectionState) -> None:
        self._modify(lambda data: data.__setitem__(storage_key(model_id), serialize_selection(selection)))
        logger.debug(f"Saved selection for model {model_id} ({len(selection)} option(s))")

    def clear(self, model_id: int) -> None:
        if not self.path.exists():
            return
        self._modify(lambda data: data.pop(storage_key(model_id), None))
        logger.debug(f"Cleared stored selection for model {model_id}")

    def _modify(self, modifier) -> None:
        """Locked read-modify-write of the whole store."""
        with locked_file(self.path, "r+", portalocker.LOCK_EX) as f:
            f.seek(0)
            data = _read_store(f, self.path)
            modifier(data)
            f.seek(0)
            f.truncate()
            json.dump(data, f, indent=2, ensure_ascii=False)
