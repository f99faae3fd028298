from __future__ import annotations

import json
import logging
from collections.abc import MutableMapping
from pathlib import Path
from typing import Dict, Iterator

logger = logging.getLogger(__name__)


class JsonFileStore(MutableMapping):
    """String key-value store persisted as one JSON document.

    Every write rewrites the file. A missing or corrupt file reads as empty.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self._data: Dict[str, str] = {}
        self.reload()

    @property
    def path(self) -> Path:
        return self._path

    def reload(self) -> None:
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except FileNotFoundError:
            self._data = {}
            return
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable progress file %s", self._path)
            self._data = {}
            return
        self._data = {str(key): str(value) for key, value in payload.items()}

    def _flush(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("w", encoding="utf-8") as handle:
            json.dump(self._data, handle, indent=2, sort_keys=True)

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __setitem__(self, key: str, value: str) -> None:
        self._data[key] = value
        self._flush()

    def __delitem__(self, key: str) -> None:
        del self._data[key]
        self._flush()

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)
