import logging
from pathlib import Path
from typing import Iterator, Optional

from laundry.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)


class JsonFileKeyValueStore(KeyValueStore):
    """
    Key-value store that keeps each key in its own ``<key>.json`` file
    inside a data directory.

    Values are written verbatim; the files hold JSON because every caller
    stores JSON documents, not because this class parses them.
    """

    def __init__(self, data_dir: Path):
        self._data_dir = data_dir

        # Ensure data directory exists
        if not self._data_dir.exists():
            self._data_dir.mkdir(parents=True, exist_ok=True)

    def _path_for(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._data_dir / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        path = self._path_for(key)
        path.write_text(value, encoding="utf-8")
        logger.debug(f"Wrote {len(value)} characters to {path.name}")

    def remove_item(self, key: str) -> None:
        path = self._path_for(key)
        if path.exists():
            path.unlink()

    def keys(self) -> Iterator[str]:
        for path in sorted(self._data_dir.glob("*.json")):
            yield path.stem
