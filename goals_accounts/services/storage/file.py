"""
JSON File Storage

Each slot is one `<key>.json` file inside a data directory.

TRADEOFFS:
- One file per key keeps a backup of the data directory trivially usable
- Writes go to a temporary file first and are then moved into place,
  so a crash mid-write leaves the previous value intact
- No locking: one process owns a data directory at a time
"""

from pathlib import Path
from typing import Optional, Union

from goals_accounts.services.storage.interface import (
    StorageCorruptError,
    StorageInterface,
    StorageUnavailableError,
)


class FileStorage(StorageInterface):
    """Directory-backed slot storage."""

    def __init__(self, data_dir: Union[str, Path]):
        self._data_dir = Path(data_dir)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, key: str) -> Path:
        """File that holds the value for a key."""
        return self._data_dir / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            if not path.exists():
                return None
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise StorageCorruptError(f"{path} is not valid UTF-8: {e}")
        except OSError as e:
            raise StorageUnavailableError(f"Cannot read {path}: {e}")

    def set_item(self, key: str, value: str) -> None:
        path = self.path_for(key)
        tmp = path.with_suffix(path.suffix + ".tmp")
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            with tmp.open("w", encoding="utf-8") as f:
                f.write(value)
            tmp.replace(path)
        except OSError as e:
            raise StorageUnavailableError(f"Cannot write {path}: {e}")

    def remove_item(self, key: str) -> None:
        path = self.path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageUnavailableError(f"Cannot remove {path}: {e}")
