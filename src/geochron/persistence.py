"""JSON file persistence for the clock registry snapshot."""

import json
import os
import tempfile
from pathlib import Path

from loguru import logger

from geochron.errors import CorruptSnapshot
from geochron.models import RegistrySnapshot


class JsonSnapshotStore:
    """Keeps one RegistrySnapshot in a JSON file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> RegistrySnapshot | None:
        """Read the saved snapshot.

        Returns:
            The snapshot, or None if nothing has been saved yet.

        Raises:
            CorruptSnapshot: If the file exists but cannot be read or parsed.
        """
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise CorruptSnapshot(f"{self.path}: {e}") from e
        try:
            data = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CorruptSnapshot(f"{self.path}: {e}") from e
        return RegistrySnapshot.from_dict(data)

    def save(self, snapshot: RegistrySnapshot) -> None:
        """Write ``snapshot``, replacing the file atomically."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(snapshot.to_dict(), f, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("[store] Saved {} clocks to {}", len(snapshot.clocks), self.path)
