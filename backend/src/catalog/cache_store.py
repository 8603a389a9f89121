"""Single-slot on-disk snapshot of the last fetched catalog."""

import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from models import Catalog
from utils.logger import get_logger

from .errors import CacheWriteError

logger = get_logger(__name__)


class CatalogCacheStore:
    """Handles saving and loading the catalog snapshot."""

    def __init__(self, path: str | Path):
        """
        Args:
            path: File holding the snapshot; its directory is created on write
        """
        self.path = Path(path)

    @property
    def exists(self) -> bool:
        return self.path.is_file()

    def persist(self, catalog: Catalog) -> None:
        """
        Overwrite the snapshot with ``catalog``.

        The JSON is written to a temporary file next to the slot and moved
        over it, so readers see either the old or the new snapshot.

        Raises:
            CacheWriteError: the snapshot could not be written
        """
        payload = catalog.to_json()
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_name = f.name
                f.write(payload)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise CacheWriteError(f"Cannot write cache {self.path}: {e}") from e

        logger.debug("Catalog cached", path=str(self.path), size=len(payload))

    def load(self) -> Catalog | None:
        """
        Read the snapshot.

        Returns:
            Catalog, or None if the file is missing or cannot be decoded
        """
        if not self.exists:
            return None

        try:
            data = self.path.read_bytes()
            return Catalog.model_validate_json(data)
        except (OSError, ValidationError) as e:
            logger.warning("Ignoring unreadable cache", path=str(self.path), error=str(e))
            return None

    def clear(self) -> None:
        """Delete the snapshot; a missing file is not an error."""
        self.path.unlink(missing_ok=True)
        logger.info("Cache cleared", path=str(self.path))
