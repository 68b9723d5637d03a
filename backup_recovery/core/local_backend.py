"""
Local File System Storage Backend

Exported backup files are persisted by the stores into a storage backend;
the harness reads them back by name to rebuild their import metadata. Only
the local file system backend is supported: a directory shared by the
stores and the harness.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from utils.identifiers import IdentifierSource, default_identifier_source
from ..exceptions import StorageReadError
from ..models.entities import StorageBackend, StorageBackendType

logger = logging.getLogger(__name__)


def make_local_backend(path: Union[str, Path]) -> StorageBackend:
    """Describe a local backend rooted at path."""
    return StorageBackend(backend_type=StorageBackendType.LOCAL, path=str(path))


def make_unique_dir(base: Union[str, Path], ids: Optional[IdentifierSource] = None) -> Path:
    """
    Create a fresh run directory under base.

    The directory name is a 16-hex-digit random suffix, e.g.
    base/3f9c0a1be2d4c567.

    Args:
        base: Parent directory (created if missing)
        ids: Identifier source; the process-wide random source by default

    Returns:
        Path of the created directory
    """
    ids = ids or default_identifier_source()
    unique = Path(base) / ids.new_dir_suffix()
    unique.mkdir(parents=True, exist_ok=True)
    logger.debug(f"Created run directory {unique}")
    return unique


class LocalStorageBackend:
    """
    Reader of files in a local storage backend.

    Directory structure:
        root/
        ├── 1_2_1_<hash>_<ts>_default.sst
        ├── 1_2_1_<hash>_<ts>_write.sst
        └── ...

    Example:
        ```python
        storage = create_storage(make_local_backend(run_dir))
        content = storage.read(backup_file.name)
        ```
    """

    def __init__(self, root: Union[str, Path]):
        """
        Initialize the backend.

        Args:
            root: Directory holding the files
        """
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)
        logger.debug(f"LocalStorageBackend initialized with root: {self.root}")

    def _path(self, name: str) -> Path:
        path = (self.root / name).resolve()
        if self.root.resolve() not in path.parents:
            raise StorageReadError(name, str(self.root), "name escapes the storage root")
        return path

    def read(self, name: str) -> bytes:
        """
        Read a file's full content.

        Raises:
            StorageReadError: If the file is missing or unreadable
        """
        path = self._path(name)
        try:
            content = path.read_bytes()
        except OSError as e:
            logger.error(f"Failed to read {name} from {self.root}: {e}")
            raise StorageReadError(name, str(self.root), str(e)) from e
        logger.debug(f"Read {len(content)} bytes from {name}")
        return content


def create_storage(backend: StorageBackend) -> LocalStorageBackend:
    """
    Open the storage described by a backend descriptor.

    Raises:
        ValueError: If the backend type is not supported
    """
    if backend.backend_type == StorageBackendType.LOCAL:
        return LocalStorageBackend(backend.path)
    raise ValueError(f"Unsupported storage backend: {backend.backend_type}")
