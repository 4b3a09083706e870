"""Physical file system used by default for staging and removal."""

import logging
import shutil
from datetime import UTC
from datetime import datetime
from pathlib import Path
from typing import BinaryIO

logger = logging.getLogger(__name__)


class PhysicalFileSystem:
    """Host file system primitives on top of pathlib."""

    def file_exists(self, path: str) -> bool:
        return Path(path).is_file()

    def open_read(self, path: str) -> BinaryIO:
        return open(path, "rb")

    def copy_file(self, source: str, destination: str, overwrite: bool) -> None:
        """Copy ``source`` to ``destination``.

        Without ``overwrite`` the destination is created exclusively and an
        existing file raises FileExistsError. A failed write removes the
        destination so no half-written file is left behind.
        """
        Path(destination).parent.mkdir(parents=True, exist_ok=True)
        mode = "wb" if overwrite else "xb"
        with open(source, "rb") as src:
            with open(destination, mode) as dst:
                try:
                    shutil.copyfileobj(src, dst)
                except BaseException:
                    dst.close()
                    Path(destination).unlink(missing_ok=True)
                    logger.debug(f"Removed partially written {destination}")
                    raise

    def delete_file(self, path: str) -> None:
        Path(path).unlink()

    def last_write_time(self, path: str) -> datetime:
        return datetime.fromtimestamp(Path(path).stat().st_mtime, tz=UTC)
