"""Filesystem storage for generated key and certificate PEM files."""

import logging
import os
import tempfile
from pathlib import Path

from devcert.issuer.errors import IssuanceError

logger = logging.getLogger(__name__)


class DirectoryCreationError(IssuanceError):
    """Raised when an output directory cannot be created."""

    step = "create_directory"
    description = "Output directory creation"


class FileWriteError(IssuanceError):
    """Raised when a PEM file cannot be written."""

    step = "write_files"
    description = "Writing key and certificate files"


class ArtifactStorage:
    """Writes the key/certificate pair to disk.

    Both files are staged as temporary siblings and only moved into place
    once both have been written, so a failed run never leaves a fresh key
    without its certificate or the other way round.
    """

    KEY_FILE_MODE = 0o600
    CERT_FILE_MODE = 0o644

    def ensure_directory(self, path: Path) -> Path:
        """Create ``path`` and any missing parents.

        An existing directory is accepted as is.

        Raises:
            DirectoryCreationError: If the path is a file or creation is denied.
        """
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(
                "directory_creation_failed",
                extra={"path": str(path), "error": str(e)},
            )
            raise DirectoryCreationError(f"Cannot create directory {path}: {e}") from e

        logger.debug("directory_ready", extra={"path": str(path)})
        return path

    def write_pair(self, key_path: Path, key_pem: str, cert_path: Path, cert_pem: str) -> None:
        """Write the private key and certificate, overwriting existing files.

        Files being overwritten are set aside first and restored if the
        second move fails, so an existing pair stays intact on error.

        Raises:
            FileWriteError: On any I/O failure.
        """
        staged: list[tuple[str, Path]] = []
        backups: list[tuple[str, Path]] = []
        placed: list[Path] = []
        try:
            staged.append((self._stage(key_path, key_pem, self.KEY_FILE_MODE), key_path))
            staged.append((self._stage(cert_path, cert_pem, self.CERT_FILE_MODE), cert_path))

            for tmp_name, target in staged:
                if target.is_file():
                    backups.append((self._set_aside(target), target))
                os.replace(tmp_name, target)
                placed.append(target)
        except OSError as e:
            self._rollback(staged, backups, placed)
            logger.error(
                "file_write_failed",
                extra={"key_path": str(key_path), "cert_path": str(cert_path), "error": str(e)},
            )
            raise FileWriteError(f"Cannot write {e.filename or 'output file'}: {e}") from e

        for backup_name, _ in backups:
            Path(backup_name).unlink(missing_ok=True)

        logger.info(
            "artifacts_written",
            extra={"key_path": str(key_path), "cert_path": str(cert_path)},
        )

    def _stage(self, target: Path, content: str, mode: int) -> str:
        """Write ``content`` to a temporary file next to ``target``."""
        fd, tmp_name = tempfile.mkstemp(
            dir=target.parent, prefix=f".{target.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.chmod(tmp_name, mode)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        return tmp_name

    def _set_aside(self, target: Path) -> str:
        """Move an existing ``target`` to a backup sibling and return its name."""
        fd, backup_name = tempfile.mkstemp(
            dir=target.parent, prefix=f".{target.name}.", suffix=".bak"
        )
        os.close(fd)
        try:
            os.replace(target, backup_name)
        except OSError:
            Path(backup_name).unlink(missing_ok=True)
            raise
        return backup_name

    def _rollback(
        self,
        staged: list[tuple[str, Path]],
        backups: list[tuple[str, Path]],
        placed: list[Path],
    ) -> None:
        """Remove staged temporaries and new files, then restore set-aside originals."""
        for tmp_name, _ in staged:
            Path(tmp_name).unlink(missing_ok=True)
        for target in placed:
            try:
                target.unlink()
            except OSError as e:
                logger.warning(
                    "rollback_failed",
                    extra={"path": str(target), "error": str(e)},
                )
        for backup_name, target in backups:
            try:
                os.replace(backup_name, target)
            except OSError as e:
                logger.warning(
                    "restore_failed",
                    extra={"path": str(target), "backup": backup_name, "error": str(e)},
                )
