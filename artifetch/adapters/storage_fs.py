"""
A concrete ArtifactFetcher that materializes pinned artifacts on the local
filesystem, pulling them from an ArtifactStoreClient on a cache miss.
"""
import hashlib
import os
import stat
from pathlib import Path
from typing import Optional

from artifetch.internal.logging import get_logger
from artifetch.kernel.artifacts import (
    ArtifactFetcher,
    ArtifactHandle,
    ArtifactSpec,
    ArtifactStoreClient,
    OutputLocation,
)
from artifetch.kernel.errors import ArtifactIOError, ChecksumMismatchError

logger = get_logger(__name__)

_EXECUTE_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


class FileSystemArtifactFetcher(ArtifactFetcher):
    """
    Keeps artifacts under a caller-chosen directory. The presence of the
    file is the only cache signal, unless an expected SHA-256 is supplied.
    """

    def __init__(self, store: ArtifactStoreClient):
        self._store = store

    def _calculate_sha256(self, file_path: Path) -> str:
        h = hashlib.sha256()
        with open(file_path, "rb") as f:
            for chunk in iter(lambda: f.read(1024 * 1024), b""):
                h.update(chunk)
        return h.hexdigest()

    def _is_valid(self, target_path: Path, spec: ArtifactSpec, expected_sha: Optional[str]) -> bool:
        if not target_path.is_file():
            return False
        if not expected_sha:
            return True
        try:
            actual_sha = self._calculate_sha256(target_path)
        except OSError as e:
            raise ArtifactIOError(f"Cannot read {target_path}: {e}", ref=spec.ref, path=target_path) from e
        if actual_sha != expected_sha.lower():
            logger.warning("Cached artifact has wrong checksum", ref=spec.ref, path=str(target_path))
            return False
        return True

    def _write_atomically(self, data: bytes, target_path: Path, spec: ArtifactSpec, expected_sha: Optional[str]) -> None:
        temp_path = target_path.with_name(f".{target_path.name}.tmp")
        try:
            if expected_sha:
                actual_sha = hashlib.sha256(data).hexdigest()
                if actual_sha != expected_sha.lower():
                    raise ChecksumMismatchError(
                        f"Checksum mismatch for {spec.name}: expected {expected_sha}, got {actual_sha}",
                        ref=spec.ref,
                        expected=expected_sha,
                        actual=actual_sha,
                    )
            try:
                with open(temp_path, "wb") as f:
                    f.write(data)
                temp_path.replace(target_path)
            except OSError as e:
                raise ArtifactIOError(f"Cannot write {target_path}: {e}", ref=spec.ref, path=target_path) from e
        finally:
            if temp_path.exists():
                temp_path.unlink()

    def resolve(self, spec: ArtifactSpec, dest_dir: Path) -> ArtifactHandle:
        location = OutputLocation.for_spec(spec, dest_dir)
        return ArtifactHandle(spec=spec, location=location, is_available=location.path.is_file())

    def ensure(
        self,
        spec: ArtifactSpec,
        dest_dir: Path,
        *,
        force: bool = False,
        sha256: Optional[str] = None,
    ) -> Path:
        dest_dir = Path(dest_dir)
        try:
            dest_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ArtifactIOError(f"Cannot create directory {dest_dir}: {e}", ref=spec.ref, path=dest_dir) from e

        handle = self.resolve(spec, dest_dir)
        target_path = handle.path

        if not force and self._is_valid(target_path, spec, sha256):
            logger.info("Artifact already present", ref=spec.ref, path=str(target_path))
            return target_path

        logger.info("Downloading artifact", ref=spec.ref, path=str(target_path), force=force)
        data = self._store.fetch(spec)
        self._write_atomically(data, target_path, spec, sha256)
        logger.info("Artifact stored", ref=spec.ref, path=str(target_path), size=len(data))
        return target_path

    def mark_executable(self, path: Path) -> None:
        path = Path(path)
        try:
            current_permissions = os.stat(path).st_mode
            os.chmod(path, current_permissions | _EXECUTE_BITS)
        except OSError as e:
            raise ArtifactIOError(f"Cannot mark {path} executable: {e}", path=path) from e
        logger.info("Marked executable", path=str(path))
