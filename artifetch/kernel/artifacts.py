"""
Defines the data model and abstract contracts for fetching pinned artifacts.

This is the core of artifetch. It defines the 'ports' that the artifact
store and local storage adapters must provide.
"""
import re
from abc import abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

from artifetch.internal.constants import DEFAULT_SERIES
from artifetch.kernel.errors import InvalidPinError

# Pins are revision hashes: short or full, SHA-1 or SHA-256.
_COMMIT_PIN = re.compile(r"[0-9a-fA-F]{7,64}")


def _is_path_segment(value: str) -> bool:
    return "/" not in value and "\\" not in value and value not in (".", "..")


@dataclass(frozen=True)
class ArtifactSpec:
    """
    Identifies exactly one immutable build artifact produced by CI for a
    repository at a pinned commit.
    """
    name: str
    repo: str
    commit: str
    series: str = DEFAULT_SERIES

    def __post_init__(self):
        if not self.name:
            raise ValueError("name cannot be empty")
        if not self.repo:
            raise ValueError("repo cannot be empty")
        if not self.commit:
            raise ValueError("commit cannot be empty")
        if not self.series:
            raise ValueError("series cannot be empty")
        if not _is_path_segment(self.name):
            raise ValueError(f"name must be a plain file name, got {self.name!r}")
        if not _is_path_segment(self.repo):
            raise ValueError(f"repo must be a single path segment, got {self.repo!r}")
        if not _is_path_segment(self.series):
            raise ValueError(f"series must be a single path segment, got {self.series!r}")
        if not _COMMIT_PIN.fullmatch(self.commit):
            raise InvalidPinError(
                f"commit must be a pinned revision hash, got {self.commit!r}"
            )

    @property
    def ref(self) -> str:
        return f"{self.repo}@{self.commit}:{self.name}"


@dataclass(frozen=True)
class OutputLocation:
    """
    Destination for a fetched artifact.
    """
    directory: Path
    filename: str

    @property
    def path(self) -> Path:
        return Path(self.directory) / self.filename

    @classmethod
    def for_spec(cls, spec: ArtifactSpec, directory: Path) -> "OutputLocation":
        return cls(directory=Path(directory), filename=spec.name)


@dataclass
class ArtifactHandle:
    """
    Result of a local lookup. `is_available` reflects only what is on disk;
    producing a handle never touches the network.
    """
    spec: ArtifactSpec
    location: OutputLocation
    is_available: bool

    @property
    def path(self) -> Path:
        return self.location.path


class ArtifactStoreClient(Protocol):
    """
    The interface (port) for a remote store holding CI-produced artifacts.
    """

    @abstractmethod
    def fetch(self, spec: ArtifactSpec) -> bytes:
        """
        Download the artifact produced by CI for spec.repo at spec.commit.

        A single attempt; no retry.

        Raises:
            NotFoundError: no artifact matches repo, commit and name.
            NetworkError: transport failure or unexpected response.
        """
        ...


class ArtifactFetcher(Protocol):
    """
    The interface (port) for materializing pinned artifacts locally.
    """

    @abstractmethod
    def resolve(self, spec: ArtifactSpec, dest_dir: Path) -> ArtifactHandle:
        """
        Check whether the artifact is already present under dest_dir.
        Must not perform network access.
        """
        ...

    @abstractmethod
    def ensure(
        self,
        spec: ArtifactSpec,
        dest_dir: Path,
        *,
        force: bool = False,
        sha256: Optional[str] = None,
    ) -> Path:
        """
        Make sure the artifact exists under dest_dir, downloading it on a
        cache miss, and return its path.
        """
        ...

    @abstractmethod
    def mark_executable(self, path: Path) -> None:
        """
        Set the execute permission bits on path.
        """
        ...
