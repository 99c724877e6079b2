"""
Loads the registry of known artifact pins from a JSON file.
"""
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from artifetch.internal.constants import DEFAULT_SERIES
from artifetch.kernel.artifacts import ArtifactSpec


@dataclass(frozen=True)
class PinnedArtifact:
    spec: ArtifactSpec
    executable: bool = True
    sha256: Optional[str] = None
    description: str = ""


class PinRegistry:
    """
    Hard-coded pins, keyed by artifact name.
    """
    def __init__(self, registry_path: Path):
        self._registry = self._load_registry(Path(registry_path))
        self._pins = {
            name: self._to_pinned(name, entry)
            for name, entry in self._registry.get("pins", {}).items()
        }

    def _load_registry(self, registry_path: Path) -> Dict[str, Any]:
        if not registry_path.exists():
            raise RuntimeError(f"Pin registry not found: {registry_path}")
        with open(registry_path, "r", encoding="utf-8") as f:
            return json.load(f)

    def _to_pinned(self, name: str, entry: Dict[str, Any]) -> PinnedArtifact:
        try:
            spec = ArtifactSpec(
                name=name,
                repo=entry["repo"],
                commit=entry["commit"],
                series=entry.get("series", DEFAULT_SERIES),
            )
        except KeyError as e:
            raise RuntimeError(f"Pin '{name}' is missing required field {e}") from e
        return PinnedArtifact(
            spec=spec,
            executable=bool(entry.get("executable", True)),
            sha256=entry.get("sha256"),
            description=entry.get("description", ""),
        )

    def get(self, name: str) -> Optional[PinnedArtifact]:
        return self._pins.get(name)

    def list(self) -> List[PinnedArtifact]:
        return [self._pins[name] for name in sorted(self._pins)]
