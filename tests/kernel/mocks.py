from typing import Dict, List, Optional

from artifetch.kernel.artifacts import ArtifactSpec, ArtifactStoreClient
from artifetch.kernel.errors import NetworkError, NotFoundError

NPUZONE_COMMIT = "3203c51cf4473d30991b522062ac0df2e045c2f2"
STORE_URL = "https://buildomat.test/public/file"


class MockArtifactStoreClient(ArtifactStoreClient):
    """An in-memory ArtifactStoreClient for testing."""
    def __init__(self, artifacts: Optional[Dict[ArtifactSpec, bytes]] = None):
        self._artifacts = dict(artifacts or {})
        self.fetch_calls: List[ArtifactSpec] = []
        self.force_network_error = False

    def add(self, spec: ArtifactSpec, data: bytes) -> None:
        self._artifacts[spec] = data

    def fetch(self, spec: ArtifactSpec) -> bytes:
        self.fetch_calls.append(spec)
        if self.force_network_error:
            raise NetworkError(f"Mock network error for {spec.ref}", ref=spec.ref)
        if spec not in self._artifacts:
            raise NotFoundError(f"Mock store has no {spec.ref}", ref=spec.ref)
        return self._artifacts[spec]
