"""
Runtime settings for talking to the artifact store.

Resolution order is: explicit overrides (CLI flags), then environment
variables, then the defaults in artifetch.internal.constants.
"""
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from artifetch.internal.constants import (
    DEFAULT_ORG,
    DEFAULT_STORE_URL,
    DEFAULT_TIMEOUT_SECONDS,
    ENV_ORG,
    ENV_STORE_URL,
    ENV_TIMEOUT,
)


@dataclass(frozen=True)
class FetchSettings:
    store_url: str = DEFAULT_STORE_URL
    org: str = DEFAULT_ORG
    timeout: float = DEFAULT_TIMEOUT_SECONDS

    def __post_init__(self):
        if not self.store_url:
            raise ValueError("store_url cannot be empty")
        if not self.org:
            raise ValueError("org cannot be empty")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        store_url: Optional[str] = None,
        org: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> "FetchSettings":
        env = os.environ if environ is None else environ

        raw_timeout = env.get(ENV_TIMEOUT)
        if timeout is None and raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                raise ValueError(f"{ENV_TIMEOUT} must be a number, got {raw_timeout!r}")

        return cls(
            store_url=(store_url or env.get(ENV_STORE_URL) or DEFAULT_STORE_URL).rstrip("/"),
            org=org or env.get(ENV_ORG) or DEFAULT_ORG,
            timeout=timeout if timeout is not None else DEFAULT_TIMEOUT_SECONDS,
        )
