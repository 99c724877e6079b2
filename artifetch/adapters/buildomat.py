"""
An ArtifactStoreClient that downloads from a buildomat public file store.

Published job outputs are addressed as

    {store_url}/{org}/{repo}/{series}/{commit}/{name}
"""
from typing import Optional

import requests
from requests.utils import quote
from requests.exceptions import ConnectionError, HTTPError, RequestException, Timeout

from artifetch.internal.config import FetchSettings
from artifetch.internal.constants import DOWNLOAD_CHUNK_SIZE
from artifetch.internal.logging import get_logger
from artifetch.kernel.artifacts import ArtifactSpec, ArtifactStoreClient
from artifetch.kernel.errors import NetworkError, NotFoundError

logger = get_logger(__name__)

_NOT_FOUND_STATUSES = (404, 410)


class BuildomatStoreClient(ArtifactStoreClient):
    """
    Fetches pinned CI artifacts over HTTP. One request per fetch; retry
    policy is left to the caller.
    """

    def __init__(self, settings: Optional[FetchSettings] = None, session: Optional[requests.Session] = None):
        self.settings = settings or FetchSettings()
        self.session = session or requests.Session()

    def url_for(self, spec: ArtifactSpec) -> str:
        segments = [self.settings.org, spec.repo, spec.series, spec.commit, spec.name]
        return "/".join(
            [self.settings.store_url.rstrip("/")] + [quote(s, safe="") for s in segments]
        )

    def fetch(self, spec: ArtifactSpec) -> bytes:
        url = self.url_for(spec)
        logger.info("Fetching artifact", ref=spec.ref, url=url)

        try:
            with self.session.get(url, stream=True, timeout=self.settings.timeout) as r:
                if r.status_code in _NOT_FOUND_STATUSES:
                    raise NotFoundError(
                        f"No artifact '{spec.name}' for {spec.repo} at {spec.commit}",
                        ref=spec.ref,
                        url=url,
                    )
                r.raise_for_status()

                chunks = []
                for chunk in r.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                    if chunk:
                        chunks.append(chunk)

        except HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            logger.error("Artifact store HTTP error", ref=spec.ref, url=url, status=status)
            raise NetworkError(
                f"Artifact store returned HTTP {status} for {url}",
                ref=spec.ref,
                url=url,
                status_code=status,
            ) from e

        except Timeout as e:
            logger.error("Artifact store request timed out", ref=spec.ref, url=url)
            raise NetworkError(f"Timed out fetching {url}", ref=spec.ref, url=url) from e

        except ConnectionError as e:
            logger.error("Connection to artifact store failed", ref=spec.ref, url=url)
            raise NetworkError(f"Could not connect to {url}: {e}", ref=spec.ref, url=url) from e

        except RequestException as e:
            logger.error("Artifact download failed", ref=spec.ref, url=url, error=str(e))
            raise NetworkError(f"Download failed for {url}: {e}", ref=spec.ref, url=url) from e

        data = b"".join(chunks)
        logger.info("Artifact downloaded", ref=spec.ref, size=len(data))
        return data
