"""
Defaults shared across artifetch. Anything here can be overridden through
the environment (see artifetch.internal.config) or CLI flags.
"""

# ---------------------------------------------------------------------
# Artifact store
# ---------------------------------------------------------------------

DEFAULT_STORE_URL = "https://buildomat.eng.oxide.computer/public/file"
DEFAULT_ORG = "oxidecomputer"
DEFAULT_SERIES = "image"

DEFAULT_TIMEOUT_SECONDS = 60.0
DOWNLOAD_CHUNK_SIZE = 1024 * 1024

# ---------------------------------------------------------------------
# Local layout
# ---------------------------------------------------------------------

DEFAULT_OUTPUT_ROOT = "out"
PIN_REGISTRY_FILE_NAME = "pins.json"

# ---------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------

ENV_STORE_URL = "ARTIFETCH_STORE_URL"
ENV_ORG = "ARTIFETCH_ORG"
ENV_TIMEOUT = "ARTIFETCH_TIMEOUT"
ENV_LOG_LEVEL = "ARTIFETCH_LOG_LEVEL"
ENV_LOG_FILE = "ARTIFETCH_LOG_FILE"

# ---------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_NOT_FOUND = 3
EXIT_NETWORK = 4
EXIT_IO = 5
EXIT_CHECKSUM = 6
