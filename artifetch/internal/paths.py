from pathlib import Path
from typing import Optional

from artifetch.internal.constants import DEFAULT_OUTPUT_ROOT, PIN_REGISTRY_FILE_NAME


# ---------------------------------------------------------------------
# Output directories
# ---------------------------------------------------------------------

def get_default_output_dir(name: str, base: Optional[Path] = None) -> Path:
    """
    Directory an artifact lands in when no -O is given: out/<name>,
    relative to `base` (the current directory by default).

    Not created here; the fetcher creates it lazily on first fetch.
    """
    root = Path(base) if base is not None else Path.cwd()
    return root / DEFAULT_OUTPUT_ROOT / name


# ---------------------------------------------------------------------
# Registry / metadata
# ---------------------------------------------------------------------

def get_registry_dir() -> Path:
    return Path(__file__).resolve().parent.parent / "registry"


def get_pin_registry_path() -> Path:
    """
    Full path to the pin registry shipped with the package.
    """
    return get_registry_dir() / PIN_REGISTRY_FILE_NAME
