from os import getenv
from .utils.io import DEFAULT_ENCODING  # NOQA: F401

# Default output buffering mode, one of `prepend`, `append` or `clean`
MODE: str = getenv("SLUICE_MODE", "prepend")

# Size of the reads when streaming a response body
CHUNK_SIZE: int = int(getenv("SLUICE_CHUNK_SIZE", 1024 * 8))

LOG_EMIT: bool = getenv("SLUICE_LOG_EMIT", "0") == "1"

# One of `Debug`, `Info`, `Warning`, `Error` or `Exception`
LOG_LEVEL: str = getenv("SLUICE_LOG_LEVEL", "Info")

# EOF
