"""Application configuration.

RoostConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class RoostConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RoostConfig(api_dir="handlers", prefix="/api", port=3000)
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False

    # Handler tree
    api_dir: str | Path = "api"
    prefix: str = ""  # Mount point for the whole tree (e.g. "/api")
    handler_attr: str = "handler"  # Module attribute holding each file's handler
    extensions: tuple[str, ...] = (".py",)

    # Skip broken entries (logged) instead of aborting the build
    tolerant: bool = False

    # Logging
    log_level: str = "info"
