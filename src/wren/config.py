"""Application configuration.

AppConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(port=8083, template_dir="views")
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8124
    debug: bool = False

    # Templates
    template_dir: str | Path = "templates"
    autoescape: bool = True

    # Upper bound (seconds) on body arrival + handler + deferred completion.
    # None waits forever.
    completion_timeout: float | None = None

    # Logging
    access_log: bool = True
    log_level: str = "info"
