"""Application configuration.

AppConfig is a frozen dataclass: immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(
            services_dir="app/service",
            routes={
                "profile": {0: "user-profile", "methods": {"name": "edit-name"}},
                "~~": [{0: "post", "pattern": r"^/p/(\\d+)$", "method": "doShow"}],
            },
        )
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    workers: int = 1  # ignored when debug (reload) is on

    # Services: <services_dir>/<Name>/<Name>.py, defaults under <services_dir>/default
    services_dir: str | Path | None = "app/service"

    # Aliases and regex routes (reserved key "~~"), see wren.routing.aliases
    routes: Mapping[str, Any] = field(default_factory=dict)

    # Fill parameters not covered by regex captures with method defaults
    regex_arguments_use_defaults: bool = False

    # Logging
    log_level: str = "info"
