"""Application configuration.

AppConfig is a frozen dataclass, immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from roost.env import env_flag, load_env


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(debug=True, secret_key="s3cr3t")
    """

    debug: bool = False

    # Security
    secret_key: str = ""

    # Templates
    template_dir: str | Path = "templates"
    autoescape: bool = True

    # Controller resolution
    controller_suffix: str = "Controller"
    default_controller: str = "home"
    default_action: str = "index"

    # Fallback routing (controller/action/params from raw path segments)
    fallback_routing: bool = True
    fallback_middleware: tuple[str, ...] = ()

    # Maintenance mode (read by MaintenanceMiddleware)
    maintenance: bool = False
    maintenance_allowed_ips: tuple[str, ...] = ("127.0.0.1", "::1")

    # Logging
    log_level: str = "info"
    log_file: str | Path | None = None

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        env_file: str | Path | None = ".env",
    ) -> AppConfig:
        """Build a config from ``APP_*`` environment variables.

        When *environ* is omitted, *env_file* is loaded into ``os.environ``
        first and the process environment is read.
        """
        if environ is None:
            if env_file is not None:
                load_env(env_file)
            environ = os.environ

        defaults = cls()
        fallback_mw = environ.get("APP_FALLBACK_MIDDLEWARE", "")
        return cls(
            debug=env_flag(environ.get("APP_DEBUG"), defaults.debug),
            secret_key=environ.get("APP_SECRET_KEY", defaults.secret_key),
            template_dir=environ.get("APP_TEMPLATE_DIR", str(defaults.template_dir)),
            fallback_routing=env_flag(
                environ.get("APP_FALLBACK_ROUTING"), defaults.fallback_routing
            ),
            fallback_middleware=tuple(n.strip() for n in fallback_mw.split(",") if n.strip()),
            maintenance=env_flag(environ.get("APP_MAINTENANCE"), defaults.maintenance),
            log_level=environ.get("APP_LOG_LEVEL", defaults.log_level),
            log_file=environ.get("APP_LOG_FILE") or None,
        )
