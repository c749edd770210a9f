"""
Simple configuration management.

``Settings`` is an immutable dataclass read from environment
variables by :meth:`Settings.from_env`.  It is built once when the
application is created (see ``main.create_app``) and handed to the
record store and services explicitly, so there is no module level
settings object to reach for.  Defaults are provided for all fields;
in a production deployment override them via environment variables.
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Tuple


DEFAULT_SEED_URL = "https://s3.amazonaws.com/roxiler.com/product_transaction.json"

# Accepted values for ``list_empty_month``.
EMPTY_MONTH_ALL = "all"
EMPTY_MONTH_LITERAL = "literal"


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass(frozen=True)
class Settings:
    """Application settings."""

    project_name: str = "Transactions API"
    api_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"
    log_file: Optional[str] = None

    # Prefix the routers are mounted under.  Empty keeps the endpoints at
    # the root (``/transactions``, ``/statistics`` ...).
    api_prefix: str = ""

    # Path or connection string for the SQLite database.  If a relative
    # path is provided, it will be resolved relative to the project root
    # by the ``db`` module.
    database_url: str = "transactions.db"

    seed_url: str = DEFAULT_SEED_URL
    seed_timeout_seconds: float = 30.0

    # Upper bound for a single store call and for the combined fan-out.
    query_timeout_seconds: float = 10.0
    combined_timeout_seconds: float = 20.0

    default_per_page: int = 10
    max_per_page: int = 100

    # What an empty ``month`` means for the list endpoint: ``all`` applies
    # no month restriction, ``literal`` matches dates containing ``--``
    # (i.e. nothing).
    list_empty_month: str = EMPTY_MONTH_ALL

    cors_origins: Tuple[str, ...] = field(default_factory=lambda: ("*",))

    host: str = "0.0.0.0"
    port: int = 5000

    def __post_init__(self) -> None:
        if self.list_empty_month not in {EMPTY_MONTH_ALL, EMPTY_MONTH_LITERAL}:
            raise ValueError(
                f"list_empty_month must be '{EMPTY_MONTH_ALL}' or '{EMPTY_MONTH_LITERAL}', "
                f"got {self.list_empty_month!r}"
            )
        if self.default_per_page < 1 or self.max_per_page < self.default_per_page:
            raise ValueError("default_per_page must be >= 1 and <= max_per_page")

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the current process environment."""
        origins = os.getenv("CORS_ORIGINS", "*")
        return cls(
            project_name=os.getenv("PROJECT_NAME", "Transactions API"),
            api_version=os.getenv("API_VERSION", "1.0.0"),
            debug=_env_bool("DEBUG"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE") or None,
            api_prefix=os.getenv("API_PREFIX", "").rstrip("/"),
            database_url=os.getenv("DATABASE_URL", "transactions.db"),
            seed_url=os.getenv("SEED_URL", DEFAULT_SEED_URL),
            seed_timeout_seconds=float(os.getenv("SEED_TIMEOUT_SECONDS", "30")),
            query_timeout_seconds=float(os.getenv("QUERY_TIMEOUT_SECONDS", "10")),
            combined_timeout_seconds=float(os.getenv("COMBINED_TIMEOUT_SECONDS", "20")),
            default_per_page=int(os.getenv("DEFAULT_PER_PAGE", "10")),
            max_per_page=int(os.getenv("MAX_PER_PAGE", "100")),
            list_empty_month=os.getenv("LIST_EMPTY_MONTH", EMPTY_MONTH_ALL).lower(),
            cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "5000")),
        )
