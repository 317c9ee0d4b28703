"""
Environment driven settings.

SUPALITE_DATABASE_PATH    sqlite file, default ":memory:"
SUPALITE_LOG_LEVEL        logging level name, default "INFO"
SUPALITE_STRICT_RELATIONS disable naming inference for embedded resources
SUPALITE_PRIMARY_KEY      primary key column used for generated ids
"""

import logging
import os

_TRUE_VALUES = {"1", "true", "yes", "on"}


def database_path() -> str:
    return os.environ.get("SUPALITE_DATABASE_PATH", "").strip() or ":memory:"


def log_level() -> str:
    return os.environ.get("SUPALITE_LOG_LEVEL", "").strip().upper() or "INFO"


def strict_relations() -> bool:
    return os.environ.get("SUPALITE_STRICT_RELATIONS", "").strip().lower() in _TRUE_VALUES


def primary_key() -> str:
    return os.environ.get("SUPALITE_PRIMARY_KEY", "").strip() or "id"


def configure_logging(level=None):
    """Opt-in root logging setup for scripts; libraries embedding supalite configure their own handlers."""
    logging.basicConfig(level=level or log_level())
