"""Configuration utilities for CDCROUTE.

Settings are read from ``CDCROUTE_*`` environment variables once, at
composition time, and handed to components as plain values. Nothing in the
service layer reads the environment itself.
"""

import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from importlib.resources import files
from typing import TextIO

from alembic.config import Config

from cdcroute.service_layer.normalizer import DialectMode
from cdcroute.service_layer.reconciler import DeleteMode, KeyLayout

ALEMBIC_URL_KEY = "sqlalchemy.url"  # pragma: no mutate
ALEMBIC_SCRIPT_LOCATION_KEY = "script_location"  # pragma: no mutate

DB_URL_ENV = "CDCROUTE_DB_URL"
MONGO_URL_ENV = "CDCROUTE_MONGO_URL"
NORMALIZATION_ENABLED_ENV = "CDCROUTE_NORMALIZATION_ENABLED"
TYPE_MAPPING_MODE_ENV = "CDCROUTE_TYPE_MAPPING_MODE"
KEY_LAYOUT_ENV = "CDCROUTE_KEY_LAYOUT"
DELETE_MODE_ENV = "CDCROUTE_DELETE_MODE"

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off"})


class DatabaseUrlNotSetError(Exception):
    """Raised when the CDCROUTE_DB_URL environment variable is not set."""


class MongoUrlNotSetError(Exception):
    """Raised when the CDCROUTE_MONGO_URL environment variable is not set."""


class InvalidSettingError(ValueError):
    """Raised when a CDCROUTE_* setting holds an unrecognised value."""

    def __init__(self, name: str, value: str, allowed: list[str]):
        super().__init__(
            f"{name}={value!r} is not valid; expected one of: {', '.join(allowed)}"
        )
        self.name = name
        self.value = value
        self.allowed = allowed


@dataclass(frozen=True, slots=True)
class NormalizerSettings:
    """Type normalization settings."""

    enabled: bool = True
    mode: DialectMode = DialectMode.ORACLE


@dataclass(frozen=True, slots=True)
class ReconcilerSettings:
    """Write-intent reconciliation settings."""

    key_layout: KeyLayout = KeyLayout.TOP_LEVEL
    delete_mode: DeleteMode = DeleteMode.HARD


def get_db_url() -> str:
    """Get the database URL from the environment.

    Returns:
        The value of the `CDCROUTE_DB_URL` environment variable.

    Raises:
        DatabaseUrlNotSetError: If `CDCROUTE_DB_URL` is not set.
    """
    if not (url := os.environ.get(DB_URL_ENV)):
        raise DatabaseUrlNotSetError
    return url


def get_mongo_url() -> str:
    """Get the MongoDB connection string from the environment.

    Raises:
        MongoUrlNotSetError: If `CDCROUTE_MONGO_URL` is not set.
    """
    if not (url := os.environ.get(MONGO_URL_ENV)):
        raise MongoUrlNotSetError
    return url


def _flag(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise InvalidSettingError(name, raw, sorted(_TRUE | _FALSE))


def _choice(env: Mapping[str, str], name: str, enum_type, default):
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return enum_type(raw.strip().lower())
    except ValueError as e:
        raise InvalidSettingError(name, raw, [m.value for m in enum_type]) from e


def load_normalizer_settings(env: Mapping[str, str] | None = None) -> NormalizerSettings:
    """Read normalization settings.

    Args:
        env: Variables to read; defaults to `os.environ`.

    Raises:
        InvalidSettingError: If a variable is set to an unrecognised value.
    """
    env = os.environ if env is None else env
    return NormalizerSettings(
        enabled=_flag(env, NORMALIZATION_ENABLED_ENV, True),
        mode=_choice(env, TYPE_MAPPING_MODE_ENV, DialectMode, DialectMode.ORACLE),
    )


def load_reconciler_settings(env: Mapping[str, str] | None = None) -> ReconcilerSettings:
    """Read reconciliation settings.

    Args:
        env: Variables to read; defaults to `os.environ`.

    Raises:
        InvalidSettingError: If a variable is set to an unrecognised value.
    """
    env = os.environ if env is None else env
    return ReconcilerSettings(
        key_layout=_choice(env, KEY_LAYOUT_ENV, KeyLayout, KeyLayout.TOP_LEVEL),
        delete_mode=_choice(env, DELETE_MODE_ENV, DeleteMode, DeleteMode.HARD),
    )


def build_alembic_config(
    db_url: str | None = None, stdout: TextIO = sys.stdout
) -> Config:
    """Build an Alembic `Config` object for CDCROUTE's migrations.

    Sets only Alembic "main" options:
    - `sqlalchemy.url` → the database URL you pass
    - `script_location` → CDCROUTE's packaged Alembic scripts

    Args:
        db_url: SQLAlchemy database URL for the dead-letter store. Can be
            `None` (default) only where Alembic won't need to connect.
        stdout: Text stream Alembic will write status lines to.

    Returns:
        An `alembic.config.Config` pointing to CDCROUTE's migration scripts.
    """
    cfg = Config(stdout=stdout)
    if db_url is not None:
        cfg.set_main_option(ALEMBIC_URL_KEY, db_url)
    cfg.set_main_option(
        ALEMBIC_SCRIPT_LOCATION_KEY,
        str(files("cdcroute.infrastructure.db.alembic")),
    )
    return cfg
