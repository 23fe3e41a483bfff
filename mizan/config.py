"""
Configuration for Mizan
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .scheme_table import DEFAULT_BUCKETS

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(message)s'


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_path(name: str) -> Optional[Path]:
    value = os.environ.get(name)
    return Path(value) if value else None


@dataclass
class Config:
    """Main configuration for the engine, CLI and web app."""

    # Registries
    bucket_count: int = DEFAULT_BUCKETS
    default_page_size: int = 10

    # Derivation
    register_on_derive: bool = True  # derive_word registers unknown valid roots

    # Startup data
    load_defaults: bool = True
    roots_file: Optional[Path] = None
    schemes_file: Optional[Path] = None

    # Logging
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> 'Config':
        """Read MIZAN_* environment variables over the defaults."""
        return cls(
            bucket_count=int(os.environ.get("MIZAN_BUCKETS", DEFAULT_BUCKETS)),
            default_page_size=int(os.environ.get("MIZAN_PAGE_SIZE", 10)),
            register_on_derive=_env_flag("MIZAN_REGISTER_ON_DERIVE", True),
            load_defaults=_env_flag("MIZAN_LOAD_DEFAULTS", True),
            roots_file=_env_path("MIZAN_ROOTS_FILE"),
            schemes_file=_env_path("MIZAN_SCHEMES_FILE"),
            log_level=os.environ.get("MIZAN_LOG_LEVEL", "INFO").upper(),
        )


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
