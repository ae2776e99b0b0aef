"""Configuration loading, validation, and defaults."""

from folio.config.loader import load_config
from folio.config.schema import FolioConfig

__all__ = ["load_config", "FolioConfig"]
