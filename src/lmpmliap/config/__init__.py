"""Recipe constants and runtime settings."""
from .env_defaults import Settings, load_settings
from . import recipe

__all__ = ["Settings", "load_settings", "recipe"]
