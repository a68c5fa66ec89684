"""Environment modules and the Python virtual environment."""
from .modules import load_modules, parse_env_dump
from .venv import activate, create_venv, install_packages

__all__ = ["load_modules", "parse_env_dump", "activate", "create_venv", "install_packages"]
