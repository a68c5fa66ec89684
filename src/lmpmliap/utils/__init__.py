"""
Installer utilities
"""
from .file_io import safe_write_json
from .toolchain import CommandFailed, CommandRunner, format_command

__all__ = ['CommandFailed', 'CommandRunner', 'format_command', 'safe_write_json']
