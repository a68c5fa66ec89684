"""Post-install reporting."""
from .summary import print_summary, usage_lines

__all__ = ["print_summary", "usage_lines"]
