"""
File I/O helpers
"""
from pathlib import Path
import json


def safe_write_json(data, path):
    """Atomic JSON write via a temporary sibling file"""
    path = Path(path)
    temp_path = path.with_suffix('.tmp')
    with open(temp_path, 'w') as f:
        json.dump(data, f, indent=2)
        f.write("\n")
    temp_path.replace(path)
