"""
Helpers for parsing JSON camera-list payloads from VMS REST APIs.
"""

import json
from typing import Optional, Any, Union


def safe_parse_json(raw_body: Union[str, bytes]) -> Optional[Any]:
    """Parse a JSON body safely. Returns None on error."""
    try:
        if isinstance(raw_body, bytes):
            raw_body = raw_body.decode("utf-8", errors="replace")
        return json.loads(raw_body)
    except (json.JSONDecodeError, TypeError):
        return None


def get_nested(data: dict, *keys: str, default: Any = None) -> Any:
    """Safely navigate nested dict keys. Returns default if any key is missing."""
    current = data
    for key in keys:
        if not isinstance(current, dict) or key not in current:
            return default
        current = current[key]
    return current
