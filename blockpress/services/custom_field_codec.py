"""
Custom Field Codec

Some per-block settings (responsive image layout, image metadata) are stored
as JSON strings inside a CustomField. Reading them never fails: a missing or
corrupt value yields the documented default and a warning in the log.
"""

import copy
import json
import logging
from typing import Any, Dict, List, Optional

from blockpress.errors import MalformedDataError

logger = logging.getLogger(__name__)

RESPONSIVE_SETTINGS_FIELD = "responsiveSettings"

_DEFAULT_RESPONSIVE_SETTINGS: Dict[str, Any] = {
    "layout": "centered",
    "aspectRatio": "auto",
    "objectFit": "cover",
    "priority": False,
    "lazy": True,
    "quality": 75,
    "sizes": {
        "mobile": {"width": "100vw", "maxWidth": "768px"},
        "tablet": {"width": "100vw", "maxWidth": "1024px"},
        "desktop": {"width": "100vw", "maxWidth": "1200px"},
    },
    "breakpoints": {
        "mobile": {"enabled": True, "customClass": ""},
        "tablet": {"enabled": True, "customClass": ""},
        "desktop": {"enabled": True, "customClass": ""},
    },
    "effects": {
        "hover": False,
        "zoom": False,
        "parallax": False,
        "fadeIn": False,
    },
}


def default_responsive_settings() -> Dict[str, Any]:
    return copy.deepcopy(_DEFAULT_RESPONSIVE_SETTINGS)


def serialize_settings(settings: Dict[str, Any]) -> str:
    """Encode a settings object as a CustomField value."""
    return json.dumps(settings, separators=(",", ":"))


def _decode_object(value: Any) -> Dict[str, Any]:
    if not isinstance(value, str) or not value.strip():
        raise MalformedDataError("Custom field value is empty")
    try:
        parsed = json.loads(value)
    except ValueError as e:
        raise MalformedDataError(f"Custom field value is not valid JSON: {e}") from e
    if not isinstance(parsed, dict):
        raise MalformedDataError("Custom field value is not a JSON object")
    return parsed


def decode_json_field(value: Any, default: Any = None) -> Any:
    """Decode a JSON-object CustomField value, returning ``default`` on any failure."""
    try:
        return _decode_object(value)
    except MalformedDataError as e:
        if value not in (None, ""):
            logger.warning("Falling back to default for custom field: %s", e.message)
        return copy.deepcopy(default)


def deserialize_settings(value: Any, default: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Decode responsive settings; corrupt or missing JSON yields the default."""
    if default is None:
        default = _DEFAULT_RESPONSIVE_SETTINGS
    return decode_json_field(value, default)


def find_custom_field(custom_fields: Optional[List[Dict[str, Any]]], name: str) -> Optional[Dict[str, Any]]:
    for field in custom_fields or []:
        if isinstance(field, dict) and field.get("name") == name:
            return field
    return None


def upsert_custom_field(custom_fields: Optional[List[Dict[str, Any]]], name: str, value: str) -> List[Dict[str, Any]]:
    """Replace the named field (keeping its position) or append it."""
    result = []
    replaced = False
    for field in custom_fields or []:
        if not isinstance(field, dict):
            continue
        if field.get("name") == name:
            if replaced:
                continue
            field = {**field, "value": value}
            replaced = True
        result.append(field)
    if not replaced:
        result.append({"name": name, "value": value})
    return result
