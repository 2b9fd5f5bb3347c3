"""
Transformation engine — applies one VMS type's mapping rule set to a raw
camera record and produces a unified camera document.

Pure: no I/O, no clock. Same raw record + same rule set → identical output.

  - no channel-id rule, or raw record lacks its source field → None
  - missing source field for a rule → rule skipped
  - unconvertible value (NUMBER / DATE) → rule skipped, target keeps its value
  - rules apply in order, last write wins
"""

import math
from datetime import datetime
from typing import Any, Optional

from vms_sync.schemas.field_mapping import FieldTransformation, MappingRuleSet, TransformationType
from vms_sync.utils.logger import get_logger

logger = get_logger(__name__)

CHANNEL_ID_FIELD = "channel_ID"
VMS_FIELD = "vms"

# Canonical unified camera fields and their defaults
UNIFIED_DEFAULTS: dict[str, Any] = {
    "name": "",
    "channel_name": "",
    "ip_address": "",
    "port": 0,
    "http_port": 0,
    "rtsp_url": None,
    "is_enabled": True,
    "status": "",
    "supports_PTZ": False,
    "supports_audio": False,
    "original_id": "",
}

TRUTHY_TOKENS = {"true", "yes", "1"}

_SKIP = object()


def stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def to_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in TRUTHY_TOKENS
    return False


def to_number(value: Any):
    """int/float for numeric input or parseable strings, _SKIP otherwise (NaN and infinity included)."""
    if isinstance(value, bool):
        return _SKIP
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else _SKIP
    if isinstance(value, str):
        text = value.strip()
        try:
            if "." in text or "e" in text.lower():
                number = float(text)
                return number if math.isfinite(number) else _SKIP
            return int(text)
        except ValueError:
            return _SKIP
    return _SKIP


def format_string(value: Any, parameters: dict) -> str:
    template = parameters.get("format") or "%s"
    return template.replace("%s", stringify(value), 1)


def format_date(value: Any, parameters: dict):
    source_format = parameters.get("sourceFormat")
    target_format = parameters.get("targetFormat")
    if not source_format or not target_format or not isinstance(value, str):
        return _SKIP
    try:
        return datetime.strptime(value, source_format).strftime(target_format)
    except ValueError:
        return _SKIP


def convert(value: Any, transformation: FieldTransformation):
    kind = transformation.transformationType
    if kind == TransformationType.DEFAULT_CONVERSION:
        return stringify(value)
    if kind == TransformationType.BOOLEAN_CONVERSION:
        return to_boolean(value)
    if kind == TransformationType.NUMBER_CONVERSION:
        return to_number(value)
    if kind == TransformationType.STRING_FORMAT:
        return format_string(value, transformation.parameters)
    if kind == TransformationType.DATE_FORMAT:
        return format_date(value, transformation.parameters)
    return _SKIP


def resolve_channel_id(raw: dict, rules: MappingRuleSet) -> Optional[str]:
    rule = rules.channelIdTransformation
    if rule is None:
        return None
    value = raw.get(rule.sourceField)
    if value is None:
        return None
    return stringify(value)


def apply_rules(raw: dict, rules: MappingRuleSet, defaults: Optional[dict] = None) -> Optional[dict]:
    """Map one raw record to a unified camera document, or None if it has no channel identity."""
    channel_id = resolve_channel_id(raw, rules)
    if channel_id is None:
        return None

    camera = dict(UNIFIED_DEFAULTS)
    if defaults:
        camera.update(defaults)
    camera[VMS_FIELD] = rules.vmsType
    camera[CHANNEL_ID_FIELD] = channel_id

    for transformation in rules.transformations:
        if transformation.sourceField not in raw or raw[transformation.sourceField] is None:
            continue
        value = convert(raw[transformation.sourceField], transformation)
        if value is _SKIP:
            logger.debug(
                f"[{rules.vmsType}] {transformation.transformationType.value} "
                f"{transformation.sourceField}={raw[transformation.sourceField]!r} not convertible — skipped"
            )
            continue
        camera[transformation.targetField] = value

    # identity is owned by the channel-id rule
    camera[CHANNEL_ID_FIELD] = channel_id
    camera[VMS_FIELD] = rules.vmsType
    return camera
