"""
Wire-format extractors — turn one VMS response body into an ordered list of
raw camera records (plain dicts, no field renaming).

Three vendor families:
  - dotted-key config text (Dahua configManager.cgi)
  - nested JSON with the camera array under a fixed key (Emstone, Hanwha)
  - XML converted structurally, camera items under a fixed path (Naiz)

A malformed line/element is skipped; only an unparsable payload raises
PayloadParseError.
"""

import re
from typing import Any, Callable, Optional

from vms_sync.exceptions import PayloadParseError
from vms_sync.utils.json_parser import safe_parse_json, get_nested
from vms_sync.utils.xml_parser import safe_parse_xml, xml_to_dict
from vms_sync.utils.logger import get_logger

logger = get_logger(__name__)

_CHANNEL_INDEX_RE = re.compile(r"(\d+)$")


# ── Dotted-key config text ───────────────────────────────────────────────────

def _as_int(value: str) -> Optional[int]:
    try:
        return int(value)
    except ValueError:
        return None


def _as_bool(value: str) -> bool:
    return value.lower() == "true"


# property path → [(field, converter)], converter returns None to leave the field untouched
_DOTTED_PROPERTIES: dict[str, list[tuple[str, Callable[[str], Any]]]] = {
    "Address":             [("address", str)],
    "DeviceType":          [("deviceType", str), ("model", str)],
    "Enable":              [("isEnabled", _as_bool)],
    "Port":                [("port", _as_int)],
    "HttpPort":            [("httpPort", _as_int)],
    "SerialNo":            [("serialNumber", str)],
    "VideoInputChannels":  [("videoInputChannels", _as_int)],
    "Version":             [("version", str)],
    "Vendor":              [("vendor", str)],
    "ProtocolType":        [("protocolType", str)],
    "AlarmInChannels":     [("alarmInChannels", _as_int)],
    "AudioInputChannels":  [("audioInputChannels", _as_int)],
    "VideoInputs[0].Name": [("name", str)],
}


def _new_dotted_record(group: str) -> dict:
    record: dict = {}
    match = _CHANNEL_INDEX_RE.search(group)
    if match:
        index = int(match.group(1))
        record["channelIndex"] = index
        record["channelName"] = f"Channel {index + 1}"
    record.update(
        port=0,
        httpPort=0,
        isEnabled=False,
        videoInputChannels=0,
        alarmInChannels=0,
        audioInputChannels=0,
    )
    return record


def parse_dotted_config(content: str) -> list[dict]:
    """
    Parse `table.RemoteDevice.<group>.<property path>=<value>` lines.

    One record per group token (3rd key segment). Only enabled groups are
    returned, sorted ascending by channelIndex.
    """
    groups: dict[str, dict] = {}

    for line in content.splitlines():
        parts = line.split("=", 1)
        if len(parts) != 2:
            continue
        key, value = parts[0].strip(), parts[1].strip()

        segments = key.split(".")
        if len(segments) < 4:
            logger.debug(f"Skipping short config key: {key!r}")
            continue

        group = segments[2]
        record = groups.get(group)
        if record is None:
            record = groups[group] = _new_dotted_record(group)

        property_path = ".".join(segments[3:])
        for field_name, convert in _DOTTED_PROPERTIES.get(property_path, ()):
            converted = convert(value)
            if converted is None:
                logger.debug(f"{group}: cannot parse {property_path}={value!r}, keeping default")
                continue
            record[field_name] = converted

    for record in groups.values():
        if not str(record.get("name") or "").strip() and record.get("channelName"):
            record["name"] = record["channelName"]

    enabled = [r for r in groups.values() if r["isEnabled"]]
    return sorted(enabled, key=lambda r: r.get("channelIndex", 0))


# ── JSON ─────────────────────────────────────────────────────────────────────

def _object_items(items: Any, path: tuple, vms_type: Optional[str]) -> list[dict]:
    records = []
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            logger.warning(f"[{vms_type}] {'/'.join(path)}[{i}] is not an object — skipped")
            continue
        records.append(item)
    return records


def extract_json_array(content: str, *path: str, vms_type: Optional[str] = None) -> list[dict]:
    """Return the objects of the JSON array found at `path`, verbatim."""
    data = safe_parse_json(content)
    if not isinstance(data, dict):
        raise PayloadParseError("response is not a JSON object", vms_type=vms_type, raw_payload=content)

    items = get_nested(data, *path)
    if not isinstance(items, list):
        raise PayloadParseError(
            f"no camera array at {'/'.join(path)}", vms_type=vms_type, raw_payload=content
        )
    return _object_items(items, path, vms_type)


# ── XML ──────────────────────────────────────────────────────────────────────

def extract_xml_items(content: str, *path: str, vms_type: Optional[str] = None) -> list[dict]:
    """Convert the XML document to a dict tree and return the items at `path`."""
    root = safe_parse_xml(content)
    if root is None:
        raise PayloadParseError("response is not well-formed XML", vms_type=vms_type, raw_payload=content)

    items = get_nested(xml_to_dict(root), *path)
    if items is None:
        raise PayloadParseError(
            f"key {'/'.join(path)} not found in response", vms_type=vms_type, raw_payload=content
        )
    if isinstance(items, dict):
        # a single repeated element converts to an object, not a list
        items = [items]
    if not isinstance(items, list):
        raise PayloadParseError(
            f"{'/'.join(path)} is not a list of items", vms_type=vms_type, raw_payload=content
        )
    return _object_items(items, path, vms_type)
