"""
Structural XML → dict conversion for XML-speaking VMS (Naiz camera list).

Mirrors the org.json XML.toJSONObject layout the vendor integrations were
written against:
  - the root tag becomes the single top-level key
  - attributes become keys, repeated child tags become lists
  - leaf text is coerced: true/false → bool, numerals → int/float, null → None
  - text mixed with children or attributes is kept under "content"
Namespaces are stripped to local names.
"""

import re
import xml.etree.ElementTree as ET
from typing import Any, Optional, Union

CONTENT_KEY = "content"

_INT_RE = re.compile(r"^-?(0|[1-9]\d*)$")
_FLOAT_RE = re.compile(r"^-?(0|[1-9]\d*)(\.\d+)?([eE][+-]?\d+)?$")


def safe_parse_xml(raw_body: Union[str, bytes]) -> Optional[ET.Element]:
    """Parse XML safely. Returns None on parse error."""
    try:
        if isinstance(raw_body, str):
            raw_body = raw_body.encode("utf-8")
        return ET.fromstring(raw_body)
    except ET.ParseError:
        return None


def _local_name(tag: str) -> str:
    return tag.split("}", 1)[1] if tag.startswith("{") else tag


def coerce_text(text: str) -> Any:
    """Convert leaf text the way org.json does; anything unrecognised stays a string."""
    if text == "":
        return ""
    lowered = text.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    if lowered == "null":
        return None
    if _INT_RE.match(text):
        return int(text)
    if _FLOAT_RE.match(text):
        return float(text)
    return text


def _accumulate(target: dict, key: str, value: Any):
    if key not in target:
        target[key] = value
    elif isinstance(target[key], list):
        target[key].append(value)
    else:
        target[key] = [target[key], value]


def _element_to_value(element: ET.Element) -> Any:
    text = (element.text or "").strip()
    children = list(element)

    if not children and not element.attrib:
        return coerce_text(text)

    result: dict = {}
    for name, value in element.attrib.items():
        _accumulate(result, _local_name(name), coerce_text(value.strip()))
    for child in children:
        _accumulate(result, _local_name(child.tag), _element_to_value(child))
        tail = (child.tail or "").strip()
        if tail:
            text = f"{text}\n{tail}" if text else tail
    if text:
        _accumulate(result, CONTENT_KEY, coerce_text(text))
    return result


def xml_to_dict(root: ET.Element) -> dict:
    """Convert a parsed document to a nested dict keyed by the root tag."""
    return {_local_name(root.tag): _element_to_value(root)}
