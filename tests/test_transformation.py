# tests/test_transformation.py
"""Unit tests for the transformation engine."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from vms_sync.schemas.field_mapping import (
    ChannelIdTransformation,
    FieldTransformation,
    MappingRuleSet,
    TransformationType as T,
)
from vms_sync.services.extractors import extract_json_array
from vms_sync.services.transformation import apply_rules, to_boolean


def rule(source, target, kind=T.DEFAULT_CONVERSION, **parameters):
    return FieldTransformation(sourceField=source, targetField=target, transformationType=kind, parameters=parameters)


def make_rules(*transformations, channel_field="id", vms_type="emstone"):
    return MappingRuleSet(
        vmsType=vms_type,
        transformations=list(transformations),
        channelIdTransformation=ChannelIdTransformation(sourceField=channel_field) if channel_field else None,
    )


class TestIdentity:
    def test_no_channel_rule_yields_none(self):
        assert apply_rules({"id": 1}, make_rules(channel_field=None)) is None

    def test_missing_channel_source_yields_none(self):
        assert apply_rules({"name": "x"}, make_rules(rule("name", "name"))) is None

    def test_channel_id_is_stringified(self):
        camera = apply_rules({"id": 12}, make_rules())
        assert camera["channel_ID"] == "12"
        assert camera["vms"] == "emstone"

    def test_rule_cannot_overwrite_channel_id(self):
        camera = apply_rules({"id": 1, "name": "x"}, make_rules(rule("name", "channel_ID")))
        assert camera["channel_ID"] == "1"

    def test_defaults_filled(self):
        camera = apply_rules({"id": 1}, make_rules())
        assert camera["name"] == ""
        assert camera["port"] == 0
        assert camera["is_enabled"] is True
        assert camera["supports_PTZ"] is False
        assert camera["rtsp_url"] is None

    def test_caller_defaults_overlay(self):
        camera = apply_rules({"id": 1}, make_rules(), defaults={"rtsp_url": "rtsp://h/video1"})
        assert camera["rtsp_url"] == "rtsp://h/video1"


class TestConversions:
    @pytest.mark.parametrize("value,expected", [
        (True, True),
        (False, False),
        (1, True),
        (0, False),
        (2.5, True),
        ("true", True),
        ("TRUE", True),
        ("True", True),
        ("YES", True),
        ("1", True),
        ("on", False),
        ("", False),
        (None, False),
    ])
    def test_to_boolean(self, value, expected):
        assert to_boolean(value) is expected

    def test_number_from_strings(self):
        rules = make_rules(rule("p", "port", T.NUMBER_CONVERSION), rule("r", "ratio", T.NUMBER_CONVERSION))
        camera = apply_rules({"id": 1, "p": "8080", "r": "1.5"}, rules)
        assert camera["port"] == 8080
        assert camera["ratio"] == 1.5

    def test_unparsable_number_skips_rule(self):
        camera = apply_rules({"id": 1, "p": "abc"}, make_rules(rule("p", "port", T.NUMBER_CONVERSION)))
        assert camera["port"] == 0

    @pytest.mark.parametrize("value", ["1e999", "-1e999", float("inf"), float("nan")])
    def test_non_finite_number_skips_rule(self, value):
        camera = apply_rules({"id": 1, "p": value}, make_rules(rule("p", "port", T.NUMBER_CONVERSION)))
        assert camera["port"] == 0

    def test_bool_is_not_a_number(self):
        camera = apply_rules({"id": 1, "p": True}, make_rules(rule("p", "port", T.NUMBER_CONVERSION)))
        assert camera["port"] == 0

    def test_default_conversion_stringifies(self):
        rules = make_rules(rule("n", "name"), rule("b", "status"))
        camera = apply_rules({"id": 1, "n": 5, "b": False}, rules)
        assert camera["name"] == "5"
        assert camera["status"] == "false"

    def test_string_format(self):
        camera = apply_rules({"id": 3}, make_rules(rule("id", "channel_name", T.STRING_FORMAT, format="CH%s")))
        assert camera["channel_name"] == "CH3"

    def test_date_format(self):
        rules = make_rules(rule(
            "installed", "install_date", T.DATE_FORMAT,
            sourceFormat="%Y%m%d", targetFormat="%Y-%m-%d",
        ))
        assert apply_rules({"id": 1, "installed": "20240131"}, rules)["install_date"] == "2024-01-31"
        assert "install_date" not in apply_rules({"id": 1, "installed": "31/01/2024"}, rules)

    def test_missing_source_skips_rule(self):
        camera = apply_rules({"id": 1}, make_rules(rule("name", "name")))
        assert camera["name"] == ""

    def test_last_write_wins(self):
        rules = make_rules(rule("a", "name"), rule("b", "name"))
        assert apply_rules({"id": 1, "a": "first", "b": "second"}, rules)["name"] == "second"

    def test_unknown_target_kept(self):
        camera = apply_rules({"id": 1, "fw": "2.1"}, make_rules(rule("fw", "firmware")))
        assert camera["firmware"] == "2.1"


def test_same_input_same_output():
    rules = make_rules(rule("name", "name"), rule("connected", "is_enabled", T.BOOLEAN_CONVERSION))
    raw = {"id": 9, "name": "Cam9", "connected": "no"}
    assert apply_rules(raw, rules) == apply_rules(raw, rules)
    assert raw == {"id": 9, "name": "Cam9", "connected": "no"}


def test_emstone_end_to_end():
    body = '{"cameras":[{"id":1,"name":"Cam1","connected":true,"has_ptz":false,"address":"10.0.0.1"}]}'
    rules = make_rules(
        rule("id", "channel_ID", T.NUMBER_CONVERSION),
        rule("name", "name"),
        rule("address", "channel_name"),
        rule("connected", "is_enabled", T.BOOLEAN_CONVERSION),
        rule("has_ptz", "supports_PTZ", T.BOOLEAN_CONVERSION),
    )

    [raw] = extract_json_array(body, "cameras", vms_type="emstone")
    camera = apply_rules(raw, rules)

    assert camera["channel_ID"] == "1"
    assert camera["name"] == "Cam1"
    assert camera["channel_name"] == "10.0.0.1"
    assert camera["supports_PTZ"] is False
    assert camera["is_enabled"] is True
