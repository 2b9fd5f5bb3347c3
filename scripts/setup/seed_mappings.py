# scripts/setup/seed_mappings.py
"""
Seeds starter mapping rule sets for the known VMS types.
Existing rule sets are left alone unless --force is given.
Usage: python scripts/setup/seed_mappings.py
       python scripts/setup/seed_mappings.py --vms emstone --force
"""

import sys
import os
import argparse
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from vms_sync.database import SessionLocal, create_tables
from vms_sync.models.field_mapping import FieldMapping
from vms_sync.schemas.field_mapping import (
    ChannelIdTransformation,
    FieldTransformation,
    MappingRuleSet,
    TransformationType as T,
)
from vms_sync.services.mapping_service import save_mapping_rules


def rule(source: str, target: str, kind: T = T.DEFAULT_CONVERSION, **parameters) -> FieldTransformation:
    return FieldTransformation(sourceField=source, targetField=target, transformationType=kind, parameters=parameters)


# channel-id source field, field rules
SEED_RULES = {
    "dahua": ("channelIndex", [
        rule("name", "name"),
        rule("channelName", "channel_name"),
        rule("address", "ip_address"),
        rule("port", "port", T.NUMBER_CONVERSION),
        rule("httpPort", "http_port", T.NUMBER_CONVERSION),
        rule("isEnabled", "is_enabled", T.BOOLEAN_CONVERSION),
        rule("deviceType", "model"),
        rule("serialNumber", "serial_number"),
    ]),
    "emstone": ("id", [
        rule("name", "name"),
        rule("address", "channel_name"),
        rule("address", "ip_address"),
        rule("connected", "is_enabled", T.BOOLEAN_CONVERSION),
        rule("has_ptz", "supports_PTZ", T.BOOLEAN_CONVERSION),
    ]),
    "hanwha": ("Channel", [
        rule("Model", "name"),
        rule("IPAddress", "ip_address"),
        rule("Port", "port", T.NUMBER_CONVERSION),
        rule("HTTPPort", "http_port", T.NUMBER_CONVERSION),
        rule("Status", "status"),
        rule("Channel", "channel_name", T.STRING_FORMAT, format="CH%s"),
    ]),
    "naiz": ("CameraId", [
        rule("Name", "name"),
        rule("IpAddress", "ip_address"),
        rule("Port", "port", T.NUMBER_CONVERSION),
        rule("Enable", "is_enabled", T.BOOLEAN_CONVERSION),
        rule("PtzEnable", "supports_PTZ", T.BOOLEAN_CONVERSION),
        rule("RtspUrl", "rtsp_url"),
    ]),
}


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--vms", choices=sorted(SEED_RULES), help="seed only one VMS type")
    parser.add_argument("--force", action="store_true", help="overwrite existing rule sets")
    args = parser.parse_args()

    print("🧭 VMS Sync Mapping Seed")
    print("=" * 40)
    create_tables()

    db = SessionLocal()
    try:
        for vms_type, (channel_field, transformations) in SEED_RULES.items():
            if args.vms and vms_type != args.vms:
                continue

            existing = db.query(FieldMapping).filter(FieldMapping.vms_type == vms_type).first()
            if existing is not None and existing.transformations and not args.force:
                print(f"  ⏭  {vms_type}: {len(existing.transformations)} rules already set (use --force)")
                continue

            save_mapping_rules(db, MappingRuleSet(
                vmsType=vms_type,
                transformations=transformations,
                channelIdTransformation=ChannelIdTransformation(sourceField=channel_field),
                description=f"Starter mapping rules for {vms_type}",
            ))
            print(f"  ✅ {vms_type}: channel ID from '{channel_field}', {len(transformations)} rules")
    finally:
        db.close()

    print("\nCheck real source field names with GET /api/v1/cameras/analyze/{vms_type} after a sync.")


if __name__ == "__main__":
    main()
