"""
Mapping rule store — one rule set per VMS type.

A VMS type without a stored rule set gets an empty default created on first
access; it is never an error. The transformation engine only reads
MappingRuleSet snapshots produced by to_rule_set().
"""

from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session
from vms_sync.exceptions import MappingRuleError
from vms_sync.models.field_mapping import FieldMapping
from vms_sync.schemas.field_mapping import (
    ChannelIdTransformation,
    FieldTransformation,
    MappingRuleSet,
    TransformationType,
)
from vms_sync.utils.logger import get_logger

logger = get_logger(__name__)


def to_rule_set(row: FieldMapping) -> MappingRuleSet:
    return MappingRuleSet(
        vmsType=row.vms_type,
        transformations=[FieldTransformation(**t) for t in (row.transformations or [])],
        channelIdTransformation=(
            ChannelIdTransformation(sourceField=row.channel_id_source_field)
            if row.channel_id_source_field else None
        ),
        description=row.description,
        createdAt=row.created_at,
        updatedAt=row.updated_at,
    )


def _find(db: Session, vms_type: str) -> Optional[FieldMapping]:
    return db.query(FieldMapping).filter(FieldMapping.vms_type == vms_type).first()


def create_default_mapping(db: Session, vms_type: str) -> FieldMapping:
    now = datetime.utcnow()
    row = FieldMapping(
        vms_type=vms_type,
        channel_id_source_field=None,
        transformations=[],
        description=f"Default mapping rules for {vms_type}",
        created_at=now,
        updated_at=now,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info(f"[{vms_type}] default mapping rule set created")
    return row


def get_mapping_row(db: Session, vms_type: str) -> FieldMapping:
    return _find(db, vms_type) or create_default_mapping(db, vms_type)


def get_mapping_rules(db: Session, vms_type: str) -> MappingRuleSet:
    return to_rule_set(get_mapping_row(db, vms_type))


def get_all_mapping_rules(db: Session) -> list[MappingRuleSet]:
    return [to_rule_set(row) for row in db.query(FieldMapping).order_by(FieldMapping.vms_type).all()]


def save_mapping_rules(db: Session, rule_set: MappingRuleSet) -> MappingRuleSet:
    """Store a whole rule set, replacing the existing one for its VMS type."""
    row = get_mapping_row(db, rule_set.vmsType)
    row.transformations = [t.model_dump(mode="json") for t in rule_set.transformations]
    row.channel_id_source_field = (
        rule_set.channelIdTransformation.sourceField if rule_set.channelIdTransformation else None
    )
    if rule_set.description is not None:
        row.description = rule_set.description
    row.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(row)
    return to_rule_set(row)


def add_transformation(db: Session, vms_type: str, transformation: FieldTransformation) -> MappingRuleSet:
    logger.info(
        f"[{vms_type}] mapping rule added: {transformation.sourceField} -> "
        f"{transformation.targetField} [{transformation.transformationType.value}]"
    )
    rules = get_mapping_rules(db, vms_type)
    rules.transformations.append(transformation)
    return save_mapping_rules(db, rules)


def set_channel_id_transformation(db: Session, vms_type: str, source_field: str) -> MappingRuleSet:
    if not source_field:
        raise MappingRuleError("channel ID source field must not be empty", vms_type=vms_type)
    logger.info(f"[{vms_type}] channel ID rule set. source field: {source_field}")
    rules = get_mapping_rules(db, vms_type)
    rules.channelIdTransformation = ChannelIdTransformation(sourceField=source_field)
    return save_mapping_rules(db, rules)


def remove_transformation(db: Session, vms_type: str, index: int) -> MappingRuleSet:
    rules = get_mapping_rules(db, vms_type)
    if index < 0 or index >= len(rules.transformations):
        raise MappingRuleError(
            f"invalid transformation index: {index}",
            vms_type=vms_type,
            details={"size": len(rules.transformations)},
        )
    removed = rules.transformations.pop(index)
    logger.info(f"[{vms_type}] mapping rule {index} removed ({removed.sourceField} -> {removed.targetField})")
    return save_mapping_rules(db, rules)


def get_transformations_for_field(db: Session, vms_type: str, source_field: str) -> list[FieldTransformation]:
    return [t for t in get_mapping_rules(db, vms_type).transformations if t.sourceField == source_field]


def get_transformations_by_type(
    db: Session, vms_type: str, transformation_type: TransformationType
) -> list[FieldTransformation]:
    return [t for t in get_mapping_rules(db, vms_type).transformations if t.transformationType == transformation_type]


def delete_mapping_rules(db: Session, vms_type: str) -> bool:
    logger.info(f"[{vms_type}] deleting all mapping rules")
    deleted = db.query(FieldMapping).filter(FieldMapping.vms_type == vms_type).delete()
    db.commit()
    return deleted > 0


def reset_mapping_rules(db: Session, vms_type: str) -> MappingRuleSet:
    logger.info(f"[{vms_type}] resetting mapping rules")
    delete_mapping_rules(db, vms_type)
    return to_rule_set(create_default_mapping(db, vms_type))
