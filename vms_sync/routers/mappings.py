# vms_sync/routers/mappings.py
"""
Mapping rule endpoints — one rule set per VMS type.
Reading a rule set that does not exist yet creates an empty default.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from vms_sync.database import get_db
from vms_sync.schemas.field_mapping import (
    ChannelIdTransformationRequest,
    FieldTransformation,
    MappingRuleSet,
    TransformationType,
)
from vms_sync.services import mapping_service

router = APIRouter()


@router.get("/mappings", response_model=list[MappingRuleSet], summary="All mapping rule sets")
def get_all_mappings(db: Session = Depends(get_db)):
    return mapping_service.get_all_mapping_rules(db)


@router.get("/mappings/{vms_type}", response_model=MappingRuleSet, summary="Mapping rules of one VMS")
def get_mappings(vms_type: str, db: Session = Depends(get_db)):
    return mapping_service.get_mapping_rules(db, vms_type)


@router.delete("/mappings/{vms_type}", summary="Delete the mapping rules of one VMS")
def delete_mappings(vms_type: str, db: Session = Depends(get_db)):
    return {"vms_type": vms_type, "deleted": mapping_service.delete_mapping_rules(db, vms_type)}


@router.post("/mappings/{vms_type}/transformation", response_model=MappingRuleSet, summary="Append a field rule")
def add_transformation(vms_type: str, body: FieldTransformation, db: Session = Depends(get_db)):
    return mapping_service.add_transformation(db, vms_type, body)


@router.delete(
    "/mappings/{vms_type}/transformation/{index}",
    response_model=MappingRuleSet,
    summary="Remove a field rule by position",
)
def remove_transformation(vms_type: str, index: int, db: Session = Depends(get_db)):
    return mapping_service.remove_transformation(db, vms_type, index)


@router.put("/mappings/{vms_type}/channel-id", response_model=MappingRuleSet, summary="Set the channel ID rule")
def set_channel_id(vms_type: str, body: ChannelIdTransformationRequest, db: Session = Depends(get_db)):
    return mapping_service.set_channel_id_transformation(db, vms_type, body.sourceField)


@router.get(
    "/mappings/{vms_type}/transformations/field",
    response_model=list[FieldTransformation],
    summary="Rules reading one source field",
)
def get_field_transformations(vms_type: str, field: str = Query(...), db: Session = Depends(get_db)):
    return mapping_service.get_transformations_for_field(db, vms_type, field)


@router.get(
    "/mappings/{vms_type}/transformations/type/{transformation_type}",
    response_model=list[FieldTransformation],
    summary="Rules of one transformation type",
)
def get_type_transformations(
    vms_type: str, transformation_type: TransformationType, db: Session = Depends(get_db)
):
    return mapping_service.get_transformations_by_type(db, vms_type, transformation_type)


@router.post("/mappings/{vms_type}/reset", response_model=MappingRuleSet, summary="Reset to the default rule set")
def reset_mappings(vms_type: str, db: Session = Depends(get_db)):
    return mapping_service.reset_mapping_rules(db, vms_type)
