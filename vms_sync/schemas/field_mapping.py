"""
Mapping rule schemas.
MappingRuleSet is what the transformation engine consumes; the request
models are the bodies accepted by the mappings router.
"""

from enum import Enum
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class TransformationType(str, Enum):
    DEFAULT_CONVERSION = "DEFAULT_CONVERSION"
    BOOLEAN_CONVERSION = "BOOLEAN_CONVERSION"
    NUMBER_CONVERSION = "NUMBER_CONVERSION"
    STRING_FORMAT = "STRING_FORMAT"
    DATE_FORMAT = "DATE_FORMAT"


class FieldTransformation(BaseModel):
    sourceField: str
    targetField: str
    transformationType: TransformationType
    parameters: dict[str, str] = Field(default_factory=dict)


class ChannelIdTransformation(BaseModel):
    sourceField: str


class MappingRuleSet(BaseModel):
    vmsType: str
    transformations: list[FieldTransformation] = Field(default_factory=list)
    channelIdTransformation: Optional[ChannelIdTransformation] = None
    description: Optional[str] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class ChannelIdTransformationRequest(BaseModel):
    sourceField: str
