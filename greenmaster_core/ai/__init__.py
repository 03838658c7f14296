"""
AI Module

AI Gateway (retry policy, OpenAI-compatible client, declared output shapes)
and the GreenMaster insight operations.
"""

from greenmaster_core.ai.gateway import AIGateway, Attachment
from greenmaster_core.ai.insights import (
    ALLOWED_UPLOAD_TYPES,
    MAX_UPLOAD_BYTES,
    AnalyzedLogDraft,
    CourseDetails,
    DocumentInput,
    GreenMasterInsights,
    map_course_type,
    map_grass_type,
    validate_document_input,
)
from greenmaster_core.ai.retry import RetryPolicy, is_transient
from greenmaster_core.ai.shapes import FieldSpec, OutputShape, load_json

__all__ = [
    "AIGateway",
    "Attachment",
    "ALLOWED_UPLOAD_TYPES",
    "MAX_UPLOAD_BYTES",
    "AnalyzedLogDraft",
    "CourseDetails",
    "DocumentInput",
    "GreenMasterInsights",
    "map_course_type",
    "map_grass_type",
    "validate_document_input",
    "RetryPolicy",
    "is_transient",
    "FieldSpec",
    "OutputShape",
    "load_json",
]
