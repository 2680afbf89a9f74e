"""
Data models and Pydantic schemas for the timetable API.
"""
from .schemas import (
    ResourceType,
    TimetableSettings,
    CourseInstance,
    ResourcePool,
    ResourceCounts,
    TimetableResource,
    ConstraintType,
    Constraint,
    TimeSlot,
    TimetableGenerationRequest,
    TimetableStats,
    TimetableResponse,
    ErrorResponse,
    ExportRequest
)

__all__ = [
    "ResourceType",
    "TimetableSettings",
    "CourseInstance",
    "ResourcePool",
    "ResourceCounts",
    "TimetableResource",
    "ConstraintType",
    "Constraint",
    "TimeSlot",
    "TimetableGenerationRequest",
    "TimetableStats",
    "TimetableResponse",
    "ErrorResponse",
    "ExportRequest"
]
