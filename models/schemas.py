from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional, Union, Literal
from datetime import datetime
from enum import Enum


ResourceType = Literal["classroom", "lab"]


def normalize_clock(value: str) -> str:
    """Validate an H:MM / HH:MM wall-clock string and return it zero-padded."""
    try:
        parsed = datetime.strptime(value.strip(), "%H:%M")
    except ValueError:
        raise ValueError("must be in HH:MM format (e.g., '12:00')")
    return parsed.strftime("%H:%M")


class CamelModel(BaseModel):
    """Base model exposing snake_case attributes under camelCase JSON keys."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


# ===========================
# Input Models
# ===========================

class TimetableSettings(CamelModel):
    """Day boundaries, lunch window and default lecture length for one run"""
    day_start_time: str    # HH:MM format, e.g., "08:00"
    day_end_time: str      # HH:MM format, e.g., "17:00"
    lunch_start_time: str
    lunch_end_time: str
    default_lecture_duration: int = Field(gt=0)  # minutes

    @field_validator("day_start_time", "day_end_time", "lunch_start_time", "lunch_end_time")
    @classmethod
    def validate_clock(cls, value: str) -> str:
        return normalize_clock(value)


class CourseInstance(CamelModel):
    """One weekly teaching unit to be scheduled"""
    id: str
    name: str
    code: str = ""
    instructor_name: str = ""
    lectures_per_week: int = Field(ge=1)
    is_lab: bool = False
    lecture_duration: Optional[int] = Field(default=None, gt=0)  # falls back to settings default


class ResourcePool(CamelModel):
    """Counts of interchangeable classrooms and labs"""
    classrooms: int = Field(default=0, ge=0)
    labs: int = Field(default=0, ge=0)


class ResourceCounts(CamelModel):
    """Object form of the resources field: {classrooms, labs}"""
    classrooms: Optional[int] = Field(default=None, ge=0)
    labs: Optional[int] = Field(default=None, ge=0)


class TimetableResource(CamelModel):
    """Array form of the resources field: [{type, count}]"""
    type: str  # "classroom" or "lab"; other types are ignored
    count: Optional[int] = Field(default=None, ge=0)
    names: Optional[List[str]] = None  # accepted for client compatibility, not used


# ===========================
# Constraint Models
# ===========================

class ConstraintType(str, Enum):
    NO_AFTER = "no_after"
    RESPECT_LUNCH = "respect_lunch"
    CONSECUTIVE_LABS = "consecutive_labs"
    MORNING_PREFERRED = "morning_preferred"
    INSTRUCTOR_UNAVAILABLE = "instructor_unavailable"


class Constraint(CamelModel):
    """Directive extracted from free-text constraints"""
    type: ConstraintType
    value: str  # e.g. "3:00", "true", "Smith:Thursday"


# ===========================
# Output Models
# ===========================

class TimeSlot(CamelModel):
    """One scheduled occupation of a resource"""
    day: str               # "Monday" .. "Friday"
    start_time: str        # HH:MM
    end_time: str
    course_id: str         # "lunch_break" for the daily lunch row
    course_name: str
    course_code: str = ""
    instructor_name: str = ""
    resource_type: ResourceType
    resource_id: int = Field(ge=0)  # 0 is reserved for the lunch row
    is_lab: bool = False


# ===========================
# Request / Response Schema
# ===========================

class TimetableGenerationRequest(CamelModel):
    """Body of the generate-timetable endpoint"""
    settings: Optional[TimetableSettings] = None
    courses: List[CourseInstance] = []
    resources: Optional[Union[ResourceCounts, List[TimetableResource]]] = None
    constraints: Optional[str] = ""


class TimetableStats(CamelModel):
    total_slots: int
    days: int
    courses: int


class TimetableResponse(CamelModel):
    """Successful generation result"""
    success: bool = True
    timetable: List[TimeSlot]
    stats: TimetableStats
    constraints: List[Constraint] = []  # parsed directives, informational only


class ErrorResponse(BaseModel):
    error: str


class ExportRequest(CamelModel):
    """Body of the export endpoints"""
    timetable: List[TimeSlot] = []
    institute_name: Optional[str] = None
