import logging
import time
from typing import List, Optional, Union

from fastapi import APIRouter, Response
from fastapi.responses import JSONResponse

from config import settings
from models.schemas import (
    TimetableGenerationRequest, TimetableResponse, TimetableStats, ErrorResponse,
    ExportRequest, ResourcePool, ResourceCounts, TimetableResource
)
from service.slot_allocator import SlotAllocator
from service.exporter import TimetableExporter

logger = logging.getLogger(__name__)

# Create a router instance
router = APIRouter()


class TimetableRequestError(Exception):
    """Caller input error, reported as a 400 with an ``error`` message."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def resolve_resources(resources: Optional[Union[ResourceCounts, List[TimetableResource]]]) -> ResourcePool:
    """
    Normalise either resources shape into a ResourcePool.

    Accepts ``{classrooms, labs}`` or ``[{type, count}]``. A count that is
    absent falls back to the configured default; an explicit 0 is kept.
    """
    classrooms = labs = None

    if isinstance(resources, list):
        classrooms = next((r.count for r in resources if r.type == "classroom"), None)
        labs = next((r.count for r in resources if r.type == "lab"), None)
    elif resources is not None:
        classrooms = resources.classrooms
        labs = resources.labs

    return ResourcePool(
        classrooms=settings.default_classrooms if classrooms is None else classrooms,
        labs=settings.default_labs if labs is None else labs
    )


@router.post(
    "/faculty/generate-timetable",
    response_model=TimetableResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)
async def generate_timetable(request: TimetableGenerationRequest):
    """
    Generate a weekly timetable for the given courses and resources.

    Free-text constraints are parsed and echoed back, but only the day
    boundaries and lunch window restrict placement.
    """
    if request.settings is None or not request.courses or request.resources is None:
        raise TimetableRequestError("Missing required fields: settings, courses, resources")

    resources = resolve_resources(request.resources)

    try:
        allocator = SlotAllocator(request.settings, resources)
        timetable = allocator.generate(request.courses, request.constraints or "")
    except Exception as e:
        logger.error(f"Error generating timetable: {str(e)}", exc_info=True)
        return JSONResponse(status_code=500, content={"error": "Failed to generate timetable"})

    if not timetable:
        raise TimetableRequestError("Could not generate timetable with the given constraints")

    return TimetableResponse(
        success=True,
        timetable=timetable,
        stats=TimetableStats(
            total_slots=len(timetable),
            days=len({slot.day for slot in timetable}),
            courses=len({slot.course_id for slot in timetable})
        ),
        constraints=allocator.constraints
    )


@router.post("/faculty/export-csv")
async def export_timetable_csv(request: ExportRequest):
    """Export a generated timetable as a CSV attachment."""
    exporter = TimetableExporter(request.timetable, request.institute_name)
    return Response(
        content=exporter.to_csv(),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="timetable_{int(time.time() * 1000)}.csv"'}
    )


@router.post("/faculty/export-excel")
async def export_timetable_excel(request: ExportRequest):
    """Export a generated timetable as an Excel workbook."""
    exporter = TimetableExporter(request.timetable, request.institute_name)
    return Response(
        content=exporter.to_xlsx(),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f'attachment; filename="timetable_{int(time.time() * 1000)}.xlsx"'}
    )


@router.get("/ping")
async def ping():
    return {"message": settings.ping_message}
