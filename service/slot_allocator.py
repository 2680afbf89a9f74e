"""
Greedy slot allocator.

Places every course's weekly lectures into (day, start time, resource)
triples without search or backtracking. Lectures that find no free resource
are dropped silently, leaving the course partially scheduled.
"""

from typing import Dict, List, Optional, Tuple
import logging

from models.schemas import (
    TimetableSettings, CourseInstance, ResourcePool, Constraint, TimeSlot
)
from service.constraint_parser import parse_constraints
from service.timegrid import WEEKDAYS, to_minutes, add_minutes, candidate_start_times, intervals_overlap

logger = logging.getLogger(__name__)

LUNCH_COURSE_ID = "lunch_break"


class SlotAllocator:
    """
    Greedy timetable builder for a single generation request.

    Every call to ``generate`` starts from fresh booking tables, so one
    allocator instance holds no state between requests apart from the
    constraints parsed for the most recent run.
    """

    def __init__(self, settings: TimetableSettings, resources: ResourcePool):
        self.settings = settings
        self.resources = resources
        self.constraints: List[Constraint] = []
        # (day, resource_type) -> resource_id -> booked [start, end) intervals
        self.bookings: Dict[Tuple[str, str], Dict[int, List[Tuple[int, int]]]] = {}

    def generate(self, courses: List[CourseInstance], constraints_text: str = "") -> List[TimeSlot]:
        """
        Build the weekly timetable.

        Args:
            courses: Courses to place, processed in the given order
            constraints_text: Free-text constraints; parsed and kept as metadata,
                they do not influence placement

        Returns:
            Lunch rows plus every placed lecture, sorted by weekday then start time
        """
        self.constraints = parse_constraints(constraints_text)
        if self.constraints:
            logger.info(f"Parsed constraints: {[(c.type.value, c.value) for c in self.constraints]}")

        self.bookings = {}
        timetable = self._lunch_slots()

        for course in courses:
            placed = self._schedule_course(course)
            timetable.extend(placed)
            if len(placed) < course.lectures_per_week:
                logger.warning(
                    f"Course {course.code or course.id} scheduled {len(placed)} of "
                    f"{course.lectures_per_week} weekly lectures"
                )

        timetable.sort(key=lambda s: (WEEKDAYS.index(s.day), s.start_time))
        logger.info(f"Generated {len(timetable)} slots for {len(courses)} courses")
        return timetable

    def _lunch_slots(self) -> List[TimeSlot]:
        """One lunch row per weekday; it books no real classroom."""
        return [
            TimeSlot(
                day=day,
                start_time=self.settings.lunch_start_time,
                end_time=self.settings.lunch_end_time,
                course_id=LUNCH_COURSE_ID,
                course_name="Lunch Break",
                course_code="LUNCH",
                instructor_name="-",
                resource_type="classroom",
                resource_id=0,
                is_lab=False
            )
            for day in WEEKDAYS
        ]

    def _schedule_course(self, course: CourseInstance) -> List[TimeSlot]:
        duration = course.lecture_duration or self.settings.default_lecture_duration
        resource_type = "lab" if course.is_lab else "classroom"
        pool_size = self.resources.labs if course.is_lab else self.resources.classrooms

        placed = []
        for day in WEEKDAYS:
            if len(placed) >= course.lectures_per_week:
                break

            # The same day keeps being scanned until the weekly count is met,
            # so several lectures of one course can share a day.
            for start_time in candidate_start_times(self.settings, duration):
                if len(placed) >= course.lectures_per_week:
                    break

                resource_id = self._find_free_resource(day, resource_type, pool_size, start_time, duration)
                if resource_id is None:
                    continue

                self._book(day, resource_type, resource_id, start_time, duration)
                placed.append(TimeSlot(
                    day=day,
                    start_time=start_time,
                    end_time=add_minutes(start_time, duration),
                    course_id=course.id,
                    course_name=course.name,
                    course_code=course.code,
                    instructor_name=course.instructor_name,
                    resource_type=resource_type,
                    resource_id=resource_id,
                    is_lab=course.is_lab
                ))

        return placed

    def _find_free_resource(self, day: str, resource_type: str, pool_size: int,
                            start_time: str, duration: int) -> Optional[int]:
        """Return the lowest resource id free for the whole interval, if any."""
        start = to_minutes(start_time)
        end = start + duration
        usage = self.bookings.get((day, resource_type), {})

        for resource_id in range(1, pool_size + 1):
            booked = usage.get(resource_id, [])
            if not any(intervals_overlap(start, end, b_start, b_end) for b_start, b_end in booked):
                return resource_id
        return None

    def _book(self, day: str, resource_type: str, resource_id: int, start_time: str, duration: int):
        start = to_minutes(start_time)
        usage = self.bookings.setdefault((day, resource_type), {})
        usage.setdefault(resource_id, []).append((start, start + duration))


def generate_timetable(settings: TimetableSettings, courses: List[CourseInstance],
                       resources: ResourcePool, constraints_text: str = "") -> List[TimeSlot]:
    """Generate a weekly timetable; see ``SlotAllocator.generate``."""
    return SlotAllocator(settings, resources).generate(courses, constraints_text)
