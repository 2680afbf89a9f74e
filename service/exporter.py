"""
Tabular renderings of a generated timetable (CSV and Excel via openpyxl).
"""

import csv
import io
from datetime import datetime
from typing import List, Optional

from models.schemas import TimeSlot
from config import settings
from service.slot_allocator import LUNCH_COURSE_ID

HEADERS = ["Day", "Time", "Course", "Code", "Instructor", "Room", "Type"]

COLORS = {
    "header": "4472C4",
    "lunch": "DDDDDD",
    "lab": "FFF2B3",
}


class TimetableExporter:
    """Renders a list of time slots verbatim into tabular formats."""

    COL_WIDTHS = [12, 15, 30, 10, 22, 14, 10]

    def __init__(self, timetable: List[TimeSlot], institute_name: Optional[str] = None):
        self.timetable = timetable
        self.institute_name = institute_name or settings.institute_name

    def rows(self) -> List[List[str]]:
        """One row per slot, in the order given."""
        return [
            [
                slot.day,
                f"{slot.start_time} - {slot.end_time}",
                slot.course_name,
                slot.course_code,
                slot.instructor_name,
                f"{'Lab' if slot.is_lab else 'Classroom'} {slot.resource_id}",
                "Lab" if slot.is_lab else "Lecture",
            ]
            for slot in self.timetable
        ]

    def to_csv(self) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow([f"Institute: {self.institute_name}"])
        writer.writerow([f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}"])
        writer.writerow([])
        writer.writerow(HEADERS)
        writer.writerows(self.rows())
        return buffer.getvalue()

    def to_xlsx(self) -> bytes:
        """Build a single-sheet workbook and return it as bytes."""
        from openpyxl import Workbook
        from openpyxl.styles import Font
        from openpyxl.utils import get_column_letter

        wb = Workbook()
        ws = wb.active
        ws.title = "Timetable"

        border = self._thin_border()
        header_fill = self._fill(COLORS["header"])
        for col, text in enumerate(HEADERS, 1):
            cell = ws.cell(row=1, column=col, value=text)
            cell.fill = header_fill
            cell.font = Font(bold=True, color="FFFFFF")
            cell.border = border
            ws.column_dimensions[get_column_letter(col)].width = self.COL_WIDTHS[col - 1]

        for row_idx, (slot, values) in enumerate(zip(self.timetable, self.rows()), 2):
            fill = None
            if slot.course_id == LUNCH_COURSE_ID:
                fill = self._fill(COLORS["lunch"])
            elif slot.is_lab:
                fill = self._fill(COLORS["lab"])
            for col, value in enumerate(values, 1):
                cell = ws.cell(row=row_idx, column=col, value=value)
                cell.border = border
                if fill is not None:
                    cell.fill = fill

        ws.freeze_panes = "A2"

        buffer = io.BytesIO()
        wb.save(buffer)
        return buffer.getvalue()

    def _fill(self, hex_color: str):
        from openpyxl.styles import PatternFill
        return PatternFill(start_color=hex_color, end_color=hex_color, fill_type="solid")

    def _thin_border(self):
        from openpyxl.styles import Border, Side
        s = Side(border_style="thin", color="BBBBBB")
        return Border(left=s, right=s, top=s, bottom=s)
