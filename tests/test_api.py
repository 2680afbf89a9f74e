"""
Test the timetable API with self-contained test data.
"""
import io

import pytest
from fastapi.testclient import TestClient
from openpyxl import load_workbook
from main import app
from service.slot_allocator import SlotAllocator
from config import settings


client = TestClient(app)

GENERATE_URL = "/api/faculty/generate-timetable"


# Test data fixtures
def get_minimal_request():
    """Return minimal valid generation request."""
    return {
        "settings": {
            "dayStartTime": "08:00",
            "dayEndTime": "17:00",
            "lunchStartTime": "12:00",
            "lunchEndTime": "13:00",
            "defaultLectureDuration": 60
        },
        "courses": [
            {
                "id": "course1",
                "name": "Data Structures",
                "code": "CS201",
                "instructorName": "Dr. Smith",
                "lecturesPerWeek": 3,
                "isLab": False
            }
        ],
        "resources": {"classrooms": 5, "labs": 2},
        "constraints": ""
    }


def get_medium_request():
    """Return medium-sized request with a lab and array-form resources."""
    request = get_minimal_request()
    request["courses"].append({
        "id": "course2",
        "name": "Physics Lab",
        "code": "PH110",
        "instructorName": "Dr. Jane",
        "lecturesPerWeek": 2,
        "isLab": True,
        "lectureDuration": 120
    })
    request["resources"] = [
        {"type": "classroom", "count": 3},
        {"type": "lab", "count": 1}
    ]
    request["constraints"] = "Respect lunch break. Professor Smith unavailable Thursday"
    return request


def test_root_endpoint():
    """Test root endpoint is accessible."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert "service" in data
    assert data["status"] == "healthy"


def test_health_endpoint():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_ping_endpoint():
    response = client.get("/api/ping")
    assert response.status_code == 200
    assert response.json() == {"message": "ping"}


def test_generate_minimal():
    """Test generation with a single classroom course."""
    response = client.post(GENERATE_URL, json=get_minimal_request())

    assert response.status_code == 200
    data = response.json()

    assert data["success"] is True
    assert isinstance(data["timetable"], list)

    course_slots = [s for s in data["timetable"] if s["courseId"] == "course1"]
    lunch_slots = [s for s in data["timetable"] if s["courseId"] == "lunch_break"]
    assert len(course_slots) == 3
    assert len(lunch_slots) == 5

    assert data["stats"] == {
        "totalSlots": 8,
        "days": 5,
        "courses": 2  # the lunch row counts as a course id
    }


def test_generate_response_uses_camel_case_keys():
    response = client.post(GENERATE_URL, json=get_minimal_request())
    slot = response.json()["timetable"][0]

    assert set(slot) == {
        "day", "startTime", "endTime", "courseId", "courseName", "courseCode",
        "instructorName", "resourceType", "resourceId", "isLab"
    }


def test_generate_medium_with_array_resources():
    """Array-form resources are resolved by type."""
    response = client.post(GENERATE_URL, json=get_medium_request())

    assert response.status_code == 200
    data = response.json()

    lab_slots = [s for s in data["timetable"] if s["courseId"] == "course2"]
    assert len(lab_slots) == 2
    for slot in lab_slots:
        assert slot["resourceType"] == "lab"
        assert slot["resourceId"] == 1
        assert slot["isLab"] is True

    classroom_ids = {s["resourceId"] for s in data["timetable"] if s["courseId"] == "course1"}
    assert classroom_ids <= {1, 2, 3}


def test_generate_echoes_parsed_constraints():
    response = client.post(GENERATE_URL, json=get_medium_request())
    constraints = response.json()["constraints"]

    assert {"type": "respect_lunch", "value": "true"} in constraints
    assert {"type": "instructor_unavailable", "value": "Smith:Thursday"} in constraints


def test_generate_constraints_do_not_block_placement():
    """Parsed directives are informational; "no classes after" is not enforced."""
    request = get_minimal_request()
    request["courses"][0]["lecturesPerWeek"] = 5
    request["resources"] = {"classrooms": 1, "labs": 0}
    request["constraints"] = "No classes after 9:00"

    response = client.post(GENERATE_URL, json=request)
    data = response.json()

    starts = [s["startTime"] for s in data["timetable"] if s["courseId"] == "course1"]
    assert len(starts) == 5
    assert any(start >= "09:00" for start in starts)


def _lab_course(lectures=3):
    return {
        "id": "lab1",
        "name": "Circuits Lab",
        "code": "EE110",
        "instructorName": "Dr. Jane",
        "lecturesPerWeek": lectures,
        "isLab": True,
        "lectureDuration": 120
    }


def _resource_ids(data, course_id):
    return sorted(s["resourceId"] for s in data["timetable"] if s["courseId"] == course_id)


def get_long_lecture_request(resources):
    """Two-hour lectures overlap across the quarter-hour grid, so each start needs a new room."""
    request = get_minimal_request()
    request["courses"][0]["lecturesPerWeek"] = 5
    request["courses"][0]["lectureDuration"] = 120
    request["courses"].append(_lab_course())
    request["resources"] = resources
    return request


def test_generate_missing_resources_defaults_to_configured_counts():
    request = get_long_lecture_request([{"type": "lab", "count": 1}])

    response = client.post(GENERATE_URL, json=request)
    assert response.status_code == 200

    # 08:00-09:00 starts, all still running at 09:00, need five classrooms
    assert _resource_ids(response.json(), "course1") == [1, 2, 3, 4, 5]


def test_generate_empty_resources_object_uses_defaults():
    response = client.post(GENERATE_URL, json=get_long_lecture_request({}))

    assert response.status_code == 200
    data = response.json()
    assert _resource_ids(data, "course1") == [1, 2, 3, 4, 5]
    assert max(_resource_ids(data, "lab1")) == 2


def test_generate_object_resources_missing_key_uses_default():
    response = client.post(GENERATE_URL, json=get_long_lecture_request({"classrooms": 3}))

    assert response.status_code == 200
    data = response.json()
    assert max(_resource_ids(data, "course1")) == 3
    assert max(_resource_ids(data, "lab1")) == 2


def test_generate_explicit_zero_count_is_kept():
    request = get_long_lecture_request([
        {"type": "classroom", "count": 2},
        {"type": "lab", "count": 0}
    ])

    response = client.post(GENERATE_URL, json=request)

    assert response.status_code == 200
    data = response.json()
    assert _resource_ids(data, "lab1") == []
    assert max(_resource_ids(data, "course1")) == 2


def test_generate_unexpected_failure_returns_500(monkeypatch):
    def fail(self, courses, constraints_text=""):
        raise RuntimeError("boom")

    monkeypatch.setattr(SlotAllocator, "generate", fail)

    response = client.post(GENERATE_URL, json=get_minimal_request())

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate timetable"}


def test_generate_empty_courses_returns_400():
    request = get_minimal_request()
    request["courses"] = []

    response = client.post(GENERATE_URL, json=request)

    assert response.status_code == 400
    assert response.json() == {"error": "Missing required fields: settings, courses, resources"}


@pytest.mark.parametrize("field", ["settings", "resources"])
def test_generate_missing_field_returns_400(field):
    request = get_minimal_request()
    del request[field]

    response = client.post(GENERATE_URL, json=request)

    assert response.status_code == 400
    assert "Missing required fields" in response.json()["error"]


def test_generate_lunch_rows_only_is_still_success():
    """Lunch rows are always produced, so an unplaceable course still yields output."""
    request = get_minimal_request()
    request["courses"][0]["lectureDuration"] = 600

    response = client.post(GENERATE_URL, json=request)

    assert response.status_code == 200
    data = response.json()
    assert all(s["courseId"] == "lunch_break" for s in data["timetable"])


def test_generate_invalid_lectures_per_week_returns_422():
    request = get_minimal_request()
    request["courses"][0]["lecturesPerWeek"] = 0

    response = client.post(GENERATE_URL, json=request)

    assert response.status_code == 422
    errors = response.json()["errors"]
    assert any("Lecturesperweek" in field for field in errors)


def test_generate_invalid_time_format_returns_422():
    request = get_minimal_request()
    request["settings"]["lunchStartTime"] = "noon"

    response = client.post(GENERATE_URL, json=request)

    assert response.status_code == 422
    assert "errors" in response.json()


def test_generate_normalizes_single_digit_hours():
    request = get_minimal_request()
    request["settings"]["dayStartTime"] = "8:00"

    response = client.post(GENERATE_URL, json=request)

    assert response.status_code == 200
    starts = [s["startTime"] for s in response.json()["timetable"] if s["courseId"] == "course1"]
    assert starts[0] == "08:00"


def test_generate_no_lecture_overlaps_lunch():
    request = get_minimal_request()
    request["courses"][0]["lecturesPerWeek"] = 20
    request["resources"] = {"classrooms": 1, "labs": 1}

    response = client.post(GENERATE_URL, json=request)
    assert response.status_code == 200

    for slot in response.json()["timetable"]:
        if slot["courseId"] == "lunch_break":
            continue
        assert slot["endTime"] <= "12:00" or slot["startTime"] >= "13:00"


# ============================================
# Export endpoints
# ============================================

def _generated_timetable():
    return client.post(GENERATE_URL, json=get_medium_request()).json()["timetable"]


def test_export_csv():
    timetable = _generated_timetable()

    response = client.post("/api/faculty/export-csv", json={
        "timetable": timetable,
        "instituteName": "Test Institute"
    })

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "attachment" in response.headers["content-disposition"]

    lines = response.text.splitlines()
    assert lines[0] == "Institute: Test Institute"
    assert lines[1].startswith("Generated: ")
    assert lines[3] == "Day,Time,Course,Code,Instructor,Room,Type"
    assert len(lines) == 4 + len(timetable)


def test_export_csv_default_institute():
    response = client.post("/api/faculty/export-csv", json={"timetable": []})

    assert response.status_code == 200
    assert response.text.splitlines()[0] == "Institute: ClassCanvas"


def test_export_excel():
    timetable = _generated_timetable()

    response = client.post("/api/faculty/export-excel", json={"timetable": timetable})

    assert response.status_code == 200
    assert ".xlsx" in response.headers["content-disposition"]

    wb = load_workbook(io.BytesIO(response.content))
    ws = wb["Timetable"]
    assert ws.cell(row=1, column=1).value == "Day"
    assert ws.max_row == 1 + len(timetable)


def test_app_debug_follows_settings():
    assert app.debug is settings.debug


def test_generate_accepts_resource_names():
    request = get_minimal_request()
    request["resources"] = [
        {"type": "classroom", "count": 1, "names": ["Room 101"]},
        {"type": "lab", "count": 1, "names": ["Lab A"]}
    ]

    response = client.post(GENERATE_URL, json=request)

    assert response.status_code == 200
    slots = [s for s in response.json()["timetable"] if s["courseId"] == "course1"]
    assert {s["resourceId"] for s in slots} == {1}
