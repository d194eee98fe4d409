from src.app.models import AppRole
from src.app.utils.ai_gateway import AIPaymentRequiredError, AIServiceUnavailableError


def test_assignments_are_returned(client, gateway, make_user, auth_headers):
    faculty = make_user(AppRole.faculty)
    gateway.queue("""Here you go:
```json
{"assignments": [
  {"title": "Cell Structure", "description": "Label a plant cell.", "max_score": 50},
  {"title": "Osmosis Lab", "description": "Write up the potato lab."}
]}
```""")

    response = client.post(
        "/api/ai/generate-assignments",
        json={"syllabus": "Unit 1: Cells\nUnit 2: Transport", "subject": "Biology", "numberOfAssignments": 2},
        headers=auth_headers(faculty),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["assignments"] == [
        {"title": "Cell Structure", "description": "Label a plant cell.", "max_score": 50},
        {"title": "Osmosis Lab", "description": "Write up the potato lab.", "max_score": 100},
    ]
    assert "SYLLABUS CONTENT:\nUnit 1: Cells" in gateway.last_user_prompt
    assert "Generate 2 assignments" in gateway.last_user_prompt


def test_default_count_is_five(client, gateway, make_user, auth_headers):
    faculty = make_user(AppRole.faculty)
    gateway.queue_json({"assignments": [{"title": "T", "description": "D", "max_score": 80}]})

    client.post(
        "/api/ai/generate-assignments",
        json={"syllabus": "Unit 1", "subject": "Physics"},
        headers=auth_headers(faculty),
    )

    assert "Generate 5 assignments" in gateway.last_user_prompt


def test_missing_syllabus_is_400(client, gateway, make_user, auth_headers):
    faculty = make_user(AppRole.faculty)
    response = client.post(
        "/api/ai/generate-assignments",
        json={"subject": "Physics"},
        headers=auth_headers(faculty),
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Syllabus content and subject are required"}
    assert gateway.calls == []


def test_payment_required_is_402(client, gateway, make_user, auth_headers):
    faculty = make_user(AppRole.faculty)
    gateway.queue(AIPaymentRequiredError())
    response = client.post(
        "/api/ai/generate-assignments",
        json={"syllabus": "Unit 1", "subject": "Physics"},
        headers=auth_headers(faculty),
    )
    assert response.status_code == 402
    assert "credits" in response.json()["error"]


def test_generic_upstream_failure_is_500(client, gateway, make_user, auth_headers):
    faculty = make_user(AppRole.faculty)
    gateway.queue(AIServiceUnavailableError())
    response = client.post(
        "/api/ai/generate-assignments",
        json={"syllabus": "Unit 1", "subject": "Physics"},
        headers=auth_headers(faculty),
    )
    assert response.status_code == 500
    assert response.json() == {"error": "AI service unavailable"}
