import logging

import pytest
from fastapi.testclient import TestClient

from conftest import COURSE_ID, USER_ID, quiz_fact, video_fact
from progress_engine import dependencies
from progress_engine.courses.models import ExamQuestion, FinalExam
from progress_engine.main import app

HEADERS = {"X-User-Id": USER_ID}


@pytest.fixture
def client(two_chapter_course):
    """Routes wired to the in-memory stores; startup hooks (index creation) are not run"""
    engine = two_chapter_course
    overrides = {
        dependencies.get_catalog: lambda: engine.catalog,
        dependencies.get_fact_store: lambda: engine.facts,
        dependencies.get_policy_store: lambda: engine.policies,
        dependencies.get_user_directory: lambda: engine.directory,
        dependencies.get_attempt_store: lambda: engine.attempts,
        dependencies.get_certificate_store: lambda: engine.certificates,
        dependencies.get_submission_store: lambda: engine.submissions,
    }
    app.dependency_overrides.update(overrides)
    yield TestClient(app)
    app.dependency_overrides.clear()


def _start_course(engine):
    for fact in (video_fact("ch-a"), quiz_fact("quiz-a", score=4), video_fact("ch-b")):
        engine.facts.record(fact)


def test_missing_user_header_is_rejected(client):
    response = client.get(f"/courses/{COURSE_ID}/progress")
    assert response.status_code == 401


def test_progress(client, two_chapter_course):
    _start_course(two_chapter_course)

    response = client.get(f"/courses/{COURSE_ID}/progress", headers=HEADERS)

    assert response.status_code == 200
    body = response.json()
    assert body["percent"] == 75
    assert body["completed_units"] == 3
    assert body["has_certificate"] is False
    assert [c["chapter_id"] for c in body["chapters"]] == ["ch-a", "ch-b"]


def test_unknown_course_is_404(client):
    response = client.get("/courses/NOPE/progress", headers=HEADERS)
    assert response.status_code == 404


def test_certificate_flow(client, two_chapter_course):
    _start_course(two_chapter_course)

    response = client.post(f"/courses/{COURSE_ID}/certificate", headers=HEADERS)
    assert response.status_code == 403
    assert response.json()["detail"]["reason"] == "assignments"

    response = client.post(
        "/assignments/asg-b/submissions", headers=HEADERS,
        json={"submission_type": "link", "link_url": "https://example.org/essay"},
    )
    assert response.status_code == 200
    assert response.json()["status"] == "submitted"

    eligibility = client.get(f"/courses/{COURSE_ID}/certificate/eligibility", headers=HEADERS).json()
    assert eligibility["eligible"] is True
    assert eligibility["progress"]["completed_assignments"] == 1

    issued = client.post(f"/courses/{COURSE_ID}/certificate", headers=HEADERS)
    assert issued.status_code == 200
    cert = issued.json()
    assert cert["completed_assignments"] == 1
    assert cert["total_assignments"] == 1
    assert cert["percentage"] == 100.0

    again = client.post(f"/courses/{COURSE_ID}/certificate", headers=HEADERS).json()
    assert again["verification_code"] == cert["verification_code"]

    progress = client.get(f"/courses/{COURSE_ID}/progress", headers=HEADERS).json()
    assert progress["has_certificate"] is True
    assert progress["certificate_id"] == cert["certificate_id"]

    verified = client.get(f"/certificates/verify/{cert['verification_code']}").json()
    assert verified["valid"] is True
    assert verified["student_name"] == "Ada Lovelace"

    mine = client.get("/certificates/mine", headers=HEADERS).json()
    assert [c["certificate_id"] for c in mine] == [cert["certificate_id"]]


def test_unknown_verification_code(client):
    body = client.get("/certificates/verify/CERT-NOPE").json()
    assert body["valid"] is False


def test_final_exam_endpoints(client, two_chapter_course):
    two_chapter_course.catalog.exams["exam-1"] = FinalExam(
        final_exam_id="exam-1", course_id=COURSE_ID, title="Final", is_published=True,
        questions=[
            ExamQuestion(question_id="q1", question="2+2?", options=["3", "4"], correct_answer=1),
            ExamQuestion(question_id="q2", question="Capital?", options=["Paris", "Rome"], correct_answer=0),
        ],
    )

    public = client.get("/final-exams/exam-1", headers=HEADERS).json()
    assert "correct_answer" not in public["questions"][0]

    response = client.post("/final-exams/exam-1/submit", headers=HEADERS,
                           json={"answers": {"q1": 1, "q2": 1}})
    assert response.status_code == 200
    attempt = response.json()
    assert attempt["score"] == 50
    assert attempt["grade"] == "F"
    assert attempt["passed"] is False
    assert "questions" not in attempt
    assert "answers" not in attempt

    history = client.get(f"/courses/{COURSE_ID}/final-exam/attempts", headers=HEADERS).json()
    assert [a["attempt_id"] for a in history] == [attempt["attempt_id"]]
    best = client.get(f"/courses/{COURSE_ID}/final-exam/best", headers=HEADERS).json()
    assert best["score"] == 50


def test_final_exam_errors(client, two_chapter_course):
    two_chapter_course.catalog.exams["draft"] = FinalExam(
        final_exam_id="draft", course_id=COURSE_ID, is_published=False,
        questions=[ExamQuestion(question_id="q1", correct_answer=0)],
    )
    two_chapter_course.catalog.exams["empty"] = FinalExam(
        final_exam_id="empty", course_id="OTHER", is_published=True,
    )

    assert client.post("/final-exams/draft/submit", headers=HEADERS, json={"answers": {}}).status_code == 403
    assert client.post("/final-exams/empty/submit", headers=HEADERS, json={"answers": {}}).status_code == 422
    assert client.post("/final-exams/missing/submit", headers=HEADERS, json={"answers": {}}).status_code == 404
    assert client.get(f"/courses/{COURSE_ID}/final-exam/best", headers=HEADERS).status_code == 404


def test_exam_readiness(client, two_chapter_course):
    _start_course(two_chapter_course)

    body = client.get(f"/courses/{COURSE_ID}/final-exam/readiness", headers=HEADERS).json()

    assert body["eligible"] is False
    assert body["reason"] == "assignments"


def test_certificate_policy(client, two_chapter_course):
    default = client.get(f"/courses/{COURSE_ID}/certificate-policy").json()
    assert default["min_percentage"] == 70
    assert default["require_all_assignments"] is True

    updated = client.put(f"/courses/{COURSE_ID}/certificate-policy", headers=HEADERS,
                         json={"min_percentage": 90}).json()
    assert updated["min_percentage"] == 90
    assert updated["require_all_quizzes"] is True
    assert two_chapter_course.policies.policies[COURSE_ID].min_percentage == 90

    response = client.put(f"/courses/{COURSE_ID}/certificate-policy", headers=HEADERS,
                          json={"min_percentage": 150})
    assert response.status_code == 422


def test_text_submission_gets_plagiarism_report(client):
    response = client.post(
        "/assignments/asg-b/submissions", headers=HEADERS,
        json={"submission_type": "text", "text_content": "Original essay about cellular respiration"},
    )
    submission_id = response.json()["submission_id"]

    report = client.get(f"/assignments/submissions/{submission_id}/plagiarism", headers=HEADERS)

    assert report.status_code == 200
    assert report.json()["similarity_score"] == 0


def test_plagiarism_failure_does_not_break_submission(client, two_chapter_course):
    class BrokenScorer:
        async def score(self, submission_id, text):
            raise RuntimeError("similarity backend down")

    app.dependency_overrides[dependencies.get_plagiarism_scorer] = lambda: BrokenScorer()

    response = client.post(
        "/assignments/asg-b/submissions", headers=HEADERS,
        json={"submission_type": "text", "text_content": "Original essay about cellular respiration"},
    )

    assert response.status_code == 200
    submission_id = response.json()["submission_id"]
    assert two_chapter_course.submissions.by_id[submission_id].plagiarism_report is None


def test_grading_routes(client):
    submission_id = client.post(
        "/assignments/asg-b/submissions", headers=HEADERS,
        json={"submission_type": "link", "link_url": "https://example.org/essay"},
    ).json()["submission_id"]

    graded = client.post(f"/assignments/submissions/{submission_id}/grade",
                         headers={"X-User-Id": "teacher-1"}, json={"score": 88, "feedback": "Nice"})
    assert graded.status_code == 200
    assert graded.json()["status"] == "graded"
    assert graded.json()["score"] == 88

    too_high = client.post(f"/assignments/submissions/{submission_id}/grade",
                           headers={"X-User-Id": "teacher-1"}, json={"score": 500})
    assert too_high.status_code == 422


def test_invalid_submission_payload(client):
    response = client.post("/assignments/asg-b/submissions", headers=HEADERS,
                           json={"submission_type": "text"})
    assert response.status_code == 422


def test_policy_change_is_logged_with_user(client, caplog):
    caplog.set_level(logging.INFO, logger="progress_engine.courses.policy_router")

    client.put(f"/courses/{COURSE_ID}/certificate-policy", headers={"X-User-Id": "teacher-9"},
               json={"require_all_quizzes": False})

    messages = [r.getMessage() for r in caplog.records if r.name == "progress_engine.courses.policy_router"]
    assert any("teacher-9" in m and COURSE_ID in m for m in messages)
