"""Tests for the response store: submit, resubmit, own answers, inbox, CSV export."""

import csv
import io
import uuid
from datetime import datetime

import pytest

from rollcall.services.auth import create_access_token
from rollcall.services.exceptions import ConflictError
from rollcall.services.responses import submit_response

FORMS_URL = "/api/v1/forms/"
NONEXISTENT_UUID = str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _auth_header(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


def _create_quiz(client, owner):
    """Create a form covering every question type; returns (form_id, {key: question_id})."""
    form = client.post(FORMS_URL, json={"title": "Quiz 1"}, headers=_auth_header(owner)).json()
    sections = [
        {
            "title": "Basics",
            "questions": [
                {
                    "type": "SHORT_TEXT",
                    "question_text": "Your name",
                    "required": True,
                    "config": {"min_length": 2, "max_length": 20},
                },
                {
                    "type": "MULTIPLE_CHOICE",
                    "question_text": "Capital of France",
                    "required": True,
                    "config": {
                        "options": [
                            {"label": "Paris", "value": "paris"},
                            {"label": "Lyon", "value": "lyon"},
                        ]
                    },
                },
                {
                    "type": "CHECKBOXES",
                    "question_text": "Pick the primes",
                    "config": {
                        "options": [
                            {"label": "Two", "value": "2"},
                            {"label": "Three", "value": "3"},
                            {"label": "Four", "value": "4"},
                        ],
                        "max_selected": 2,
                    },
                },
            ],
        },
        {
            "title": "Details",
            "questions": [
                {
                    "type": "LINEAR_SCALE",
                    "question_text": "Confidence",
                    "config": {"min": 0, "max": 10, "step": 2},
                },
                {"type": "DATE", "question_text": "Exam date"},
                {"type": "TIME", "question_text": "Start time"},
                {"type": "URL", "question_text": "Homepage"},
                {"type": "CONTENT_BLOCK", "question_text": "Thanks for taking part"},
            ],
        },
    ]
    resp = client.post(
        f"{FORMS_URL}{form['id']}",
        json={"form_meta": {"title": "Quiz 1"}, "sections": sections},
        headers=_auth_header(owner),
    )
    assert resp.status_code == 200, resp.text
    keys = ["name", "capital", "primes", "confidence", "date", "time", "url", "content"]
    questions = [q for s in resp.json()["sections"] for q in s["questions"]]
    return form["id"], dict(zip(keys, (q["id"] for q in questions)))


def _answers(q, **overrides):
    answers = {q["name"]: "Asha", q["capital"]: "paris"}
    for key, value in overrides.items():
        answers[q[key]] = value
    return answers


def _submit(client, user, form_id, answers):
    return client.post(
        f"{FORMS_URL}{form_id}/responses",
        json={"answers": answers},
        headers=_auth_header(user),
    )


def _update(client, user, form_id, answers):
    return client.put(
        f"{FORMS_URL}{form_id}/responses",
        json={"answers": answers},
        headers=_auth_header(user),
    )


# ---------------------------------------------------------------------------
# POST /forms/{id}/responses
# ---------------------------------------------------------------------------


class TestSubmitResponse:
    def test_submit_success(self, client, owner, students):
        form_id, q = _create_quiz(client, owner)
        answers = _answers(
            q,
            primes=["2", "3"],
            confidence=6,
            date="2026-11-02",
            time="09:30",
            url="https://example.com/me",
        )
        resp = _submit(client, students[0], form_id, answers)
        assert resp.status_code == 201
        data = resp.json()
        assert data["form_id"] == form_id
        assert data["responder_id"] == str(students[0].id)
        assert data["answers"] == answers
        assert data["submitted_at"] is not None

    def test_second_submit_conflicts(self, client, owner, students):
        form_id, q = _create_quiz(client, owner)
        first = _submit(client, students[0], form_id, _answers(q))
        second = _submit(client, students[0], form_id, _answers(q, name="Someone else"))
        assert first.status_code == 201
        assert second.status_code == 409
        assert second.json() == {"detail": "You have already submitted this form", "error": "conflict"}

        own = client.get(f"{FORMS_URL}{form_id}/responses", headers=_auth_header(students[0])).json()
        assert own["responses"][0]["answers"][q["name"]] == "Asha"

    def test_duplicate_submit_across_sessions(self, client, db, owner, students, session_factory):
        form_id, q = _create_quiz(client, owner)
        responder_id = students[0].id
        outcomes = []
        for _ in range(2):
            session = session_factory()
            try:
                submit_response(session, uuid.UUID(form_id), responder_id, _answers(q))
                outcomes.append("created")
            except ConflictError:
                outcomes.append("conflict")
            finally:
                session.close()

        assert outcomes == ["created", "conflict"]
        own = client.get(f"{FORMS_URL}{form_id}/responses", headers=_auth_header(students[0])).json()
        assert len(own["responses"]) == 1

    def test_different_users_may_each_submit(self, client, owner, students):
        form_id, q = _create_quiz(client, owner)
        for student in students[:3]:
            assert _submit(client, student, form_id, _answers(q)).status_code == 201
        detail = client.get(f"{FORMS_URL}{form_id}", headers=_auth_header(owner)).json()
        assert detail["response_count"] == 3

    def test_submit_unknown_form(self, client, students):
        resp = _submit(client, students[0], NONEXISTENT_UUID, {})
        assert resp.status_code == 404

    def test_missing_required_answer(self, client, owner, students):
        form_id, q = _create_quiz(client, owner)
        resp = _submit(client, students[0], form_id, {q["name"]: "Asha"})
        assert resp.status_code == 400
        assert "Question 'Capital of France' is required" in resp.json()["detail"]

    def test_blank_required_answer(self, client, owner, students):
        form_id, q = _create_quiz(client, owner)
        resp = _submit(client, students[0], form_id, _answers(q, name="   "))
        assert resp.status_code == 400
        assert "Your name" in resp.json()["detail"]

    def test_errors_are_joined(self, client, owner, students):
        form_id, q = _create_quiz(client, owner)
        resp = _submit(client, students[0], form_id, {q["capital"]: "berlin"})
        assert resp.status_code == 400
        detail = resp.json()["detail"]
        assert "; " in detail
        assert "Your name" in detail
        assert "'berlin' is not a valid option" in detail

    def test_unknown_question_id(self, client, owner, students):
        form_id, q = _create_quiz(client, owner)
        stray = str(uuid.uuid4())
        answers = _answers(q)
        answers[stray] = "x"
        resp = _submit(client, students[0], form_id, answers)
        assert resp.status_code == 400
        assert f"Unknown question ids: {stray}" in resp.json()["detail"]

    @pytest.mark.parametrize(
        "key,value,message",
        [
            ("name", "A", "at least 2 characters"),
            ("name", "A" * 21, "at most 20 characters"),
            ("name", 42, "answer must be text"),
            ("primes", ["2", "9"], "invalid options: 9"),
            ("primes", ["2", "3", "4"], "select at most 2 options"),
            ("primes", "2", "answer must be a list of options"),
            ("confidence", 11, "between 0 and 10"),
            ("confidence", 3, "in steps of 2"),
            ("confidence", "high", "must be an integer"),
            ("date", "02/11/2026", "ISO date"),
            ("time", "half past nine", "ISO time"),
            ("url", "not a url", "valid http(s) URL"),
            ("content", "hello", "does not accept an answer"),
        ],
    )
    def test_invalid_answers_rejected(self, client, owner, students, key, value, message):
        form_id, q = _create_quiz(client, owner)
        resp = _submit(client, students[0], form_id, _answers(q, **{key: value}))
        assert resp.status_code == 400
        assert message in resp.json()["detail"]

    def test_non_finite_scale_answer_rejected(self, client, owner, students):
        form_id, q = _create_quiz(client, owner)
        body = (
            f'{{"answers": {{"{q["name"]}": "Asha", "{q["capital"]}": "paris", '
            f'"{q["confidence"]}": Infinity}}}}'
        )
        resp = client.post(
            f"{FORMS_URL}{form_id}/responses",
            content=body,
            headers={**_auth_header(students[0]), "Content-Type": "application/json"},
        )
        assert resp.status_code == 400
        assert "scale answer must be an integer" in resp.json()["detail"]

    def test_optional_answers_may_be_blank(self, client, owner, students):
        form_id, q = _create_quiz(client, owner)
        resp = _submit(client, students[0], form_id, _answers(q, primes=[], url=""))
        assert resp.status_code == 201

    def test_invalid_submission_not_stored(self, client, owner, students):
        form_id, q = _create_quiz(client, owner)
        _submit(client, students[0], form_id, {q["capital"]: "berlin"})
        assert _submit(client, students[0], form_id, _answers(q)).status_code == 201


# ---------------------------------------------------------------------------
# PUT /forms/{id}/responses
# ---------------------------------------------------------------------------


class TestUpdateResponse:
    def test_update_overwrites_answers(self, client, owner, students):
        form_id, q = _create_quiz(client, owner)
        _submit(client, students[0], form_id, _answers(q))

        resp = _update(client, students[0], form_id, _answers(q, capital="lyon", confidence=4))
        assert resp.status_code == 200
        data = resp.json()
        assert data["answers"][q["capital"]] == "lyon"
        assert data["answers"][q["confidence"]] == 4
        assert datetime.fromisoformat(data["updated_at"]) > datetime.fromisoformat(data["submitted_at"])

        own = client.get(f"{FORMS_URL}{form_id}/responses", headers=_auth_header(students[0])).json()
        assert own["responses"][0]["answers"][q["capital"]] == "lyon"

    def test_update_without_submission(self, client, owner, students):
        form_id, q = _create_quiz(client, owner)
        resp = _update(client, students[0], form_id, _answers(q))
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Form submission not found"

    def test_update_validates_answers(self, client, owner, students):
        form_id, q = _create_quiz(client, owner)
        _submit(client, students[0], form_id, _answers(q))
        resp = _update(client, students[0], form_id, _answers(q, capital="berlin"))
        assert resp.status_code == 400

        own = client.get(f"{FORMS_URL}{form_id}/responses", headers=_auth_header(students[0])).json()
        assert own["responses"][0]["answers"][q["capital"]] == "paris"


# ---------------------------------------------------------------------------
# GET /forms/{id}/responses
# ---------------------------------------------------------------------------


class TestOwnResponses:
    def test_no_response_yet(self, client, owner, students):
        form_id, _ = _create_quiz(client, owner)
        resp = client.get(f"{FORMS_URL}{form_id}/responses", headers=_auth_header(students[0]))
        assert resp.status_code == 200
        assert resp.json() == {"responses": []}

    def test_only_own_response_returned(self, client, owner, students):
        form_id, q = _create_quiz(client, owner)
        _submit(client, students[0], form_id, _answers(q, name="First"))
        _submit(client, students[1], form_id, _answers(q, name="Second"))

        data = client.get(f"{FORMS_URL}{form_id}/responses", headers=_auth_header(students[1])).json()
        assert len(data["responses"]) == 1
        assert data["responses"][0]["responder_id"] == str(students[1].id)
        assert data["responses"][0]["answers"][q["name"]] == "Second"


# ---------------------------------------------------------------------------
# GET /users/me/forms
# ---------------------------------------------------------------------------


class TestAssignedForms:
    def _group(self, client, owner, name, members):
        resp = client.post(
            "/api/v1/groups/",
            json={"name": name, "user_ids": [str(m.id) for m in members]},
            headers=_auth_header(owner),
        )
        return resp.json()["id"]

    def _assign(self, client, owner, form_id, group_ids):
        client.post(
            "/api/v1/assignments/",
            json={"form_id": form_id, "group_ids": group_ids},
            headers=_auth_header(owner),
        )

    def test_forms_listed_once_with_status(self, client, owner, students):
        form_id, q = _create_quiz(client, owner)
        a = self._group(client, owner, "Class A", students[:2])
        b = self._group(client, owner, "Class B", students[:1])
        self._assign(client, owner, form_id, [a, b])

        resp = client.get("/api/v1/users/me/forms", headers=_auth_header(students[0]))
        assert resp.status_code == 200
        data = resp.json()
        assert len(data) == 1
        assert data[0]["form_id"] == form_id
        assert data[0]["form_title"] == "Quiz 1"
        assert data[0]["submitted_at"] is None

        _submit(client, students[0], form_id, _answers(q))
        data = client.get("/api/v1/users/me/forms", headers=_auth_header(students[0])).json()
        assert len(data) == 1
        assert data[0]["submitted_at"] is not None

        other = client.get("/api/v1/users/me/forms", headers=_auth_header(students[1])).json()
        assert other[0]["submitted_at"] is None

    def test_unassigned_user_sees_nothing(self, client, owner, students):
        form_id, _ = _create_quiz(client, owner)
        a = self._group(client, owner, "Class A", students[:1])
        self._assign(client, owner, form_id, [a])

        resp = client.get("/api/v1/users/me/forms", headers=_auth_header(students[4]))
        assert resp.json() == []


# ---------------------------------------------------------------------------
# GET /forms/{id}/responses/export
# ---------------------------------------------------------------------------


class TestExportResponses:
    def test_export_csv(self, client, owner, students):
        form_id, q = _create_quiz(client, owner)
        _submit(client, students[0], form_id, _answers(q, primes=["2", "3"], confidence=8))
        _submit(client, students[1], form_id, _answers(q, name="Bikash"))

        resp = client.get(f"{FORMS_URL}{form_id}/responses/export", headers=_auth_header(owner))
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        assert "attachment" in resp.headers["content-disposition"]

        rows = list(csv.reader(io.StringIO(resp.text)))
        header = rows[0]
        assert header[:2] == ["responder_id", "responder_email"]
        assert header[2] == "Q1: Your name"
        assert header[-2:] == ["submitted_at", "updated_at"]
        assert not any("Thanks for taking part" in h for h in header)
        # 7 answerable questions plus 4 fixed columns
        assert len(header) == 11

        assert len(rows) == 3
        first = rows[1]
        assert first[0] == str(students[0].id)
        assert first[1] == "student1@example.com"
        assert first[2] == "Asha"
        assert first[4] == "2; 3"
        assert first[5] == "8"
        assert rows[2][2] == "Bikash"

    def test_export_empty_form(self, client, owner):
        form_id, _ = _create_quiz(client, owner)
        resp = client.get(f"{FORMS_URL}{form_id}/responses/export", headers=_auth_header(owner))
        rows = list(csv.reader(io.StringIO(resp.text)))
        assert len(rows) == 1

    def test_export_by_non_owner_forbidden(self, client, owner, students):
        form_id, _ = _create_quiz(client, owner)
        resp = client.get(f"{FORMS_URL}{form_id}/responses/export", headers=_auth_header(students[0]))
        assert resp.status_code == 403
