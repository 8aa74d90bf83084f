"""Tests for form-to-group assignment."""

import uuid
from types import SimpleNamespace

import pytest

from rollcall.core.database import insert_ignoring_conflicts
from rollcall.models.form_assignment import FormAssignment
from rollcall.services.auth import create_access_token

ASSIGNMENTS_URL = "/api/v1/assignments/"
NONEXISTENT_UUID = str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _auth_header(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


def _create_form(client, user, title="Quiz 1"):
    resp = client.post("/api/v1/forms/", json={"title": title}, headers=_auth_header(user))
    assert resp.status_code == 201
    return resp.json()


def _create_group(client, user, name):
    resp = client.post("/api/v1/groups/", json={"name": name}, headers=_auth_header(user))
    assert resp.status_code == 201
    return resp.json()


def _assign(client, user, form_id, group_ids):
    return client.post(
        ASSIGNMENTS_URL,
        json={"form_id": form_id, "group_ids": group_ids},
        headers=_auth_header(user),
    )


def _assigned_group_ids(client, user, form_id):
    resp = client.get(f"{ASSIGNMENTS_URL}?form_id={form_id}", headers=_auth_header(user))
    assert resp.status_code == 200
    return set(resp.json()["group_ids"])


# ---------------------------------------------------------------------------
# POST /assignments/
# ---------------------------------------------------------------------------


class TestAssignForm:
    def test_assign_form_to_groups(self, client, owner):
        form = _create_form(client, owner)
        a = _create_group(client, owner, "Class A")
        b = _create_group(client, owner, "Class B")

        resp = _assign(client, owner, form["id"], [a["id"], b["id"]])
        assert resp.status_code == 201
        assert resp.json() == {"form_id": form["id"], "assigned_count": 2, "newly_assigned": 2}
        assert _assigned_group_ids(client, owner, form["id"]) == {a["id"], b["id"]}

    def test_assign_is_idempotent(self, client, owner):
        form = _create_form(client, owner)
        a = _create_group(client, owner, "Class A")

        first = _assign(client, owner, form["id"], [a["id"]])
        second = _assign(client, owner, form["id"], [a["id"]])
        assert first.status_code == 201
        assert second.status_code == 201
        assert second.json()["assigned_count"] == 1
        assert second.json()["newly_assigned"] == 0
        assert _assigned_group_ids(client, owner, form["id"]) == {a["id"]}

    def test_assign_partially_overlapping(self, client, owner):
        form = _create_form(client, owner)
        a = _create_group(client, owner, "Class A")
        b = _create_group(client, owner, "Class B")
        _assign(client, owner, form["id"], [a["id"]])

        resp = _assign(client, owner, form["id"], [a["id"], b["id"]])
        assert resp.json()["assigned_count"] == 2
        assert resp.json()["newly_assigned"] == 1

    def test_assign_counts_distinct_groups(self, client, owner):
        form = _create_form(client, owner)
        a = _create_group(client, owner, "Class A")
        resp = _assign(client, owner, form["id"], [a["id"], a["id"]])
        assert resp.status_code == 201
        assert resp.json()["assigned_count"] == 1

    def test_assign_by_non_owner_forbidden(self, client, owner, outsider):
        form = _create_form(client, owner)
        a = _create_group(client, outsider, "Class A")
        resp = _assign(client, outsider, form["id"], [a["id"]])
        assert resp.status_code == 403
        assert _assigned_group_ids(client, owner, form["id"]) == set()

    def test_assign_empty_group_list_rejected(self, client, owner):
        form = _create_form(client, owner)
        resp = _assign(client, owner, form["id"], [])
        assert resp.status_code == 400
        assert resp.json()["error"] == "validation_error"

    def test_assign_unknown_group_rejected(self, client, owner):
        form = _create_form(client, owner)
        a = _create_group(client, owner, "Class A")
        resp = _assign(client, owner, form["id"], [a["id"], NONEXISTENT_UUID])
        assert resp.status_code == 400
        assert _assigned_group_ids(client, owner, form["id"]) == set()

    def test_assign_unknown_form(self, client, owner):
        a = _create_group(client, owner, "Class A")
        resp = _assign(client, owner, NONEXISTENT_UUID, [a["id"]])
        assert resp.status_code == 404


# ---------------------------------------------------------------------------
# GET / DELETE /assignments/
# ---------------------------------------------------------------------------


class TestListAndUnassign:
    def test_list_requires_form_id(self, client, owner):
        resp = client.get(ASSIGNMENTS_URL, headers=_auth_header(owner))
        assert resp.status_code == 400

    def test_list_by_non_owner_forbidden(self, client, owner, outsider):
        form = _create_form(client, owner)
        resp = client.get(f"{ASSIGNMENTS_URL}?form_id={form['id']}", headers=_auth_header(outsider))
        assert resp.status_code == 403

    def test_unassign(self, client, owner):
        form = _create_form(client, owner)
        a = _create_group(client, owner, "Class A")
        b = _create_group(client, owner, "Class B")
        _assign(client, owner, form["id"], [a["id"], b["id"]])

        url = f"{ASSIGNMENTS_URL}?form_id={form['id']}&group_id={a['id']}"
        resp = client.delete(url, headers=_auth_header(owner))
        assert resp.status_code == 200
        assert resp.json() == {"removed": True}
        assert _assigned_group_ids(client, owner, form["id"]) == {b["id"]}

        resp = client.delete(url, headers=_auth_header(owner))
        assert resp.json() == {"removed": False}

    def test_unassign_by_non_owner_forbidden(self, client, owner, outsider):
        form = _create_form(client, owner)
        a = _create_group(client, owner, "Class A")
        _assign(client, owner, form["id"], [a["id"]])

        resp = client.delete(
            f"{ASSIGNMENTS_URL}?form_id={form['id']}&group_id={a['id']}",
            headers=_auth_header(outsider),
        )
        assert resp.status_code == 403
        assert _assigned_group_ids(client, owner, form["id"]) == {a["id"]}


# ---------------------------------------------------------------------------
# insert_ignoring_conflicts
# ---------------------------------------------------------------------------


class TestInsertIgnoringConflicts:
    def test_unsupported_dialect_raises(self):
        fake_db = SimpleNamespace(
            get_bind=lambda: SimpleNamespace(dialect=SimpleNamespace(name="mysql"))
        )
        rows = [{"form_id": uuid.uuid4(), "group_id": uuid.uuid4()}]
        with pytest.raises(RuntimeError, match="mysql"):
            insert_ignoring_conflicts(fake_db, FormAssignment.__table__, rows)

    def test_no_rows_is_noop(self, db):
        assert insert_ignoring_conflicts(db, FormAssignment.__table__, []) == 0
