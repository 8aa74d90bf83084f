"""Response store: one response per (form, responder), plus the responder's inbox."""

import csv
import io
import logging
import uuid
from typing import Any

from sqlalchemy import and_, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rollcall.core.database import utcnow
from rollcall.models.form import Form, FormQuestion
from rollcall.models.form_assignment import FormAssignment
from rollcall.models.form_response import FormResponse
from rollcall.models.group import GroupMember
from rollcall.models.user import User
from rollcall.schemas.questions import question_adapter
from rollcall.services.exceptions import ConflictError, NotFoundError, ValidationError
from rollcall.services.forms import ordered_questions
from rollcall.services.lookups import get_form, get_owned_form

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Answer validation
# ---------------------------------------------------------------------------


def _as_definition(question: FormQuestion):
    return question_adapter.validate_python(
        {
            "type": question.type,
            "question_text": question.question_text,
            "question_description": question.question_description,
            "required": question.required,
            "config": question.config or {},
        }
    )


def validate_answers(form: Form, answers: dict[str, Any]) -> list[str]:
    """Validate submitted answers against the form's questions, return list of errors."""
    errors: list[str] = []
    questions = ordered_questions(form)

    known = {str(q.id) for q in questions}
    unknown = [key for key in answers if key not in known]
    if unknown:
        errors.append(f"Unknown question ids: {', '.join(sorted(unknown))}")

    for question in questions:
        errors.extend(_as_definition(question).answer_errors(answers.get(str(question.id))))

    return errors


# ---------------------------------------------------------------------------
# Submission
# ---------------------------------------------------------------------------


def submit_response(
    db: Session,
    form_id: uuid.UUID,
    responder_id: uuid.UUID,
    answers: dict[str, Any],
) -> FormResponse:
    """Record the responder's answers.

    Uniqueness is left to the (form_id, responder_id) primary key: a second
    submission fails at INSERT time and surfaces as ConflictError.
    """
    form = get_form(db, form_id)
    validation_errors = validate_answers(form, answers)
    if validation_errors:
        raise ValidationError(validation_errors)

    now = utcnow()
    try:
        db.execute(
            insert(FormResponse).values(
                form_id=form_id,
                responder_id=responder_id,
                answers=answers,
                submitted_at=now,
                updated_at=now,
            )
        )
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning("Duplicate submission for form %s by %s", form_id, responder_id)
        raise ConflictError("You have already submitted this form") from None

    logger.info("Response recorded for form %s by %s", form_id, responder_id)
    return db.get(FormResponse, (form_id, responder_id), populate_existing=True)


def update_response(
    db: Session,
    form_id: uuid.UUID,
    responder_id: uuid.UUID,
    answers: dict[str, Any],
) -> FormResponse:
    """Overwrite the responder's existing answers."""
    form = get_form(db, form_id)
    response = db.get(FormResponse, (form_id, responder_id))
    if response is None:
        raise NotFoundError("Form submission", (form_id, responder_id))

    validation_errors = validate_answers(form, answers)
    if validation_errors:
        raise ValidationError(validation_errors)

    response.answers = answers
    response.updated_at = utcnow()
    db.commit()
    db.refresh(response)

    logger.info("Response updated for form %s by %s", form_id, responder_id)
    return response


def get_own_responses(
    db: Session,
    form_id: uuid.UUID,
    responder_id: uuid.UUID,
) -> list[FormResponse]:
    return list(
        db.execute(
            select(FormResponse).where(
                FormResponse.form_id == form_id,
                FormResponse.responder_id == responder_id,
            )
        )
        .scalars()
        .all()
    )


# ---------------------------------------------------------------------------
# Responder inbox
# ---------------------------------------------------------------------------


def list_assigned_forms_for_user(db: Session, user_id: uuid.UUID) -> list[dict]:
    """Forms assigned to any of the user's groups, one row per form.

    ``submitted_at`` is the user's own submission time, or None.
    """
    rows = db.execute(
        select(Form.id, Form.title, Form.deadline, FormResponse.submitted_at)
        .select_from(GroupMember)
        .join(FormAssignment, FormAssignment.group_id == GroupMember.group_id)
        .join(Form, Form.id == FormAssignment.form_id)
        .outerjoin(
            FormResponse,
            and_(
                FormResponse.form_id == Form.id,
                FormResponse.responder_id == GroupMember.user_id,
            ),
        )
        .where(GroupMember.user_id == user_id)
        .distinct()
        .order_by(Form.title, Form.id)
    ).all()

    return [
        {
            "form_id": row[0],
            "form_title": row[1],
            "deadline": row[2],
            "submitted_at": row[3],
        }
        for row in rows
    ]


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


def export_responses_csv(db: Session, form_id: uuid.UUID, caller_id: uuid.UUID) -> tuple[str, str]:
    """Render every response to the caller's form as CSV. Returns ``(filename, csv_text)``."""
    form = get_owned_form(db, form_id, caller_id)
    questions = [q for q in ordered_questions(form) if _as_definition(q).answerable]

    rows = db.execute(
        select(FormResponse, User.email)
        .join(User, User.id == FormResponse.responder_id)
        .where(FormResponse.form_id == form_id)
        .order_by(FormResponse.submitted_at.asc())
    ).all()

    output = io.StringIO()
    writer = csv.writer(output)

    # Header row: responder_id, responder_email, Q1 text, Q2 text, ..., submitted_at, updated_at
    header = ["responder_id", "responder_email"]
    for i, q in enumerate(questions):
        header.append(f"Q{i + 1}: {q.question_text}")
    header.extend(["submitted_at", "updated_at"])
    writer.writerow(header)

    for resp, email in rows:
        row = [str(resp.responder_id), email]
        for q in questions:
            answer = resp.answers.get(str(q.id))
            if answer is None:
                row.append("")
            elif isinstance(answer, list):
                row.append("; ".join(str(a) for a in answer))
            else:
                row.append(str(answer))
        row.append(resp.submitted_at.isoformat())
        row.append(resp.updated_at.isoformat())
        writer.writerow(row)

    filename = f"form_{form.title.replace(' ', '_')}_{form_id}.csv"
    return filename, output.getvalue()
