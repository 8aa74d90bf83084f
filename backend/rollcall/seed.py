"""Seed the database with sample users, a group and a form for local development."""

from rollcall.core.database import SessionLocal
from rollcall.models import Form, FormQuestion, FormSection, Group, GroupMember, User
from rollcall.services.auth import create_access_token

SEED_USERS = [
    {"name": "Asha Instructor", "email": "instructor@example.com", "role": "ADMIN"},
    {"name": "Bikash Student", "email": "bikash@example.com", "role": "USER"},
    {"name": "Chandra Student", "email": "chandra@example.com", "role": "USER"},
    {"name": "Dipa Student", "email": "dipa@example.com", "role": "USER"},
]

SEED_QUESTIONS = [
    {
        "question_text": "Which topic was hardest?",
        "type": "MULTIPLE_CHOICE",
        "required": True,
        "config": {
            "options": [
                {"label": "Recursion", "value": "recursion"},
                {"label": "Pointers", "value": "pointers"},
                {"label": "Sorting", "value": "sorting"},
            ]
        },
    },
    {
        "question_text": "How confident do you feel?",
        "type": "LINEAR_SCALE",
        "required": True,
        "config": {"min": 1, "max": 5, "step": 1, "min_label": "Not at all", "max_label": "Very"},
    },
    {
        "question_text": "Anything else?",
        "type": "LONG_TEXT",
        "required": False,
        "config": {},
    },
]


def seed() -> list[User]:
    """Insert seed users, a class group and a quiz. Returns created users."""
    db = SessionLocal()
    try:
        users = [User(**data) for data in SEED_USERS]
        db.add_all(users)
        db.flush()

        owner, *students = users
        group = Group(name="Class A", description="Seed group", created_by=owner.id, size=len(students))
        db.add(group)
        db.flush()
        db.add_all(GroupMember(group_id=group.id, user_id=s.id) for s in students)

        form = Form(title="Quiz 1", description="Weekly check-in", created_by=owner.id)
        section = FormSection(title="Week 1", order=1)
        for index, data in enumerate(SEED_QUESTIONS):
            section.questions.append(FormQuestion(order=index + 1, **data))
        form.sections.append(section)
        db.add(form)

        db.commit()
        for u in users:
            db.refresh(u)
        return users
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    users = seed()
    for u in users:
        print(f"Created: {u.email} (id={u.id}, role={u.role})")
        print(f"  token: {create_access_token(u.id)}")
    print(f"\nSeeded {len(users)} users.")
