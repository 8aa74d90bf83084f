"""create users, forms, sections, questions, groups, assignments and responses

Revision ID: c1d2e3f4a5b6
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "c1d2e3f4a5b6"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

USER_ROLES = ("USER", "ADMIN", "DEV")
GROUP_ROLES = ("MEMBER", "MODERATOR", "ADMIN")
QUESTION_TYPES = (
    "SHORT_TEXT", "LONG_TEXT", "MULTIPLE_CHOICE", "CHECKBOXES", "DROPDOWN",
    "LINEAR_SCALE", "DATE", "TIME", "DATE_TIME", "URL", "CONTENT_BLOCK", "RADIO",
)


def _timestamp(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        server_default=sa.text("now()"),
        nullable=False,
    )


def upgrade() -> None:
    user_role = postgresql.ENUM(*USER_ROLES, name="user_role", create_type=False)
    group_role = postgresql.ENUM(*GROUP_ROLES, name="group_role", create_type=False)
    question_type = postgresql.ENUM(*QUESTION_TYPES, name="question_type", create_type=False)
    user_role.create(op.get_bind(), checkfirst=True)
    group_role.create(op.get_bind(), checkfirst=True)
    question_type.create(op.get_bind(), checkfirst=True)

    # users
    op.create_table(
        "users",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("role", user_role, server_default="USER", nullable=False),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # forms
    op.create_table(
        "forms",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("config", postgresql.JSONB(), nullable=False),
        sa.Column("metadata", postgresql.JSONB(), nullable=False),
        sa.Column("deadline", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_by", sa.UUID(), nullable=False),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_forms_created_by", "forms", ["created_by"], unique=False)
    op.create_index("ix_forms_updated_at", "forms", ["updated_at"], unique=False)

    # form_sections
    op.create_table(
        "form_sections",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("form_id", sa.UUID(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("config", postgresql.JSONB(), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["form_id"], ["forms.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("form_id", "order", name="uq_form_sections_form_order"),
    )
    op.create_index("ix_form_sections_form_id", "form_sections", ["form_id"], unique=False)

    # form_questions
    op.create_table(
        "form_questions",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("section_id", sa.UUID(), nullable=False),
        sa.Column("question_text", sa.Text(), nullable=False),
        sa.Column("question_description", sa.Text(), nullable=True),
        sa.Column("type", question_type, nullable=False),
        sa.Column("required", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("config", postgresql.JSONB(), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["section_id"], ["form_sections.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("section_id", "order", name="uq_form_questions_section_order"),
    )
    op.create_index("ix_form_questions_section_id", "form_questions", ["section_id"], unique=False)

    # groups
    op.create_table(
        "groups",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_by", sa.UUID(), nullable=False),
        sa.Column("size", sa.Integer(), server_default="0", nullable=False),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_groups_name", "groups", ["name"], unique=False)

    # group_members
    op.create_table(
        "group_members",
        sa.Column("group_id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("role", group_role, server_default="MEMBER", nullable=False),
        _timestamp("joined_at"),
        _timestamp("updated_at"),
        sa.ForeignKeyConstraint(["group_id"], ["groups.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("group_id", "user_id"),
    )
    op.create_index("ix_group_members_user_id", "group_members", ["user_id"], unique=False)
    op.create_index("ix_group_members_group_id", "group_members", ["group_id"], unique=False)

    # form_assignments
    op.create_table(
        "form_assignments",
        sa.Column("form_id", sa.UUID(), nullable=False),
        sa.Column("group_id", sa.UUID(), nullable=False),
        _timestamp("assigned_at"),
        sa.ForeignKeyConstraint(["form_id"], ["forms.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["group_id"], ["groups.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("form_id", "group_id"),
    )
    op.create_index("ix_form_assignments_group_id", "form_assignments", ["group_id"], unique=False)

    # form_responses: the primary key is the one-response-per-user guarantee
    op.create_table(
        "form_responses",
        sa.Column("form_id", sa.UUID(), nullable=False),
        sa.Column("responder_id", sa.UUID(), nullable=False),
        sa.Column("answers", postgresql.JSONB(), nullable=False),
        _timestamp("submitted_at"),
        _timestamp("updated_at"),
        sa.ForeignKeyConstraint(["form_id"], ["forms.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["responder_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("form_id", "responder_id"),
    )
    op.create_index("ix_form_responses_responder_id", "form_responses", ["responder_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_form_responses_responder_id", table_name="form_responses")
    op.drop_table("form_responses")

    op.drop_index("ix_form_assignments_group_id", table_name="form_assignments")
    op.drop_table("form_assignments")

    op.drop_index("ix_group_members_group_id", table_name="group_members")
    op.drop_index("ix_group_members_user_id", table_name="group_members")
    op.drop_table("group_members")

    op.drop_index("ix_groups_name", table_name="groups")
    op.drop_table("groups")

    op.drop_index("ix_form_questions_section_id", table_name="form_questions")
    op.drop_table("form_questions")

    op.drop_index("ix_form_sections_form_id", table_name="form_sections")
    op.drop_table("form_sections")

    op.drop_index("ix_forms_updated_at", table_name="forms")
    op.drop_index("ix_forms_created_by", table_name="forms")
    op.drop_table("forms")

    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")

    op.execute("DROP TYPE IF EXISTS question_type")
    op.execute("DROP TYPE IF EXISTS group_role")
    op.execute("DROP TYPE IF EXISTS user_role")
