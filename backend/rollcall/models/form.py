import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Index, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rollcall.core.database import Base, utcnow

QUESTION_TYPES = (
    "SHORT_TEXT",
    "LONG_TEXT",
    "MULTIPLE_CHOICE",
    "CHECKBOXES",
    "DROPDOWN",
    "LINEAR_SCALE",
    "DATE",
    "TIME",
    "DATE_TIME",
    "URL",
    "CONTENT_BLOCK",
    "RADIO",
)


class Form(Base):
    """Form definition owned by the user who created it.

    Structure lives in ``form_sections`` / ``form_questions``; ``config`` holds
    display/layout options and ``metadata`` is free-form.
    """

    __tablename__ = "forms"
    __table_args__ = (
        Index("ix_forms_created_by", "created_by"),
        Index("ix_forms_updated_at", "updated_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    config: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    metadata_: Mapped[dict] = mapped_column("metadata", JSONB, nullable=False, default=dict)
    deadline: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    created_by: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow
    )

    owner: Mapped["User"] = relationship(back_populates="forms")
    sections: Mapped[list["FormSection"]] = relationship(
        back_populates="form",
        cascade="all, delete-orphan",
        order_by="FormSection.order",
    )
    assignments: Mapped[list["FormAssignment"]] = relationship(
        back_populates="form", cascade="all, delete-orphan"
    )
    responses: Mapped[list["FormResponse"]] = relationship(
        back_populates="form", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Form {self.title}>"


class FormSection(Base):
    __tablename__ = "form_sections"
    __table_args__ = (
        Index("ix_form_sections_form_id", "form_id"),
        UniqueConstraint("form_id", "order", name="uq_form_sections_form_order"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    form_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("forms.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    config: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    order: Mapped[int] = mapped_column(Integer, nullable=False)

    form: Mapped["Form"] = relationship(back_populates="sections")
    questions: Mapped[list["FormQuestion"]] = relationship(
        back_populates="section",
        cascade="all, delete-orphan",
        order_by="FormQuestion.order",
    )

    def __repr__(self) -> str:
        return f"<FormSection {self.order}: {self.title}>"


class FormQuestion(Base):
    __tablename__ = "form_questions"
    __table_args__ = (
        Index("ix_form_questions_section_id", "section_id"),
        UniqueConstraint("section_id", "order", name="uq_form_questions_section_order"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    section_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("form_sections.id", ondelete="CASCADE"), nullable=False
    )
    question_text: Mapped[str] = mapped_column(Text, nullable=False)
    question_description: Mapped[str | None] = mapped_column(Text)
    type: Mapped[str] = mapped_column(Enum(*QUESTION_TYPES, name="question_type"), nullable=False)
    required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")
    config: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    order: Mapped[int] = mapped_column(Integer, nullable=False)

    section: Mapped["FormSection"] = relationship(back_populates="questions")

    def __repr__(self) -> str:
        return f"<FormQuestion {self.type} {self.order}>"
