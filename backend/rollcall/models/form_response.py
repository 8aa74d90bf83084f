import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, func
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rollcall.core.database import Base, utcnow


class FormResponse(Base):
    """A responder's answers to a form.

    The primary key (form_id, responder_id) is the storage-level guarantee
    that a user submits a given form at most once. ``answers`` maps question
    id (as string) to the answer value:
        {
            "8d0f...": "Option A",        # MULTIPLE_CHOICE / RADIO / DROPDOWN
            "1b2c...": ["a", "c"],        # CHECKBOXES
            "77aa...": 4,                 # LINEAR_SCALE
            "e3f1...": "2026-03-01"       # DATE
        }
    """

    __tablename__ = "form_responses"
    __table_args__ = (Index("ix_form_responses_responder_id", "responder_id"),)

    form_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("forms.id", ondelete="CASCADE"), primary_key=True
    )
    responder_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    answers: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )

    form: Mapped["Form"] = relationship(back_populates="responses")
    responder: Mapped["User"] = relationship()

    def __repr__(self) -> str:
        return f"<FormResponse form={self.form_id} responder={self.responder_id}>"
