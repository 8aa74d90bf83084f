import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rollcall.core.database import Base, utcnow


class FormAssignment(Base):
    """Makes a form visible/required for every current member of a group.

    The composite primary key makes (form, group) assignment idempotent.
    """

    __tablename__ = "form_assignments"
    __table_args__ = (Index("ix_form_assignments_group_id", "group_id"),)

    form_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("forms.id", ondelete="CASCADE"), primary_key=True
    )
    group_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("groups.id", ondelete="CASCADE"), primary_key=True
    )
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )

    form: Mapped["Form"] = relationship(back_populates="assignments")
    group: Mapped["Group"] = relationship(back_populates="assignments")

    def __repr__(self) -> str:
        return f"<FormAssignment form={self.form_id} group={self.group_id}>"
