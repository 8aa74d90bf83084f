import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, String, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rollcall.core.database import Base, utcnow

USER_ROLES = ("USER", "ADMIN", "DEV")


class User(Base):
    """A person known to the identity provider.

    Rows are provisioned by the identity side; the forms core only references
    them as owners, group members and responders.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str | None] = mapped_column(String(255))
    email: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False, index=True
    )
    role: Mapped[str] = mapped_column(
        Enum(*USER_ROLES, name="user_role"),
        nullable=False,
        default="USER",
        server_default="USER",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )

    forms: Mapped[list["Form"]] = relationship(back_populates="owner")
    memberships: Mapped[list["GroupMember"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<User {self.email}>"
