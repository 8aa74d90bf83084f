import uuid

from pydantic import BaseModel, ConfigDict


class PrincipalResponse(BaseModel):
    """The authenticated caller as resolved from the bearer token."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    name: str | None
    role: str
