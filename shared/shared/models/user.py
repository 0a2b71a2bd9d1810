from pydantic import BaseModel, ConfigDict, Field

from shared.constants import Role


class CurrentUser(BaseModel):
    """Caller context from JWT; used by all services.

    ``id`` is the identity-provider subject string, not a database key.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(min_length=1, max_length=100)
    email: str = ""
    roles: list[Role] = Field(default_factory=list)
