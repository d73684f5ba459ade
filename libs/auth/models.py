from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AuthUser(BaseModel):
    """
    Authenticated caller decoded from the bearer token.
    """

    model_config = ConfigDict(populate_by_name=True)

    user_id: int = Field(..., alias="sub")
    email: Optional[str] = None
    role: str
