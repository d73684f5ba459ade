from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    email: str
    role: str
    title: Optional[str] = None
    trainee_id: Optional[str] = None
    profile_picture: Optional[str] = None
    created_at: Optional[datetime] = None


class UserCreate(BaseModel):
    # Required fields are validated by the service so the error names them.
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None
    title: Optional[str] = None


class UserCreatedResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    user: UserResponse
    email_sent: bool = Field(alias="emailSent")


class PasswordResetRequest(BaseModel):
    email: Optional[str] = None
    new_password: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("new_password", "newPassword")
    )


class PasswordResetResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    email_sent: bool = Field(alias="emailSent")


class ProfileUpdateResponse(BaseModel):
    message: str
    user: UserResponse


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class LoginResponse(BaseModel):
    message: str
    user: UserResponse
    token: str
