from pydantic import BaseModel, Field, field_validator
from typing import Optional

from iwems.models import Identity, Role


class SignInRequest(BaseModel):
    email: str
    password: str = Field(..., min_length=1)


class SignUpRequest(BaseModel):
    email: str
    password: str = Field(..., min_length=6)
    full_name: str
    role: Role = Field(default=Role.COUPLE, description="Initial role picked on the sign-up form")

    @field_validator("full_name")
    @classmethod
    def full_name_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Full name is required")
        return value.strip()

    @field_validator("role")
    @classmethod
    def role_is_self_service(cls, value: Role) -> Role:
        if value == Role.ADMIN:
            raise ValueError("The admin role can only be granted by an administrator")
        return value


class SessionResponse(BaseModel):
    initialized: bool
    identity: Optional[Identity] = None
    redirect_to: Optional[str] = None
    message: Optional[str] = None
