from pydantic import BaseModel, Field
from typing import Literal, Optional

from iwems.models import ApprovalStatus, Role


class ApprovalUpdate(BaseModel):
    status: ApprovalStatus
    rejection_reason: Optional[str] = Field(default=None, description="Required when status is 'rejected'")


class RoleChange(BaseModel):
    user_id: str
    role: Role
    action: Literal["add", "remove"]
