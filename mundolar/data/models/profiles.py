from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

NotificationType = Literal["task", "quote", "order"]


class Profile(BaseModel):
    """Row of the ``profiles`` table, keyed by the auth user id."""
    id: str = Field(description="Auth user identifier")
    full_name: Optional[str] = Field(default=None, description="Display name")
    email: Optional[str] = Field(default=None, description="Email, duplicated from auth for easier access")
    role: Optional[str] = Field(default=None, description="Portal role, e.g. Admin")
    force_password_change: bool = Field(default=False, description="Ask for a new password on first login")


class Notification(BaseModel):
    """Row of the ``notifications`` table."""
    user_id: str = Field(description="Recipient profile id")
    title: str = Field(description="Short title")
    message: str = Field(description="Notification body")
    type: NotificationType = Field(description="What the notification is about")
    related_id: Optional[str] = Field(default=None, description="Identifier of the related task, quote or order")
    is_read: bool = Field(default=False, description="Read flag")
