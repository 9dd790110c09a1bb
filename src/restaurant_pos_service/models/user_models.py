"""Staff user models."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from restaurant_pos_service.models.common import CAMEL_CASE_CONFIG, to_iso


class UserRole(str, Enum):
    """Staff roles. Admins may log in under any role."""

    BAR = "bar"
    KITCHEN = "kitchen"
    ADMIN = "admin"


class User(BaseModel):
    """Staff account.

    The password digest is stored under ``password`` and never serialized by
    ``public_view``.
    """

    model_config = CAMEL_CASE_CONFIG

    user_id: str = Field(..., description="USER-<epoch millis>-<suffix>")
    username: str = Field(..., description="Lowercased login name")
    password_hash: str = Field(..., alias="password", description="SHA-256 hex digest")
    name: str = Field(..., description="Display name")
    role: UserRole
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def public_view(self) -> dict[str, Any]:
        """Serialize for API responses, without the password digest."""
        return self.model_dump(by_alias=True, exclude={"password_hash"})

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        Returns:
            dict: DynamoDB-compatible representation
        """
        item: dict[str, Any] = {
            "userId": self.user_id,
            "username": self.username,
            "password": self.password_hash,
            "name": self.name,
            "role": self.role.value,
            "isActive": self.is_active,
        }

        if self.created_at is not None:
            item["createdAt"] = to_iso(self.created_at)

        if self.updated_at is not None:
            item["updatedAt"] = to_iso(self.updated_at)

        return item

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "User":
        """Create User from DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            User: Parsed model instance
        """
        data: dict[str, Any] = {
            "user_id": item["userId"],
            "username": item["username"],
            "password_hash": item["password"],
            "name": item.get("name", ""),
            "role": UserRole(item["role"]),
            "is_active": bool(item.get("isActive", True)),
        }

        if item.get("createdAt"):
            data["created_at"] = datetime.fromisoformat(item["createdAt"])

        if item.get("updatedAt"):
            data["updated_at"] = datetime.fromisoformat(item["updatedAt"])

        return cls(**data)


class UserPatch(BaseModel):
    """Partial update for a user. ``password`` is plaintext and gets re-hashed."""

    model_config = ConfigDict(**CAMEL_CASE_CONFIG, extra="forbid")

    name: str | None = None
    role: UserRole | None = None
    is_active: bool | None = None
    password: str | None = Field(None, min_length=1)
