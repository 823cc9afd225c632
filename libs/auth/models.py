from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class AuthUser(BaseModel):
    """
    Identity carried by the bearer token of an admin session.
    """

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="sub")
    email: Optional[EmailStr] = None
    role: str = "authenticated"
    store_ids: list[str] = Field(default_factory=list)

    @property
    def is_admin(self) -> bool:
        return self.role in ("admin", "service_role")
