# ruff: noqa: TC003
from __future__ import annotations

import uuid
from typing import Literal

from pydantic import BaseModel

Role = Literal["employee", "supervisor", "rrhh", "admin"]


class AuthContext(BaseModel):
    """Dev auth context extracted from request headers."""

    company_id: uuid.UUID
    user_id: uuid.UUID
    role: Role = "employee"

    def has_role(self, *roles: Role) -> bool:
        """Admins pass every role check."""
        return self.role == "admin" or self.role in roles
