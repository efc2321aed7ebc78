from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Back-office account; plain data, no DB access."""

    user_id: int
    full_name: str
    username: str
    password_hash: str
    role: Role
    is_active: bool = True
