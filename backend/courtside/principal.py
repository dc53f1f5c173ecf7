"""Authenticated principal attached to every booking request."""

from dataclasses import dataclass

from .core.enums import RoleName


@dataclass(frozen=True)
class Principal:
    id: str
    role: RoleName = RoleName.USER

    @property
    def is_admin(self) -> bool:
        return self.role == RoleName.ADMIN
