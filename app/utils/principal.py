from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class Principal:
    """Authenticated caller, resolved once per request by the auth dependency."""

    id: str
    email: str = ""
    display_name: Optional[str] = None
    photo_url: Optional[str] = None
    roles: Tuple[str, ...] = field(default_factory=tuple)

    def has_role(self, role: str) -> bool:
        return role in self.roles

    @property
    def is_admin(self) -> bool:
        return self.has_role("admin")
