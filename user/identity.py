from dataclasses import dataclass
from typing import Optional

from user.models import Role


@dataclass(frozen=True)
class Identity:
    """The authenticated caller, resolved once per request."""
    id: int
    email: str
    role: str

    @property
    def is_read_only(self) -> bool:
        return self.role == Role.READ_ONLY


def resolve_identity(user) -> Optional[Identity]:
    """
    Turn the DRF-authenticated user into an Identity.

    Anonymous or inactive users resolve to None. Users without a profile
    (e.g. created through createsuperuser) get the default EDITOR role.
    """
    if user is None or not user.is_authenticated or not user.is_active:
        return None

    profile = getattr(user, 'profile', None)
    role = profile.role if profile is not None else Role.EDITOR
    return Identity(id=user.id, email=user.email, role=role)
