from dataclasses import dataclass
from enum import Enum
from typing import Optional

from rest_framework.exceptions import NotAuthenticated, PermissionDenied
from rest_framework.permissions import BasePermission

from user.identity import Identity, resolve_identity


class Operation(str, Enum):
    READ = 'read'
    CREATE = 'create'
    UPDATE = 'update'
    DELETE = 'delete'

    @property
    def is_write(self) -> bool:
        return self is not Operation.READ


class DenyReason(str, Enum):
    UNAUTHENTICATED = 'unauthenticated'
    READ_ONLY = 'read-only role'
    NOT_OWNER = 'not owner'


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: Optional[DenyReason] = None

    def __bool__(self):
        return self.allowed

    def to_exception(self, message=None):
        """The DRF exception a denied decision surfaces as (401 or 403)."""
        if self.reason is DenyReason.UNAUTHENTICATED:
            return NotAuthenticated()
        return PermissionDenied(message or f"Forbidden: {self.reason.value}")


ALLOW = Decision(True)


def authorize(identity: Optional[Identity], owner_id, operation: Operation) -> Decision:
    """
    Decide whether ``identity`` may perform ``operation``.

    ``owner_id`` is the owner of the targeted project (for tasks, the parent
    project's owner), or None when there is no existing resource to own, as
    with project creation. Reads only require authentication.
    """
    if identity is None:
        return Decision(False, DenyReason.UNAUTHENTICATED)

    if not operation.is_write:
        return ALLOW

    if identity.is_read_only:
        return Decision(False, DenyReason.READ_ONLY)

    if owner_id is not None and owner_id != identity.id:
        return Decision(False, DenyReason.NOT_OWNER)

    return ALLOW


class ProjectAccessPermission(BasePermission):
    """
    DRF adapter for ``authorize`` on the read paths.

    Writes are gated inside the mutation pipeline, where the owner of the
    target is known; here only rule 1 (authentication) can apply.
    """

    def has_permission(self, request, view):
        decision = authorize(resolve_identity(request.user), None, Operation.READ)
        return decision.allowed
