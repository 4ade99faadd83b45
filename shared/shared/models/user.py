from pydantic import BaseModel, ConfigDict

from shared.constants import STAFF_ROLES, Role


class Viewer(BaseModel):
    """Principal a request is evaluated for; used by all services.

    ``role`` is ``None`` for anonymous browsers. ``tenant_id`` may be ``None``
    when no tenant could be resolved, in which case tenant-scoped reads must
    return nothing for a non-privileged viewer.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    user_id: int | None = None
    role: Role | None = None
    tenant_id: int | None = None
    student_id: int | None = None
    cross_tenant: bool = False

    @property
    def is_anonymous(self) -> bool:
        return self.role is None

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES
