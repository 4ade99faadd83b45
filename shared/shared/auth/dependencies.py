import logging

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from shared.auth.config import AuthSettings, get_auth_settings
from shared.constants import Role
from shared.models.user import Viewer

logger = logging.getLogger(__name__)

http_bearer = HTTPBearer(auto_error=False)

TENANT_HEADER = "X-Tenant-ID"


def _decode_token(token: str, settings: AuthSettings) -> dict:
    payload = jwt.decode(
        token,
        settings.secret,
        algorithms=[settings.algorithm],
        issuer=settings.issuer,
        audience=settings.audience,
    )
    return payload


def _payload_to_viewer(payload: dict) -> Viewer:
    sub = payload.get("sub")
    if not sub:
        raise ValueError("Missing sub in token")
    role = Role(payload["role"])
    tenant_raw = payload.get("tenant_id")
    tenant_id = int(tenant_raw) if tenant_raw is not None else None

    student_raw = payload.get("student_id")
    if student_raw is None and role == Role.STUDENT:
        student_raw = sub
    student_id = int(student_raw) if student_raw is not None else None

    # Only super admins span tenants; the claim can opt them out, never in.
    cross_tenant = role == Role.SUPER_ADMIN and payload.get("cross_tenant", True) is not False
    return Viewer(
        user_id=int(sub),
        role=role,
        tenant_id=tenant_id,
        student_id=student_id,
        cross_tenant=cross_tenant,
    )


def parse_tenant_header(raw: str | None) -> int | None:
    if raw is None or not raw.strip():
        return None
    try:
        tenant_id = int(raw)
    except ValueError:
        logger.warning("Ignoring malformed %s header: %r", TENANT_HEADER, raw)
        return None
    if tenant_id <= 0:
        logger.warning("Ignoring non-positive %s header: %r", TENANT_HEADER, raw)
        return None
    return tenant_id


async def get_authenticated_viewer(
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
    settings: AuthSettings = Depends(get_auth_settings),
) -> Viewer | None:
    if not credentials or not credentials.credentials:
        return None
    try:
        payload = _decode_token(credentials.credentials, settings)
        return _payload_to_viewer(payload)
    except (JWTError, ValueError, KeyError, TypeError):
        return None


async def get_viewer(
    user: Viewer | None = Depends(get_authenticated_viewer),
    x_tenant_id: str | None = Header(default=None, alias=TENANT_HEADER),
) -> Viewer:
    """Resolve the request principal; anonymous browsers name their tenant by header."""
    header_tenant = parse_tenant_header(x_tenant_id)
    if user is None:
        return Viewer(tenant_id=header_tenant)
    if header_tenant is None or header_tenant == user.tenant_id:
        return user
    if user.cross_tenant:
        return user.model_copy(update={"tenant_id": header_tenant, "cross_tenant": False})
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="Cross-tenant access is not allowed",
    )


async def get_viewer_required(viewer: Viewer = Depends(get_viewer)) -> Viewer:
    if viewer.is_anonymous:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return viewer
