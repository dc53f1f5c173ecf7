# backend/courtside/api/dependencies/auth.py
"""
Principal dependencies.

Authentication happens upstream: the gateway forwards the authenticated
principal in ``X-Principal-Id`` / ``X-Principal-Role`` and these values are
trusted as-is.
"""

from typing import Optional

from fastapi import Depends, Header, HTTPException, status

from ...core.enums import RoleName
from ...principal import Principal

PRINCIPAL_ID_HEADER = "X-Principal-Id"
PRINCIPAL_ROLE_HEADER = "X-Principal-Role"


def get_current_principal(
    principal_id: Optional[str] = Header(None, alias=PRINCIPAL_ID_HEADER),
    principal_role: Optional[str] = Header(None, alias=PRINCIPAL_ROLE_HEADER),
) -> Principal:
    if not principal_id or not principal_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": "Authentication required", "code": "UNAUTHENTICATED"},
        )
    try:
        role = RoleName((principal_role or RoleName.USER.value).strip().lower())
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": f"Unknown role '{principal_role}'", "code": "UNKNOWN_ROLE"},
        )
    return Principal(id=principal_id.strip(), role=role)


def require_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    if not principal.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"message": "Admin access required", "code": "ADMIN_REQUIRED"},
        )
    return principal
