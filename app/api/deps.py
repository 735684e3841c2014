from enum import Enum
from typing import Optional
from uuid import UUID

from fastapi import Header, HTTPException, status
from pydantic import BaseModel


class UserRole(str, Enum):
    OWNER = "OWNER"
    MANAGER = "MANAGER"
    CASHIER = "CASHIER"
    KITCHEN = "KITCHEN"


class Claims(BaseModel):
    """Identity claims verified by the upstream authentication gateway."""
    user_id: UUID
    outlet_id: UUID
    role: UserRole


def get_claims(
    x_user_id: Optional[str] = Header(None),
    x_outlet_id: Optional[str] = Header(None),
    x_user_role: Optional[str] = Header(None),
) -> Claims:
    """Reads the caller's claims from the headers set by the auth gateway."""
    if not x_user_id or not x_outlet_id or not x_user_role:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="not authenticated")
    try:
        return Claims(
            user_id=UUID(x_user_id),
            outlet_id=UUID(x_outlet_id),
            role=UserRole(x_user_role.upper()),
        )
    except ValueError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="invalid identity claims")


def require_outlet_access(claims: Claims, outlet_id: UUID) -> None:
    """OWNER can access any outlet; everyone else only their own."""
    if claims.role == UserRole.OWNER:
        return
    if claims.outlet_id != outlet_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="access denied for this outlet")
