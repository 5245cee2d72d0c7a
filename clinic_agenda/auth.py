import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError
from jose import jwt as jose_jwt
from sqlalchemy.orm import Session, joinedload

from .config import AUTH_JWT_AUDIENCE, AUTH_JWT_SECRET
from .database import get_db
from .models import Profile, Unit

logger = logging.getLogger(__name__)

security = HTTPBearer()

ALGORITHM = "HS256"


def verify_session_token(token: str) -> dict:
    """
    Verify a session token issued by the auth service.

    Tokens are HS256 JWTs signed with the project's JWT secret. Signature,
    audience and expiry are checked; the decoded claims are returned.
    """
    try:
        claims = jose_jwt.decode(
            token, AUTH_JWT_SECRET, algorithms=[ALGORITHM], audience=AUTH_JWT_AUDIENCE
        )
    except ExpiredSignatureError as e:
        raise HTTPException(
            status_code=401,
            detail="Token has expired. Please refresh your session.",
            headers={"X-Token-Expired": "true"},
        ) from e
    except JWTError as e:
        logger.warning(f"⚠️ Session token rejected: {e}")
        raise HTTPException(status_code=401, detail="Invalid authentication token") from e

    if not isinstance(claims, dict) or not claims.get("sub"):
        logger.error("❌ Token missing user ID claim")
        raise HTTPException(status_code=401, detail="Invalid token claims")

    return claims


async def get_current_profile(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> Profile:
    """Resolve the staff profile behind the session token"""
    claims = verify_session_token(credentials.credentials)
    user_id = claims["sub"]

    profile = (
        db.query(Profile)
        .filter(Profile.user_id == user_id)
        .options(joinedload(Profile.current_unit))
        .first()
    )
    if not profile:
        logger.warning(f"⚠️ Authenticated user {user_id} has no profile")
        raise HTTPException(status_code=403, detail="No profile is linked to this account")

    logger.debug(f"✅ Profile authenticated: {profile.email}")
    return profile


@dataclass
class TenantContext:
    """Organization and unit scope of the caller, passed explicitly to services"""

    profile: Profile
    organization_id: str
    unit: Optional[Unit]

    @property
    def unit_id(self) -> Optional[str]:
        return self.unit.id if self.unit else None


def resolve_current_unit(db: Session, profile: Profile) -> Optional[Unit]:
    """
    The unit the profile is working in.

    A profile without a current unit falls back to its default unit, which
    is then recorded as current.
    """
    unit_id = profile.current_unit_id
    if not unit_id and profile.default_unit_id:
        unit_id = profile.default_unit_id
        profile.current_unit_id = unit_id
        db.commit()
        logger.info(f"🏥 Profile {profile.id} now working in default unit {unit_id}")

    if not unit_id:
        return None

    return (
        db.query(Unit)
        .filter(Unit.id == unit_id, Unit.organization_id == profile.organization_id)
        .first()
    )


async def get_tenant_context(
    profile: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
) -> TenantContext:
    return TenantContext(
        profile=profile,
        organization_id=profile.organization_id,
        unit=resolve_current_unit(db, profile),
    )


def require_unit(context: TenantContext) -> Unit:
    """Agenda operations need a selected unit."""
    if context.unit is None:
        raise HTTPException(status_code=400, detail="Select a unit before using the agenda")
    return context.unit
