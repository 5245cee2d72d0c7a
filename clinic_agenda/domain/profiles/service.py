"""Profile service - Business logic for staff profiles and account provisioning"""

import logging
from typing import Any, Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...auth import TenantContext
from ...models import Appointment, Profile, Unit
from ...services.identity_service import AuthServiceError, IdentityClient
from .repository import ProfileRepository
from .schemas import ProfileCreate, ProfileUpdate, ProfileWithAuthCreate

logger = logging.getLogger(__name__)


class ProfileProvisioningError(Exception):
    """The identity was created but its profile could not be stored"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ProfileService:
    """Service layer for profile business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProfileRepository()

    def _check_unit(self, unit_id: Optional[str], organization_id: str) -> None:
        if not unit_id:
            return
        exists = (
            self.db.query(Unit.id)
            .filter(Unit.id == unit_id, Unit.organization_id == organization_id)
            .first()
        )
        if not exists:
            raise HTTPException(status_code=404, detail="Unit not found")

    def get_profiles(self, context: TenantContext) -> list[Profile]:
        return self.repo.get_profiles(self.db, context.organization_id)

    def get_profile(self, profile_id: str, context: TenantContext) -> Profile:
        profile = self.repo.get_profile(self.db, profile_id, context.organization_id)
        if not profile:
            raise HTTPException(status_code=404, detail="Profile not found")
        return profile

    def create_profile(self, data: ProfileCreate, context: TenantContext) -> Profile:
        self._check_unit(data.defaultUnitId, context.organization_id)
        if self.repo.get_by_email(self.db, data.email, context.organization_id):
            raise HTTPException(status_code=409, detail="A profile with this email already exists")

        return self.repo.create_profile(
            self.db,
            organization_id=context.organization_id,
            name=data.name,
            email=data.email,
            role=data.role,
            default_unit_id=data.defaultUnitId,
        )

    def update_profile(self, profile_id: str, data: ProfileUpdate, context: TenantContext) -> Profile:
        profile = self.get_profile(profile_id, context)
        self._check_unit(data.defaultUnitId, context.organization_id)

        # Only fields present in the request are written
        updates = {}
        if data.name is not None:
            updates["name"] = data.name
        if data.email is not None:
            updates["email"] = data.email
        if data.role is not None:
            updates["role"] = data.role
        if "defaultUnitId" in data.model_fields_set:
            updates["default_unit_id"] = data.defaultUnitId or None

        return self.repo.update_profile(self.db, profile, **updates)

    def delete_profile(self, profile_id: str, context: TenantContext) -> dict:
        profile = self.get_profile(profile_id, context)
        if profile.id == context.profile.id:
            raise HTTPException(status_code=400, detail="You cannot delete your own profile")

        self.db.query(Appointment).filter(Appointment.booked_by_id == profile.id).update(
            {Appointment.booked_by_id: None}, synchronize_session=False
        )
        self.repo.delete_profile(self.db, profile)
        logger.info(f"🗑️ Profile {profile_id} deleted")
        return {"message": "Profile deleted"}

    def switch_unit(self, unit_id: str, context: TenantContext) -> Profile:
        """Make unit_id the unit the caller is working in"""
        self._check_unit(unit_id, context.organization_id)
        profile = context.profile
        profile.current_unit_id = unit_id
        self.db.commit()
        self.db.refresh(profile)
        logger.info(f"🏥 Profile {profile.id} switched to unit {unit_id}")
        return profile

    async def create_with_auth(
        self, data: ProfileWithAuthCreate, context: TenantContext, identity: IdentityClient
    ) -> dict[str, Any]:
        """
        Create the auth identity, then link or insert the profile.

        An existing profile with the same email is updated with the new
        identity; otherwise a profile is inserted. If the profile write fails
        the identity is deleted again so no orphan account remains.

        Raises:
            AuthServiceError: the identity could not be created
            ProfileProvisioningError: the profile could not be stored
        """
        organization_id = data.organizationId or context.organization_id
        if organization_id != context.organization_id:
            raise HTTPException(status_code=403, detail="Cannot create users for another organization")
        self._check_unit(data.defaultUnitId, organization_id)

        user = await identity.create_user(
            data.email,
            data.password,
            metadata={"name": data.name, "organization_id": organization_id},
        )

        try:
            profile = self.repo.get_by_email(self.db, data.email, organization_id)
            if profile:
                logger.info(f"🔗 Linking identity {user['id']} to existing profile {profile.id}")
                profile = self.repo.update_profile(
                    self.db,
                    profile,
                    user_id=user["id"],
                    name=data.name,
                    role=data.role,
                    default_unit_id=data.defaultUnitId or None,
                    organization_id=organization_id,
                )
            else:
                profile = self.repo.create_profile(
                    self.db,
                    user_id=user["id"],
                    name=data.name,
                    email=data.email,
                    role=data.role,
                    organization_id=organization_id,
                    default_unit_id=data.defaultUnitId or None,
                )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Profile write failed, removing identity {user['id']}: {e}")
            try:
                await identity.delete_user(user["id"])
            except AuthServiceError as cleanup_error:
                logger.error(f"❌ Could not remove identity {user['id']}: {cleanup_error.message}")
            raise ProfileProvisioningError(str(e)) from e

        return {"user": user, "profile": profile}
