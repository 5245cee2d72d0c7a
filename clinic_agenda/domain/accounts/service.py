"""Account service - self-service signup of a new organization"""

import logging

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import Organization, Profile
from ...services.identity_service import AuthServiceError, IdentityClient
from .schemas import SignupRequest

logger = logging.getLogger(__name__)


class AccountService:
    def __init__(self, db: Session):
        self.db = db

    async def signup(self, data: SignupRequest, identity: IdentityClient) -> dict:
        """
        Create the identity, then the organization and its first admin profile.

        Organization and profile are written in one transaction. A failure
        there is reported but the identity is left in place.
        """
        try:
            user = await identity.create_user(data.email, data.password, metadata={"name": data.userName})
        except AuthServiceError as e:
            raise HTTPException(status_code=e.status_code or 400, detail=e.message) from e

        try:
            organization = Organization(name=data.organizationName, tax_id=data.cnpj)
            self.db.add(organization)
            self.db.flush()

            profile = Profile(
                user_id=user["id"],
                organization_id=organization.id,
                name=data.userName,
                email=data.email,
                role="admin",
            )
            self.db.add(profile)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Signup failed after identity {user['id']} was created: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to create organization: {e}") from e

        logger.info(f"🎉 Organization {organization.id} created by {data.email}")
        return {
            "user": user,
            "organization": {"id": organization.id, "name": organization.name, "cnpj": organization.tax_id},
            "profileId": profile.id,
        }
