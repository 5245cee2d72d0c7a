"""Profile repository - Database operations for staff profiles"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Profile


class ProfileRepository:
    """Repository for profile database operations"""

    @staticmethod
    def get_profiles(db: Session, organization_id: str) -> list[Profile]:
        return (
            db.query(Profile)
            .options(joinedload(Profile.default_unit))
            .filter(Profile.organization_id == organization_id)
            .order_by(Profile.name.asc())
            .all()
        )

    @staticmethod
    def get_profile(db: Session, profile_id: str, organization_id: str) -> Optional[Profile]:
        return (
            db.query(Profile)
            .options(joinedload(Profile.default_unit))
            .filter(Profile.id == profile_id, Profile.organization_id == organization_id)
            .first()
        )

    @staticmethod
    def get_by_email(db: Session, email: str, organization_id: str) -> Optional[Profile]:
        return (
            db.query(Profile)
            .filter(Profile.email == email, Profile.organization_id == organization_id)
            .first()
        )

    @staticmethod
    def create_profile(db: Session, **profile_data) -> Profile:
        profile = Profile(**profile_data)
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return profile

    @staticmethod
    def update_profile(db: Session, profile: Profile, **updates) -> Profile:
        for key, value in updates.items():
            if hasattr(profile, key):
                setattr(profile, key, value)

        db.commit()
        db.refresh(profile)
        return profile

    @staticmethod
    def delete_profile(db: Session, profile: Profile) -> None:
        db.delete(profile)
        db.commit()
