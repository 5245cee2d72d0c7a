"""Account router - public signup endpoint"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...database import get_db
from ...services.identity_service import IdentityClient, get_identity_client
from .schemas import SignupRequest, SignupResponse
from .service import AccountService

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/signup", response_model=SignupResponse)
async def signup(
    data: SignupRequest,
    db: Session = Depends(get_db),
    identity: IdentityClient = Depends(get_identity_client),
):
    """Register a clinic: login, organization and admin profile"""
    return await AccountService(db).signup(data, identity)
