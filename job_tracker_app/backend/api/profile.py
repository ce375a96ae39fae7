import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from .. import schemas
from ..models.db import crud
from ..models.db.database import get_db
from ..services.validation import validate_profile_field
from .auth import get_current_active_user

logger = logging.getLogger(__name__)
router = APIRouter()

PROFILE_LABELS = {
    "full_name": "Full name",
    "university": "University",
    "major": "Major",
}


def _profile_response(profile, user) -> schemas.UserProfile:
    return schemas.UserProfile(
        id=user.id,
        email=user.email,
        full_name=profile.full_name,
        university=profile.university,
        major=profile.major,
    )


@router.get("/", response_model=schemas.UserProfile)
def read_profile(
    db: Session = Depends(get_db),
    current_user: schemas.User = Depends(get_current_active_user),
):
    """
    The current user's profile. An empty profile is created on first access.
    """
    return _profile_response(crud.get_or_create_profile(db, current_user.id), current_user)


@router.put("/", response_model=schemas.UserProfile)
def update_profile(
    updates: schemas.UserProfileUpdate,
    db: Session = Depends(get_db),
    current_user: schemas.User = Depends(get_current_active_user),
):
    """
    Update only the profile fields present in the request body.
    """
    values = updates.model_dump(exclude_unset=True)
    for field, value in values.items():
        result = validate_profile_field(value, PROFILE_LABELS[field])
        if not result:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.error)

    profile = crud.update_profile(db, current_user.id, values)
    logger.info("User %s updated profile (%s)", current_user.id, ", ".join(sorted(values)) or "no fields")
    return _profile_response(profile, current_user)
