"""
Per-user notification switches and display preferences.
"""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import schemas
from ..models.db import crud
from ..models.db.database import get_db
from .auth import get_current_active_user

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=schemas.UserSettings)
def read_user_settings(
    db: Session = Depends(get_db),
    current_user: schemas.User = Depends(get_current_active_user),
):
    """
    Saved settings with defaults filled in for anything never set.
    """
    return crud.get_user_settings(db, current_user.id)


@router.put("/notifications", response_model=schemas.UserSettings)
def update_notifications(
    notifications: schemas.NotificationSettings,
    db: Session = Depends(get_db),
    current_user: schemas.User = Depends(get_current_active_user),
):
    """
    Replace the notification switches; display preferences are kept.
    """
    logger.info("User %s updated notification settings", current_user.id)
    return crud.update_notification_settings(db, current_user.id, notifications)


@router.put("/preferences", response_model=schemas.UserSettings)
def update_preferences(
    preferences: schemas.DisplayPreferences,
    db: Session = Depends(get_db),
    current_user: schemas.User = Depends(get_current_active_user),
):
    """
    Replace the display preferences; notification switches are kept.
    """
    logger.info("User %s updated display preferences", current_user.id)
    return crud.update_display_preferences(db, current_user.id, preferences)
