from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from . import user as model
from . import preferences as preferences_model
from . import profile as profile_model
from ... import schemas

PROFILE_FIELDS = ("full_name", "university", "major")


def get_user_by_email(db: Session, email: str):
    return db.query(model.User).filter(model.User.email == email).first()


def create_user(db: Session, user: schemas.UserCreate, hashed_password: str):
    db_user = model.User(email=user.email, hashed_password=hashed_password)
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


# Profiles

def get_or_create_profile(db: Session, user_id: int) -> profile_model.UserProfile:
    profile = db.get(profile_model.UserProfile, user_id)
    if profile is None:
        profile = profile_model.UserProfile(user_id=user_id)
        db.add(profile)
        db.commit()
        db.refresh(profile)
    return profile


def update_profile(db: Session, user_id: int, updates: Dict[str, Any]) -> profile_model.UserProfile:
    profile = get_or_create_profile(db, user_id)
    for key, value in updates.items():
        if key in PROFILE_FIELDS:
            setattr(profile, key, value or None)
    db.commit()
    db.refresh(profile)
    return profile


# Board column titles

def get_column_titles(db: Session, user_id: int) -> dict:
    prefs = db.get(preferences_model.UserPreferences, user_id)
    if prefs is None or not prefs.column_titles:
        return {}
    return dict(prefs.column_titles)


def set_column_title(db: Session, user_id: int, status: str, title: str) -> dict:
    prefs: Optional[preferences_model.UserPreferences] = db.get(preferences_model.UserPreferences, user_id)
    if prefs is None:
        prefs = preferences_model.UserPreferences(user_id=user_id, column_titles={})
        db.add(prefs)
    # Reassign so the JSON column is flagged dirty
    prefs.column_titles = {**(prefs.column_titles or {}), status: title}
    db.commit()
    db.refresh(prefs)
    return dict(prefs.column_titles)


# Notification and display settings

def _with_defaults(stored: Optional[dict], defaults: dict) -> dict:
    # Missing or null keys fall back to the default
    return {**defaults, **{k: v for k, v in (stored or {}).items() if k in defaults and v is not None}}


def get_user_settings(db: Session, user_id: int) -> schemas.UserSettings:
    """Load settings with defaults filled in, creating the row on first access."""
    defaults = schemas.UserSettings()
    row = db.get(preferences_model.UserSettings, user_id)
    if row is None:
        db.add(preferences_model.UserSettings(
            user_id=user_id,
            notifications=defaults.notifications.model_dump(by_alias=True),
            preferences=defaults.preferences.model_dump(by_alias=True, mode="json"),
        ))
        db.commit()
        return defaults

    return schemas.UserSettings(
        notifications=_with_defaults(row.notifications, defaults.notifications.model_dump(by_alias=True)),
        preferences=_with_defaults(row.preferences, defaults.preferences.model_dump(by_alias=True, mode="json")),
    )


def _upsert_settings(db: Session, user_id: int, **values: dict) -> schemas.UserSettings:
    current = get_user_settings(db, user_id)
    row = db.get(preferences_model.UserSettings, user_id)
    row.notifications = values.get("notifications", current.notifications.model_dump(by_alias=True))
    row.preferences = values.get("preferences", current.preferences.model_dump(by_alias=True, mode="json"))
    db.commit()
    return get_user_settings(db, user_id)


def update_notification_settings(
    db: Session, user_id: int, notifications: schemas.NotificationSettings
) -> schemas.UserSettings:
    return _upsert_settings(db, user_id, notifications=notifications.model_dump(by_alias=True))


def update_display_preferences(
    db: Session, user_id: int, preferences: schemas.DisplayPreferences
) -> schemas.UserSettings:
    return _upsert_settings(db, user_id, preferences=preferences.model_dump(by_alias=True, mode="json"))
