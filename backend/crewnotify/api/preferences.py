"""
API endpoints для настроек уведомлений.
"""
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from crewnotify.core.database import get_db
from crewnotify.core.security import verify_api_key, get_current_user_id
from crewnotify.schemas.preference import PreferenceResponse, PreferenceUpdate
from crewnotify.services.preference_service import PreferenceService

router = APIRouter(
    prefix="/preferences",
    tags=["preferences"],
    dependencies=[Depends(verify_api_key)],
)


@router.get("", response_model=Optional[PreferenceResponse])
def get_preferences(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Настройки текущего пользователя; null: пользователь их не сохранял (всё включено)."""
    pref = PreferenceService(db).get(user_id)
    return PreferenceResponse.model_validate(pref) if pref else None


@router.patch("", response_model=PreferenceResponse)
def update_preferences(
    data: PreferenceUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Сохранить настройки (создаются при первом сохранении)."""
    pref = PreferenceService(db).update(user_id, data)
    return PreferenceResponse.model_validate(pref)
