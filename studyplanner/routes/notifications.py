"""
알림 관련 API 라우트
"""

from typing import List

from fastapi import APIRouter, HTTPException, Query

from studyplanner.models.database import (
    get_notification_settings,
    get_user_sessions,
    save_notification_settings,
)
from studyplanner.models.study_session import NotificationSettings
from studyplanner.notifications import daily_summary, due_reminders

router = APIRouter()


@router.get("/notifications/{user_id}/settings", response_model=NotificationSettings)
def read_settings(user_id: str):
    """알림 설정 조회"""
    try:
        return get_notification_settings(user_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/notifications/{user_id}/settings", response_model=NotificationSettings)
def write_settings(user_id: str, settings: NotificationSettings):
    """알림 설정 저장"""
    try:
        return save_notification_settings(user_id, settings)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/notifications/{user_id}/due")
def get_due_notifications(user_id: str, notified: List[str] = Query(default=[])):
    """지금 보내야 할 알림 (세션 리마인더 + 하루 요약)

    Args:
        notified: 이미 알림을 보낸 세션 id 목록
    """
    try:
        settings = get_notification_settings(user_id)
        sessions = get_user_sessions(user_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

    return {
        "reminders": due_reminders(sessions, settings, notified=notified),
        "daily_summary": daily_summary(sessions, settings),
    }
