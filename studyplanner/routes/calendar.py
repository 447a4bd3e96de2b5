"""
캘린더 내보내기 API 라우트
"""

from typing import Optional

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from studyplanner.calendar_export import (
    generate_ics,
    google_calendar_url,
    outlook_calendar_url,
    session_filename,
)
from studyplanner.models.database import get_session, get_user_sessions

router = APIRouter()

ICS_MEDIA_TYPE = "text/calendar; charset=utf-8"


def _ics_response(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=ICS_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/calendar/{user_id}/export.ics")
def export_sessions(user_id: str, completed: Optional[bool] = None):
    """세션 전체를 .ics 파일로 내보내기"""
    try:
        sessions = get_user_sessions(user_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

    if completed is not None:
        sessions = [s for s in sessions if s.completed == completed]
    return _ics_response(generate_ics(sessions), "study-sessions.ics")


def _session_or_404(user_id: str, session_id: str):
    try:
        session = get_session(user_id, session_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
    if session is None:
        raise HTTPException(status_code=404, detail="세션을 찾을 수 없습니다.")
    return session


@router.get("/calendar/{user_id}/{session_id}/export.ics")
def export_single_session(user_id: str, session_id: str):
    """세션 하나를 .ics 파일로 내보내기"""
    session = _session_or_404(user_id, session_id)
    return _ics_response(generate_ics([session]), session_filename(session))


@router.get("/calendar/{user_id}/{session_id}/links")
def calendar_links(user_id: str, session_id: str):
    """Google / Outlook 캘린더 추가 링크"""
    session = _session_or_404(user_id, session_id)
    return {
        "google": google_calendar_url(session),
        "outlook": outlook_calendar_url(session),
    }
