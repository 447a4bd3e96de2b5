"""
공부 세션 관련 API 라우트
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, HTTPException

from studyplanner.models.database import (
    create_session,
    delete_session,
    get_session,
    get_user_sessions,
    mark_session_completed,
    update_session,
)
from studyplanner.models.study_session import (
    StudySession,
    StudySessionCreate,
    StudySessionUpdate,
)

router = APIRouter()


def _parse_date(value: Optional[str], name: str) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"{name} 형식이 올바르지 않습니다: {value}")


@router.get("/sessions/{user_id}", response_model=List[StudySession])
def get_sessions(
    user_id: str,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    completed: Optional[bool] = None,
    limit: int = 100
):
    """사용자의 공부 세션 목록 조회"""
    start = _parse_date(start_date, "start_date")
    end = _parse_date(end_date, "end_date")

    try:
        sessions = get_user_sessions(user_id, start, end)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

    if completed is not None:
        sessions = [s for s in sessions if s.completed == completed]
    return sessions[:limit]


@router.post("/sessions/{user_id}", response_model=StudySession, status_code=201)
def add_session(user_id: str, payload: StudySessionCreate):
    """세션 생성"""
    try:
        return create_session(user_id, payload)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


def _get_or_404(user_id: str, session_id: str) -> StudySession:
    try:
        session = get_session(user_id, session_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
    if session is None:
        raise HTTPException(status_code=404, detail="세션을 찾을 수 없습니다.")
    return session


@router.get("/sessions/{user_id}/{session_id}", response_model=StudySession)
def get_single_session(user_id: str, session_id: str):
    """세션 하나 조회"""
    return _get_or_404(user_id, session_id)


@router.put("/sessions/{user_id}/{session_id}", response_model=StudySession)
def edit_session(user_id: str, session_id: str, payload: StudySessionUpdate):
    """세션 수정"""
    try:
        session = update_session(user_id, session_id, payload)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
    if session is None:
        raise HTTPException(status_code=404, detail="세션을 찾을 수 없습니다.")
    return session


@router.delete("/sessions/{user_id}/{session_id}", status_code=204)
def remove_session(user_id: str, session_id: str):
    """세션 삭제"""
    try:
        deleted = delete_session(user_id, session_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
    if not deleted:
        raise HTTPException(status_code=404, detail="세션을 찾을 수 없습니다.")


@router.post("/sessions/{user_id}/{session_id}/complete", response_model=StudySession)
def complete_session(user_id: str, session_id: str):
    """세션 완료 처리"""
    session = _get_or_404(user_id, session_id)
    if session.completed:
        return session

    try:
        updated = mark_session_completed(user_id, session_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
    if updated is None:
        raise HTTPException(status_code=404, detail="세션을 찾을 수 없습니다.")
    return updated
