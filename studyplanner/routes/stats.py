"""
통계 관련 API 라우트
"""

from fastapi import APIRouter, HTTPException

from studyplanner.goals import goals_summary
from studyplanner.models.database import get_user_goals, get_user_sessions
from studyplanner.progress import dashboard, progress_overview

router = APIRouter()


@router.get("/stats/{user_id}/goals")
def get_goals_and_streaks(user_id: str):
    """스트릭과 목표 진행률"""
    try:
        sessions = get_user_sessions(user_id)
        goals = get_user_goals(user_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

    return goals_summary(sessions, goals)


@router.get("/stats/{user_id}/progress")
def get_progress(user_id: str):
    """최근 7일, 과목별, 난이도별 통계와 달성 배지"""
    try:
        sessions = get_user_sessions(user_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

    return progress_overview(sessions)


@router.get("/stats/{user_id}/dashboard")
def get_dashboard(user_id: str):
    """오늘의 대시보드"""
    try:
        sessions = get_user_sessions(user_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

    return dashboard(sessions)
