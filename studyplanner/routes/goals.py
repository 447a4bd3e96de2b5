"""
학습 목표 설정 API 라우트
"""

from fastapi import APIRouter, HTTPException

from studyplanner.models.database import get_user_goals, save_user_goals
from studyplanner.models.study_session import Goals

router = APIRouter()


@router.get("/goals/{user_id}", response_model=Goals)
def read_goals(user_id: str):
    """학습 목표 조회"""
    try:
        return get_user_goals(user_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/goals/{user_id}", response_model=Goals)
def write_goals(user_id: str, goals: Goals):
    """학습 목표 저장"""
    try:
        return save_user_goals(user_id, goals)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
