"""
학습 계획 생성 API 라우트
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from studyplanner.models.database import create_sessions
from studyplanner.models.study_session import StudySession
from studyplanner.study_plan import DEFAULT_DAYS, generate_study_plan, plan_to_sessions

logger = logging.getLogger(__name__)

router = APIRouter()


class StudyPlanRequest(BaseModel):
    """학습 계획 생성 요청"""
    subject: str = ""
    duration: Optional[int] = Field(default=None, ge=1)  # 일 수


class PlanDay(BaseModel):
    day: int
    topics: List[str]
    focus: str


class PlanSessionsRequest(BaseModel):
    """선택한 주제로 세션 만들기 요청"""
    subject: str = Field(min_length=1)
    plan: List[PlanDay]
    selected: List[List[int]]  # [[날짜 인덱스, 주제 인덱스], ...]


@router.post("/generate-study-plan")
async def create_study_plan(request: StudyPlanRequest):
    """과목별 학습 계획 생성"""
    if not request.subject.strip():
        raise HTTPException(status_code=400, detail="Subject is required")

    days = request.duration or DEFAULT_DAYS
    logger.info("학습 계획 생성: %s, %d일", request.subject, days)

    plan = generate_study_plan(request.subject, days)
    return {
        "success": True,
        "plan": plan,
        "subject": request.subject,
        "duration": days,
    }


@router.post("/study-plan/{user_id}/sessions", response_model=List[StudySession], status_code=201)
def create_sessions_from_plan(user_id: str, request: PlanSessionsRequest):
    """학습 계획에서 선택한 주제로 세션 생성"""
    selected = [tuple(pair) for pair in request.selected if len(pair) == 2]
    if not selected:
        raise HTTPException(status_code=400, detail="주제를 하나 이상 선택해주세요.")

    payloads = plan_to_sessions(
        request.subject,
        [day.model_dump() for day in request.plan],
        selected,
    )
    if not payloads:
        raise HTTPException(status_code=400, detail="선택한 주제가 계획에 없습니다.")

    try:
        return create_sessions(user_id, payloads)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
