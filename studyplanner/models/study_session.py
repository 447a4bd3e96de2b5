"""
공부 세션 데이터 모델
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class Difficulty(str, Enum):
    """세션 난이도"""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class StudySession(BaseModel):
    """공부 세션 모델"""
    id: str
    user_id: Optional[str] = None
    subject: str
    topic: str
    duration: int = Field(gt=0)  # 분 단위
    start_time: datetime
    completed: bool = False
    difficulty: Difficulty = Difficulty.MEDIUM
    description: Optional[str] = None
    goals: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None


class StudySessionCreate(BaseModel):
    """세션 생성 요청 모델"""
    subject: str = Field(min_length=1)
    topic: str = Field(min_length=1)
    duration: int = Field(gt=0)
    start_time: datetime
    difficulty: Difficulty = Difficulty.MEDIUM
    description: Optional[str] = None
    goals: List[str] = Field(default_factory=list)


class StudySessionUpdate(BaseModel):
    """세션 수정 요청 모델 (완료 여부는 complete 엔드포인트로만 변경)"""
    subject: Optional[str] = Field(default=None, min_length=1)
    topic: Optional[str] = Field(default=None, min_length=1)
    duration: Optional[int] = Field(default=None, gt=0)
    start_time: Optional[datetime] = None
    difficulty: Optional[Difficulty] = None
    description: Optional[str] = None
    goals: Optional[List[str]] = None


class Goals(BaseModel):
    """학습 목표 모델"""
    daily_minutes: int = Field(default=120, ge=0)
    weekly_minutes: int = Field(default=600, ge=0)
    weekly_sessions: int = Field(default=10, ge=0)


class NotificationSettings(BaseModel):
    """알림 설정 모델"""
    enabled: bool = False
    reminder_time: int = Field(default=15, ge=0)  # 세션 시작 몇 분 전
    break_reminders: bool = True
    daily_summary: bool = True
    daily_summary_time: str = Field(default="20:00", pattern=r"^([01]\d|2[0-3]):[0-5]\d$")
