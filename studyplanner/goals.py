"""
학습 목표 및 연속 학습일(스트릭) 계산

세션 목록과 목표값으로부터 진행률과 스트릭을 계산하는 순수 함수 모음입니다.
입력을 변경하지 않으므로 화면을 그릴 때마다 다시 계산해도 됩니다.
"""

from dataclasses import asdict, dataclass
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional

from studyplanner.models.study_session import Goals, StudySession


@dataclass
class GoalProgress:
    current: int
    target: int
    percentage: float
    achieved: bool


def local_datetime(value: datetime) -> datetime:
    """타임존 정보가 있으면 로컬 시간으로 바꾼 뒤 naive datetime으로 반환"""
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def local_date(value: datetime) -> date:
    return local_datetime(value).date()


def _now(now: Optional[datetime]) -> datetime:
    return local_datetime(now) if now is not None else datetime.now()


def percentage(current: float, target: float) -> float:
    """목표 대비 진행률 (최대 100)

    목표가 0이면 이미 달성한 것으로 보고 100을 반환합니다.
    """
    if target <= 0:
        return 100.0
    return min(100.0, current / target * 100)


def goal_progress(current: int, target: int) -> GoalProgress:
    return GoalProgress(
        current=current,
        target=target,
        percentage=percentage(current, target),
        achieved=current >= target,
    )


def completed_dates(sessions: Iterable[StudySession]) -> List[date]:
    """완료된 세션이 있는 날짜 (중복 제거, 오름차순)"""
    return sorted({local_date(s.start_time) for s in sessions if s.completed})


def current_streak(sessions: Iterable[StudySession], now: Optional[datetime] = None) -> int:
    """오늘 또는 어제부터 거슬러 올라가며 연속으로 공부한 일수"""
    today = _now(now).date()
    dates = completed_dates(sessions)
    if not dates:
        return 0

    # 미래 날짜의 완료 세션은 스트릭에 포함하지 않음
    past = [d for d in reversed(dates) if d <= today]
    if not past or past[0] < today - timedelta(days=1):
        return 0

    streak = 1
    for prev, cur in zip(past, past[1:]):
        if prev - cur != timedelta(days=1):
            break
        streak += 1
    return streak


def longest_streak(sessions: Iterable[StudySession]) -> int:
    """기록 전체에서 가장 긴 연속 학습일"""
    dates = completed_dates(sessions)
    if not dates:
        return 0

    longest = 1
    run = 1
    for prev, cur in zip(dates, dates[1:]):
        if cur - prev == timedelta(days=1):
            run += 1
            longest = max(longest, run)
        else:
            run = 1
    return longest


def week_start(now: Optional[datetime] = None) -> datetime:
    """이번 주 일요일 00:00 (오늘이 일요일이면 오늘)"""
    today = _now(now).replace(hour=0, minute=0, second=0, microsecond=0)
    # weekday(): 월요일 0 ... 일요일 6
    days_since_sunday = (today.weekday() + 1) % 7
    return today - timedelta(days=days_since_sunday)


def today_progress(sessions: Iterable[StudySession], goals: Goals,
                   now: Optional[datetime] = None) -> GoalProgress:
    today = _now(now).date()
    minutes = sum(
        s.duration for s in sessions
        if s.completed and local_date(s.start_time) == today
    )
    return goal_progress(minutes, goals.daily_minutes)


def week_sessions(sessions: Iterable[StudySession],
                  now: Optional[datetime] = None) -> List[StudySession]:
    """이번 주 [일요일 00:00, 다음 일요일 00:00) 안에 시작한 완료 세션"""
    start = week_start(now)
    end = start + timedelta(days=7)
    return [
        s for s in sessions
        if s.completed and start <= local_datetime(s.start_time) < end
    ]


def week_progress(sessions: Iterable[StudySession], goals: Goals,
                  now: Optional[datetime] = None) -> Dict[str, GoalProgress]:
    in_week = week_sessions(sessions, now)
    return {
        "minutes": goal_progress(sum(s.duration for s in in_week), goals.weekly_minutes),
        "sessions": goal_progress(len(in_week), goals.weekly_sessions),
    }


def goals_summary(sessions: List[StudySession], goals: Goals,
                  now: Optional[datetime] = None) -> Dict:
    """스트릭과 목표 진행률을 한 번에 계산"""
    now = _now(now)
    week = week_progress(sessions, goals, now)
    return {
        "current_streak": current_streak(sessions, now),
        "longest_streak": longest_streak(sessions),
        "today": asdict(today_progress(sessions, goals, now)),
        "week": {
            "start": week_start(now).date().isoformat(),
            "minutes": asdict(week["minutes"]),
            "sessions": asdict(week["sessions"]),
        },
        "goals": goals.model_dump(),
    }
