"""
진행 현황 / 대시보드 집계
"""

from datetime import datetime, timedelta
from typing import Dict, List, Optional

from studyplanner.goals import local_date, local_datetime
from studyplanner.models.study_session import Difficulty, StudySession

UPCOMING_LIMIT = 3


def _now(now: Optional[datetime]) -> datetime:
    return local_datetime(now) if now is not None else datetime.now()


def _completed(sessions: List[StudySession]) -> List[StudySession]:
    return [s for s in sessions if s.completed]


def daily_data(sessions: List[StudySession], now: Optional[datetime] = None,
               days: int = 7) -> List[Dict]:
    """최근 N일 동안의 일별 완료 세션 수와 공부 시간 (오래된 날짜부터)"""
    today = _now(now).date()
    completed = _completed(sessions)

    result = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        day_sessions = [s for s in completed if local_date(s.start_time) == day]
        result.append({
            "day": day.strftime("%a"),
            "date": day.isoformat(),
            "sessions": len(day_sessions),
            "duration": sum(s.duration for s in day_sessions),
        })
    return result


def subject_distribution(sessions: List[StudySession]) -> List[Dict]:
    """과목별 완료 세션 수와 공부 시간"""
    subjects: Dict[str, Dict] = {}
    for session in _completed(sessions):
        if session.subject not in subjects:
            subjects[session.subject] = {
                "subject": session.subject,
                "sessions": 0,
                "duration": 0,
            }
        subjects[session.subject]["sessions"] += 1
        subjects[session.subject]["duration"] += session.duration
    return list(subjects.values())


def difficulty_distribution(sessions: List[StudySession]) -> Dict[str, int]:
    counts = {d.value: 0 for d in Difficulty}
    for session in _completed(sessions):
        counts[session.difficulty.value] += 1
    return counts


def achievements(sessions: List[StudySession], now: Optional[datetime] = None) -> List[Dict]:
    """달성 배지 목록"""
    completed = _completed(sessions)
    total_minutes = sum(s.duration for s in completed)
    # 최근 7일 중 공부한 날 수
    active_days = sum(1 for day in daily_data(sessions, now) if day["sessions"] > 0)
    subject_count = len(subject_distribution(sessions))

    return [
        {"name": "First Session", "completed": len(completed) >= 1},
        {"name": "Study Streak", "completed": active_days >= 3},
        {"name": "Time Master", "completed": total_minutes >= 300},
        {"name": "Subject Explorer", "completed": subject_count >= 3},
        {"name": "Consistency King", "completed": active_days >= 7},
        {"name": "Marathon Learner", "completed": total_minutes >= 1200},
    ]


def progress_overview(sessions: List[StudySession], now: Optional[datetime] = None) -> Dict:
    completed = _completed(sessions)
    total_minutes = sum(s.duration for s in completed)
    return {
        "total_sessions": len(completed),
        "total_minutes": total_minutes,
        "average_session_length": round(total_minutes / len(completed)) if completed else 0,
        "daily": daily_data(sessions, now),
        "subjects": subject_distribution(sessions),
        "difficulty": difficulty_distribution(sessions),
        "achievements": achievements(sessions, now),
    }


def dashboard(sessions: List[StudySession], now: Optional[datetime] = None) -> Dict:
    """오늘의 공부 대시보드"""
    now = _now(now)
    today_sessions = [s for s in sessions if local_date(s.start_time) == now.date()]
    completed_today = [s for s in today_sessions if s.completed]

    total = len(today_sessions)
    upcoming = sorted(
        (s for s in today_sessions if not s.completed and local_datetime(s.start_time) > now),
        key=lambda s: local_datetime(s.start_time),
    )[:UPCOMING_LIMIT]

    return {
        "date": now.date().isoformat(),
        "completed": len(completed_today),
        "total": total,
        "progress": len(completed_today) / total * 100 if total > 0 else 0,
        "study_minutes": sum(s.duration for s in completed_today),
        "upcoming": upcoming,
    }
