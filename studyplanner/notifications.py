"""
알림 대상 선택
전송 채널(브라우저 알림 등)은 클라이언트가 담당하고,
여기서는 언제 어떤 알림을 보내야 하는지만 계산합니다.
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional

from studyplanner.goals import local_date, local_datetime
from studyplanner.models.study_session import NotificationSettings, StudySession


def due_reminders(sessions: Iterable[StudySession], settings: NotificationSettings,
                  now: Optional[datetime] = None,
                  notified: Iterable[str] = ()) -> List[Dict]:
    """곧 시작하는 세션 알림 목록

    아직 완료되지 않았고 알림을 보낸 적 없는 세션 중
    시작까지 남은 시간(분, 내림)이 1 ~ reminder_time 사이인 세션.
    """
    if not settings.enabled:
        return []

    now = local_datetime(now) if now is not None else datetime.now()
    notified = set(notified)

    reminders = []
    for session in sessions:
        if session.completed or session.id in notified:
            continue
        seconds_until = (local_datetime(session.start_time) - now).total_seconds()
        minutes_until = int(seconds_until // 60)
        if 0 < minutes_until <= settings.reminder_time:
            reminders.append({
                "session_id": session.id,
                "title": "Study Session Reminder",
                "body": f"{session.subject}: {session.topic} starts in {minutes_until} minutes",
                "minutes_until": minutes_until,
            })
    return reminders


def daily_summary(sessions: Iterable[StudySession], settings: NotificationSettings,
                  now: Optional[datetime] = None) -> Optional[Dict]:
    """설정한 시각(HH:MM)에 보낼 하루 요약 알림"""
    if not settings.enabled or not settings.daily_summary:
        return None

    now = local_datetime(now) if now is not None else datetime.now()
    if now.strftime("%H:%M") != settings.daily_summary_time:
        return None

    today_sessions = [s for s in sessions if local_date(s.start_time) == now.date()]
    if not today_sessions:
        return None

    completed = sum(1 for s in today_sessions if s.completed)
    return {
        "title": "Daily Study Summary",
        "body": f"You've completed {completed} of {len(today_sessions)} study sessions today!",
        "completed": completed,
        "total": len(today_sessions),
    }
