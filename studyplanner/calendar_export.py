"""
캘린더 내보내기
공부 세션을 iCalendar(.ics) 파일과 외부 캘린더 링크로 변환합니다.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional
from urllib.parse import urlencode

from ics import Calendar, Event
from ics.alarm import DisplayAlarm

from studyplanner.models.study_session import StudySession

PRODID = "-//StudySmart//Study Scheduler//EN"
UID_DOMAIN = "studysmart.app"
ALARM_BEFORE = timedelta(minutes=15)
LOCATION = "Study Area"

GOOGLE_CALENDAR_URL = "https://calendar.google.com/calendar/render"
OUTLOOK_CALENDAR_URL = "https://outlook.live.com/calendar/0/deeplink/compose"


def _utc(value: datetime) -> datetime:
    # naive datetime은 로컬 시간으로 간주
    return value.astimezone(timezone.utc)


def session_window(session: StudySession):
    """세션의 (시작, 종료) UTC 시각"""
    start = _utc(session.start_time)
    return start, start + timedelta(minutes=session.duration)


def _description(session: StudySession) -> str:
    parts = [f"Study session: {session.topic}"]
    if session.description:
        parts.append(session.description)
    if session.goals:
        parts.append("Goals:\n" + "\n".join(f"- {goal}" for goal in session.goals))
    parts.append(f"Difficulty: {session.difficulty.value}")
    return "\n\n".join(parts)


def build_event(session: StudySession, now: Optional[datetime] = None) -> Event:
    start, end = session_window(session)
    return Event(
        name=f"{session.subject}: {session.topic}",
        begin=start,
        end=end,
        uid=f"{session.id}@{UID_DOMAIN}",
        description=_description(session),
        created=_utc(now or datetime.now(timezone.utc)),
        categories={"Study", session.subject, session.difficulty.value},
        status="CONFIRMED" if session.completed else "TENTATIVE",
        alarms=[
            DisplayAlarm(
                trigger=-ALARM_BEFORE,
                display_text="Study session starting in 15 minutes",
            )
        ],
    )


def build_calendar(sessions: Iterable[StudySession], now: Optional[datetime] = None) -> Calendar:
    calendar = Calendar(creator=PRODID)
    calendar.scale = "GREGORIAN"
    calendar.method = "PUBLISH"
    for session in sessions:
        calendar.events.add(build_event(session, now))
    return calendar


def generate_ics(sessions: Iterable[StudySession], now: Optional[datetime] = None) -> str:
    """세션 목록을 .ics 텍스트로 변환"""
    return build_calendar(sessions, now).serialize()


def session_filename(session: StudySession) -> str:
    """단일 세션 내보내기 파일명 (예: mathematics-calculus.ics)"""
    return re.sub(r"\s+", "-", f"{session.subject}-{session.topic}.ics").lower()


def _compact(value: datetime) -> str:
    return value.strftime("%Y%m%dT%H%M%SZ")


def google_calendar_url(session: StudySession) -> str:
    start, end = session_window(session)
    params = {
        "action": "TEMPLATE",
        "text": f"{session.subject}: {session.topic}",
        "dates": f"{_compact(start)}/{_compact(end)}",
        "details": session.description or f"Study session for {session.topic}",
        "location": LOCATION,
    }
    return f"{GOOGLE_CALENDAR_URL}?{urlencode(params)}"


def outlook_calendar_url(session: StudySession) -> str:
    start, end = session_window(session)
    params = {
        "path": "/calendar/action/compose",
        "rru": "addevent",
        "subject": f"{session.subject}: {session.topic}",
        "startdt": start.isoformat().replace("+00:00", "Z"),
        "enddt": end.isoformat().replace("+00:00", "Z"),
        "body": session.description or f"Study session for {session.topic}",
        "location": LOCATION,
    }
    return f"{OUTLOOK_CALENDAR_URL}?{urlencode(params)}"
