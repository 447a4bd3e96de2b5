from datetime import datetime
from itertools import count

import pytest

from studyplanner.models.study_session import (
    Goals,
    NotificationSettings,
    StudySession,
)

_ids = count(1)


def make_session(start_time=None, duration=60, completed=False, **kwargs):
    data = {
        "id": str(next(_ids)),
        "user_id": "user-1",
        "subject": "Mathematics",
        "topic": "Calculus - Derivatives",
        "duration": duration,
        "start_time": start_time or datetime(2026, 10, 14, 9, 0),
        "completed": completed,
        "difficulty": "medium",
    }
    data.update(kwargs)
    return StudySession(**data)


class FakeDatabase:
    """메모리에 세션과 설정을 보관하는 database 모듈 대역"""

    def __init__(self):
        self.sessions = {}
        self.goals = {}
        self.notifications = {}
        self.completed_calls = []
        self.fail_complete = False

    def add(self, session):
        self.sessions[session.id] = session
        return session

    def get_user_sessions(self, user_id, start_date=None, end_date=None):
        return sorted(
            (s for s in self.sessions.values() if s.user_id == user_id),
            key=lambda s: s.start_time,
        )

    def get_session(self, user_id, session_id):
        session = self.sessions.get(session_id)
        if session and session.user_id == user_id:
            return session
        return None

    def create_session(self, user_id, payload):
        session = StudySession(id=str(next(_ids)), user_id=user_id, **payload.model_dump())
        return self.add(session)

    def create_sessions(self, user_id, payloads):
        return [self.create_session(user_id, p) for p in payloads]

    def update_session(self, user_id, session_id, payload):
        session = self.get_session(user_id, session_id)
        if session is None:
            return None
        updated = session.model_copy(update=payload.model_dump(exclude_unset=True))
        self.sessions[session_id] = updated
        return updated

    def delete_session(self, user_id, session_id):
        if self.get_session(user_id, session_id) is None:
            return False
        del self.sessions[session_id]
        return True

    def mark_session_completed(self, user_id, session_id):
        self.completed_calls.append((user_id, session_id))
        if self.fail_complete:
            raise RuntimeError("connection refused")
        session = self.get_session(user_id, session_id)
        if session is None:
            return None
        updated = session.model_copy(update={"completed": True})
        self.sessions[session_id] = updated
        return updated

    def get_user_goals(self, user_id):
        return self.goals.get(user_id, Goals())

    def save_user_goals(self, user_id, goals):
        self.goals[user_id] = goals
        return goals

    def get_notification_settings(self, user_id):
        return self.notifications.get(user_id, NotificationSettings())

    def save_notification_settings(self, user_id, settings):
        self.notifications[user_id] = settings
        return settings


PATCHED_MODULES = [
    "studyplanner.routes.study_sessions",
    "studyplanner.routes.goals",
    "studyplanner.routes.stats",
    "studyplanner.routes.calendar",
    "studyplanner.routes.study_plan",
    "studyplanner.routes.notifications",
    "studyplanner.timer_handler",
]


@pytest.fixture
def fake_db(monkeypatch):
    import importlib

    db = FakeDatabase()
    for module_name in PATCHED_MODULES:
        module = importlib.import_module(module_name)
        for name in vars(FakeDatabase):
            if not name.startswith("_") and hasattr(module, name):
                monkeypatch.setattr(module, name, getattr(db, name))
    return db


@pytest.fixture
def client(fake_db):
    from fastapi.testclient import TestClient

    from studyplanner.main import app

    return TestClient(app)
