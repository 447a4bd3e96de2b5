"""
Supabase 데이터베이스 연동 모듈
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional

from supabase import create_client, Client

from studyplanner import config
from studyplanner.models.study_session import (
    Goals,
    NotificationSettings,
    StudySession,
    StudySessionCreate,
    StudySessionUpdate,
)

logger = logging.getLogger(__name__)

SESSIONS_TABLE = "study_sessions"
SETTINGS_TABLE = "user_settings"

# Supabase 초기화 플래그
_supabase_initialized = False
_supabase_client: Optional[Client] = None


class DatabaseError(Exception):
    """Supabase 요청 실패"""


def init_supabase():
    """Supabase 초기화"""
    global _supabase_initialized, _supabase_client

    if _supabase_initialized:
        return

    if not config.SUPABASE_URL or not config.SUPABASE_KEY:
        raise ValueError(
            "SUPABASE_URL과 SUPABASE_KEY 환경 변수를 설정해주세요.\n"
            "Supabase 프로젝트 설정에서 URL과 anon key를 확인할 수 있습니다."
        )

    _supabase_client = create_client(config.SUPABASE_URL, config.SUPABASE_KEY)
    _supabase_initialized = True
    logger.info("Supabase가 초기화되었습니다.")


def get_db() -> Client:
    """Supabase 클라이언트 인스턴스 반환"""
    if not _supabase_initialized:
        init_supabase()
    return _supabase_client


def _parse_datetime(value) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _to_session(row: Dict) -> StudySession:
    """DB 행을 StudySession 모델로 변환"""
    row = dict(row)
    row["start_time"] = _parse_datetime(row["start_time"])
    row["created_at"] = _parse_datetime(row.get("created_at"))
    row["id"] = str(row["id"])
    row["goals"] = row.get("goals") or []
    return StudySession(**row)


def get_user_sessions(user_id: str, start_date: Optional[datetime] = None,
                      end_date: Optional[datetime] = None) -> List[StudySession]:
    """사용자의 공부 세션 목록 조회 (시작 시간 오름차순)"""
    db = get_db()

    query = db.table(SESSIONS_TABLE).select("*").eq("user_id", user_id)

    if start_date:
        query = query.gte("start_time", start_date.isoformat())
    if end_date:
        query = query.lt("start_time", end_date.isoformat())

    response = query.order("start_time").execute()
    return [_to_session(row) for row in response.data]


def get_session(user_id: str, session_id: str) -> Optional[StudySession]:
    """세션 하나 조회"""
    db = get_db()

    response = db.table(SESSIONS_TABLE)\
        .select("*")\
        .eq("user_id", user_id)\
        .eq("id", session_id)\
        .limit(1)\
        .execute()

    if response.data:
        return _to_session(response.data[0])
    return None


def create_session(user_id: str, payload: StudySessionCreate) -> StudySession:
    """공부 세션 생성"""
    db = get_db()

    record = payload.model_dump(mode="json")
    record["user_id"] = user_id
    record["completed"] = False
    record["created_at"] = datetime.now().isoformat()

    response = db.table(SESSIONS_TABLE).insert(record).execute()

    if response.data:
        return _to_session(response.data[0])
    raise DatabaseError("세션 저장 실패")


def create_sessions(user_id: str, payloads: List[StudySessionCreate]) -> List[StudySession]:
    """공부 세션 여러 개를 한 번에 생성"""
    if not payloads:
        return []

    db = get_db()
    now = datetime.now().isoformat()

    records = []
    for payload in payloads:
        record = payload.model_dump(mode="json")
        record["user_id"] = user_id
        record["completed"] = False
        record["created_at"] = now
        records.append(record)

    response = db.table(SESSIONS_TABLE).insert(records).execute()
    if not response.data:
        raise DatabaseError("세션 저장 실패")
    return [_to_session(row) for row in response.data]


def update_session(user_id: str, session_id: str,
                   payload: StudySessionUpdate) -> Optional[StudySession]:
    """세션 수정 (전달된 필드만 변경)"""
    changes = payload.model_dump(mode="json", exclude_unset=True)
    if not changes:
        return get_session(user_id, session_id)

    db = get_db()
    response = db.table(SESSIONS_TABLE)\
        .update(changes)\
        .eq("user_id", user_id)\
        .eq("id", session_id)\
        .execute()

    if response.data:
        return _to_session(response.data[0])
    return None


def delete_session(user_id: str, session_id: str) -> bool:
    """세션 삭제"""
    db = get_db()
    response = db.table(SESSIONS_TABLE)\
        .delete()\
        .eq("user_id", user_id)\
        .eq("id", session_id)\
        .execute()
    return bool(response.data)


def mark_session_completed(user_id: str, session_id: str) -> Optional[StudySession]:
    """세션을 완료 상태로 변경 (완료 -> 미완료로 되돌리지 않음)"""
    db = get_db()
    response = db.table(SESSIONS_TABLE)\
        .update({"completed": True})\
        .eq("user_id", user_id)\
        .eq("id", session_id)\
        .execute()

    if response.data:
        logger.info("세션 완료 처리: 사용자 %s, 세션 %s", user_id, session_id)
        return _to_session(response.data[0])
    return None


def _get_settings_row(user_id: str) -> Dict:
    db = get_db()
    response = db.table(SETTINGS_TABLE)\
        .select("*")\
        .eq("user_id", user_id)\
        .limit(1)\
        .execute()
    return response.data[0] if response.data else {}


def _save_settings_field(user_id: str, field: str, value: Dict) -> None:
    db = get_db()
    response = db.table(SETTINGS_TABLE)\
        .upsert({"user_id": user_id, field: value, "updated_at": datetime.now().isoformat()})\
        .execute()
    if not response.data:
        raise DatabaseError(f"설정 저장 실패: {field}")


def get_user_goals(user_id: str) -> Goals:
    """사용자 학습 목표 조회 (없으면 기본값)"""
    row = _get_settings_row(user_id)
    return Goals(**(row.get("goals") or {}))


def save_user_goals(user_id: str, goals: Goals) -> Goals:
    """사용자 학습 목표 저장"""
    _save_settings_field(user_id, "goals", goals.model_dump())
    return goals


def get_notification_settings(user_id: str) -> NotificationSettings:
    """알림 설정 조회 (없으면 기본값)"""
    row = _get_settings_row(user_id)
    return NotificationSettings(**(row.get("notifications") or {}))


def save_notification_settings(user_id: str, settings: NotificationSettings) -> NotificationSettings:
    """알림 설정 저장"""
    _save_settings_field(user_id, "notifications", settings.model_dump())
    return settings
