"""
FastAPI 서버 메인 파일
공부 세션 일정, 목표/스트릭 통계, 캘린더 내보내기 API와
WebSocket 공부 타이머를 제공합니다.
"""

import json
import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from studyplanner import config
from studyplanner.models.database import init_supabase
from studyplanner.routes import calendar, goals, notifications, stats, study_plan, study_sessions
from studyplanner.timer_handler import TimerConnectionManager

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """서버 시작 시 Supabase 초기화"""
    init_supabase()
    logger.info("서버가 시작되었습니다.")
    yield


app = FastAPI(title="Study Planner API", version="1.0.0", lifespan=lifespan)

# CORS 설정 (웹 클라이언트에서 접근 가능하도록)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 타이머 WebSocket 연결 관리자
manager = TimerConnectionManager()

# 라우터 등록
app.include_router(study_sessions.router, prefix="/api", tags=["study-sessions"])
app.include_router(goals.router, prefix="/api", tags=["goals"])
app.include_router(stats.router, prefix="/api", tags=["stats"])
app.include_router(calendar.router, prefix="/api", tags=["calendar"])
app.include_router(study_plan.router, prefix="/api", tags=["study-plan"])
app.include_router(notifications.router, prefix="/api", tags=["notifications"])


@app.get("/")
async def root():
    """루트 엔드포인트"""
    return {"message": "Study Planner API", "status": "running"}


@app.get("/health")
async def health_check():
    """헬스 체크"""
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}


@app.websocket("/ws/timer/{user_id}/{session_id}")
async def timer_endpoint(websocket: WebSocket, user_id: str, session_id: str):
    """WebSocket 엔드포인트 - 공부 세션 타이머"""
    if not await manager.connect(websocket, user_id, session_id):
        return

    try:
        while True:
            data = await websocket.receive_text()
            try:
                message = json.loads(data)
            except ValueError:
                await manager.send_personal_message(
                    {"type": "error", "message": "JSON 형식이 아닙니다."}, websocket
                )
                continue

            await manager.handle_message(websocket, message)

            # 타이머가 종료되어 연결이 정리되었다면 루프 종료
            if websocket not in manager.active_connections:
                break

    except WebSocketDisconnect:
        manager.disconnect(websocket)
    except Exception as e:
        logger.error("WebSocket 오류: %s", e)
        # 이미 연결이 해제된 상태일 수 있으므로 안전하게 처리
        if websocket in manager.active_connections:
            manager.disconnect(websocket)
