"""
WebSocket 타이머 연결 관리 및 메시지 처리
연결 하나당 하나의 공부 타이머를 띄우고, 1초마다 남은 시간을 전송합니다.
"""

import asyncio
import json
import logging
import time
from collections import deque
from typing import Deque, Dict, List, Optional

from fastapi import WebSocket
from starlette.concurrency import run_in_threadpool

from studyplanner import config
from studyplanner.models.database import get_session, mark_session_completed
from studyplanner.timer import StudyTimer, TimerState

logger = logging.getLogger(__name__)

# 클라이언트 메시지 타입 -> StudyTimer 메서드
TIMER_ACTIONS = {
    "start": "start",
    "pause": "pause",
    "reset": "reset",
    "stop": "stop",
    "start_break": "start_break",
    "skip_break": "skip_break",
    "mark_complete": "mark_complete",
}


class TimerConnectionManager:
    """타이머 WebSocket 연결 관리자

    Supabase 호출은 동기 함수라서 이벤트 루프를 막지 않도록 스레드풀에서 실행합니다.
    """

    def __init__(self, tick_seconds: Optional[float] = None):
        self.active_connections: List[WebSocket] = []
        self.timers: Dict[WebSocket, StudyTimer] = {}
        self.user_ids: Dict[WebSocket, str] = {}
        self.tick_tasks: Dict[WebSocket, asyncio.Task] = {}
        # 완료 콜백에서 받은 세션 id (메시지 처리 중에 저장)
        self.pending_completions: Dict[WebSocket, List[str]] = {}
        # 콜백에서 쌓아 두었다가 메시지 처리 후 전송할 메시지
        self.outboxes: Dict[WebSocket, Deque[Dict]] = {}
        self.tick_seconds = tick_seconds if tick_seconds is not None else config.TIMER_TICK_SECONDS

    async def connect(self, websocket: WebSocket, user_id: str, session_id: str) -> bool:
        """클라이언트 연결 및 타이머 생성"""
        await websocket.accept()

        try:
            session = await run_in_threadpool(get_session, user_id, session_id)
        except Exception as e:
            logger.error("세션 조회 실패: %s", e)
            await websocket.send_text(json.dumps({"type": "error", "message": f"세션 조회 실패: {e}"}))
            await websocket.close(code=1011)
            return False

        if session is None:
            await websocket.send_text(json.dumps({"type": "error", "message": "세션을 찾을 수 없습니다."}))
            await websocket.close(code=4404)
            return False

        outbox: Deque[Dict] = deque()
        completions: List[str] = []
        timer = StudyTimer(
            session,
            on_complete=completions.append,
            on_close=lambda: self._timer_closed(websocket, outbox),
        )

        self.active_connections.append(websocket)
        self.timers[websocket] = timer
        self.user_ids[websocket] = user_id
        self.pending_completions[websocket] = completions
        self.outboxes[websocket] = outbox
        logger.info("타이머 연결됨: 세션 %s. 총 연결 수: %d", session_id, len(self.active_connections))

        await self.send_state(websocket)
        return True

    def disconnect(self, websocket: WebSocket):
        """클라이언트 연결 해제 (진행 중이던 타이머는 버림)"""
        self._cancel_ticker(websocket)

        if websocket in self.active_connections:
            self.active_connections.remove(websocket)
        self.timers.pop(websocket, None)
        self.user_ids.pop(websocket, None)
        self.pending_completions.pop(websocket, None)
        self.outboxes.pop(websocket, None)

        logger.info("타이머 연결 해제됨. 총 연결 수: %d", len(self.active_connections))

    async def send_personal_message(self, message: Dict, websocket: WebSocket):
        """특정 클라이언트에게 메시지 전송"""
        try:
            await websocket.send_text(json.dumps(message))
        except Exception as e:
            logger.warning("메시지 전송 실패: %s", e)
            self.disconnect(websocket)

    async def send_state(self, websocket: WebSocket, msg_type: str = "timer_state"):
        timer = self.timers.get(websocket)
        if timer is None:
            return
        await self.send_personal_message({
            "type": msg_type,
            "timer": timer.snapshot(),
            "timestamp": time.time(),
        }, websocket)

    async def _save_completions(self, websocket: WebSocket):
        """완료된 세션을 저장하고 결과를 전송"""
        completions = self.pending_completions.get(websocket)
        user_id = self.user_ids.get(websocket)
        while completions:
            session_id = completions.pop(0)
            try:
                await run_in_threadpool(mark_session_completed, user_id, session_id)
                message = {"type": "session_completed", "session_id": session_id}
            except Exception as e:
                # 저장 실패는 타이머 상태에 영향을 주지 않음
                logger.error("세션 완료 저장 실패: %s", e)
                message = {"type": "error", "message": f"세션 완료 저장 실패: {e}"}
            await self.send_personal_message(message, websocket)

    def _timer_closed(self, websocket: WebSocket, outbox: Deque[Dict]):
        self._cancel_ticker(websocket)
        outbox.append({"type": "timer_closed"})

    async def _flush(self, websocket: WebSocket):
        outbox = self.outboxes.get(websocket)
        while outbox:
            await self.send_personal_message(outbox.popleft(), websocket)

    def _sync_ticker(self, websocket: WebSocket):
        """running 상태일 때만 틱 태스크가 돌도록 맞춤"""
        timer = self.timers.get(websocket)
        running = timer is not None and not timer.closed and timer.state == TimerState.RUNNING
        task = self.tick_tasks.get(websocket)

        if running and (task is None or task.done()):
            self.tick_tasks[websocket] = asyncio.create_task(self._tick_loop(websocket, timer))
        elif not running:
            self._cancel_ticker(websocket)

    def _cancel_ticker(self, websocket: WebSocket):
        task = self.tick_tasks.pop(websocket, None)
        if task is None or task.done():
            return
        if task is not asyncio.current_task():
            task.cancel()

    async def _tick_loop(self, websocket: WebSocket, timer: StudyTimer):
        try:
            while True:
                await asyncio.sleep(self.tick_seconds)
                # 연결이 끊겼거나 타이머가 멈췄으면 더 이상 건드리지 않음
                if self.timers.get(websocket) is not timer or timer.state != TimerState.RUNNING:
                    break
                timer.tick()
                await self.send_state(websocket)
                if timer.state != TimerState.RUNNING:
                    break
        finally:
            if self.tick_tasks.get(websocket) is asyncio.current_task():
                del self.tick_tasks[websocket]

    async def handle_message(self, websocket: WebSocket, message: Dict):
        """받은 메시지 처리"""
        msg_type = message.get("type")
        timer = self.timers.get(websocket)

        if timer is None:
            return

        if msg_type == "ping":
            await self.send_personal_message({"type": "pong", "timestamp": time.time()}, websocket)
            return

        if msg_type == "select_timer_type":
            accepted = timer.select_timer_type(message.get("timer_type"))
        elif msg_type == "close":
            timer.close()
            accepted = True
        elif msg_type in TIMER_ACTIONS:
            accepted = getattr(timer, TIMER_ACTIONS[msg_type])()
        else:
            await self.send_personal_message(
                {"type": "error", "message": f"알 수 없는 메시지 타입: {msg_type}"}, websocket
            )
            return

        await self._save_completions(websocket)
        await self._flush(websocket)

        if timer.closed:
            logger.info("타이머 종료: 세션 %s", timer.session.id)
            self.disconnect(websocket)
            await websocket.close()
            return

        await self.send_state(websocket, "timer_state" if accepted else "rejected")
        self._sync_ticker(websocket)
