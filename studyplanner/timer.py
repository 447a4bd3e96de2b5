"""
공부 타이머 상태 머신

한 번에 하나의 공부 세션에 대한 카운트다운을 관리합니다.
공부(study)와 휴식(break) 모드를 번갈아 가며, 세션에 설정된 시간(custom)
또는 고정 뽀모도로 주기(25분 공부 / 5분 휴식 / 4번째마다 15분 휴식)를 따릅니다.

상태 전이:
    idle -> running               (start)
    running -> paused             (pause)
    paused -> running             (start)
    running/paused/completed -> idle  (reset)
    running/paused -> idle, study (stop)
    running -> completed          (공부 모드에서 0초 도달)
    running -> idle, study        (휴식 모드에서 0초 도달)
    completed -> running, break   (start_break)
    completed -> idle, study      (skip_break)
    completed -> 종료             (mark_complete)
"""

from enum import Enum
from typing import Callable, Dict, Optional

from studyplanner.models.study_session import StudySession

POMODORO_STUDY_SECONDS = 25 * 60
SHORT_BREAK_SECONDS = 5 * 60
LONG_BREAK_SECONDS = 15 * 60
POMODOROS_PER_LONG_BREAK = 4


class TimerType(str, Enum):
    CUSTOM = "custom"
    POMODORO = "pomodoro"


class TimerMode(str, Enum):
    STUDY = "study"
    BREAK = "break"


class TimerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


def format_time(seconds: int) -> str:
    """초를 MM:SS 형식으로 변환"""
    mins, secs = divmod(int(seconds), 60)
    return f"{mins:02d}:{secs:02d}"


def break_length(pomodoro_count: int) -> int:
    """다음에 시작할 휴식 길이(초)

    pomodoro_count는 휴식을 시작하기 직전의 완료 횟수입니다.
    4, 8, 12... 번째 휴식은 긴 휴식입니다.
    """
    if (pomodoro_count + 1) % POMODOROS_PER_LONG_BREAK == 0:
        return LONG_BREAK_SECONDS
    return SHORT_BREAK_SECONDS


class StudyTimer:
    """공부 세션 타이머

    전이 메서드는 선행 조건이 맞으면 True, 아니면 아무것도 하지 않고
    False를 반환합니다. 예외는 발생하지 않습니다.
    """

    def __init__(self, session: StudySession,
                 on_complete: Optional[Callable[[str], None]] = None,
                 on_close: Optional[Callable[[], None]] = None):
        self.session = session
        self._on_complete = on_complete
        self._on_close = on_close

        self.timer_type = TimerType.CUSTOM
        self.mode = TimerMode.STUDY
        self.state = TimerState.IDLE
        self.pomodoro_count = 0
        self.closed = False

        self.total_time = self.study_duration()
        self.time_left = self.total_time

    def study_duration(self) -> int:
        """현재 타이머 종류의 공부 시간(초)"""
        if self.timer_type == TimerType.POMODORO:
            return POMODORO_STUDY_SECONDS
        return self.session.duration * 60

    @property
    def next_break_seconds(self) -> int:
        return break_length(self.pomodoro_count)

    @property
    def progress(self) -> float:
        """현재 구간 진행률 (0~100)"""
        if self.total_time <= 0:
            return 0.0
        return (self.total_time - self.time_left) / self.total_time * 100

    def _load_study(self):
        self.mode = TimerMode.STUDY
        self.total_time = self.study_duration()
        self.time_left = self.total_time

    def start(self) -> bool:
        if self.closed or self.state not in (TimerState.IDLE, TimerState.PAUSED):
            return False
        self.state = TimerState.RUNNING
        return True

    def pause(self) -> bool:
        if self.closed or self.state != TimerState.RUNNING:
            return False
        self.state = TimerState.PAUSED
        return True

    def reset(self) -> bool:
        if self.closed or self.state == TimerState.IDLE:
            return False
        self.state = TimerState.IDLE
        if self.mode == TimerMode.STUDY:
            self._load_study()
        else:
            # 휴식 모드에서는 현재 휴식 길이 그대로 다시 시작
            self.time_left = self.total_time
        return True

    def stop(self) -> bool:
        if self.closed or self.state not in (TimerState.RUNNING, TimerState.PAUSED):
            return False
        self.state = TimerState.IDLE
        self._load_study()
        return True

    def tick(self) -> bool:
        """1초 경과 처리 (running 상태에서만)"""
        if self.closed or self.state != TimerState.RUNNING or self.time_left <= 0:
            return False

        self.time_left -= 1
        if self.time_left == 0:
            if self.mode == TimerMode.STUDY:
                self.state = TimerState.COMPLETED
            else:
                # 휴식 종료 -> 다음 공부 준비
                self.state = TimerState.IDLE
                self._load_study()
        return True

    def select_timer_type(self, timer_type) -> bool:
        if self.closed or self.state != TimerState.IDLE:
            return False
        try:
            self.timer_type = TimerType(timer_type)
        except ValueError:
            return False
        self.pomodoro_count = 0
        self._load_study()
        return True

    def start_break(self) -> bool:
        if self.closed or self.state != TimerState.COMPLETED or self.mode != TimerMode.STUDY:
            return False
        length = break_length(self.pomodoro_count)
        self.pomodoro_count += 1
        self.mode = TimerMode.BREAK
        self.total_time = length
        self.time_left = length
        self.state = TimerState.RUNNING
        return True

    def skip_break(self) -> bool:
        if self.closed or self.state != TimerState.COMPLETED or self.mode != TimerMode.STUDY:
            return False
        self.state = TimerState.IDLE
        self._load_study()
        return True

    def mark_complete(self) -> bool:
        """완료 콜백 호출 후 타이머 종료"""
        if self.closed or self.state != TimerState.COMPLETED:
            return False
        if self._on_complete:
            self._on_complete(self.session.id)
        self.close()
        return True

    def close(self):
        if self.closed:
            return
        self.closed = True
        if self._on_close:
            self._on_close()

    def snapshot(self) -> Dict:
        """현재 타이머 상태"""
        return {
            "session_id": self.session.id,
            "timer_type": self.timer_type.value,
            "mode": self.mode.value,
            "state": self.state.value,
            "time_left": self.time_left,
            "total_time": self.total_time,
            "display": format_time(self.time_left),
            "progress": round(self.progress, 2),
            "pomodoro_count": self.pomodoro_count,
            "next_break_seconds": self.next_break_seconds,
            "closed": self.closed,
        }
