"""
환경 설정 모듈
.env 파일과 환경 변수에서 서버 설정을 읽습니다.
"""

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

# .env 파일 로드 (여러 위치에서 검색)
_current_file = Path(__file__).resolve()
_possible_paths = [
    _current_file.parent.parent / ".env",  # 프로젝트 루트
    _current_file.parent / ".env",         # studyplanner/.env
    Path.cwd() / ".env",                   # 현재 작업 디렉토리
]

for _env_path in _possible_paths:
    if _env_path.exists():
        load_dotenv(_env_path)
        break
else:
    load_dotenv()  # 기본 동작


SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# 타이머 틱 간격 (초)
TIMER_TICK_SECONDS = float(os.getenv("TIMER_TICK_SECONDS", "1.0"))


def cors_origins() -> List[str]:
    """CORS 허용 도메인 목록 (쉼표 구분, 기본값은 전체 허용)"""
    raw = os.getenv("CORS_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]
