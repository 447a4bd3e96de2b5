"""
애플리케이션 진입점
백엔드 서버를 실행합니다.

사용법:
    python app.py
    또는
    uvicorn studyplanner.main:app --reload
"""

import logging

from studyplanner import config

if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    from studyplanner.main import app

    uvicorn.run(app, host=config.HOST, port=config.PORT)
