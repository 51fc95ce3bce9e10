# 환경변수 로딩 (.env)
# 디코더 튜닝값은 전부 여기서 관리 (품질 점수 가중치는 규범값 아님 → 운영 중 조정)
from typing import List

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # 호스트 쪽 입력 상한 (라우터에서 413 처리). 파이프라인 내부는 크기 가정 없음
    DECODER_MAX_INPUT_BYTES: int = 200_000
    # 로그에 남기는 페이로드 스니펫 길이
    DECODER_LOG_SNIPPET: int = 200

    # 휴리스틱 추출 상한
    HEURISTIC_MAX_INGREDIENTS: int = 6
    HEURISTIC_MAX_EXERCISES: int = 8
    HEURISTIC_MAX_MINUTES: int = 120
    HEURISTIC_MAX_WORKOUT_MINUTES: int = 150
    # 운동 시간이 본문에 없을 때 (분)
    HEURISTIC_DEFAULT_WORKOUT_MINUTES: int = 60

    # 품질 점수 가중치
    QUALITY_INGREDIENT_WEIGHT: float = 8.0
    QUALITY_KEYWORD_WEIGHT: float = 7.0
    QUALITY_LENGTH_STEPS: List[int] = [100, 200]
    QUALITY_LENGTH_BONUS: float = 10.0
    QUALITY_MAX: float = 100.0

    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    class Config:
        env_file = ".env"

settings = Settings()
