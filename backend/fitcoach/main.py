# fitcoach/main.py
# FastAPI 앱 초기화 및 라우터 설정
# 라우터는 각 기능별로 분리하여 관리

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fitcoach.core.config import settings
from fitcoach.api.routes_decode import router as decode_router   # LLM 응답 디코딩

app = FastAPI(title="FitCoach Decoder - API", version="0.1.0")

# CORS: 프론트 localhost:3000 허용 (목록은 settings.CORS_ORIGINS)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/")
async def root():
    return {"status": "ok"}

@app.get("/health")
async def health():
    # 외부 의존성 없음 → 항상 ok
    return {"status": "ok"}

# 라우터 prefix는 각 파일 내에서 정의함 , 중복 prefix 금지
app.include_router(decode_router)
