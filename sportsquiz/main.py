"""
FastAPI main application
"""
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sportsquiz.api import routes
from sportsquiz.config import get_settings
from sportsquiz.utils.logger import setup_logging, get_logger

# 로깅 설정
settings = get_settings()
setup_logging(environment=settings.environment, log_dir=settings.log_dir, app_name="sports_quiz")
logger = get_logger(__name__)

# LangSmith 트레이싱 설정 (@traceable은 LANGSMITH_* 환경변수를 참조)
if settings.langsmith_tracing and settings.langsmith_api_key:
    os.environ["LANGSMITH_API_KEY"] = settings.langsmith_api_key
    os.environ["LANGSMITH_TRACING"] = "true"
    os.environ["LANGSMITH_PROJECT"] = settings.langsmith_project

app = FastAPI(
    title="Sports Quiz API",
    description="AI 스포츠 퀴즈 생성 및 채점 API",
    version="1.0.0",
    debug=settings.debug
)

# CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 라우터 등록
app.include_router(routes.router, prefix="/api")


@app.get("/")
async def root():
    """Health check endpoint"""
    return {
        "status": "ok",
        "message": "Sports Quiz API",
        "environment": settings.environment
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "sportsquiz.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug
    )
