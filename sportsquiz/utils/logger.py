"""
Logging configuration for the Sports Quiz backend

- 콘솔 + 파일 동시 출력
- logs/<app>.log: INFO 이상, 매일 자정 로테이션 (30일 보관)
- logs/<app>_error.log: ERROR 이상, 10MB 단위 로테이션
- logs/<app>_debug.log: DEBUG 포함 (development 환경만)

Usage:
    from sportsquiz.utils.logger import setup_logging, get_logger

    setup_logging(environment="development")   # 앱 시작 시 한 번만
    logger = get_logger(__name__)
    logger.info("Quiz generated")
"""
import logging
import logging.handlers
from pathlib import Path

LOG_LEVELS = {
    "development": logging.DEBUG,
    "test": logging.WARNING,
    "production": logging.INFO,
}

DETAILED_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s"
SIMPLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# 외부 라이브러리 로그 (노이즈 감소)
NOISY_LOGGERS = (
    "uvicorn",
    "uvicorn.access",
    "httpx",
    "httpcore",
    "urllib3",
    "openai",
    "openai._base_client",
    "langsmith",
    "redis",
)


def setup_logging(
    environment: str = "development",
    log_dir: str = "logs",
    app_name: str = "sports_quiz"
) -> None:
    """
    로깅 시스템 초기화

    Args:
        environment: "development" | "production" | "test"
        log_dir: 로그 파일 저장 디렉토리
        app_name: 로그 파일명 접두사
    """
    log_level = LOG_LEVELS.get(environment, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    detailed_formatter = logging.Formatter(fmt=DETAILED_FORMAT, datefmt=DATE_FORMAT)
    simple_formatter = logging.Formatter(fmt=SIMPLE_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(simple_formatter)
    root_logger.addHandler(console_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    # test 환경에서는 파일을 남기지 않는다
    if environment == "test":
        return

    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    app_file_handler = logging.handlers.TimedRotatingFileHandler(
        filename=log_path / f"{app_name}.log",
        when="midnight",
        interval=1,
        backupCount=30,
        encoding="utf-8"
    )
    app_file_handler.setLevel(logging.INFO)
    app_file_handler.setFormatter(detailed_formatter)
    app_file_handler.suffix = "%Y-%m-%d"
    root_logger.addHandler(app_file_handler)

    error_file_handler = logging.handlers.RotatingFileHandler(
        filename=log_path / f"{app_name}_error.log",
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding="utf-8"
    )
    error_file_handler.setLevel(logging.ERROR)
    error_file_handler.setFormatter(detailed_formatter)
    root_logger.addHandler(error_file_handler)

    if environment == "development":
        debug_file_handler = logging.handlers.RotatingFileHandler(
            filename=log_path / f"{app_name}_debug.log",
            maxBytes=10 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8"
        )
        debug_file_handler.setLevel(logging.DEBUG)
        debug_file_handler.setFormatter(detailed_formatter)
        root_logger.addHandler(debug_file_handler)

    logger = logging.getLogger(__name__)
    logger.info(f"🔧 Logging initialized: environment={environment}, level={logging.getLevelName(log_level)}")
    logger.info(f"📁 Log directory: {log_path.absolute()}")


def get_logger(name: str) -> logging.Logger:
    """
    로거 인스턴스 가져오기 (보통 __name__ 사용)
    """
    return logging.getLogger(name)
