"""
로깅 설정

structlog 기반 구조화 로그를 stdout으로 출력합니다.
- console: 개발용 사람이 읽기 쉬운 포맷
- json: 운영용 JSON 포맷
"""

import logging
import sys

import structlog


# 로그가 너무 많은 서드파티 로거
NOISY_LOGGERS = [
    "httpx",
    "httpcore",
    "asyncio",
    "uvicorn.access",
    "sqlalchemy.engine",
]


def setup_logging(log_level: str = "INFO", log_format: str = "console") -> None:
    """
    로깅 시스템을 설정합니다.

    structlog 로그와 표준 logging 로그가 모두 stdout으로 출력되도록
    root logger의 핸들러를 교체합니다.

    Args:
        log_level: 로그 레벨 (DEBUG, INFO, WARNING, ERROR)
        log_format: 출력 포맷 ("console" 또는 "json")
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # 기존 핸들러 제거 (중복 출력 방지)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(level)
    stdout_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(stdout_handler)

    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    """로거를 반환합니다."""
    return structlog.get_logger(name)
