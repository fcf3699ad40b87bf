"""
SQLAlchemy 데이터베이스 설정

SQLAlchemy 엔진, 세션, Base 클래스와 트랜잭션 스코프를 정의합니다.
"""

import sqlite3
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from shoestore.core.config import get_settings
from shoestore.core.exceptions import PersistenceException
from shoestore.core.logging import get_logger

logger = get_logger(__name__)

settings = get_settings()

if settings.is_sqlite:
    # SQLite 사용 시 check_same_thread 비활성화 (threadpool에서 세션 공유)
    engine = create_engine(
        settings.database_url,
        connect_args={"check_same_thread": False},
    )
else:
    engine = create_engine(
        settings.database_url,
        pool_size=10,
        max_overflow=20,
        pool_timeout=60,
        pool_pre_ping=True,  # connection 유효성 자동 체크 (keep-alive 대체)
        pool_recycle=3600,  # 1시간마다 connection 재생성 (stale connection 방지)
    )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite는 기본적으로 FK(ON DELETE CASCADE)를 강제하지 않으므로 커넥션마다 활성화"""
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def get_db():
    """
    FastAPI 의존성 주입용 데이터베이스 세션 제너레이터

    성공/검증 실패/예외 등 모든 경로에서 세션(커넥션)을 반환합니다.

    사용 예:
        @router.get("/items/")
        def read_items(db: Session = Depends(get_db)):
            return db.query(Item).all()
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def atomic(db: Session) -> Iterator[Session]:
    """
    블록 전체를 하나의 트랜잭션으로 실행합니다.

    - 정상 종료 시 commit
    - 어떤 예외든 발생하면 rollback 후 재발생
    - IntegrityError는 호출자가 도메인 예외로 변환할 수 있도록 그대로 전달
    - 그 외 SQLAlchemyError는 PersistenceException으로 변환

    사용 예:
        with atomic(db):
            db.add(product)
    """
    try:
        yield db
        db.commit()
    except IntegrityError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("transaction_rolled_back", error=str(e))
        raise PersistenceException(str(e)) from e
    except Exception:
        db.rollback()
        raise
