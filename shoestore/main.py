from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shoestore.api.routes import admin, catalog, ws
from shoestore.broadcast.manager import connection_manager
from shoestore.broadcast.relay import CatalogRelay
from shoestore.core.config import get_settings
from shoestore.core.logging import get_logger, setup_logging
from shoestore.db.database import SessionLocal
from shoestore.db.init_db import create_tables, seed_catalog

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 생명주기 관리 (테이블 생성, 데모 데이터, Redis 중계기)"""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)

    logger.info(
        "starting_shoestore",
        env=settings.app_env,
        broadcast_backend=settings.broadcast_backend,
    )

    create_tables()

    if settings.seed_demo_data:
        db = SessionLocal()
        try:
            seed_catalog(db)
        finally:
            db.close()

    relay = None
    if settings.broadcast_backend == "redis":
        relay = CatalogRelay(settings, connection_manager)
        await relay.start()

    try:
        yield
    finally:
        if relay is not None:
            await relay.stop()
        logger.info("shoestore_stopped")


app = FastAPI(
    title="Shoestore Catalog API",
    description="사이즈별 재고를 실시간으로 브로드캐스트하는 신발 카탈로그",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().frontend_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """요청 본문 형식 오류는 다른 입력 오류와 같이 400으로 응답"""
    logger.warning(
        "request_validation_failed", path=request.url.path, errors=_validation_errors(exc)
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request body", "errors": _validation_errors(exc)},
    )


def _validation_errors(exc: RequestValidationError):
    # ctx에 예외 객체가 들어 있을 수 있어 문자열만 남김
    return [
        {"loc": list(error.get("loc", ())), "msg": str(error.get("msg", ""))}
        for error in exc.errors()
    ]


# 라우터 등록
app.include_router(catalog.router, prefix="/api", tags=["catalog"])
app.include_router(admin.router, prefix="/api/admin", tags=["admin"])
app.include_router(ws.router, tags=["websocket"])


@app.get("/")
async def root():
    """루트 엔드포인트"""
    return {
        "message": "Shoestore Catalog API",
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health")
async def health_check():
    """헬스체크 엔드포인트 (Docker 헬스체크용)"""
    return {"status": "healthy", "websocket": connection_manager.get_stats()}
