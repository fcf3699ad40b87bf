"""
pytest 픽스처 정의
"""

import os

# shoestore 모듈 import 전에 설정 (엔진/CORS가 import 시점에 설정을 읽음)
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BROADCAST_BACKEND"] = "local"
os.environ["SEED_DEMO_DATA"] = "false"

from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from shoestore.broadcast.publisher import CatalogPublisher, get_publisher  # noqa: E402
from shoestore.core.config import Settings, get_settings  # noqa: E402
from shoestore.core.security import hash_password  # noqa: E402
from shoestore.db.database import Base, get_db  # noqa: E402
from shoestore.db.init_db import create_tables  # noqa: E402
from shoestore.main import app  # noqa: E402
from shoestore.models import Product, ProductSize  # noqa: E402

ADMIN_PASSWORD = "admin-secret-for-tests"


class RecordingPublisher(CatalogPublisher):
    """발행된 메시지를 기록만 하는 테스트용 발행기"""

    def __init__(self):
        self.messages = []

    def publish(self, message):
        self.messages.append(message)

    @property
    def events(self):
        return [message["event"] for message in self.messages]


@pytest.fixture(scope="session")
def admin_password():
    """관리자 비밀번호 (평문)"""
    return ADMIN_PASSWORD


@pytest.fixture(scope="session")
def settings():
    """테스트용 설정 객체 픽스처"""
    return Settings(
        database_url="sqlite://",
        broadcast_backend="local",
        admin_password_hash=hash_password(ADMIN_PASSWORD),
        jwt_secret_key="test-secret-key-for-testing",
        jwt_algorithm="HS256",
        jwt_expiration_minutes=30,
        low_stock_threshold=5,
    )


@pytest.fixture(scope="function")
def test_db() -> Session:
    """
    테스트용 in-memory SQLite 데이터베이스 세션 픽스처

    StaticPool로 하나의 커넥션을 공유하므로 threadpool에서 실행되는
    라우트도 같은 데이터베이스를 봅니다.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    create_tables(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSessionLocal()

    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def publisher():
    """발행 내용을 기록하는 발행기 픽스처"""
    return RecordingPublisher()


@pytest.fixture
def make_product(test_db):
    """상품과 사이즈를 직접 입력하는 팩토리 픽스처"""

    def _make_product(title, brand="Boni", price="74.99", sizes=(("38", 2),)):
        product = Product(
            title=title,
            brand=brand,
            price=Decimal(price),
            image_url=f"/imagenes/{title.lower().replace(' ', '_')}.jpeg",
        )
        product.sizes = [ProductSize(size=size, stock=stock) for size, stock in sizes]
        test_db.add(product)
        test_db.commit()
        test_db.refresh(product)
        return product

    return _make_product


@pytest.fixture
def sample_products(make_product):
    """기본 상품 2개 (A: 38/40, B: 39/41)"""
    product_a = make_product("Zapato Boni urbano", sizes=(("38", 2), ("40", 5)))
    product_b = make_product(
        "Bota Andina", brand="Andes", price="120.50", sizes=(("39", 0), ("41", 3))
    )
    return product_a, product_b


@pytest.fixture(scope="function")
def test_client(test_db, settings, publisher):
    """테스트 데이터베이스, 설정, 기록용 발행기를 주입한 TestClient 픽스처"""

    def override_get_db():
        yield test_db

    def override_get_settings():
        return settings

    def override_get_publisher():
        yield publisher

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = override_get_settings
    app.dependency_overrides[get_publisher] = override_get_publisher

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(test_client):
    """관리자 토큰을 포함한 헤더를 반환하는 픽스처"""
    response = test_client.post(
        "/api/admin/verify", json={"password": ADMIN_PASSWORD}
    )
    assert response.status_code == 200

    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}
