"""
Locust load test scenarios

테스트 시나리오:
1. 카탈로그 조회: 다수의 방문자가 전체 목록/단일 상품 조회
2. 재고 일괄 수정 경쟁: 여러 관리자가 같은 상품들의 재고를 동시에 덮어씀
3. 중복 title 생성 경쟁: 여러 관리자가 같은 title로 동시에 상품 생성

검증 기준:
- 같은 title 상품 생성 성공은 정확히 1건
- 조회 결과에 음수 재고나 사이즈가 0개인 상품이 없음
"""

import os
import random
from typing import Dict, List, Optional

from locust import HttpUser, TaskSet, between, events, task


ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD", "admin")
DUPLICATE_TITLE = "Load Test Duplicate Title"

# 전역 메트릭 수집
duplicate_created = 0
duplicate_rejected = 0
invariant_violations = 0


def _check_catalog(products: List[Dict]) -> Optional[str]:
    """목록 불변 조건 위반 내용을 반환 (없으면 None)"""
    for product in products:
        if not product["sizes"]:
            return f"Product {product['id']} has no sizes"
        for entry in product["sizes"]:
            if entry["stock"] < 0:
                return f"Negative stock on product {product['id']} size {entry['size']}"
    return None


class CatalogBrowseTaskSet(TaskSet):
    """방문자 행동 모델"""

    @task(3)
    def list_products(self):
        global invariant_violations

        with self.client.get(
            "/api/products", name="[Catalog] List Products", catch_response=True
        ) as response:
            if response.status_code != 200:
                response.failure(f"List products failed: {response.status_code}")
                return

            products = response.json()
            problem = _check_catalog(products)
            if problem:
                invariant_violations += 1
                response.failure(problem)
            else:
                self.user.known_ids = [product["id"] for product in products]
                response.success()

    @task(1)
    def get_product(self):
        if not self.user.known_ids:
            return

        product_id = random.choice(self.user.known_ids)
        with self.client.get(
            f"/api/products/{product_id}",
            name="[Catalog] Get Product",
            catch_response=True,
        ) as response:
            # 동시에 삭제된 상품이면 404도 정상
            if response.status_code in (200, 404):
                response.success()
            else:
                response.failure(f"Get product failed: {response.status_code}")


class AdminTaskSet(TaskSet):
    """관리자 행동 모델 (동시 재고 수정, 동시 상품 생성)"""

    def on_start(self):
        self.access_token: Optional[str] = None
        self.catalog: List[Dict] = []

        with self.client.post(
            "/api/admin/verify",
            json={"password": ADMIN_PASSWORD},
            name="[Admin] Verify",
            catch_response=True,
        ) as response:
            if response.status_code == 200:
                self.access_token = response.json()["access_token"]
                response.success()
            else:
                response.failure(f"Admin verify failed: {response.status_code}")

    def _get_headers(self) -> Dict[str, str]:
        if not self.access_token:
            return {}
        return {"Authorization": f"Bearer {self.access_token}"}

    def _refresh_catalog(self):
        response = self.client.get("/api/products", name="[Catalog] List Products")
        if response.status_code == 200:
            self.catalog = response.json()

    @task(5)
    def update_stock_batch(self):
        """무작위 (상품, 사이즈) 3개의 재고를 한 번에 설정"""
        if not self.catalog:
            self._refresh_catalog()
            if not self.catalog:
                return

        pairs = [
            (product["id"], entry["size"])
            for product in self.catalog
            for entry in product["sizes"]
        ]
        updates = [
            {"productId": product_id, "size": size, "stock": random.randint(0, 10)}
            for product_id, size in random.sample(pairs, min(3, len(pairs)))
        ]

        with self.client.put(
            "/api/admin/stock",
            json={"updates": updates},
            headers=self._get_headers(),
            name="[Admin] Update Stock",
            catch_response=True,
        ) as response:
            if response.status_code == 200:
                response.success()
            elif response.status_code == 404:
                # 다른 관리자가 상품을 삭제한 경우 (배치 전체 롤백)
                self.catalog = []
                response.success()
            else:
                response.failure(f"Update stock failed: {response.status_code}")

    @task(1)
    def create_duplicate_title(self):
        """같은 title로 생성 경쟁 (성공은 1건만 허용)"""
        global duplicate_created, duplicate_rejected

        with self.client.post(
            "/api/admin/products",
            json={
                "product": {
                    "title": DUPLICATE_TITLE,
                    "brand": "Load",
                    "price": 10,
                    "image_url": "/imagenes/load.jpeg",
                },
                "sizes": [{"size": "40", "stock": 1}],
            },
            headers=self._get_headers(),
            name="[Admin] Create Duplicate Title",
            catch_response=True,
        ) as response:
            if response.status_code == 200:
                duplicate_created += 1
                response.success()
            elif response.status_code == 400:
                duplicate_rejected += 1
                response.success()
            else:
                response.failure(f"Create product failed: {response.status_code}")


class Visitor(HttpUser):
    """일반 방문자"""

    tasks = [CatalogBrowseTaskSet]
    wait_time = between(1, 3)
    host = "http://localhost:8000"

    def on_start(self):
        self.known_ids: List[int] = []


class Admin(HttpUser):
    """동시에 작업하는 관리자"""

    tasks = [AdminTaskSet]
    wait_time = between(0.1, 0.5)
    host = "http://localhost:8000"


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    global duplicate_created, duplicate_rejected, invariant_violations
    duplicate_created = 0
    duplicate_rejected = 0
    invariant_violations = 0

    print("\n" + "=" * 60)
    print("Locust Load Test Started")
    print(f"Target: {environment.host}")
    print("=" * 60 + "\n")


@events.test_stop.add_listener
def on_test_stop(environment, **kwargs):
    """테스트 종료 시 결과 출력"""
    print("\n" + "=" * 60)
    print("Test Results Summary")
    print("=" * 60)
    print(f"Duplicate title created: {duplicate_created}")
    print(f"Duplicate title rejected: {duplicate_rejected}")
    print(f"Catalog invariant violations: {invariant_violations}")
    print("=" * 60)

    # 테스트 시작 전 같은 title 상품이 없었다면 성공은 최대 1건
    if duplicate_created > 1:
        print("FAIL: Duplicate title was created more than once.")
    else:
        print("PASS: Title uniqueness held under concurrency.")

    if invariant_violations > 0:
        print("FAIL: Catalog invariants violated.")
    else:
        print("PASS: No negative stock or size-less products observed.")

    print("=" * 60 + "\n")


"""
기본 실행 (웹 UI):
    locust -f load_tests/locustfile.py --host=http://localhost:8000

헤드리스 모드 (CLI):
    ADMIN_PASSWORD=... locust -f load_tests/locustfile.py --headless --users 50 --spawn-rate 10 -t 60s --host=http://localhost:8000

    # 관리자 경쟁만
    ADMIN_PASSWORD=... locust -f load_tests/locustfile.py --headless --users 20 --spawn-rate 20 -t 30s --host=http://localhost:8000 Admin
"""
