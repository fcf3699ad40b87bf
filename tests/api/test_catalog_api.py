"""
공개 카탈로그 API 엔드포인트 통합 테스트
"""


class TestListProductsAPI:
    """상품 목록 API 테스트 클래스"""

    def test_list_empty(self, test_client):
        response = test_client.get("/api/products")

        assert response.status_code == 200
        assert response.json() == []

    def test_list_products(self, test_client, sample_products):
        """전체 목록: 최신 상품 우선, 가격은 문자열, 사이즈 포함"""
        product_a, product_b = sample_products

        response = test_client.get("/api/products")

        assert response.status_code == 200
        data = response.json()
        assert [item["id"] for item in data] == [product_b.id, product_a.id]
        assert data[0]["price"] == "120.50"
        assert data[1]["sizes"] == [
            {"size": "38", "stock": 2},
            {"size": "40", "stock": 5},
        ]
        assert set(data[0]) >= {
            "id",
            "title",
            "brand",
            "price",
            "image_url",
            "created_at",
            "updated_at",
            "sizes",
        }


class TestGetProductAPI:
    """단일 상품 조회 API 테스트 클래스"""

    def test_get_product(self, test_client, sample_products):
        product_a, _ = sample_products

        response = test_client.get(f"/api/products/{product_a.id}")

        assert response.status_code == 200
        assert response.json()["title"] == "Zapato Boni urbano"

    def test_get_missing_product(self, test_client):
        response = test_client.get("/api/products/9999")

        assert response.status_code == 404
        assert response.json()["detail"] == "Product with id 9999 not found"


class TestHealthAPI:
    def test_health(self, test_client):
        response = test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert "total_connections" in body["websocket"]
