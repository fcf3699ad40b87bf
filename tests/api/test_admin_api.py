"""
관리자 API 엔드포인트 통합 테스트

토큰 발급, 쓰기 엔드포인트의 인증/검증/상태 코드, 브로드캐스트 여부를 검증합니다.
"""

import pytest

from shoestore.models import Product, ProductSize


NEW_PRODUCT = {
    "product": {
        "title": "Bota Patagonia",
        "brand": "Andes",
        "price": 99.9,
        "image_url": "/imagenes/patagonia.jpeg",
    },
    "sizes": [{"size": "40", "stock": 3}, {"size": "41"}],
}


class TestAdminVerifyAPI:
    """관리자 토큰 발급 API 테스트 클래스"""

    def test_verify_success(self, test_client, admin_password, settings):
        response = test_client.post(
            "/api/admin/verify", json={"password": admin_password}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["expires_in"] == settings.jwt_expiration_minutes * 60
        assert data["access_token"]

    def test_verify_wrong_password(self, test_client):
        response = test_client.post("/api/admin/verify", json={"password": "nope"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid admin password"

    def test_verify_missing_password(self, test_client):
        """본문 형식 오류는 400"""
        response = test_client.post("/api/admin/verify", json={})

        assert response.status_code == 400


class TestAdminAuthorization:
    """쓰기 엔드포인트 인증 테스트 클래스"""

    @pytest.mark.parametrize(
        "method,path,body",
        [
            ("put", "/api/admin/stock", {"updates": [{"productId": 1, "size": "38", "stock": 0}]}),
            ("post", "/api/admin/products", NEW_PRODUCT),
            ("put", "/api/admin/products/1", {"product": NEW_PRODUCT["product"]}),
            ("delete", "/api/admin/products/1", None),
            ("post", "/api/admin/products/1/sizes", {"size": "43", "stock": 1}),
            ("delete", "/api/admin/products/1/sizes/38", None),
        ],
    )
    def test_write_requires_token(
        self, test_client, test_db, publisher, sample_products, method, path, body
    ):
        """토큰 없이 요청하면 401, 상태 변경과 브로드캐스트 없음"""
        kwargs = {"json": body} if body is not None else {}

        response = test_client.request(method.upper(), path, **kwargs)

        assert response.status_code == 401
        assert test_db.query(Product).count() == 2
        assert publisher.messages == []

    def test_password_in_body_is_not_a_credential(self, test_client, admin_password):
        """본문의 password 필드로는 인증되지 않음"""
        response = test_client.put(
            "/api/admin/stock",
            json={
                "password": admin_password,
                "updates": [{"productId": 1, "size": "38", "stock": 0}],
            },
        )

        assert response.status_code == 401

    def test_invalid_token(self, test_client):
        response = test_client.put(
            "/api/admin/stock",
            json={"updates": []},
            headers={"Authorization": "Bearer not-a-token"},
        )

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"


class TestUpdateStockAPI:
    """재고 일괄 수정 API 테스트 클래스"""

    def test_update_stock(self, test_client, admin_headers, publisher, sample_products):
        product_a, _ = sample_products

        response = test_client.put(
            "/api/admin/stock",
            json={"updates": [{"productId": product_a.id, "size": "38", "stock": 0}]},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["success"] is True

        listing = test_client.get(f"/api/products/{product_a.id}").json()
        assert {"size": "38", "stock": 0} in listing["sizes"]

        assert publisher.events == ["stock_updated"]
        broadcast = publisher.messages[0]
        assert broadcast["sequence"] > 0
        assert len(broadcast["products"]) == 2

    def test_negative_stock_rejected(self, test_client, admin_headers, test_db, publisher, sample_products):
        """음수 재고 항목이 있으면 400, 아무것도 반영되지 않음"""
        product_a, _ = sample_products

        response = test_client.put(
            "/api/admin/stock",
            json={
                "updates": [
                    {"productId": product_a.id, "size": "38", "stock": 9},
                    {"productId": product_a.id, "size": "40", "stock": -1},
                ]
            },
            headers=admin_headers,
        )

        assert response.status_code == 400
        test_db.expire_all()
        row = (
            test_db.query(ProductSize)
            .filter(ProductSize.product_id == product_a.id, ProductSize.size == "38")
            .one()
        )
        assert row.stock == 2
        assert publisher.messages == []

    def test_stock_beyond_column_range_rejected(
        self, test_client, admin_headers, publisher, sample_products
    ):
        """컬럼 범위를 넘는 재고는 DB에 닿기 전에 400"""
        product_a, _ = sample_products

        response = test_client.put(
            "/api/admin/stock",
            json={"updates": [{"productId": product_a.id, "size": "38", "stock": 2**63}]},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert "Invalid update at index 0" in response.json()["detail"]
        assert publisher.messages == []

    def test_unknown_product(self, test_client, admin_headers, sample_products):
        response = test_client.put(
            "/api/admin/stock",
            json={"updates": [{"productId": 9999, "size": "38", "stock": 1}]},
            headers=admin_headers,
        )

        assert response.status_code == 404

    def test_malformed_body(self, test_client, admin_headers):
        response = test_client.put(
            "/api/admin/stock", json={"updates": "all"}, headers=admin_headers
        )

        assert response.status_code == 400


class TestProductAPI:
    """상품 생성/수정/삭제 API 테스트 클래스"""

    def test_create_product(self, test_client, admin_headers, publisher):
        response = test_client.post(
            "/api/admin/products", json=NEW_PRODUCT, headers=admin_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert isinstance(data["productId"], int)

        created = test_client.get(f"/api/products/{data['productId']}").json()
        assert created["price"] == "99.90"
        assert created["sizes"] == [
            {"size": "40", "stock": 3},
            {"size": "41", "stock": 0},
        ]
        assert publisher.events == ["products_updated"]

    def test_create_duplicate_title(self, test_client, admin_headers, test_db):
        """같은 title로 두 번 생성하면 두 번째는 400, 행 추가 없음"""
        first = test_client.post(
            "/api/admin/products", json=NEW_PRODUCT, headers=admin_headers
        )
        second = test_client.post(
            "/api/admin/products", json=NEW_PRODUCT, headers=admin_headers
        )

        assert first.status_code == 200
        assert second.status_code == 400
        assert "already exists" in second.json()["detail"]
        assert test_db.query(Product).count() == 1

    @pytest.mark.parametrize(
        "body",
        [
            {"product": {**NEW_PRODUCT["product"], "title": ""}, "sizes": NEW_PRODUCT["sizes"]},
            {"product": {**NEW_PRODUCT["product"], "price": 0}, "sizes": NEW_PRODUCT["sizes"]},
            {"product": {**NEW_PRODUCT["product"], "price": "abc"}, "sizes": NEW_PRODUCT["sizes"]},
            {"product": NEW_PRODUCT["product"], "sizes": []},
            {"product": NEW_PRODUCT["product"], "sizes": [{"size": "40", "stock": -3}]},
            {"sizes": NEW_PRODUCT["sizes"]},
        ],
    )
    def test_create_invalid(self, test_client, admin_headers, test_db, body):
        response = test_client.post(
            "/api/admin/products", json=body, headers=admin_headers
        )

        assert response.status_code == 400
        assert test_db.query(Product).count() == 0

    def test_update_product(self, test_client, admin_headers, sample_products):
        product_a, _ = sample_products

        response = test_client.put(
            f"/api/admin/products/{product_a.id}",
            json={"product": {**NEW_PRODUCT["product"], "title": "Zapato renovado"}},
            headers=admin_headers,
        )

        assert response.status_code == 200
        product = response.json()["product"]
        assert product["title"] == "Zapato renovado"
        assert product["price"] == "99.90"
        assert len(product["sizes"]) == 2

    def test_update_to_existing_title(self, test_client, admin_headers, sample_products):
        product_a, product_b = sample_products

        response = test_client.put(
            f"/api/admin/products/{product_a.id}",
            json={"product": {**NEW_PRODUCT["product"], "title": product_b.title}},
            headers=admin_headers,
        )

        assert response.status_code == 400

    def test_update_missing_product(self, test_client, admin_headers):
        response = test_client.put(
            "/api/admin/products/9999",
            json={"product": NEW_PRODUCT["product"]},
            headers=admin_headers,
        )

        assert response.status_code == 404

    def test_delete_product(self, test_client, admin_headers, publisher, sample_products):
        product_a, product_b = sample_products
        product_a_id = product_a.id

        response = test_client.delete(
            f"/api/admin/products/{product_a_id}", headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["deletedProduct"] == {
            "id": product_a_id,
            "title": "Zapato Boni urbano",
        }
        ids = [item["id"] for item in test_client.get("/api/products").json()]
        assert ids == [product_b.id]
        assert publisher.events == ["products_updated"]

    def test_delete_missing_product(self, test_client, admin_headers):
        response = test_client.delete("/api/admin/products/9999", headers=admin_headers)

        assert response.status_code == 404


class TestSizeAPI:
    """사이즈 추가/삭제 API 테스트 클래스"""

    def test_add_size(self, test_client, admin_headers, sample_products):
        product_a, _ = sample_products

        response = test_client.post(
            f"/api/admin/products/{product_a.id}/sizes",
            json={"size": "43", "stock": 4},
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["productId"] == product_a.id
        assert data["productTitle"] == "Zapato Boni urbano"
        assert (data["size"], data["stock"]) == ("43", 4)

    def test_add_duplicate_size(self, test_client, admin_headers, sample_products):
        product_a, _ = sample_products

        response = test_client.post(
            f"/api/admin/products/{product_a.id}/sizes",
            json={"size": "38", "stock": 1},
            headers=admin_headers,
        )

        assert response.status_code == 400

    def test_add_size_missing_product(self, test_client, admin_headers):
        response = test_client.post(
            "/api/admin/products/9999/sizes",
            json={"size": "38", "stock": 1},
            headers=admin_headers,
        )

        assert response.status_code == 404

    def test_remove_size(self, test_client, admin_headers, sample_products):
        product_a, _ = sample_products

        response = test_client.delete(
            f"/api/admin/products/{product_a.id}/sizes/38", headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["size"] == "38"
        sizes = test_client.get(f"/api/products/{product_a.id}").json()["sizes"]
        assert [entry["size"] for entry in sizes] == ["40"]

    def test_remove_last_size(self, test_client, admin_headers, sample_products):
        """마지막 사이즈 삭제는 400"""
        product_a, _ = sample_products
        test_client.delete(
            f"/api/admin/products/{product_a.id}/sizes/38", headers=admin_headers
        )

        response = test_client.delete(
            f"/api/admin/products/{product_a.id}/sizes/40", headers=admin_headers
        )

        assert response.status_code == 400

    def test_remove_missing_size(self, test_client, admin_headers, sample_products):
        product_a, _ = sample_products

        response = test_client.delete(
            f"/api/admin/products/{product_a.id}/sizes/99", headers=admin_headers
        )

        assert response.status_code == 404


class TestStatsAPI:
    """재고 통계 API 테스트 클래스"""

    def test_stats(self, test_client, sample_products):
        response = test_client.get("/api/admin/stats")

        assert response.status_code == 200
        data = response.json()
        assert data["general"] == {
            "totalProducts": 2,
            "totalStock": 10,
            "outOfStockSizes": 1,
            "lowStockSizes": 2,
        }
        assert data["topProducts"][0]["title"] == "Bota Andina"
        assert {item["brand"] for item in data["stockByBrand"]} == {"Boni", "Andes"}
