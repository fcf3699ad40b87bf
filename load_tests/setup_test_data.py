#!/usr/bin/env python3
"""
테스트 데이터 초기화 스크립트

부하 테스트 실행 전 관리자 API로 테스트 상품과 사이즈 재고를 생성합니다.
"""

import argparse
import os
import sys

import httpx


SIZES = ["37", "38", "39", "40", "41", "42"]


def get_admin_token(client: httpx.Client, password: str) -> str:
    """관리자 토큰 발급"""
    response = client.post("/api/admin/verify", json={"password": password})

    if response.status_code != 200:
        print(f"Admin verify failed: {response.status_code}")
        print(response.text)
        sys.exit(1)

    print("Admin token issued")
    return response.json()["access_token"]


def create_test_product(client: httpx.Client, token: str, title: str, stock: int) -> int:
    """모든 사이즈에 같은 재고를 가진 테스트 상품 생성"""
    response = client.post(
        "/api/admin/products",
        json={
            "product": {
                "title": title,
                "brand": "Load",
                "price": 59.9,
                "image_url": "/imagenes/load.jpeg",
            },
            "sizes": [{"size": size, "stock": stock} for size in SIZES],
        },
        headers={"Authorization": f"Bearer {token}"},
    )

    if response.status_code == 200:
        product_id = response.json()["productId"]
        print(f"Product created: {title} (ID: {product_id}, stock per size: {stock})")
        return product_id

    if response.status_code == 400 and "already exists" in response.text:
        print(f"Product already exists: {title}")
        return 0

    print(f"Product creation failed: {response.status_code}")
    print(response.text)
    sys.exit(1)


def check_health(client: httpx.Client) -> bool:
    """서버 헬스체크"""
    try:
        return client.get("/health", timeout=5).status_code == 200
    except httpx.HTTPError:
        return False


def main():
    parser = argparse.ArgumentParser(description="Setup test data for load testing")
    parser.add_argument(
        "--host",
        default="http://localhost:8000",
        help="API server host (default: http://localhost:8000)",
    )
    parser.add_argument(
        "--products", type=int, default=10, help="Number of products (default: 10)"
    )
    parser.add_argument(
        "--stock", type=int, default=5, help="Initial stock per size (default: 5)"
    )
    args = parser.parse_args()

    password = os.environ.get("ADMIN_PASSWORD")
    if not password:
        print("ADMIN_PASSWORD environment variable is required")
        sys.exit(1)

    with httpx.Client(base_url=args.host, timeout=10) as client:
        if not check_health(client):
            print(f"Server is not reachable at {args.host}")
            sys.exit(1)

        token = get_admin_token(client, password)
        for index in range(1, args.products + 1):
            create_test_product(client, token, f"Load Test Shoe {index:03d}", args.stock)

    print("\nYou can now run Locust tests:")
    print(f"  locust -f load_tests/locustfile.py --host={args.host}")


if __name__ == "__main__":
    main()
