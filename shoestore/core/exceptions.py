"""
커스텀 예외 정의

애플리케이션 전역에서 사용되는 커스텀 예외 클래스들입니다.
라우터에서 각 예외를 HTTP 상태 코드로 변환합니다.
"""


class InvalidCredentialsException(Exception):
    """
    관리자 인증 실패 시 발생하는 예외 (잘못된 비밀번호, 유효하지 않은 토큰 등)

    HTTP Status Code: 401 Unauthorized
    """

    def __init__(self, message: str = "Invalid credentials"):
        self.message = message
        super().__init__(self.message)


class CatalogValidationException(Exception):
    """
    요청 값 검증 실패 시 발생하는 예외 (필수 필드 누락, 음수 재고 등)

    모든 검증은 쓰기 작업 전에 수행되므로 이 예외가 발생하면 상태 변경이 없습니다.

    HTTP Status Code: 400 Bad Request
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ProductAlreadyExistsException(CatalogValidationException):
    """
    중복된 상품명(title)으로 상품을 생성/수정하려 할 때 발생하는 예외

    HTTP Status Code: 400 Bad Request
    """

    def __init__(self, title: str):
        self.title = title
        super().__init__(f"Product with title '{title}' already exists")


class SizeAlreadyExistsException(CatalogValidationException):
    """
    이미 존재하는 사이즈를 추가하려 할 때 발생하는 예외

    HTTP Status Code: 400 Bad Request
    """

    def __init__(self, product_id: int, size: str):
        self.product_id = product_id
        self.size = size
        super().__init__(f"Size '{size}' already exists for product {product_id}")


class LastSizeRemovalException(CatalogValidationException):
    """
    상품의 마지막 사이즈를 삭제하려 할 때 발생하는 예외

    상품은 항상 최소 1개의 사이즈를 가져야 합니다.

    HTTP Status Code: 400 Bad Request
    """

    def __init__(self, product_id: int, size: str):
        self.product_id = product_id
        self.size = size
        super().__init__(
            f"Cannot remove size '{size}': it is the last size of product {product_id}"
        )


class ProductNotFoundException(Exception):
    """
    상품을 찾을 수 없을 때 발생하는 예외

    HTTP Status Code: 404 Not Found
    """

    def __init__(self, product_id: int):
        self.product_id = product_id
        self.message = f"Product with id {product_id} not found"
        super().__init__(self.message)


class SizeNotFoundException(Exception):
    """
    상품에 해당 사이즈가 없을 때 발생하는 예외

    HTTP Status Code: 404 Not Found
    """

    def __init__(self, product_id: int, size: str):
        self.product_id = product_id
        self.size = size
        self.message = f"Size '{size}' not found for product {product_id}"
        super().__init__(self.message)


class PersistenceException(Exception):
    """
    트랜잭션 실패(커넥션 끊김, 제약 조건 위반 등) 시 발생하는 예외

    트랜잭션은 이미 롤백된 상태이며, 원인 메시지를 진단용으로 포함합니다.

    HTTP Status Code: 500 Internal Server Error
    """

    def __init__(self, message: str):
        self.message = f"Transaction failed: {message}"
        super().__init__(self.message)
