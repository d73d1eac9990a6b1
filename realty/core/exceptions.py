# realty/core/exceptions.py

"""
애플리케이션 공통 예외 계층을 정의하는 모듈입니다.

모든 예외는 `AppError`를 상속하며, HTTP 상태 코드와 (선택적으로) 필드별 오류 목록을 가집니다.
main.py에 등록된 예외 핸들러가 이를 응답 엔벨로프
`{success: false, message, errors?}` 형식으로 변환합니다.
"""

from typing import Any, Dict, List, Optional

from fastapi import status


class AppError(Exception):
    """상태 코드를 가지는 애플리케이션 예외의 기본 클래스"""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        self.errors = errors or []
        self.headers = headers
        super().__init__(self.message)


class ValidationError(AppError):
    """입력 형식/범위 오류 (400). 위반된 모든 필드를 `errors`에 담습니다."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"

    @classmethod
    def from_pydantic(cls, exc, *, prefix: str = "", message: Optional[str] = None) -> "ValidationError":
        """pydantic.ValidationError를 필드 경로 목록으로 변환합니다."""
        return cls(message, errors=errors_from_pydantic(exc, prefix=prefix))


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class AuthError(AppError):
    """자격 증명 누락/오류/만료 (401)"""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Could not validate credentials"

    def __init__(self, message: Optional[str] = None, **kwargs):
        kwargs.setdefault("headers", {"WWW-Authenticate": "Bearer"})
        super().__init__(message, **kwargs)


class ForbiddenError(AppError):
    """인증은 되었으나 권한이 부족한 경우 (403)"""
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not enough permissions"


class UploadError(AppError):
    """
    원격 이미지 저장소 업로드 실패.
    제약 조건 위반(용량, 형식)은 400, 전송/원격 오류는 502로 응답합니다.
    """
    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Image upload failed"


class DeleteError(AppError):
    """원격 이미지 저장소 삭제 실패. 호출자는 항상 로그만 남기고 계속 진행합니다."""
    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Image deletion failed"


class DuplicateActiveError(AppError):
    """활성 회사 정보가 동시에 두 번 생성되려 할 때 저장소 계층에서 발생합니다."""
    status_code = status.HTTP_409_CONFLICT
    default_message = "An active company profile already exists"


def errors_from_pydantic(exc, *, prefix: str = "") -> List[Dict[str, Any]]:
    """
    pydantic(또는 FastAPI RequestValidationError)의 오류 목록을
    `[{"field": "about.story.0.title", "message": "..."}]` 형태로 변환합니다.
    """
    converted = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "form")]
        field = ".".join(([prefix] if prefix else []) + loc)
        converted.append({"field": field or prefix or "__root__", "message": error.get("msg", "Invalid value")})
    return converted
