# realty/domains/shared/schemas.py

"""
'shared' 도메인의 API 데이터 전송 객체(DTO)를 정의하는 모듈입니다.

- 모든 API 응답이 공유하는 응답 엔벨로프 (`ApiResponse`).
- 원격 이미지 저장소의 업로드 결과 (`AssetRef`).
- 삭제 대기 자산 조회 스키마.
- 목록 응답의 페이지 정보 (`page_info`).
"""

from typing import Annotated, Any, Dict, List, Optional
from datetime import datetime

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, HttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from sqlmodel import SQLModel

_HTTP_URL = TypeAdapter(HttpUrl)


def _check_url(value: Optional[str]) -> Optional[str]:
    """빈 문자열은 '값 없음'으로 허용하고, 그 외에는 http(s) URL이어야 합니다."""
    if value is None or value == "":
        return value
    try:
        _HTTP_URL.validate_python(value)
    except PydanticValidationError:
        raise ValueError("must be a valid http(s) URL")
    return value


def _none_to_empty(value):
    return "" if value is None else value


# 여러 도메인의 요청/응답 스키마가 공유하는 필드 타입
OptionalUrl = Annotated[Optional[str], AfterValidator(_check_url)]
EmptyIfNone = Annotated[str, BeforeValidator(_none_to_empty)]


class StrictModel(BaseModel):
    """알 수 없는 키를 거부하고 문자열 앞뒤 공백을 제거하는 입력 스키마 기반 클래스"""
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class ApiResponse(BaseModel):
    """
    `{success, message?, data?, errors?, warnings?}` 형식의 공통 응답 엔벨로프.
    `warnings`에는 작업은 성공했지만 정리(cleanup) 단계에서 실패한 내용이 담깁니다.
    """
    success: bool = True
    message: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    errors: Optional[List[Dict[str, Any]]] = None
    warnings: Optional[List[str]] = None


class AssetRef(BaseModel):
    """업로드된 이미지의 공개 URL과 삭제 요청에 쓰이는 불투명 식별자"""
    url: str
    public_id: str


class PendingAssetDeletionCreate(SQLModel):
    public_id: str
    url: Optional[str] = None
    last_error: Optional[str] = None


class PendingAssetDeletionUpdate(SQLModel):
    last_error: Optional[str] = None
    attempts: Optional[int] = None


class PendingAssetDeletionRead(SQLModel):
    id: int
    public_id: str
    url: Optional[str] = None
    last_error: Optional[str] = None
    attempts: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


def page_info(page: int, limit: int, total: int, *, total_key: str) -> Dict[str, Any]:
    """
    목록 응답의 `pagination` 객체.
    `total_key`는 도메인별 전체 건수 키 이름입니다 (total_properties, total_blogs, ...).
    """
    total_pages = (total + limit - 1) // limit if limit else 0
    return {
        "current_page": page,
        "total_pages": total_pages,
        total_key: total,
        "has_next_page": page < total_pages,
        "has_prev_page": page > 1,
    }
