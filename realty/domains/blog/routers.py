# realty/domains/blog/routers.py

"""
'blog' 도메인의 API 엔드포인트를 정의하는 모듈입니다 (/api/v1/blogs).

비로그인/일반 사용자는 published 상태이면서 게시일이 지난 글만 볼 수 있습니다.
관리자 등록/수정 요청은 multipart 폼이며 대표 이미지는 `image`, 태그는 JSON 배열 또는 쉼표 목록입니다.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlmodel.ext.asyncio.session import AsyncSession

from realty.core import dependencies as deps
from realty.core.exceptions import ForbiddenError
from realty.core.models import utcnow
from realty.domains.shared.forms import decode_request_form, form_file, read_image
from realty.domains.shared.schemas import ApiResponse, page_info
from realty.domains.shared.services import BLOG_IMAGE, AssetStore
from realty.domains.usr import models as usr_models

from . import crud as blog_crud
from . import schemas as blog_schemas
from . import services as blog_services
from .models import BlogStatus


router = APIRouter(tags=["Blog Management (블로그 관리)"])

AdminUser = Depends(deps.get_current_admin_user)

_FORM_OPTIONS = dict(list_fields=("tags",))


def _dump(post) -> dict:
    return blog_schemas.BlogRead.model_validate(post).model_dump(mode="json")


@router.get("/featured", response_model=ApiResponse, response_model_exclude_none=True, summary="추천 게시글")
async def read_featured_blogs(db: AsyncSession = Depends(deps.get_db_session)):
    posts = await blog_crud.blog.featured_posts(db, utcnow())
    return ApiResponse(data={"blogs": [_dump(p) for p in posts]})


@router.get("/", response_model=ApiResponse, response_model_exclude_none=True, summary="게시글 목록")
async def read_blogs(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status_filter: Optional[BlogStatus] = Query(None, alias="status", description="관리자 전용"),
    category: Optional[str] = None,
    featured: Optional[bool] = None,
    tags: Optional[str] = Query(None, description="쉼표로 구분된 태그 (하나라도 일치)"),
    search: Optional[str] = Query(None, description="제목/요약/본문 부분 일치"),
    sort: str = Query("-publish_date", description="publish_date, created_at, views, likes, title"),
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: Optional[usr_models.User] = Depends(deps.get_optional_user),
):
    admin = deps.is_admin(current_user)
    statement = blog_crud.blog.filtered(
        published_before=None if admin else utcnow(),
        status=status_filter.value if status_filter else None,
        category=category,
        featured=featured,
        tags=tags.split(",") if tags else (),
        search=search,
        sort=sort,
    )
    posts, total = await blog_crud.blog.paginate(db, statement, page=page, limit=limit)
    return ApiResponse(
        data={
            "blogs": [_dump(p) for p in posts],
            "pagination": page_info(page, limit, total, total_key="total_blogs"),
        }
    )


@router.get("/{id_or_slug}", response_model=ApiResponse, response_model_exclude_none=True, summary="게시글 상세")
async def read_blog(
    id_or_slug: str,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: Optional[usr_models.User] = Depends(deps.get_optional_user),
):
    """숫자 ID 또는 slug로 조회합니다. 공개되지 않은 글은 관리자만 볼 수 있습니다 (그 외 403)."""
    post = await blog_services.get_blog_or_404(db, id_or_slug)
    if not blog_services.is_public(post) and not deps.is_admin(current_user):
        raise ForbiddenError("Blog post not available")
    await blog_services.record_view(db, post)
    return ApiResponse(data={"blog": _dump(post)})


@router.post("/{blog_id}/like", response_model=ApiResponse, response_model_exclude_none=True, summary="좋아요")
async def like_blog(blog_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    likes = await blog_services.like_blog(db, blog_id)
    return ApiResponse(message="Blog post liked successfully", data={"likes": likes})


@router.post(
    "/", response_model=ApiResponse, response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED, summary="게시글 등록",
)
async def create_blog(
    request: Request,
    db: AsyncSession = Depends(deps.get_db_session),
    store: AssetStore = Depends(deps.get_asset_store),
    current_user: usr_models.User = AdminUser,
):
    """게시글을 등록합니다. 대표 이미지(`image`)는 필수입니다. (관리자 권한 필요)"""
    create, form = await decode_request_form(request, blog_schemas.BlogCreate, **_FORM_OPTIONS)
    image = await read_image(form_file(form, "image"), BLOG_IMAGE)
    post = await blog_services.create_blog(db, store, create, image, current_user.id)
    return ApiResponse(message="Blog post created successfully", data={"blog": _dump(post)})


@router.put("/{blog_id}", response_model=ApiResponse, response_model_exclude_none=True, summary="게시글 수정")
async def update_blog(
    blog_id: int,
    request: Request,
    db: AsyncSession = Depends(deps.get_db_session),
    store: AssetStore = Depends(deps.get_asset_store),
    _admin: usr_models.User = AdminUser,
):
    """전달된 필드만 수정합니다. tags는 빈 값으로 비울 수 있습니다."""
    update, form = await decode_request_form(
        request, blog_schemas.BlogUpdate, clearable=("tags",), **_FORM_OPTIONS
    )
    image = await read_image(form_file(form, "image"), BLOG_IMAGE)
    post = await blog_services.get_blog_or_404(db, str(blog_id))
    post, warnings = await blog_services.update_blog(db, store, post, update, image)
    return ApiResponse(
        message="Blog post updated successfully", data={"blog": _dump(post)}, warnings=warnings or None
    )


@router.delete("/{blog_id}", response_model=ApiResponse, response_model_exclude_none=True, summary="게시글 삭제")
async def delete_blog(
    blog_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    store: AssetStore = Depends(deps.get_asset_store),
    _admin: usr_models.User = AdminUser,
):
    post = await blog_services.get_blog_or_404(db, str(blog_id))
    warnings = await blog_services.delete_blog(db, store, post)
    return ApiResponse(message="Blog post deleted successfully", warnings=warnings or None)
