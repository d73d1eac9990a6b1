# realty/domains/blog/services.py

"""
'blog' 도메인의 비즈니스 로직 모듈입니다.

- slug: 제목을 소문자로 바꾸고 단어 문자/공백 외의 문자를 지운 뒤 공백을 '-'로 잇고,
  '-<밀리초 타임스탬프>'를 붙입니다. 제목이 바뀌면 다시 만들어집니다.
- read_time: 본문 단어 수 / 200 을 올림한 값 (최소 1분). 본문이 바뀌면 다시 계산됩니다.
"""

import logging
import math
import re
from datetime import UTC, datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlmodel.ext.asyncio.session import AsyncSession

from realty.core.exceptions import NotFoundError, ValidationError
from realty.core.models import utcnow
from realty.domains.shared.services import (
    BLOG_IMAGE,
    AssetStore,
    ImageUpload,
    collect_warnings,
    discard_asset,
    upload_image,
)
from . import crud as blog_crud
from . import models as blog_models
from . import schemas as blog_schemas

logger = logging.getLogger(__name__)

WORDS_PER_MINUTE = 200

_NON_WORD = re.compile(r"[^\w ]+")
_SPACES = re.compile(r" +")


def compute_read_time(content: str) -> int:
    return max(1, math.ceil(len(content.split()) / WORDS_PER_MINUTE))


def make_slug(title: str, stamp_ms: int) -> str:
    base = _SPACES.sub("-", _NON_WORD.sub("", title.lower()))
    return f"{base}-{stamp_ms}"


async def unique_slug(db: AsyncSession, title: str) -> str:
    """같은 밀리초에 만든 slug가 이미 있으면 타임스탬프를 1씩 올립니다."""
    stamp = int(utcnow().timestamp() * 1000)
    slug = make_slug(title, stamp)
    while await blog_crud.blog.slug_taken(db, slug):
        stamp += 1
        slug = make_slug(title, stamp)
    return slug


def _as_utc(value: datetime) -> datetime:
    # SQLite는 시간대 정보 없이 UTC 값을 돌려줍니다.
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value


def is_public(post: blog_models.Blog, now: Optional[datetime] = None) -> bool:
    now = now or utcnow()
    return post.status == blog_models.BlogStatus.PUBLISHED.value and _as_utc(post.publish_date) <= now


async def get_blog_or_404(db: AsyncSession, id_or_slug: str) -> blog_models.Blog:
    """숫자면 ID로, 아니면 slug로 찾습니다."""
    if id_or_slug.isdigit():
        post = await blog_crud.blog.reload(db, int(id_or_slug))
    else:
        found = await blog_crud.blog.get_by_slug(db, id_or_slug)
        post = await blog_crud.blog.reload(db, found.id) if found else None
    if post is None:
        raise NotFoundError("Blog post not found")
    return post


async def _commit_or_cleanup(
    db: AsyncSession, store: AssetStore, post: blog_models.Blog, new_image_url: Optional[str]
) -> blog_models.Blog:
    try:
        db.add(post)
        await db.commit()
    except Exception:
        await db.rollback()
        await discard_asset(None, store, new_image_url)
        raise
    return await blog_crud.blog.reload(db, post.id)


async def create_blog(
    db: AsyncSession,
    store: AssetStore,
    create: blog_schemas.BlogCreate,
    image: Optional[ImageUpload],
    acting_user_id: Optional[int],
) -> blog_models.Blog:
    if image is None:
        raise ValidationError(errors=[{"field": "image", "message": "Blog image is required"}])

    values = create.model_dump(mode="python", exclude={"publish_date"})
    values["status"] = create.status.value
    slug = await unique_slug(db, create.title)
    asset = await upload_image(store, image, BLOG_IMAGE)
    post = blog_models.Blog(
        **values,
        publish_date=create.publish_date or utcnow(),
        read_time=compute_read_time(create.content),
        slug=slug,
        image=asset.url,
        created_by_id=acting_user_id,
    )
    post = await _commit_or_cleanup(db, store, post, asset.url)
    logger.info("블로그 게시글 등록: id=%s, slug=%s, status=%s", post.id, post.slug, post.status)
    return post


async def update_blog(
    db: AsyncSession,
    store: AssetStore,
    post: blog_models.Blog,
    update: blog_schemas.BlogUpdate,
    image: Optional[ImageUpload],
) -> Tuple[blog_models.Blog, List[str]]:
    changes: Dict[str, Any] = update.model_dump(exclude_unset=True, exclude_none=True, mode="python")
    if "status" in changes:
        changes["status"] = changes["status"].value
    if "title" in changes and changes["title"] != post.title:
        changes["slug"] = await unique_slug(db, changes["title"])
    if "content" in changes:
        changes["read_time"] = compute_read_time(changes["content"])

    warnings: List[str] = []
    new_url = None
    if image is not None:
        asset = await upload_image(store, image, BLOG_IMAGE)
        new_url = asset.url
        warnings.extend(collect_warnings(await discard_asset(db, store, post.image)))
        changes["image"] = new_url

    post.sqlmodel_update(changes)
    post = await _commit_or_cleanup(db, store, post, new_url)
    logger.info("블로그 게시글 수정: id=%s, fields=%s", post.id, sorted(changes))
    return post, warnings


async def delete_blog(db: AsyncSession, store: AssetStore, post: blog_models.Blog) -> List[str]:
    post_id = post.id
    cleanup = await discard_asset(db, store, post.image)
    await db.delete(post)
    await db.commit()
    logger.info("블로그 게시글 삭제: id=%s", post_id)
    return collect_warnings(cleanup)


async def record_view(db: AsyncSession, post: blog_models.Blog) -> None:
    views = await blog_crud.blog.increment(db, post.id, "views")
    if views is not None:
        post.views = views


async def like_blog(db: AsyncSession, blog_id: int) -> int:
    likes = await blog_crud.blog.increment(db, blog_id, "likes")
    if likes is None:
        raise NotFoundError("Blog post not found")
    return likes
