# realty/domains/shared/services.py

"""
원격 이미지 저장소(Cloudinary) 게이트웨이 서비스 모듈입니다.

- 이미지 종류별 업로드 제약 조건 (회사 로고, 팀원 사진, 파트너 로고, 매물/에이전트/블로그 이미지).
- 공식 SDK를 이용한 업로드/삭제 (`CloudinaryAssetStore`).
- URL에서 자산 식별자(public_id)를 추출하는 순수 함수 (`id_from_url`).
- 실패해도 작업을 중단하지 않는 이전 이미지 정리 (`discard_asset`).
"""

import asyncio
import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Protocol, Tuple

import cloudinary.exceptions
import cloudinary.uploader
from fastapi import UploadFile, status
from sqlmodel.ext.asyncio.session import AsyncSession

from realty.core.config import settings
from realty.core.exceptions import DeleteError, UploadError
from . import crud as shared_crud
from .schemas import AssetRef

logger = logging.getLogger(__name__)

MB = 1024 * 1024


@dataclass(frozen=True)
class ImageConstraints:
    """이미지 종류별 업로드 제약 조건"""
    kind: str
    folder: str
    max_bytes: int
    allowed_formats: Tuple[str, ...]
    transformation: Tuple[Tuple[str, Any], ...]   # SDK 변환 파라미터 (crop, width, ...)


COMPANY_LOGO = ImageConstraints(
    kind="company logo",
    folder="company_images/logos",
    max_bytes=5 * MB,
    allowed_formats=("jpg", "jpeg", "png", "webp", "svg"),
    transformation=(("crop", "limit"), ("width", 500), ("height", 500), ("quality", "auto")),
)
TEAM_IMAGE = ImageConstraints(
    kind="team member image",
    folder="company_images/team",
    max_bytes=3 * MB,
    allowed_formats=("jpg", "jpeg", "png", "webp"),
    transformation=(("crop", "fill"), ("gravity", "face"), ("width", 400), ("height", 400), ("quality", "auto")),
)
PARTNER_LOGO = ImageConstraints(
    kind="partner logo",
    folder="company_images/partners",
    max_bytes=2 * MB,
    allowed_formats=("jpg", "jpeg", "png", "webp", "svg"),
    transformation=(("crop", "fit"), ("width", 300), ("height", 200), ("quality", "auto")),
)
PROPERTY_IMAGE = ImageConstraints(
    kind="property image",
    folder="properties",
    max_bytes=5 * MB,
    allowed_formats=("jpg", "jpeg", "png", "webp"),
    transformation=(("crop", "limit"), ("width", 1920), ("height", 1080), ("quality", "auto")),
)
AGENT_IMAGE = ImageConstraints(
    kind="agent image",
    folder="agents",
    max_bytes=5 * MB,
    allowed_formats=("jpg", "jpeg", "png", "webp"),
    transformation=(("crop", "fill"), ("gravity", "face"), ("width", 400), ("height", 400), ("quality", "auto")),
)
BLOG_IMAGE = ImageConstraints(
    kind="blog image",
    folder="blogs",
    max_bytes=5 * MB,
    allowed_formats=("jpg", "jpeg", "png", "webp"),
    transformation=(("crop", "limit"), ("width", 1600), ("height", 900), ("quality", "auto")),
)


@dataclass
class ImageUpload:
    """요청에서 읽어 들인 업로드 파일 내용"""
    data: bytes
    filename: str
    content_type: Optional[str] = None

    @classmethod
    async def from_upload_file(cls, upload_file: Optional[UploadFile]) -> Optional["ImageUpload"]:
        """파일이 첨부되지 않았거나 이름이 빈 파트는 '이미지 없음'으로 취급합니다."""
        if upload_file is None or not upload_file.filename:
            return None
        data = await upload_file.read()
        return cls(data=data, filename=upload_file.filename, content_type=upload_file.content_type)


# Cloudinary 전달 URL: .../image/upload/<변환>/v<버전>/<public_id>.<확장자>
_VERSIONED_PATH = re.compile(r"/v\d+/(.+)\.[^./]+$")


def id_from_url(url: Any) -> Optional[str]:
    """
    이미지 URL에서 버전 표식 `/v<숫자>/` 이후, 마지막 `.` 이전의 경로를 식별자로 반환합니다.
    형식이 맞지 않으면 None을 반환합니다.
    """
    if not url or not isinstance(url, str):
        return None
    path = url.split("?", 1)[0].split("#", 1)[0]
    match = _VERSIONED_PATH.search(path)
    if not match:
        return None
    return match.group(1)


class AssetStore(Protocol):
    async def upload(
        self, data: bytes, *, filename: str, content_type: Optional[str], constraints: ImageConstraints
    ) -> AssetRef:
        ...

    async def delete(self, public_id: str) -> None:
        ...

    def id_from_url(self, url: Any) -> Optional[str]:
        ...


def check_constraints(
    data: bytes, *, filename: str, content_type: Optional[str], constraints: ImageConstraints
) -> None:
    """원격 호출 전에 용량/형식 제약을 검사합니다. 위반 시 400 UploadError."""
    if not data:
        raise UploadError(f"Uploaded {constraints.kind} is empty", status_code=status.HTTP_400_BAD_REQUEST)
    if len(data) > constraints.max_bytes:
        raise UploadError(
            f"{constraints.kind.capitalize()} exceeds the {constraints.max_bytes // MB}MB limit",
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    if content_type and not content_type.lower().startswith("image/"):
        raise UploadError("Only image files are allowed!", status_code=status.HTTP_400_BAD_REQUEST)
    extension = Path(filename).suffix.lower().lstrip(".")
    if extension not in constraints.allowed_formats:
        raise UploadError(
            f"Unsupported image format '{extension or filename}'. "
            f"Allowed: {', '.join(constraints.allowed_formats)}",
            status_code=status.HTTP_400_BAD_REQUEST,
        )


class CloudinaryAssetStore:
    """
    공식 `cloudinary` SDK를 감싼 게이트웨이.

    SDK 호출은 동기식이므로 `asyncio.to_thread`로 실행합니다.
    요청 서명은 SDK가 처리하며, 계정 정보는 전역 설정 대신 호출마다 옵션으로 넘깁니다.
    모든 호출은 SDK의 `timeout` 옵션과 `asyncio.wait_for`로 `timeout` 초 안에 끝납니다.
    """

    def __init__(self, cloud_name: str, api_key: str, api_secret: str, *, timeout: float = 10.0):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.timeout = timeout

    @classmethod
    def from_settings(cls) -> "CloudinaryAssetStore":
        return cls(
            settings.CLOUDINARY_CLOUD_NAME,
            settings.CLOUDINARY_API_KEY,
            settings.CLOUDINARY_API_SECRET.get_secret_value(),
            timeout=settings.ASSET_STORE_TIMEOUT_SECONDS,
        )

    @property
    def configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)

    def _options(self, **options: Any) -> Dict[str, Any]:
        return dict(
            options,
            cloud_name=self.cloud_name,
            api_key=self.api_key,
            api_secret=self.api_secret,
            timeout=self.timeout,
        )

    async def _call(self, func, *args: Any, **options: Any) -> Any:
        return await asyncio.wait_for(
            asyncio.to_thread(func, *args, **self._options(**options)),
            timeout=self.timeout,
        )

    id_from_url = staticmethod(id_from_url)

    async def upload(
        self, data: bytes, *, filename: str, content_type: Optional[str], constraints: ImageConstraints
    ) -> AssetRef:
        check_constraints(data, filename=filename, content_type=content_type, constraints=constraints)
        if not self.configured:
            raise UploadError("Image storage is not configured")

        try:
            body = await self._call(
                cloudinary.uploader.upload,
                data,
                folder=constraints.folder,
                transformation=[dict(constraints.transformation)],
                resource_type="image",
            )
        except asyncio.TimeoutError:
            logger.error("이미지 업로드 시간 초과 (%ss): %s", self.timeout, filename)
            raise UploadError("Image upload timed out")
        except cloudinary.exceptions.Error as e:
            logger.error("이미지 업로드 실패 (%s): %s", type(e).__name__, e)
            raise UploadError("Image upload failed")

        if not isinstance(body, dict):
            raise UploadError("Image upload returned an incomplete response")
        url = body.get("secure_url") or body.get("url")
        public_id = body.get("public_id")
        if not url or not public_id:
            raise UploadError("Image upload returned an incomplete response")
        logger.info("이미지 업로드 완료: %s", public_id)
        return AssetRef(url=url, public_id=public_id)

    async def delete(self, public_id: str) -> None:
        if not self.configured:
            raise DeleteError("Image storage is not configured")
        try:
            body = await self._call(cloudinary.uploader.destroy, public_id, resource_type="image")
        except asyncio.TimeoutError:
            raise DeleteError(f"Deleting {public_id} timed out")
        except cloudinary.exceptions.Error as e:
            raise DeleteError(f"Deleting {public_id} failed: {e}")

        if not isinstance(body, dict):
            raise DeleteError(f"Deleting {public_id} returned an unexpected response")
        result = body.get("result")
        # "not found"는 이미 삭제된 것으로 간주
        if result not in ("ok", "not found"):
            raise DeleteError(f"Deleting {public_id} returned '{result}'")


@lru_cache
def get_asset_store() -> CloudinaryAssetStore:
    """FastAPI 의존성: 설정값으로 만든 게이트웨이 (프로세스당 하나)"""
    return CloudinaryAssetStore.from_settings()


@dataclass
class CleanupResult:
    """이전 이미지 정리 결과. 실패는 예외가 아니라 `warning`으로 보고됩니다."""
    url: str
    public_id: Optional[str]
    deleted: bool
    error: Optional[str] = None

    @property
    def warning(self) -> Optional[str]:
        if self.deleted:
            return None
        return f"Could not delete previous image {self.public_id or self.url}: {self.error}"


async def discard_asset(db: Optional[AsyncSession], store: AssetStore, url: Optional[str]) -> Optional[CleanupResult]:
    """
    더 이상 참조되지 않는 이미지를 원격 저장소에서 삭제합니다 (best-effort).

    삭제에 실패하면 경고 로그를 남기고 `db`가 주어진 경우 삭제 대기 행을 세션에 추가합니다.
    대기 행은 호출한 작업의 커밋과 함께 저장되며, ARQ 태스크가 재시도합니다.
    URL이 비어 있으면 None을 반환합니다.
    """
    if not url:
        return None

    public_id = store.id_from_url(url)
    if public_id is None:
        logger.warning("자산 식별자를 추출할 수 없는 이미지 URL: %s", url)
        return CleanupResult(url=url, public_id=None, deleted=False, error="unrecognized image URL")

    try:
        await store.delete(public_id)
    except DeleteError as e:
        logger.warning("이전 이미지 삭제 실패 (재시도 대기열에 추가): %s - %s", public_id, e.message)
        error = e.message
    except Exception as e:
        # 게이트웨이가 예상하지 못한 오류도 정리 실패로만 취급합니다.
        logger.exception("이전 이미지 삭제 중 예기치 않은 오류: %s", public_id)
        error = f"unexpected error: {type(e).__name__}"
    else:
        logger.info("이전 이미지 삭제 완료: %s", public_id)
        return CleanupResult(url=url, public_id=public_id, deleted=True)

    if db is not None:
        shared_crud.pending_deletion.enqueue(db, public_id=public_id, url=url, error=error)
    return CleanupResult(url=url, public_id=public_id, deleted=False, error=error)


async def upload_image(store: AssetStore, image: ImageUpload, constraints: ImageConstraints) -> AssetRef:
    return await store.upload(
        image.data, filename=image.filename, content_type=image.content_type, constraints=constraints
    )


async def upload_all(
    store: AssetStore, images: List[ImageUpload], constraints: ImageConstraints
) -> List[AssetRef]:
    """
    여러 이미지를 차례로 업로드합니다.
    도중에 실패하면 이미 올라간 이미지를 정리한 뒤 원래 오류를 다시 발생시킵니다.
    """
    uploaded: List[AssetRef] = []
    try:
        for image in images:
            uploaded.append(await upload_image(store, image, constraints))
    except UploadError:
        await discard_assets(None, store, [ref.url for ref in uploaded])
        raise
    return uploaded


async def discard_assets(
    db: Optional[AsyncSession], store: AssetStore, urls: Iterable[Optional[str]]
) -> List[CleanupResult]:
    """`discard_asset`을 여러 URL에 적용합니다. 빈 URL은 건너뜁니다."""
    results = []
    for url in urls:
        result = await discard_asset(db, store, url)
        if result is not None:
            results.append(result)
    return results


def collect_warnings(*results: Optional[CleanupResult]) -> list:
    return [result.warning for result in results if result is not None and result.warning]
