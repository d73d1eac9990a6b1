# realty/domains/shared/forms.py

"""
관리자 수정 API가 공유하는 multipart 폼 디코딩 헬퍼입니다.

- 텍스트 필드: 전달된 키만 모아 스키마로 검증합니다. 회사 라우터에서는 빈 문자열이 '값 비우기'이고,
  `decode_request_form`을 쓰는 라우터에서는 `clearable` 필드에서만 그렇습니다.
- JSON 필드: 중첩 객체(about, social_media 등)는 JSON 문자열로 전달됩니다.
- 목록 필드: JSON 배열 또는 쉼표로 구분된 문자열 ("en, ar")을 받습니다.
- 이미지 파일: 원격 저장소를 호출하기 전에 용량/형식 제약을 검사합니다.
"""

import json
from typing import Any, Dict, Iterable, List, Optional, Tuple, Type

from fastapi import Request, UploadFile
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from starlette.datastructures import FormData

from realty.core.exceptions import ValidationError
from .services import ImageConstraints, ImageUpload, check_constraints


def decode_form(
    schema: Type[BaseModel],
    fields: Dict[str, Optional[str]],
    *,
    json_fields: Iterable[str] = (),
    list_fields: Iterable[str] = (),
) -> BaseModel:
    """
    전달된 폼 필드만 모아 스키마로 검증합니다 (None은 '전달되지 않음', ""는 '값 비우기').
    JSON 필드의 파싱 오류와 스키마 위반을 모두 모아 한 번에 400으로 보고합니다.
    """
    json_fields = set(json_fields)
    list_fields = set(list_fields)
    errors: List[Dict[str, Any]] = []
    raw: Dict[str, Any] = {}
    for key, value in fields.items():
        if value is None:
            continue
        if key in json_fields:
            if not value.strip():
                continue
            try:
                parsed = json.loads(value)
            except json.JSONDecodeError:
                errors.append({"field": key, "message": "Must be a valid JSON object"})
                continue
            if not isinstance(parsed, dict):
                errors.append({"field": key, "message": "Must be a JSON object"})
                continue
            value = parsed
        elif key in list_fields:
            try:
                value = split_list(value)
            except ValueError as e:
                errors.append({"field": key, "message": str(e)})
                continue
        raw[key] = value

    try:
        decoded = schema.model_validate(raw)
    except PydanticValidationError as e:
        errors.extend(ValidationError.from_pydantic(e).errors)
        decoded = None

    if errors:
        raise ValidationError(errors=errors)
    return decoded


def split_list(value: str) -> List[Any]:
    """`["a", "b"]` 형식의 JSON 배열 또는 `a, b` 형식의 쉼표 목록을 리스트로 변환합니다."""
    text = value.strip()
    if not text:
        return []
    if text.startswith("["):
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError:
            raise ValueError("Must be a valid JSON array")
        if not isinstance(parsed, list):
            raise ValueError("Must be a JSON array")
        return parsed
    return [part.strip() for part in text.split(",") if part.strip()]


def form_values(
    form: FormData, names: Iterable[str], *, clearable: Iterable[str] = ()
) -> Dict[str, Optional[str]]:
    """
    폼에 실제로 전달된 텍스트 필드만 돌려줍니다.
    빈 문자열은 `clearable`에 있는 필드에서만 '값 비우기'로 남고, 나머지는 전달되지 않은 것으로 봅니다.
    """
    clearable = set(clearable)
    values: Dict[str, Optional[str]] = {}
    for name in names:
        value = form.get(name)
        if not isinstance(value, str):
            continue
        if value.strip() == "" and name not in clearable:
            continue
        values[name] = value
    return values


async def decode_request_form(
    request: Request,
    schema: Type[BaseModel],
    *,
    json_fields: Iterable[str] = (),
    list_fields: Iterable[str] = (),
    clearable: Iterable[str] = (),
) -> Tuple[BaseModel, FormData]:
    """
    요청 폼에서 스키마 필드만 골라 검증합니다.
    파일 파트를 읽을 수 있도록 디코딩 결과와 함께 폼 자체도 반환합니다.
    """
    form = await request.form()
    fields = form_values(form, schema.model_fields, clearable=clearable)
    return decode_form(schema, fields, json_fields=json_fields, list_fields=list_fields), form


def form_file(form: FormData, name: str) -> Optional[UploadFile]:
    """이름이 `name`인 첫 번째 파일 파트 (없거나 텍스트 값이면 None)"""
    value = form.get(name)
    return None if value is None or isinstance(value, str) else value


async def sent_fields(request: Request, **values: Optional[str]) -> Dict[str, Optional[str]]:
    """
    Form(None)은 빈 문자열을 None으로 바꿉니다. 폼에 키가 빈 값으로 실제 전달됐다면
    ""를 되살려 '값 비우기'와 '전달되지 않음'을 구분합니다.
    """
    form = await request.form()
    return {
        key: "" if value is None and form.get(key) == "" else value
        for key, value in values.items()
    }


async def read_image(upload_file: Optional[UploadFile], constraints: ImageConstraints) -> Optional[ImageUpload]:
    """첨부 이미지를 읽고, 저장된 데이터를 건드리기 전에 용량/형식 제약을 검사합니다."""
    image = await ImageUpload.from_upload_file(upload_file)
    if image is not None:
        check_constraints(
            image.data, filename=image.filename, content_type=image.content_type, constraints=constraints
        )
    return image


async def read_images(
    form: FormData, name: str, constraints: ImageConstraints, *, max_count: int
) -> List[ImageUpload]:
    """같은 이름으로 전달된 여러 이미지를 읽습니다. 개수 제한을 넘으면 400입니다."""
    files = [item for item in form.getlist(name) if not isinstance(item, str)]
    if len(files) > max_count:
        raise ValidationError(errors=[{"field": name, "message": f"At most {max_count} files are allowed"}])
    images = []
    for upload_file in files:
        image = await read_image(upload_file, constraints)
        if image is not None:
            images.append(image)
    return images
