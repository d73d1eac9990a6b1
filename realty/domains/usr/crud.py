# realty/domains/usr/crud.py

"""
usr.users 저장소. 비밀번호 해싱, 중복 검사, 관리자 계정 보호 규칙을 포함합니다.
"""

from typing import Dict, List, Optional
from sqlmodel.ext.asyncio.session import AsyncSession

from realty.core.crud_base import CRUDBase
from realty.core.exceptions import ValidationError
from realty.core.security import get_password_hash, verify_password
from . import models as usr_models
from . import schemas as usr_schemas

User = usr_models.User
UserRole = usr_models.UserRole


class CRUDUser(CRUDBase[User, usr_schemas.UserCreate, usr_schemas.UserUpdate]):
    def __init__(self):
        super().__init__(model=User)

    async def get_by_username(self, db: AsyncSession, *, username: str) -> Optional[User]:
        return await self.get_one_by(db, username=username)

    async def get_by_email(self, db: AsyncSession, *, email: str) -> Optional[User]:
        return await self.get_one_by(db, email=email)

    async def _email_taken(self, db: AsyncSession, email: Optional[str], owner_id: Optional[int] = None) -> bool:
        if not email:
            return False
        holder = await self.get_by_email(db, email=email)
        return holder is not None and holder.id != owner_id

    async def create(self, db: AsyncSession, *, obj_in: usr_schemas.UserCreate) -> User:
        """중복된 사용자명/이메일은 한 번에 모아 ValidationError(400)로 보고합니다."""
        errors: List[Dict[str, str]] = []
        if await self.get_by_username(db, username=obj_in.username):
            errors.append({"field": "username", "message": "Username already registered"})
        if await self._email_taken(db, obj_in.email):
            errors.append({"field": "email", "message": "Email already registered"})
        if errors:
            raise ValidationError(errors=errors)

        db_user = User.model_validate(
            obj_in.model_dump(exclude={"password"}),
            update={"password_hash": get_password_hash(obj_in.password)},
        )
        return await self._save(db, db_user)

    async def authenticate(self, db: AsyncSession, *, username: str, password: str) -> Optional[User]:
        """사용자명/비밀번호가 맞으면 사용자를, 아니면 None을 반환합니다 (활성 여부는 호출자가 확인)."""
        user = await self.get_by_username(db, username=username)
        if user is None or not verify_password(password, user.password_hash):
            return None
        return user

    async def update(self, db: AsyncSession, *, db_obj: User, obj_in: usr_schemas.UserUpdate) -> User:
        errors: List[Dict[str, str]] = []
        if db_obj.role == UserRole.ADMIN:
            # 관리자 계정은 강등/비활성화할 수 없습니다.
            if obj_in.role not in (None, UserRole.ADMIN):
                errors.append({"field": "role", "message": "Cannot change the role of an admin account."})
            if obj_in.is_active is False:
                errors.append({"field": "is_active", "message": "Cannot deactivate an admin account."})
        if await self._email_taken(db, obj_in.email, owner_id=db_obj.id):
            errors.append({"field": "email", "message": "Email already registered"})
        if errors:
            raise ValidationError(errors=errors)
        return await super().update(db, db_obj=db_obj, obj_in=obj_in)


user = CRUDUser()
