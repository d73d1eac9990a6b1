# realty/domains/corp/__init__.py

"""
FastAPI 애플리케이션의 'corp' 도메인 패키지입니다.

'corp' 도메인은 서비스를 운영하는 부동산 회사의 프로필을 관리합니다.
회사명, 로고, 소개(about), 연락처, 소셜 미디어, 팀원, 파트너로 구성되며
활성 상태의 회사 정보는 항상 하나만 존재합니다.

주요 서브모듈:
- `models.py`: 'corp' 스키마의 테이블(companies, team_members, partners)에 매핑되는 SQLModel 정의.
- `schemas.py`: 중첩 구조(about, contacts, social_media) 및 요청/응답 Pydantic 모델.
- `crud.py`: 활성 회사 정보 저장소 (하위 컬렉션은 이 저장소를 통해서만 기록됩니다).
- `services.py`: 부분 병합 업데이트와 하위 컬렉션 편집 (이미지 교체 포함).
- `routers.py`: 공개 조회 및 관리자 수정 API 엔드포인트.
"""

__title__ = "Realty Company Profile Domain"
__description__ = "Manages the operating company's profile, team members and partners."
__version__ = "0.1.0"
__all__ = ["models", "schemas", "crud", "services", "routers"]
