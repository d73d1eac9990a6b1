# realty/domains/prop/__init__.py

"""
FastAPI 애플리케이션의 'prop' 도메인 패키지입니다.

판매/임대 매물(가격, 위치, 방 수, 편의시설, 이미지, 평면도)과 공개 상태(draft/active/inactive/deleted)를 관리합니다.
공개 사용자는 active 매물만 볼 수 있습니다.

주요 서브모듈:
- `models.py`: 'prop' 스키마의 properties 테이블.
- `schemas.py`: 요청/응답 Pydantic 모델과 목록 필터.
- `crud.py`: 필터 목록, 랜딩 페이지 묶음, 조회수 증가.
- `services.py`: 여러 이미지(대표, 갤러리, 평면도)의 업로드/교체/정리.
- `routers.py`: 공개 조회 및 관리자 API 엔드포인트.
"""

__title__ = "Realty Property Domain"
__description__ = "Manages property listings and their images."
__version__ = "0.1.0"
__all__ = ["models", "schemas", "crud", "services", "routers"]
