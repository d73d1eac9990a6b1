# realty/domains/agt/__init__.py

"""
FastAPI 애플리케이션의 'agt' 도메인 패키지입니다.

매물을 담당하는 부동산 에이전트의 프로필(연락처, 전문 분야, 경력, 근무 시간, 평점)을 관리합니다.

주요 서브모듈:
- `models.py`: 'agt' 스키마의 agents 테이블.
- `schemas.py`: 요청/응답 Pydantic 모델.
- `crud.py`: 목록 필터, 담당 매물 통계.
- `services.py`: 프로필 이미지 교체를 포함한 생성/수정/삭제.
- `routers.py`: 공개 조회 및 관리자 API 엔드포인트.
"""

__title__ = "Realty Agent Domain"
__description__ = "Manages real-estate agent profiles."
__version__ = "0.1.0"
__all__ = ["models", "schemas", "crud", "services", "routers"]
