# realty/domains/usr/__init__.py

"""
FastAPI 애플리케이션의 'usr' 도메인 패키지입니다.

PostgreSQL의 'usr' 스키마에 해당하는 사용자 계정 모델과
로그인(토큰 발급), 사용자 관리 API 엔드포인트를 포함합니다.

주요 서브모듈:
- `models.py`: 'usr' 스키마의 테이블에 매핑되는 SQLModel 정의.
- `schemas.py`: 요청 및 응답 유효성 검사용 Pydantic 모델.
- `crud.py`: 사용자 조회/생성/인증 로직.
- `routers.py`: 인증 및 사용자 관리 API 엔드포인트.
"""

__title__ = "Realty User Domain"
__description__ = "Manages user accounts and authentication."
__version__ = "0.1.0"
__all__ = []
