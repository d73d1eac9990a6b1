# realty/core/__init__.py

"""
FastAPI 애플리케이션의 핵심 구성 요소 패키지입니다.

- `config.py`: 애플리케이션의 설정 및 환경 변수 관리 (Pydantic Settings).
- `database.py`: 데이터베이스 연결, 세션 관리 (SQLModel 및 AsyncSQLAlchemy).
- `security.py`: 사용자 인증, 권한 부여, 비밀번호 해싱 등 보안 관련 유틸리티.
- `dependencies.py`: FastAPI 의존성 주입 시스템에서 사용될 공통 의존성 함수들.
- `exceptions.py`: 도메인 공통 예외 계층과 응답 엔벨로프 변환 규칙.
- `crud_base.py`: 단순 테이블용 공통 CRUD 베이스 클래스.
- `models.py`: 여러 도메인 테이블이 공유하는 타임스탬프 믹스인.
"""

__title__ = "Realty Core"
__description__ = "Core components for the Realty CMS FastAPI application."
__version__ = "0.1.0"
__all__ = []
