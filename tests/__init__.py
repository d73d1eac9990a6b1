# tests/__init__.py

"""
Realty CMS 백엔드의 테스트 스위트 패키지입니다.

- `conftest.py`: 인메모리 SQLite DB, 이미지 저장소 대역(FakeAssetStore), 역할별 인증 클라이언트 픽스처.
- `test_main.py`: 루트/헬스 체크 엔드포인트와 공통 오류 엔벨로프.
- `domains/`: 도메인(usr, corp, shared)별 API 및 서비스 테스트.
"""

__title__ = "Realty CMS API Tests"
__version__ = "0.1.0"
__all__ = []
