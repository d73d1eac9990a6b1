# tests/domains/__init__.py

"""
도메인별 테스트 스위트 패키지입니다.

- `test_auth_n.py`, `test_usr_n.py`: 'usr' 도메인 (인증, 사용자 관리).
- `test_corp_n.py`: 'corp' 도메인 API (회사 정보, 팀원, 파트너).
- `test_corp_services.py`: 'corp' 도메인 서비스/저장소 (병합, 활성 회사 지연 생성).
- `test_shared_n.py`: 'shared' 도메인 (이미지 저장소 게이트웨이, 삭제 재시도 태스크).
"""

__title__ = "Realty CMS Domain Tests"
__version__ = "0.1.0"
__all__ = []
