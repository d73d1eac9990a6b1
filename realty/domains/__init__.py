# realty/domains/__init__.py

"""
비즈니스 도메인 서브패키지 모음입니다.

각 도메인은 PostgreSQL의 동일한 이름의 스키마에 대응합니다.
- `usr`: 사용자 계정 및 인증.
- `corp`: 단일 활성 회사 프로필 (팀원, 파트너 포함).
- `shared`: 응답 엔벨로프, 원격 이미지 저장소 게이트웨이, 삭제 대기열.
"""
