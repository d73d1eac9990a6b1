# realty/domains/blog/__init__.py

"""
FastAPI 애플리케이션의 'blog' 도메인 패키지입니다.

회사 블로그 게시글(본문, 요약, 대표 이미지, 태그, 공개 상태, 예약 게시일)을 관리합니다.
게시글은 숫자 ID 또는 slug로 조회할 수 있습니다.
"""

__title__ = "Realty Blog Domain"
__description__ = "Manages blog posts and their publication state."
__version__ = "0.1.0"
__all__ = ["models", "schemas", "crud", "services", "routers"]
