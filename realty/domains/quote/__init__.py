# realty/domains/quote/__init__.py

"""
FastAPI 애플리케이션의 'quote' 도메인 패키지입니다.

방문자가 제출한 견적 요청과, 관리자가 처리 과정에서 남기는 메모를 관리합니다.
제출은 공개 API이고 조회/수정/통계는 관리자 전용입니다.
"""

__title__ = "Realty Quote Request Domain"
__description__ = "Collects and tracks design/construction quote requests."
__version__ = "0.1.0"
__all__ = ["models", "schemas", "crud", "services", "routers"]
