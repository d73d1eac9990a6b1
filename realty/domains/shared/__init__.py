# realty/domains/shared/__init__.py

"""
FastAPI 애플리케이션의 'shared' 도메인 패키지입니다.

여러 도메인에서 공통으로 사용하는 기능을 담습니다.
- `schemas.py`: 공통 응답 엔벨로프와 이미지 자산 참조.
- `services.py`: 원격 이미지 저장소(Cloudinary) 게이트웨이.
- `forms.py`: 관리자 수정 API의 multipart 폼 디코딩과 이미지 읽기.
- `models.py` / `crud.py`: 삭제에 실패한 이미지 자산의 재시도 대기열.
- `tasks.py`: 대기열을 처리하는 ARQ 태스크.
- `routers.py`: 대기열 조회용 관리자 API.
"""

__title__ = "Realty Shared Domain"
__description__ = "Response envelope, image storage gateway and pending asset deletions."
__version__ = "0.1.0"
__all__ = []
