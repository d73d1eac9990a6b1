# realty/domains/models/__init__.py

"""
모든 도메인의 SQLModel 모델을 한 곳에서 임포트하여
SQLModel.metadata가 모든 테이블을 인식하도록 보장합니다. (Alembic, 테스트용 테이블 생성)
"""

# usr (User, UserRole)
from realty.domains.usr.models import User, UserRole

# shared (PendingAssetDeletion)
from realty.domains.shared.models import PendingAssetDeletion

# corp (Company, TeamMember, Partner)
from realty.domains.corp.models import Company, TeamMember, Partner

# agt (Agent)
from realty.domains.agt.models import Agent

# prop (Property)
from realty.domains.prop.models import Property

# blog (Blog)
from realty.domains.blog.models import Blog

# quote (QuoteRequest, QuoteNote)
from realty.domains.quote.models import QuoteRequest, QuoteNote


__all__ = [
    # usr
    "User", "UserRole",
    # shared
    "PendingAssetDeletion",
    # corp
    "Company", "TeamMember", "Partner",
    # agt
    "Agent",
    # prop
    "Property",
    # blog
    "Blog",
    # quote
    "QuoteRequest", "QuoteNote",
]
