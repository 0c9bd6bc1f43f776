from dataclasses import dataclass, field
from enum import Enum


class StockFilter(str, Enum):
    ALL = 'all'
    IN = 'in'
    OUT = 'out'


class SortField(str, Enum):
    CREATED_AT = 'createdAt'
    PRICE = 'price'
    NAME = 'name'
    RATING = 'rating'


class SortOrder(str, Enum):
    ASC = 'asc'
    DESC = 'desc'


@dataclass(frozen=True)
class Pagination:
    """Paging as reported by the server; never computed locally."""
    current_page: int = 1
    total_pages: int = 0
    total_count: int = 0
    has_next_page: bool = False
    has_previous_page: bool = False

    @property
    def can_go_next(self):
        return self.has_next_page

    @property
    def can_go_previous(self):
        return self.has_previous_page

    def to_dict(self):
        return {
            'currentPage': self.current_page,
            'totalPages': self.total_pages,
            'totalCount': self.total_count,
            'hasNextPage': self.has_next_page,
            'hasPreviousPage': self.has_previous_page,
        }


@dataclass(frozen=True)
class ProductPage:
    products: list = field(default_factory=list)
    pagination: Pagination = field(default_factory=Pagination)


class ReviewMode(str, Enum):
    SIGN_IN = 'sign_in'
    PURCHASE_REQUIRED = 'purchase_required'
    FRESH_FORM = 'fresh_form'
    EXISTING_REVIEW = 'existing_review'
    EDITING = 'editing'


@dataclass(frozen=True)
class ReviewEligibility:
    """The backend's verdict on whether the viewer may review a product."""
    can_review: bool = False
    has_reviewed: bool = False
    user_review: dict = None
    reviews: list = field(default_factory=list)
