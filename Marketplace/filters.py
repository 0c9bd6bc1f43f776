"""
Catalog filter state and the browser that keeps the product list in sync
with it.
"""
import logging
import math
import threading
from dataclasses import dataclass, fields, replace

from django.conf import settings

from landycakes.backend import BackendError

from .models import ProductPage, SortField, SortOrder, StockFilter
from .services import fetch_products

logger = logging.getLogger(__name__)

ALL = 'all'
DEFAULT_MIN_PRICE = 0
DEFAULT_MAX_PRICE = 10000


def _page_size():
    return getattr(settings, 'CATALOG_PAGE_SIZE', 12)


def _number(value, default, cast=float):
    """Parse a non-negative finite number, or fall back to `default`."""
    if value in (None, ''):
        return default
    try:
        number = cast(value)
    except (ValueError, TypeError):
        return default
    if not math.isfinite(number) or number < 0:
        return default
    return number


def _choice(enum, value, default):
    try:
        return enum(value).value
    except ValueError:
        return default


@dataclass(frozen=True)
class ProductFilterState:
    search: str = ''
    category: str = ALL
    min_price: float = DEFAULT_MIN_PRICE
    max_price: float = DEFAULT_MAX_PRICE
    stock: str = StockFilter.ALL.value
    min_rating: float = 0
    seller: str = ALL
    sort_by: str = SortField.CREATED_AT.value
    sort_order: str = SortOrder.DESC.value
    page: int = 1
    limit: int = None

    def __post_init__(self):
        if self.limit is None or self.limit < 1:
            object.__setattr__(self, 'limit', _page_size())
        if self.page < 1:
            object.__setattr__(self, 'page', 1)

    @property
    def price_range(self):
        return (self.min_price, self.max_price)

    def with_changes(self, **changes):
        """
        Apply facet changes. Changing anything other than the page sends the
        buyer back to page 1.
        """
        changed = {k for k, v in changes.items() if getattr(self, k) != v}
        if changed - {'page'}:
            changes['page'] = 1
        return replace(self, **changes)

    def cleared(self):
        return ProductFilterState(limit=self.limit)

    def to_query_params(self):
        params = {
            'minPrice': self.min_price,
            'maxPrice': self.max_price,
            'sortBy': self.sort_by,
            'sortOrder': self.sort_order,
            'page': self.page,
            'limit': self.limit,
        }
        if self.search.strip():
            params['search'] = self.search.strip()
        if self.category and self.category != ALL:
            params['category'] = self.category
        if self.stock != StockFilter.ALL.value:
            params['stock'] = self.stock
        if self.min_rating:
            params['minRating'] = self.min_rating
        if self.seller and self.seller != ALL:
            params['sellerId'] = self.seller
        return params

    def to_dict(self):
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_query(cls, query):
        """Build a state from request parameters; bad values fall back to defaults."""
        return cls(
            search=query.get('search', '') or '',
            category=query.get('category') or ALL,
            min_price=_number(query.get('minPrice'), DEFAULT_MIN_PRICE),
            max_price=_number(query.get('maxPrice'), DEFAULT_MAX_PRICE),
            stock=_choice(StockFilter, query.get('stock'), StockFilter.ALL.value),
            min_rating=_number(query.get('minRating'), 0),
            seller=query.get('sellerId') or ALL,
            sort_by=_choice(SortField, query.get('sortBy'), SortField.CREATED_AT.value),
            sort_order=_choice(SortOrder, query.get('sortOrder'), SortOrder.DESC.value),
            page=_number(query.get('page'), 1, int),
            limit=_number(query.get('limit'), _page_size(), int),
        )


class CatalogBrowser:
    """
    Holds the filter state and the latest product page. Every change refetches.

    Fetches are numbered; a response is applied only if no newer fetch has
    started since, so a slow earlier response cannot replace fresher results.
    """

    def __init__(self, client, state=None):
        self.client = client
        self.state = state or ProductFilterState()
        self.result = ProductPage()
        self.error = None
        self.fetches = 0
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def products(self):
        return self.result.products

    @property
    def pagination(self):
        return self.result.pagination

    def set_filters(self, **changes):
        self.state = self.state.with_changes(**changes)
        return self.refetch()

    def set_page(self, page):
        self.state = self.state.with_changes(page=page)
        return self.refetch()

    def next_page(self):
        if not self.pagination.can_go_next:
            return False
        return self.set_page(self.state.page + 1)

    def previous_page(self):
        if not self.pagination.can_go_previous:
            return False
        return self.set_page(self.state.page - 1)

    def clear_filters(self):
        self.state = self.state.cleared()
        return self.refetch()

    def refetch(self):
        """Fetch the products for the current state. Returns True if the response was applied."""
        with self._lock:
            self._generation += 1
            generation = self._generation
            state = self.state
            self.fetches += 1

        try:
            page = fetch_products(self.client, state)
        except BackendError as exc:
            return self._apply(generation, error=exc.message)
        return self._apply(generation, page=page)

    def _apply(self, generation, page=None, error=None):
        with self._lock:
            if generation != self._generation:
                logger.debug("Dropping stale catalog response #%d (latest #%d)", generation, self._generation)
                return False
            if error is not None:
                self.error = error
            else:
                self.result = page
                self.error = None
            return True
