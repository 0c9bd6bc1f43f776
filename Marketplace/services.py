import logging

from landycakes.backend import BackendError

from .models import Pagination, ProductPage, ReviewEligibility
from .serializers import ProductPageSerializer, ReviewEligibilitySerializer

logger = logging.getLogger(__name__)


def fetch_products(client, state):
    """GET /products for a ProductFilterState."""
    data = client.get('/products', params=state.to_query_params())
    serializer = ProductPageSerializer(data=data)
    if not serializer.is_valid():
        logger.error("Unexpected products payload: %s", serializer.errors)
        raise BackendError('Failed to fetch products', payload=data)
    return ProductPage(
        products=serializer.validated_data['products'],
        pagination=Pagination(**serializer.validated_data['pagination']),
    )


def fetch_review_eligibility(client, product_id):
    data = client.get(f'/products/{product_id}/review')
    serializer = ReviewEligibilitySerializer(data=data)
    if not serializer.is_valid():
        logger.error("Unexpected review payload for %s: %s", product_id, serializer.errors)
        raise BackendError('Failed to load reviews', payload=data)
    return ReviewEligibility(**serializer.validated_data)


def submit_review(client, product_id, rating, comment):
    """Create or update the viewer's review; the backend decides which."""
    return client.post(f'/products/{product_id}/review', json={'rating': rating, 'comment': comment})
