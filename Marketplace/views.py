import json
import logging

from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from landycakes.backend import BackendClient

from .filters import CatalogBrowser, ProductFilterState
from .models import ReviewMode
from .reviews import ReviewPanel

logger = logging.getLogger(__name__)


@require_http_methods(["GET"])
def products_api(request):
    """
    Products matching the filters in the query string, with the server's
    pagination and the normalized filter state.
    """
    browser = CatalogBrowser(BackendClient.for_request(request), ProductFilterState.from_query(request.GET))
    browser.refetch()
    if browser.error:
        return JsonResponse({'success': False, 'message': browser.error}, status=502)

    return JsonResponse({
        'success': True,
        'products': browser.products,
        'pagination': browser.pagination.to_dict(),
        'filters': browser.state.to_dict(),
        'query': browser.state.to_query_params(),
    })


def _review_payload(panel):
    return {
        'mode': panel.mode.value,
        'reviews': panel.reviews,
        'canReview': panel.eligibility.can_review,
        'hasReviewed': panel.eligibility.has_reviewed,
        'userReview': panel.eligibility.user_review,
        'initial': panel.initial(),
    }


@require_http_methods(["GET", "POST"])
def product_reviews(request, product_id):
    panel = ReviewPanel(BackendClient.for_request(request), product_id)

    if request.method == 'GET':
        if not panel.refresh():
            return JsonResponse({'success': False, 'message': panel.error}, status=502)
        if request.GET.get('edit') == '1':
            panel.start_edit()
        return JsonResponse({'success': True, **_review_payload(panel)})

    if not panel.signed_in:
        return JsonResponse({'success': False, 'message': 'Sign in to write a review', 'mode': panel.mode.value}, status=401)

    if request.content_type == 'application/json':
        try:
            data = json.loads(request.body or b'{}')
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}
    else:
        data = request.POST

    if not panel.refresh():
        return JsonResponse({'success': False, 'message': panel.error}, status=502)
    if panel.mode is ReviewMode.EXISTING_REVIEW:
        panel.start_edit()
    if panel.mode not in (ReviewMode.FRESH_FORM, ReviewMode.EDITING):
        return JsonResponse({
            'success': False,
            'message': "You can only review products you have purchased and received",
            **_review_payload(panel),
        }, status=403)

    result = panel.submit(data.get('rating'), data.get('comment'))
    if result is None:
        return JsonResponse({'success': False, 'message': panel.error, **_review_payload(panel)}, status=400)

    logger.info("Review saved for product %s", product_id)
    review = result.get('review') if isinstance(result, dict) else None
    return JsonResponse({'success': True, 'review': review, **_review_payload(panel)})
