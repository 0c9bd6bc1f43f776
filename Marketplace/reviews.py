"""
Review gate for a product page.

The backend decides eligibility ({canReview, hasReviewed, userReview}); this
module only maps that verdict to what the page offers:

    signed out                       -> sign_in
    signed in, no delivered purchase -> purchase_required
    eligible, no review yet          -> fresh_form
    eligible, already reviewed       -> existing_review (-> editing via start_edit)
"""
import logging

from landycakes.backend import BackendError

from .forms import ReviewForm
from .models import ReviewEligibility, ReviewMode
from .services import fetch_review_eligibility, submit_review

logger = logging.getLogger(__name__)


def review_mode(signed_in, eligibility):
    if not signed_in:
        return ReviewMode.SIGN_IN
    if not eligibility.can_review:
        return ReviewMode.PURCHASE_REQUIRED
    if eligibility.has_reviewed:
        return ReviewMode.EXISTING_REVIEW
    return ReviewMode.FRESH_FORM


class ReviewPanel:
    def __init__(self, client, product_id, signed_in=None):
        self.client = client
        self.product_id = product_id
        self.signed_in = client.signed_in if signed_in is None else signed_in
        self.eligibility = ReviewEligibility()
        self.editing = False
        self.error = None

    @property
    def mode(self):
        mode = review_mode(self.signed_in, self.eligibility)
        if mode is ReviewMode.EXISTING_REVIEW and self.editing:
            return ReviewMode.EDITING
        return mode

    @property
    def reviews(self):
        return self.eligibility.reviews

    def refresh(self):
        try:
            self.eligibility = fetch_review_eligibility(self.client, self.product_id)
        except BackendError as exc:
            logger.warning("Could not load reviews for %s: %s", self.product_id, exc.message)
            self.error = exc.message
            return False
        self.error = None
        return True

    def initial(self):
        """Form values: the viewer's own review when editing, blank otherwise."""
        review = self.eligibility.user_review or {}
        if self.mode is ReviewMode.EDITING:
            return {'rating': review.get('rating'), 'comment': review.get('comment', '')}
        return {'rating': None, 'comment': ''}

    def start_edit(self):
        if self.mode is not ReviewMode.EXISTING_REVIEW:
            return None
        self.editing = True
        return self.initial()

    def submit(self, rating, comment):
        """
        Send the review (create and edit share one endpoint), then reload the
        eligibility from the backend. Returns the backend response or None.
        """
        if self.mode not in (ReviewMode.FRESH_FORM, ReviewMode.EDITING):
            self.error = "You can only review products you have purchased and received"
            return None

        form = ReviewForm({'rating': rating, 'comment': comment})
        if not form.is_valid():
            self.error = form.first_error()
            return None

        try:
            result = submit_review(self.client, self.product_id,
                                   form.cleaned_data['rating'], form.cleaned_data['comment'])
        except BackendError as exc:
            self.error = exc.message or "Failed to submit review"
            return None

        self.editing = False
        self.refresh()
        return result
