"""
Checkout flow: validate contact details, create the order, then watch the
M-Pesa payment until it settles.

    pending --submit--> processing --tick*--> success | failed

A failed checkout can be submitted again. Polling stops on a terminal status,
on timeout, or on cancel(); all three go through the same cancel event.
"""
import logging
import threading
import time

from landycakes.backend import BackendError

from .forms import CheckoutForm
from .models import CheckoutPolicy, CheckoutSession, PaymentStatus, RemotePaymentStatus
from .services import fetch_payment_status, initiate_checkout

logger = logging.getLogger(__name__)

MSG_EMPTY_CART = "Your cart is empty"
MSG_IN_PROGRESS = "A payment is already in progress. Please complete it on your phone."
MSG_INITIATE_FAILED = "Failed to initiate payment"
MSG_PROMPT_SENT = "M-Pesa prompt sent to your phone!"
MSG_PAID = "Payment successful! Your order has been confirmed."
MSG_FAILED = "Payment failed. Please try again."
MSG_TIMEOUT = "Payment timeout. Please check your phone and try again."


class CheckoutController:
    def __init__(self, client, cart, policy=None, session=None, clock=time.time):
        self.client = client
        self.cart = cart
        self.policy = policy or CheckoutPolicy.from_settings()
        self.session = session or CheckoutSession()
        self.clock = clock
        self.polls = 0
        self._cancel = threading.Event()
        self._thread = None

    @property
    def status(self):
        return self.session.payment_status

    @property
    def can_submit(self):
        return self.status is not PaymentStatus.PROCESSING

    def submit(self, data):
        """
        Validate `data` (guest_name, guest_email, phone) and create the order.

        Nothing is sent when validation fails or a payment is already being
        processed.
        """
        if not self.can_submit:
            self.session.error = MSG_IN_PROGRESS
            return self.session

        self.session = CheckoutSession()
        form = CheckoutForm(data, policy=self.policy)
        error = form.first_error()
        if error:
            self.session.error = error
            return self.session

        lines = self.cart.items
        if not lines:
            self.session.error = MSG_EMPTY_CART
            return self.session

        contact = form.cleaned_data
        try:
            created = initiate_checkout(
                self.client, lines,
                guest_name=contact['guest_name'],
                guest_email=contact['guest_email'],
                phone=contact['phone'],
            )
        except BackendError as exc:
            logger.warning("Checkout failed: %s", exc.message)
            self.session.payment_status = PaymentStatus.FAILED
            self.session.error = exc.message or MSG_INITIATE_FAILED
            return self.session

        self.session.order_id = created['order_id']
        self.session.checkout_request_id = created.get('checkout_request_id')
        self.session.message = created.get('message') or MSG_PROMPT_SENT
        self.session.payment_status = PaymentStatus.PROCESSING
        self.session.started_at = self.clock()
        self._cancel.clear()
        return self.session

    def timed_out(self):
        started = self.session.started_at
        return started is not None and self.clock() - started >= self.policy.poll_timeout

    def tick(self):
        """Poll the payment status once and apply the result."""
        if self.status is not PaymentStatus.PROCESSING:
            return self.status

        if self.timed_out():
            self.session.payment_status = PaymentStatus.FAILED
            self.session.timed_out = True
            self.session.error = MSG_TIMEOUT
            self._cancel.set()
            logger.info("Payment for order %s timed out", self.session.order_id)
            return self.status

        self.polls += 1
        try:
            remote = fetch_payment_status(self.client, self.session.order_id)
        except BackendError as exc:
            logger.warning("Payment status check failed for %s: %s", self.session.order_id, exc.message)
            return self.status

        if not remote.is_terminal:
            return self.status

        if remote is RemotePaymentStatus.PAID:
            self.session.payment_status = PaymentStatus.SUCCESS
            self.session.message = MSG_PAID
            self.session.error = None
            self.cart.clear_cart()
            self._cancel.set()
            logger.info("Order %s paid", self.session.order_id)
        elif remote is RemotePaymentStatus.FAILED:
            self.session.payment_status = PaymentStatus.FAILED
            self.session.error = MSG_FAILED
            self._cancel.set()
            logger.info("Payment for order %s failed", self.session.order_id)
        return self.status

    def run(self):
        """Poll every `poll_interval` seconds until the payment settles or cancel() is called."""
        while self.status is PaymentStatus.PROCESSING:
            if self._cancel.wait(self.policy.poll_interval):
                break
            self.tick()
        return self.status

    def start(self):
        """Run the poll loop on a background thread."""
        self._thread = threading.Thread(target=self.run, name=f'payment-{self.session.order_id}', daemon=True)
        self._thread.start()
        return self._thread

    def cancel(self, wait=True):
        self._cancel.set()
        if wait and self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join()
