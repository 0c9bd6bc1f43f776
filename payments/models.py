import re
from dataclasses import dataclass, field
from enum import Enum

from django.conf import settings


class PaymentStatus(str, Enum):
    """The checkout page's own view of a payment."""
    PENDING = 'pending'          # not submitted yet
    PROCESSING = 'processing'    # submitted, waiting on the gateway
    SUCCESS = 'success'
    FAILED = 'failed'


class RemotePaymentStatus(str, Enum):
    """Values reported by GET /mpesa/status/{orderId}."""
    PENDING = 'PENDING'
    PAID = 'PAID'
    FAILED = 'FAILED'

    @classmethod
    def parse(cls, value):
        try:
            return cls(str(value).upper())
        except ValueError:
            return cls.PENDING

    @property
    def is_terminal(self):
        return self is not RemotePaymentStatus.PENDING


@dataclass
class CheckoutSession:
    order_id: str = None
    checkout_request_id: str = None
    payment_status: PaymentStatus = PaymentStatus.PENDING
    error: str = None
    message: str = None
    started_at: float = None
    timed_out: bool = False

    def to_dict(self):
        return {
            'orderId': self.order_id,
            'checkoutRequestId': self.checkout_request_id,
            'paymentStatus': self.payment_status.value,
            'error': self.error,
            'message': self.message,
            'startedAt': self.started_at,
            'timedOut': self.timed_out,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            order_id=data.get('orderId'),
            checkout_request_id=data.get('checkoutRequestId'),
            payment_status=PaymentStatus(data.get('paymentStatus', PaymentStatus.PENDING.value)),
            error=data.get('error'),
            message=data.get('message'),
            started_at=data.get('startedAt'),
            timed_out=bool(data.get('timedOut')),
        )


@dataclass(frozen=True)
class CheckoutPolicy:
    """Market-specific checkout rules and polling timings (seconds)."""
    phone_pattern: str = r'^07\d{8}$'
    phone_example: str = '07XXXXXXXX'
    poll_interval: float = 3
    poll_timeout: float = 300
    redirect_delay: float = 3
    _phone_re: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, '_phone_re', re.compile(self.phone_pattern))

    def valid_phone(self, phone):
        return bool(self._phone_re.match(phone or ''))

    @classmethod
    def from_settings(cls):
        cfg = getattr(settings, 'CHECKOUT', {})
        return cls(
            phone_pattern=cfg.get('PHONE_PATTERN', cls.phone_pattern),
            phone_example=cfg.get('PHONE_EXAMPLE', cls.phone_example),
            poll_interval=cfg.get('POLL_INTERVAL', cls.poll_interval),
            poll_timeout=cfg.get('POLL_TIMEOUT', cls.poll_timeout),
            redirect_delay=cfg.get('REDIRECT_DELAY', cls.redirect_delay),
        )
