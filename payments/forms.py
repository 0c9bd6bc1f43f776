import re

from django import forms
from django.core.exceptions import ValidationError

from .models import CheckoutPolicy

EMAIL_RE = re.compile(r'^\S+@\S+\.\S+$')


class CheckoutForm(forms.Form):
    """
    Contact details collected before the M-Pesa prompt is sent.

    Checks run in a fixed order (name, email, phone) and stop at the first
    problem, so the buyer only ever sees one message.
    """
    guest_name = forms.CharField(required=False, max_length=120)
    guest_email = forms.CharField(required=False, max_length=254)
    phone = forms.CharField(required=False, max_length=20)

    def __init__(self, *args, policy=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.policy = policy or CheckoutPolicy.from_settings()

    def clean(self):
        cleaned = super().clean()
        name = (cleaned.get('guest_name') or '').strip()
        email = (cleaned.get('guest_email') or '').strip()
        phone = (cleaned.get('phone') or '').strip()

        if not name:
            raise ValidationError("Please enter your name.")
        if not EMAIL_RE.match(email):
            raise ValidationError("Please enter a valid email address.")
        if not self.policy.valid_phone(phone):
            raise ValidationError(
                f"Please enter a valid M-Pesa phone number (e.g. {self.policy.phone_example})"
            )

        cleaned.update(guest_name=name, guest_email=email, phone=phone)
        return cleaned

    def first_error(self):
        if self.is_valid():
            return None
        errors = self.non_field_errors()
        if errors:
            return errors[0]
        # max_length overflow and the like
        for field_errors in self.errors.values():
            return field_errors[0]
        return None
