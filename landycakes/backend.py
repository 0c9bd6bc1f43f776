"""
HTTP client for the storefront backend (products, orders, payments, reviews).

Every response is JSON. Non-success responses surface as BackendError with the
server-provided `error` message when there is one.
"""
import logging

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

GENERIC_ERROR = 'Something went wrong. Please try again.'
UNREACHABLE_ERROR = 'The store is unreachable right now. Please try again.'


class BackendError(Exception):
    def __init__(self, message, status_code=None, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload or {}


class BackendClient:
    def __init__(self, base_url=None, timeout=None, token=None, session=None):
        cfg = getattr(settings, 'STOREFRONT_API', {})
        self.base_url = (base_url or cfg.get('BASE_URL', '')).rstrip('/')
        self.timeout = timeout or cfg.get('TIMEOUT', 15)
        self.token = token
        self.http = session or requests.Session()

    @classmethod
    def for_request(cls, request):
        """Client acting on behalf of the browser that sent `request`."""
        token = request.session.get(settings.AUTH_TOKEN_SESSION_KEY)
        return cls(token=token)

    @property
    def signed_in(self):
        return bool(self.token)

    def _headers(self):
        headers = {'Accept': 'application/json'}
        if self.token:
            headers['Authorization'] = f'Bearer {self.token}'
        return headers

    def request(self, method, path, params=None, json=None):
        url = self.base_url + '/' + path.lstrip('/')
        try:
            resp = self.http.request(
                method, url, params=params, json=json,
                headers=self._headers(), timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Backend unreachable: %s %s (%s)", method, url, exc)
            raise BackendError(UNREACHABLE_ERROR) from exc

        try:
            data = resp.json()
        except ValueError:
            data = {}

        if not resp.ok:
            message = data.get('error') if isinstance(data, dict) else None
            logger.info("Backend %s %s -> %s", method, url, resp.status_code)
            raise BackendError(message or GENERIC_ERROR, status_code=resp.status_code, payload=data)
        return data

    def get(self, path, params=None):
        return self.request('GET', path, params=params)

    def post(self, path, json=None):
        return self.request('POST', path, json=json)
