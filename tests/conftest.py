import pytest

from cart.cart import CartLineItem, CartStore
from landycakes.backend import BackendClient


class FakeBackend:
    """
    Stand-in for BackendClient. Each route answers from a queue of scripted
    responses; the last one repeats. A response may be a dict, an exception
    to raise, or a callable producing either.
    """

    def __init__(self, signed_in=True):
        self.token = 'token-123' if signed_in else None
        self.routes = {}
        self.calls = []

    @property
    def signed_in(self):
        return bool(self.token)

    def on(self, method, path, *responses):
        self.routes[(method, path)] = list(responses)
        return self

    def request(self, method, path, params=None, json=None):
        self.calls.append((method, path, params, json))
        queue = self.routes.get((method, path))
        if not queue:
            raise AssertionError(f'unexpected backend call {method} {path}')
        resp = queue.pop(0) if len(queue) > 1 else queue[0]
        if callable(resp):
            resp = resp()
        if isinstance(resp, Exception):
            raise resp
        return resp

    def get(self, path, params=None):
        return self.request('GET', path, params=params)

    def post(self, path, json=None):
        return self.request('POST', path, json=json)

    def count(self, method, path):
        return sum(1 for m, p, _, _ in self.calls if (m, p) == (method, path))


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def use_backend(monkeypatch, backend):
    """Make every view talk to the fake backend."""
    monkeypatch.setattr(BackendClient, 'for_request', classmethod(lambda cls, request: backend))
    return backend


@pytest.fixture
def storage():
    return {}


@pytest.fixture
def store(storage):
    return CartStore(storage).load()


def make_item(id='p1', seller='Acme', price=1200, **extra):
    return CartLineItem(id=id, name=f'Cake {id}', price=price, seller=seller, **extra)


@pytest.fixture
def item_factory():
    return make_item


@pytest.fixture
def anonymous_backend():
    return FakeBackend(signed_in=False)
