"""Tests for the persisted cart store: seller homogeneity, quantities, totals, storage."""

import json

import pytest

from cart.cart import CART_SESSION_KEY, CartLineItem, CartNotReady, CartStore


class TestAddToCart:
    def test_first_item_goes_in_with_quantity_one(self, store, item_factory):
        result = store.add_to_cart(item_factory('p1', seller='Acme', price=1500))

        assert result.success is True
        assert [(line.id, line.quantity, line.seller) for line in store.items] == [('p1', 1, 'Acme')]
        assert store.get_cart_total() == 1500
        assert store.get_cart_count() == 1

    def test_same_product_increments_quantity(self, store, item_factory):
        store.add_to_cart(item_factory('p1'))
        store.add_to_cart(item_factory('p1'))

        assert len(store.items) == 1
        assert store.get_line('p1').quantity == 2

    def test_same_seller_new_product_appends(self, store, item_factory):
        store.add_to_cart(item_factory('p1'))
        store.add_to_cart(item_factory('p2'))

        assert [line.id for line in store.items] == ['p1', 'p2']

    def test_other_seller_is_rejected_without_mutation(self, store, item_factory):
        store.add_to_cart(item_factory('p1', seller='Acme'))
        before = store.items

        result = store.add_to_cart(item_factory('p2', seller='Other'))

        assert result.success is False
        assert '"Acme"' in result.message
        assert '"Other"' in result.message
        assert 'clear your cart' in result.message
        assert store.items == before

    def test_quantity_in_candidate_is_ignored(self, store, item_factory):
        store.add_to_cart(item_factory('p1', quantity=7))

        assert store.get_line('p1').quantity == 1

    def test_accepts_mapping(self, store):
        result = store.add_to_cart({'id': 42, 'name': 'Red velvet', 'price': 900, 'seller': 'Acme'})

        assert result.success
        assert store.get_line('42').price == 900

    def test_any_add_sequence_keeps_one_seller(self, store, item_factory):
        sellers = ['Acme', 'Acme', 'Other', 'Acme', 'Third', 'Other']
        for i, seller in enumerate(sellers):
            store.add_to_cart(item_factory(f'p{i}', seller=seller))

        assert {line.seller for line in store.items} == {'Acme'}
        assert store.get_current_seller() == 'Acme'


class TestQuantityAndRemoval:
    def test_update_sets_absolute_quantity(self, store, item_factory):
        store.add_to_cart(item_factory('p1'))
        store.update_quantity('p1', 5)

        assert store.get_line('p1').quantity == 5

    @pytest.mark.parametrize('quantity', [0, -1, -10])
    def test_non_positive_quantity_removes_line(self, store, item_factory, quantity):
        store.add_to_cart(item_factory('p1'))
        store.add_to_cart(item_factory('p1'))

        store.update_quantity('p1', quantity)

        assert store.get_line('p1') is None
        assert store.get_cart_count() == 0

    def test_update_unknown_id_is_ignored(self, store, item_factory):
        store.add_to_cart(item_factory('p1'))
        store.update_quantity('nope', 3)

        assert [(line.id, line.quantity) for line in store.items] == [('p1', 1)]

    def test_remove(self, store, item_factory):
        store.add_to_cart(item_factory('p1'))
        store.add_to_cart(item_factory('p2'))
        store.remove_from_cart('p1')

        assert [line.id for line in store.items] == ['p2']

    def test_move_to_wishlist_returns_removed_line(self, store, item_factory):
        store.add_to_cart(item_factory('p1'))

        line = store.move_to_wishlist('p1')

        assert line.id == 'p1'
        assert store.items == ()

    def test_clear_then_other_seller_is_accepted(self, store, item_factory):
        store.add_to_cart(item_factory('p1', seller='Acme'))
        store.clear_cart()

        assert store.get_current_seller() is None
        assert store.add_to_cart(item_factory('p2', seller='Other')).success


class TestDerivedValues:
    def test_total_and_count_follow_lines(self, store, item_factory):
        store.add_to_cart(item_factory('p1', price=1000))
        store.add_to_cart(item_factory('p2', price=250))
        store.update_quantity('p1', 3)
        store.update_quantity('p2', 2)

        assert store.get_cart_total() == 3 * 1000 + 2 * 250
        assert store.get_cart_count() == 5

    def test_empty_cart(self, store):
        assert store.get_cart_total() == 0
        assert store.get_cart_count() == 0
        assert store.get_current_seller() is None


class TestPersistence:
    def test_every_mutation_is_written(self, store, storage, item_factory):
        store.add_to_cart(item_factory('p1'))
        assert storage[CART_SESSION_KEY][0]['quantity'] == 1

        store.update_quantity('p1', 4)
        assert storage[CART_SESSION_KEY][0]['quantity'] == 4

        store.clear_cart()
        assert storage[CART_SESSION_KEY] == []

    def test_stored_lines_use_camel_case_keys(self, store, storage, item_factory):
        store.add_to_cart(item_factory('p1', original_price=1500, free_shipping=True))

        saved = storage[CART_SESSION_KEY][0]
        assert saved['originalPrice'] == 1500
        assert saved['inStock'] is True
        assert saved['freeShipping'] is True

    def test_round_trip_through_storage(self, store, storage, item_factory):
        store.add_to_cart(item_factory('p1', original_price=1500, image='/img/p1.png'))
        store.add_to_cart(item_factory('p2', price=300))
        store.update_quantity('p2', 3)

        reloaded = CartStore(storage).load()

        assert reloaded.items == store.items

    def test_lines_are_stored_as_a_list(self, store, storage, item_factory):
        store.add_to_cart(item_factory('p1'))

        saved = storage[CART_SESSION_KEY]
        assert isinstance(saved, list)
        assert json.dumps(saved).count('\\"') == 0

    def test_cart_saved_as_json_text_still_loads(self):
        storage = {CART_SESSION_KEY: json.dumps([
            {'id': 'p1', 'name': 'x', 'price': 10, 'seller': 'A', 'quantity': 3},
        ])}

        assert CartStore(storage).load().get_cart_count() == 3

    def test_unreadable_cart_loads_empty(self, caplog):
        storage = {CART_SESSION_KEY: '{not json'}

        store = CartStore(storage).load()

        assert store.ready
        assert store.items == ()
        assert 'unreadable' in caplog.text

    def test_invalid_lines_load_empty(self):
        storage = {CART_SESSION_KEY: json.dumps([{'id': 'p1', 'name': 'x', 'price': 10, 'seller': 'A', 'quantity': 0}])}

        assert CartStore(storage).load().items == ()

    def test_mixed_sellers_load_empty(self):
        lines = [
            {'id': 'p1', 'name': 'x', 'price': 10, 'seller': 'A', 'quantity': 1},
            {'id': 'p2', 'name': 'y', 'price': 10, 'seller': 'B', 'quantity': 1},
        ]

        assert CartStore({CART_SESSION_KEY: json.dumps(lines)}).load().items == ()


class TestLoadGate:
    def test_nothing_is_readable_before_load(self):
        store = CartStore({})

        with pytest.raises(CartNotReady):
            store.get_cart_count()

    def test_nothing_is_written_before_load(self):
        storage = {CART_SESSION_KEY: json.dumps([
            {'id': 'p1', 'name': 'x', 'price': 10, 'seller': 'A', 'quantity': 2},
        ])}
        store = CartStore(storage)

        with pytest.raises(CartNotReady):
            store.add_to_cart(CartLineItem(id='p9', name='y', price=1, seller='A'))

        assert json.loads(storage[CART_SESSION_KEY])[0]['quantity'] == 2
        assert store.load().get_cart_count() == 2
