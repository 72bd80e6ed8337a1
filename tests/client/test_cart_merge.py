"""Tests for the anonymous cart and the login-time merge."""

import json
from unittest.mock import MagicMock, call

import httpx
from client.api import StorefrontAPIError, StorefrontUnavailable
from client.cart import AnonymousCart, CartMergeCoordinator, CartRefreshSignal
from client.storage import GUEST_CART_KEY


def _guest_cart(store, *entries):
    store.set(GUEST_CART_KEY, {"items": list(entries)})


class TestAnonymousCart:
    def test_duplicates_are_folded(self, store):
        _guest_cart(
            store,
            {"productId": "p1", "quantity": 1},
            {"productId": "p2", "quantity": 1},
            {"productId": "p1", "quantity": 1},
        )
        assert AnonymousCart(store).items() == [
            {"product_id": "p1", "quantity": 2},
            {"product_id": "p2", "quantity": 1},
        ]

    def test_accepts_alternative_product_keys(self, store):
        _guest_cart(
            store,
            {"product_id": "p1", "quantity": 2},
            {"product": {"_id": "p2"}, "quantity": 3},
        )
        assert AnonymousCart(store).items() == [
            {"product_id": "p1", "quantity": 2},
            {"product_id": "p2", "quantity": 3},
        ]

    def test_bad_quantities_default_to_one(self, store):
        _guest_cart(store, {"productId": "p1", "quantity": "many"}, {"productId": "p2", "quantity": 0})
        assert [line["quantity"] for line in AnonymousCart(store).items()] == [1, 1]

    def test_add_and_remove(self, store):
        cart = AnonymousCart(store)
        cart.add("p1")
        cart.add("p1", 2)
        cart.add("p2")
        cart.remove("p2")

        assert cart.items() == [{"product_id": "p1", "quantity": 3}]
        assert cart.count() == 3

    def test_clear(self, store):
        cart = AnonymousCart(store)
        cart.add("p1")
        cart.clear()
        assert cart.is_empty()
        assert GUEST_CART_KEY not in store

    def test_malformed_storage_is_empty(self, store):
        store.set(GUEST_CART_KEY, "garbage")
        assert AnonymousCart(store).is_empty()


class TestCartMergeCoordinator:
    def test_empty_guest_cart_makes_no_calls(self, api, store):
        listener = MagicMock()
        signal = CartRefreshSignal()
        signal.subscribe(listener)

        report = CartMergeCoordinator(api, store, signal).merge()

        assert report.attempted == 0
        api.add_to_cart.assert_not_called()
        listener.assert_not_called()

    def test_each_line_is_added_once_with_folded_quantity(self, api, store):
        _guest_cart(
            store,
            {"productId": "p1", "quantity": 1},
            {"productId": "p2", "quantity": 1},
            {"productId": "p1", "quantity": 1},
        )

        report = CartMergeCoordinator(api, store).merge()

        assert api.add_to_cart.call_args_list == [call("p1", 2), call("p2", 1)]
        assert report.merged == ["p1", "p2"]
        assert report.ok

    def test_failed_line_is_skipped_and_the_rest_continue(self, api, store):
        _guest_cart(
            store,
            {"productId": "p1", "quantity": 1},
            {"productId": "p2", "quantity": 1},
            {"productId": "p1", "quantity": 1},
        )
        api.add_to_cart.side_effect = [None, StorefrontAPIError(400, "Insufficient stock")]

        report = CartMergeCoordinator(api, store).merge()

        assert report.merged == ["p1"]
        assert list(report.failures) == ["p2"]
        assert not report.ok
        assert AnonymousCart(store).is_empty()

    def test_guest_cart_is_discarded_even_when_everything_fails(self, api, store):
        _guest_cart(store, {"productId": "p1", "quantity": 1}, {"productId": "p2", "quantity": 1})
        api.add_to_cart.side_effect = [StorefrontUnavailable("down"), httpx.ConnectTimeout("slow")]

        report = CartMergeCoordinator(api, store).merge()

        assert report.merged == []
        assert set(report.failures) == {"p1", "p2"}
        assert AnonymousCart(store).is_empty()

    def test_unexpected_error_on_one_line_does_not_stop_the_rest(self, api, store):
        _guest_cart(
            store,
            {"productId": "p1", "quantity": 1},
            {"productId": "p2", "quantity": 2},
            {"productId": "p3", "quantity": 3},
        )
        # p2 answers 200 with a body that is not JSON
        api.add_to_cart.side_effect = [
            {"items": []},
            json.JSONDecodeError("Expecting value", "<html>", 0),
            {"items": []},
        ]

        report = CartMergeCoordinator(api, store).merge()

        assert api.add_to_cart.call_args_list == [call("p1", 1), call("p2", 2), call("p3", 3)]
        assert report.merged == ["p1", "p3"]
        assert set(report.failures) == {"p2"}
        assert AnonymousCart(store).is_empty()

    def test_runtime_errors_are_recorded_as_failures(self, api, store):
        _guest_cart(store, {"productId": "p1", "quantity": 1})
        api.add_to_cart.side_effect = RuntimeError()

        report = CartMergeCoordinator(api, store).merge()

        assert report.failures == {"p1": "RuntimeError"}
        assert AnonymousCart(store).is_empty()

    def test_entries_without_product_are_reported(self, api, store):
        _guest_cart(store, {"quantity": 2}, {"productId": "p1", "quantity": 1})

        report = CartMergeCoordinator(api, store).merge()

        api.add_to_cart.assert_called_once_with("p1", 1)
        assert report.failures == {"entry-1": "missing product id"}

    def test_refresh_signal_fires_after_merge(self, api, store):
        _guest_cart(store, {"productId": "p1", "quantity": 1})
        listener = MagicMock()
        signal = CartRefreshSignal()
        signal.subscribe(listener)

        CartMergeCoordinator(api, store, signal).merge()

        listener.assert_called_once_with()


class TestCartRefreshSignal:
    def test_unsubscribe(self):
        listener = MagicMock()
        signal = CartRefreshSignal()
        signal.subscribe(listener)
        signal.unsubscribe(listener)
        signal.notify()
        listener.assert_not_called()
