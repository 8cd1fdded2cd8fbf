import json
from decimal import Decimal

import pytest

from cart.cart import CartStore, LineItem, clamp_quantity
from cart.storage import MemoryStorage


def test_scenario_add_update_remove(store):
    assert store.is_empty()

    assert store.add_item({'id': '7', 'name': 'Som Tam', 'price': 18.90, 'quantity': 1})
    assert store.get_count() == 1
    assert store.get_total() == Decimal('18.90')

    assert store.update_quantity('7', 3)
    assert store.get_count() == 3
    assert store.get_total() == Decimal('56.70')

    assert store.remove_item('7')
    assert store.is_empty()


@pytest.mark.parametrize('quantity', [0, -1, -50])
def test_update_quantity_non_positive_removes(store, quantity):
    store.add_item({'id': '1', 'name': 'Pad Thai', 'price': 10})
    store.add_item({'id': '2', 'name': 'Tom Yum', 'price': 12})

    assert store.update_quantity('1', quantity)

    assert [item.id for item in store.get_items()] == ['2']


def test_same_id_and_image_merges(store):
    store.add_item({'id': '1', 'name': 'A', 'price': 10, 'image': 'x'})
    store.add_item({'id': '1', 'name': 'A', 'price': 10, 'image': 'x'})

    items = store.get_items()
    assert len(items) == 1
    assert items[0].quantity == 2


def test_different_image_is_a_distinct_line(store):
    store.add_item({'id': '1', 'name': 'A', 'price': 10, 'image': 'x'})
    store.add_item({'id': '1', 'name': 'A', 'price': 10, 'image': 'y'})
    store.add_item({'id': '1', 'name': 'A', 'price': 10})

    assert len(store.get_items()) == 3
    assert store.get_count() == 3


def test_merge_adds_candidate_quantity(store):
    store.add_item({'id': '1', 'name': 'A', 'price': 10, 'quantity': 2})
    store.add_item({'id': '1', 'name': 'A', 'price': 10, 'quantity': 5})

    assert store.get_items()[0].quantity == 7


def test_count_is_units_not_lines(store):
    store.add_item({'id': '1', 'name': 'A', 'price': 10, 'quantity': 3})
    store.add_item({'id': '2', 'name': 'B', 'price': 5, 'quantity': 1})

    assert store.get_count() == 4
    assert len(store.get_items()) == 2


def test_total_is_exact_sum(store):
    store.add_item({'id': '1', 'name': 'A', 'price': 10, 'quantity': 2})
    store.add_item({'id': '2', 'name': 'B', 'price': 5, 'quantity': 1})

    assert store.get_total() == Decimal('25')


def test_remove_and_update_match_by_id_only(store):
    store.add_item({'id': '1', 'name': 'A', 'price': 10, 'image': 'x'})
    store.add_item({'id': '1', 'name': 'A', 'price': 10, 'image': 'y'})

    assert store.update_quantity('1', 4)
    assert [item.quantity for item in store.get_items()] == [4, 1]

    assert store.remove_item('1')
    remaining = store.get_items()
    assert len(remaining) == 1
    assert remaining[0].image == 'y'


def test_missing_items_report_false(store):
    assert store.remove_item('404') is False
    assert store.update_quantity('404', 2) is False


@pytest.mark.parametrize('candidate', [
    {'name': 'A', 'price': 10},
    {'id': '1', 'price': 10},
    {'id': '1', 'name': 'A'},
    {'id': '', 'name': 'A', 'price': 10},
    {'id': '1', 'name': 'A', 'price': 0},
    {'id': '1', 'name': 'A', 'price': 'abc'},
    {'id': '1', 'name': 'A', 'price': -3},
    {'id': '1', 'name': 'A', 'price': 10, 'quantity': -2},
])
def test_invalid_candidates_are_rejected(store, candidate):
    listener_calls = []
    store.subscribe(listener_calls.append)

    assert store.add_item(candidate) is False
    assert store.is_empty()
    assert listener_calls == []


def test_update_quantity_does_not_clamp(store):
    store.add_item({'id': '1', 'name': 'A', 'price': 1})
    store.update_quantity('1', 150)

    assert store.get_count() == 150


def test_update_quantity_coerces_numeric_strings(store):
    store.add_item({'id': '1', 'name': 'A', 'price': 1})

    assert store.update_quantity('1', '3') is True
    assert store.get_items()[0].quantity == 3


@pytest.mark.parametrize('quantity', [None, 'lots', [2]])
def test_update_quantity_rejects_unparseable_values(store, quantity):
    store.add_item({'id': '1', 'name': 'A', 'price': 1, 'quantity': 2})
    calls = []
    store.subscribe(calls.append)

    assert store.update_quantity('1', quantity) is False
    assert store.get_count() == 2
    assert calls == []


def test_clamp_quantity():
    assert clamp_quantity(0) == 1
    assert clamp_quantity(42) == 42
    assert clamp_quantity(120) == 99


def test_get_items_returns_copies(store):
    store.add_item({'id': '1', 'name': 'A', 'price': 10})

    items = store.get_items()
    items[0].quantity = 50
    items.append(LineItem(id='9', name='Z', price=Decimal('1')))

    assert store.get_count() == 1
    assert len(store.get_items()) == 1


def test_added_at_is_kept_on_merge(store):
    store.add_item({'id': '1', 'name': 'A', 'price': 10})
    first = store.get_items()[0].added_at
    store.add_item({'id': '1', 'name': 'A', 'price': 10})

    assert store.get_items()[0].added_at == first


def test_clear_on_empty_cart(store):
    assert store.clear()
    assert store.get_items() == []
    assert store.clear()
    assert store.is_empty()


# --- persistence ---

def test_fresh_store_reloads_persisted_state(storage):
    first = CartStore(storage)
    first.add_item({'id': '1', 'name': 'A', 'price': '10.50', 'image': 'a.jpg', 'quantity': 2})
    first.add_item({'id': '2', 'name': 'B', 'price': 4})

    second = CartStore(MemoryStorage(origin=storage.origin))
    assert [item.to_dict() for item in second.get_items()] == [item.to_dict() for item in first.get_items()]

    first.clear()
    third = CartStore(MemoryStorage(origin=storage.origin))
    assert third.is_empty()


def test_every_mutation_writes_the_whole_cart(store, storage):
    store.add_item({'id': '1', 'name': 'A', 'price': 10})
    store.add_item({'id': '2', 'name': 'B', 'price': 5, 'quantity': 2})

    saved = json.loads(storage.get(store.key))
    assert [line['id'] for line in saved] == ['1', '2']
    assert saved[1] == {
        'id': '2', 'name': 'B', 'price': '5', 'image': '', 'quantity': 2,
        'addedAt': saved[1]['addedAt'],
    }


@pytest.mark.parametrize('raw', ['{not json', '"a string"', '{"id": 1}', '42'])
def test_corrupted_storage_starts_empty(storage, raw):
    storage.set('miniThai_cart', raw)

    assert CartStore(storage).is_empty()


def test_unreadable_lines_are_skipped(storage):
    storage.set('miniThai_cart', json.dumps([
        {'id': '1', 'name': 'A', 'price': '10'},
        {'name': 'missing id'},
    ]))

    items = CartStore(storage).get_items()
    assert len(items) == 1
    assert items[0].quantity == 1


def test_disabled_storage_fails_soft():
    store = CartStore(MemoryStorage(origin='off', enabled=False))

    assert store.is_empty()
    assert store.add_item({'id': '1', 'name': 'A', 'price': 10})
    assert store.get_count() == 1


def test_quota_exceeded_keeps_in_memory_change():
    storage = MemoryStorage(origin='tiny', quota=10)
    store = CartStore(storage)
    notified = []
    store.subscribe(notified.append)

    assert store.add_item({'id': '1', 'name': 'A', 'price': 10})
    assert store.get_count() == 1
    assert storage.get(store.key) is None
    assert notified == [store]


# --- notifications ---

def test_each_mutation_notifies_each_subscriber_once(store):
    first, second = [], []
    store.subscribe(first.append)
    store.subscribe(second.append)

    store.add_item({'id': '1', 'name': 'A', 'price': 10})
    store.update_quantity('1', 3)
    store.remove_item('1')
    store.clear()

    assert len(first) == 4
    assert len(second) == 4


def test_unsubscribed_listener_is_not_called(store):
    calls = []
    unsubscribe = store.subscribe(calls.append)
    store.add_item({'id': '1', 'name': 'A', 'price': 10})
    unsubscribe()
    store.add_item({'id': '1', 'name': 'A', 'price': 10})

    assert len(calls) == 1


def test_failing_listener_does_not_block_others(store):
    calls = []

    def broken(cart):
        raise RuntimeError("boom")

    store.subscribe(broken)
    store.subscribe(calls.append)

    assert store.add_item({'id': '1', 'name': 'A', 'price': 10})
    assert calls == [store]


def test_failed_operations_do_not_notify(store):
    calls = []
    store.subscribe(calls.append)

    store.remove_item('nope')
    store.update_quantity('nope', 3)

    assert calls == []


def test_non_callable_subscriber_is_rejected(store):
    assert store.subscribe('not a function') is None
    assert store.add_item({'id': '1', 'name': 'A', 'price': 10})
