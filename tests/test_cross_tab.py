from decimal import Decimal

from django.core.cache import caches

from cart.cart import CartStore
from cart.storage import CacheStorage, MemoryStorage, storage_changed


def open_tab(origin='https://minithai.test'):
    return CartStore(MemoryStorage(origin=origin))


class RecordingBadge:

    def __init__(self):
        self.calls = 0

    def reconcile(self):
        self.calls += 1


def test_other_tab_reloads_after_a_write():
    tab_a, tab_b = open_tab(), open_tab()

    tab_a.add_item({'id': '1', 'name': 'Pad Thai', 'price': 10, 'quantity': 2})

    assert tab_b.get_count() == 2
    tab_a.clear()
    assert tab_b.is_empty()


def test_reload_refreshes_badge_then_notifies():
    tab_a, tab_b = open_tab(), open_tab()
    badge = RecordingBadge()
    events = []
    tab_b.attach_badge(badge)
    tab_b.subscribe(lambda store: events.append(('notify', badge.calls, store.get_count())))

    tab_a.add_item({'id': '1', 'name': 'Pad Thai', 'price': 10})

    assert badge.calls == 1
    assert events == [('notify', 1, 1)]


def test_writer_does_not_reload_itself():
    tab = open_tab()
    badge = RecordingBadge()
    tab.attach_badge(badge)

    tab.add_item({'id': '1', 'name': 'Pad Thai', 'price': 10})

    assert badge.calls == 0


def test_other_keys_and_origins_are_ignored():
    tab = open_tab()
    calls = []
    tab.subscribe(calls.append)

    MemoryStorage(origin='https://minithai.test').set('miniThai_orders', '[]')
    open_tab(origin='https://elsewhere.test').add_item({'id': '1', 'name': 'A', 'price': 1})

    assert calls == []
    assert tab.is_empty()


def test_tabs_converge_after_sequential_writes():
    tab_a, tab_b = open_tab(), open_tab()
    tab_a.add_item({'id': '1', 'name': 'A', 'price': 1})
    tab_b.add_item({'id': '2', 'name': 'B', 'price': 1})

    fresh = open_tab()
    assert [item.id for item in fresh.get_items()] == ['1', '2']
    assert [item.id for item in tab_a.get_items()] == ['1', '2']


def test_closed_store_stops_listening():
    tab_a, tab_b = open_tab(), open_tab()
    tab_b.close()

    tab_a.add_item({'id': '1', 'name': 'A', 'price': 1})

    assert tab_b.is_empty()


def test_signal_carries_origin_and_key():
    received = []

    def receiver(sender, origin, key, **kwargs):
        received.append((origin, key))

    storage_changed.connect(receiver)
    try:
        open_tab().add_item({'id': '1', 'name': 'A', 'price': 1})
    finally:
        storage_changed.disconnect(receiver)

    assert received == [('https://minithai.test', 'miniThai_cart')]


def test_stale_tab_overwrites_concurrent_change():
    tab_a, tab_b = open_tab(), open_tab()
    tab_b.close()  # misses the cross-tab signal from here on

    tab_a.add_item({'id': '1', 'name': 'A', 'price': 1})
    tab_b.add_item({'id': '2', 'name': 'B', 'price': 1})

    assert [item.id for item in open_tab().get_items()] == ['2']


def test_cache_storage_persists_and_syncs_tabs():
    caches['default'].clear()
    tab_a = CartStore(CacheStorage('https://minithai.test'))
    tab_b = CartStore(CacheStorage('https://minithai.test'))
    elsewhere = CartStore(CacheStorage('https://elsewhere.test'))

    tab_a.add_item({'id': '1', 'name': 'Pad Thai', 'price': '12.50', 'quantity': 2})

    assert tab_b.get_count() == 2
    assert elsewhere.is_empty()
    assert caches['default'].get('https://minithai.test:miniThai_cart') is not None
    reopened = CartStore(CacheStorage('https://minithai.test'))
    assert reopened.get_total() == Decimal('25.00')

    for store in (tab_a, tab_b, elsewhere, reopened):
        store.close()
