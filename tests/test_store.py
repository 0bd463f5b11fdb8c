# tests/test_store.py

from streeteats.backend.app.models.queue_entry import COMPLETED, READY, WAITING
from streeteats.backend.app.models.vendor import Vendor
from streeteats.backend.app.store import QueueStore

ITEMS = [{"dishId": 1, "quantity": 1, "name": "Fish Taco", "price": 4.0}]


def _fill(store, queue_id, count):
    return [
        store.insert_entry(queue_id, f"c{n}", n, ITEMS, 4, n * 5)
        for n in range(1, count + 1)
    ]


def test_create_queue_defaults(db_session, vendor):
    store = QueueStore(db_session)
    assert store.get_active_queue(vendor.id) is None

    queue = store.create_queue(vendor.id)
    assert queue.is_active is True
    assert queue.current_serving_number == 0
    assert store.get_active_queue(vendor.id).id == queue.id


def test_next_queue_number_starts_at_one(db_session, vendor):
    store = QueueStore(db_session)
    queue = store.create_queue(vendor.id)
    assert store.next_queue_number(queue.id) == 1


def test_next_queue_number_ignores_status(db_session, vendor):
    store = QueueStore(db_session)
    queue = store.create_queue(vendor.id)
    for entry_id in _fill(store, queue.id, 3):
        store.update_status(entry_id, COMPLETED)
    assert store.next_queue_number(queue.id) == 4


def test_numbers_are_scoped_per_queue(db_session, vendor):
    other = Vendor(name="Burger Bliss", vendor_type="truck", is_online=True)
    db_session.add(other)
    db_session.flush()

    store = QueueStore(db_session)
    first = store.create_queue(vendor.id)
    second = store.create_queue(other.id)
    _fill(store, first.id, 4)

    assert store.next_queue_number(first.id) == 5
    assert store.next_queue_number(second.id) == 1


def test_count_waiting_before(db_session, vendor):
    store = QueueStore(db_session)
    queue = store.create_queue(vendor.id)
    ids = _fill(store, queue.id, 5)
    store.update_status(ids[0], COMPLETED)
    store.update_status(ids[2], READY)

    assert store.count_waiting_before(queue.id, 1) == 0
    assert store.count_waiting_before(queue.id, 5) == 2
    assert store.count_waiting(queue.id) == 3


def test_insert_entry_stores_items(db_session, vendor):
    store = QueueStore(db_session)
    queue = store.create_queue(vendor.id)
    entry_id = store.insert_entry(queue.id, "Ana", 1, ITEMS, 4, 5)

    entry = store.get_entry(entry_id)
    assert entry.status == WAITING
    assert entry.customer_name == "Ana"
    assert entry.get_items() == ITEMS


def test_find_entry_by_vendor_and_number(db_session, vendor):
    store = QueueStore(db_session)
    queue = store.create_queue(vendor.id)
    _fill(store, queue.id, 2)

    assert store.find_entry(vendor.id, 2).queue_number == 2
    assert store.find_entry(vendor.id, 3) is None
    assert store.find_entry(vendor.id + 1, 1) is None


def test_update_status_unknown_entry(db_session):
    assert QueueStore(db_session).update_status(999, COMPLETED) is False


def test_list_open_entries_skips_completed(db_session, vendor):
    store = QueueStore(db_session)
    queue = store.create_queue(vendor.id)
    ids = _fill(store, queue.id, 3)
    store.update_status(ids[1], COMPLETED)

    assert [e.queue_number for e in store.list_open_entries(queue.id)] == [1, 3]
