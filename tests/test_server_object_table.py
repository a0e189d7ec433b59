import threading

import pytest

from bifrost.server.object_table import ObjectTable
from bifrost.utils.exceptions import UnknownReference


def test_ids_start_at_one_and_increase():
    table = ObjectTable()
    assert [table.allocate_or_lookup(object()) for _ in range(3)] == [1, 2, 3]


def test_same_object_yields_same_id():
    table = ObjectTable()
    obj = object()
    assert table.allocate_or_lookup(obj) == table.allocate_or_lookup(obj)
    assert len(table) == 1


def test_equal_but_distinct_objects_get_distinct_ids():
    table = ObjectTable()
    first, second = [1], [1]
    assert table.allocate_or_lookup(first) != table.allocate_or_lookup(second)


def test_resolve_returns_the_registered_instance():
    table = ObjectTable()
    obj = object()
    oid = table.allocate_or_lookup(obj)
    assert table.resolve(oid) is obj
    assert oid in table


def test_resolve_unknown_raises():
    table = ObjectTable()
    with pytest.raises(UnknownReference) as exc:
        table.resolve(99)
    assert exc.value.oid == 99
    assert 99 not in table


def test_ids_are_never_reused_for_dropped_temporaries():
    table = ObjectTable()
    ids = {table.allocate_or_lookup(object()) for _ in range(200)}
    assert len(ids) == 200
    assert len(table) == 200


def test_concurrent_allocation_is_serialized():
    table = ObjectTable()
    shared = object()
    seen: list[int] = []
    lock = threading.Lock()

    def worker():
        for _ in range(50):
            oid = table.allocate_or_lookup(shared)
            table.allocate_or_lookup(object())
            with lock:
                seen.append(oid)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert set(seen) == {seen[0]}
    assert len(table) == 1 + 8 * 50


def test_pending_rolls_back_allocations_on_error():
    table = ObjectTable()
    kept = object()
    assert table.allocate_or_lookup(kept) == 1
    dropped = object()
    with pytest.raises(RuntimeError):
        with table.pending():
            table.allocate_or_lookup(dropped)
            assert table.allocate_or_lookup(kept) == 1
            raise RuntimeError("encode failed")
    assert len(table) == 1
    assert 2 not in table
    assert table.allocate_or_lookup(object()) == 2
    assert table.allocate_or_lookup(kept) == 1


def test_pending_keeps_allocations_on_success():
    table = ObjectTable()
    with table.pending():
        oid = table.allocate_or_lookup(object())
    assert oid in table
