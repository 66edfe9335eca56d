import pytest

from fixed_hashmap.hashmap import ABSENT, FixedCapacityHashMap


def fill(m, n, prefix="value"):
    for i in range(n):
        assert m.set("key" + str(i), prefix + str(i))


def test_set_and_get():
    m = FixedCapacityHashMap(1000)
    fill(m, 500)

    for i in range(500):
        assert m.get("key" + str(i)) == "value" + str(i)

    # unknown keys are absent
    assert m.get("key500") is ABSENT
    assert m.size() == 500
    assert len(m) == 500


def test_set_and_update():
    m = FixedCapacityHashMap(1000)
    fill(m, 500)

    for i in range(250, 500):
        assert m.set("key" + str(i), "newValue" + str(i))

    # updates do not count as new keys
    assert m.size() == 500

    for i in range(250):
        assert m.get("key" + str(i)) == "value" + str(i)
    for i in range(250, 500):
        assert m.get("key" + str(i)) == "newValue" + str(i)


def test_capacity_enforcement():
    m = FixedCapacityHashMap(1000)
    fill(m, 1000)

    assert not m.set("tooManyKeys", "tooManyValues")
    assert m.get("tooManyKeys") is ABSENT
    assert "tooManyKeys" not in m
    assert m.size() == 1000

    # updates are still allowed when full
    assert m.set("key7", "again")
    assert m.get("key7") == "again"
    assert m.size() == 1000


def test_rejected_set_leaves_map_unchanged():
    m = FixedCapacityHashMap(64)
    fill(m, 64)
    before = m.chain_lengths()

    for i in range(64, 200):
        assert not m.set("key" + str(i), i)

    assert m.chain_lengths() == before
    assert m.size() == 64
    for i in range(64):
        assert m.get("key" + str(i)) == "value" + str(i)


def test_rejected_set_releases_new_bucket():
    m = FixedCapacityHashMap(64)
    fill(m, 64)

    released = 0
    for i in range(64, 400):
        k = "key" + str(i)
        slot = m.index(k)
        bucket = m.bucket_at(slot)
        assert not m.set(k, i)

        # the slot holds the same bucket as before, or stays unused
        assert m.bucket_at(slot) is bucket
        if bucket is None:
            released += 1

    # some rejected keys hashed to unused slots
    assert released > 0


def test_unused_slots_are_none():
    m = FixedCapacityHashMap(16)
    assert all(m.bucket_at(i) is None for i in range(m.array_size))

    m.set("a", 1)
    slot = m.index("a")
    assert m.bucket_at(slot) is not None
    assert m.bucket_at(slot).find("a").value == 1

    # a failed delete keeps the bucket, the last delete releases it
    m.delete("b")
    assert m.bucket_at(slot) is not None
    m.delete("a")
    assert m.bucket_at(slot) is None


def test_delete_frees_room():
    m = FixedCapacityHashMap(2)
    assert m.set("a", 1)
    assert m.set("b", 2)
    assert not m.set("c", 3)

    assert m.delete("a") == 1
    assert m.set("c", 3)
    assert m.get("c") == 3
    assert m.get("a") is ABSENT


def test_delete():
    m = FixedCapacityHashMap(1000)
    m.set("key1", "value1")
    assert m.delete("key1") == "value1"
    assert m.get("key1") is ABSENT
    assert m.load() == 0.0

    # deleting an absent key changes nothing
    assert m.delete("key1") is ABSENT
    assert m.delete("never") is ABSENT
    assert m.size() == 0


def test_load():
    m = FixedCapacityHashMap(1000)
    fill(m, 1000)
    assert m.load() == 1.0

    for i in range(500):
        m.delete("key" + str(i))
    assert m.load() == 0.5

    for i in range(500, 1000):
        m.delete("key" + str(i))
    assert m.load() == 0.0


def test_load_tracks_size():
    m = FixedCapacityHashMap(7)
    for i in range(10):
        m.set(str(i % 4), i)
        assert m.load() == m.size() / 7


def test_none_is_a_value():
    m = FixedCapacityHashMap(4)
    assert m.set("k", None)
    assert m.get("k") is None
    assert "k" in m
    assert m.delete("k") is None
    assert m.size() == 0
    assert "k" not in m


def test_absent_is_falsy_singleton():
    assert not ABSENT
    assert repr(ABSENT) == "ABSENT"
    assert type(ABSENT)() is ABSENT


def test_chain_lengths():
    m = FixedCapacityHashMap(100)
    fill(m, 100)
    lengths = m.chain_lengths()
    assert len(lengths) == m.array_size
    assert sum(lengths) == 100

    for i in range(100):
        m.delete("key" + str(i))

    assert m.chain_lengths() == [0] * m.array_size

    # emptied chains are released back to unused slots
    assert all(m.bucket_at(i) is None for i in range(m.array_size))


def test_capacity_one():
    m = FixedCapacityHashMap(1)
    assert m.set("only", 1)
    assert not m.set("other", 2)
    assert m.set("only", 3)
    assert m.get("only") == 3
    assert m.capacity == 1


@pytest.mark.parametrize("capacity", [0, -1])
def test_non_positive_capacity(capacity):
    with pytest.raises(ValueError):
        FixedCapacityHashMap(capacity)


@pytest.mark.parametrize("capacity", [1.5, "10", None, True])
def test_bad_capacity_type(capacity):
    with pytest.raises(TypeError):
        FixedCapacityHashMap(capacity)


def test_non_string_key():
    m = FixedCapacityHashMap(4)
    with pytest.raises(TypeError):
        m.set(1, "x")
    with pytest.raises(TypeError):
        m.get(b"key")
    assert 1 not in m
    assert m.size() == 0
