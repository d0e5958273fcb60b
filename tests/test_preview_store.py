import dataclasses
import re
import threading

import pytest

from sqlassist.errors import PreviewNotFoundError
from sqlassist.preview.store import InMemoryPreviewStore, new_preview_id


def test_round_trip_then_expiry(previews, clock):
    pid = previews.put("SELECT *\nFROM sales", user_id="u1", user_role="analyst")
    item = previews.get(pid)
    assert item.query == "SELECT *\nFROM sales"
    assert (item.user_id, item.user_role) == ("u1", "analyst")

    clock.advance(3601)
    assert previews.sweep() == [pid]
    with pytest.raises(PreviewNotFoundError):
        previews.get(pid)
    assert len(previews) == 0


def test_entry_at_exact_ttl_is_still_live(previews, clock):
    pid = previews.put("SELECT 1")
    clock.advance(3600)
    assert previews.get(pid).query == "SELECT 1"
    assert previews.sweep() == []


def test_expired_but_unswept_is_not_found(previews, clock):
    pid = previews.put("SELECT 1")
    clock.advance(4000)
    with pytest.raises(PreviewNotFoundError):
        previews.get(pid)
    assert previews.expired_ids() == [pid]


def test_sweep_keeps_fresh_entries(previews, clock):
    old = previews.put("SELECT 1")
    clock.advance(3000)
    fresh = previews.put("SELECT 2")
    clock.advance(1000)
    assert previews.sweep() == [old]
    assert previews.get(fresh).query == "SELECT 2"


def test_delete_is_idempotent(previews):
    pid = previews.put("SELECT 1")
    previews.delete(pid)
    previews.delete(pid)
    previews.delete("never-existed")
    with pytest.raises(PreviewNotFoundError):
        previews.get(pid)


def test_take_removes_the_entry(previews):
    pid = previews.put("SELECT 1", user_role="guest")
    item = previews.take(pid)
    assert (item.query, item.user_role) == ("SELECT 1", "guest")
    assert len(previews) == 0
    with pytest.raises(PreviewNotFoundError):
        previews.take(pid)


def test_take_expired_is_not_found(previews, clock):
    pid = previews.put("SELECT 1")
    clock.advance(4000)
    with pytest.raises(PreviewNotFoundError):
        previews.take(pid)


def test_restore_keeps_original_age(previews, clock):
    pid = previews.put("SELECT 1")
    clock.advance(3000)
    previews.restore(previews.take(pid))
    assert previews.get(pid).query == "SELECT 1"
    clock.advance(700)
    assert previews.sweep() == [pid]


def test_concurrent_takes_have_one_winner(previews):
    pid = previews.put("SELECT 1")
    won = []
    lock = threading.Lock()

    def worker():
        try:
            item = previews.take(pid)
        except PreviewNotFoundError:
            return
        with lock:
            won.append(item)

    threads = [threading.Thread(target=worker) for _ in range(16)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(won) == 1


def test_previews_are_immutable(previews):
    item = previews.get(previews.put("SELECT 1"))
    with pytest.raises(dataclasses.FrozenInstanceError):
        item.query = "DROP TABLE sales"


def test_live_id_is_never_reused(clock):
    ids = iter(["dup", "dup", "dup", "fresh"])
    store = InMemoryPreviewStore(clock=clock, id_factory=lambda: next(ids))
    assert store.put("SELECT 1") == "dup"
    assert store.put("SELECT 2") == "fresh"


def test_concurrent_puts_get_unique_ids():
    store = InMemoryPreviewStore()
    results = []
    lock = threading.Lock()

    def worker():
        local = [store.put("SELECT 1") for _ in range(200)]
        with lock:
            results.extend(local)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(results) == 1600
    assert len(set(results)) == 1600
    assert len(store) == 1600


def test_id_format():
    assert re.fullmatch(r"[0-9a-z]+-[A-Za-z0-9_-]+", new_preview_id())


def test_invalid_ttl():
    with pytest.raises(ValueError):
        InMemoryPreviewStore(ttl_seconds=0)
