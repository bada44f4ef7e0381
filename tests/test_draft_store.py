from coding_round_cbt.services.debounce import Debouncer
from coding_round_cbt.services.draft_store import DraftStore, code_key, output_key
from coding_round_cbt.services.session_storage import USER_EMAIL_KEY
from coding_round_cbt.services.templates import BLANK_CODE_MARKER


def test_save_then_load_round_trip(storage, scheduler):
    store = DraftStore(storage, scheduler=scheduler)
    store.save(3, "X", "Y")

    record = store.load(3)
    assert record.code == "X"
    assert record.output == "Y"


def test_load_missing_question_returns_none(storage, scheduler):
    store = DraftStore(storage, scheduler=scheduler)
    assert store.load(7) is None


def test_saving_identical_draft_twice_keeps_single_record(storage, scheduler):
    store = DraftStore(storage, scheduler=scheduler)
    store.save(2, "code", "out")
    snapshot = dict((k, storage.get_item(k)) for k in storage.keys())

    store.save(2, "code", "out")

    assert dict((k, storage.get_item(k)) for k in storage.keys()) == snapshot
    assert sorted(storage.keys("question_")) == [code_key(2), output_key(2)]


def test_rapid_saves_coalesce_into_one_write_with_last_values(storage, scheduler):
    store = DraftStore(storage, delay=2.0, scheduler=scheduler)

    store.schedule_save(1, "a", "")
    scheduler.advance(0.5)
    store.schedule_save(1, "ab", "")
    scheduler.advance(0.5)
    store.schedule_save(1, "abc", "ran")

    scheduler.advance(1.9)
    assert store.writes == 0
    assert store.load(1) is None

    scheduler.advance(0.2)
    assert store.writes == 1
    assert store.load(1).code == "abc"
    assert store.load(1).output == "ran"


def test_direct_save_supersedes_pending_debounced_write(storage, scheduler):
    store = DraftStore(storage, delay=2.0, scheduler=scheduler)
    store.schedule_save(4, "stale", "")
    store.save(4, "fresh", "")

    assert not store.has_pending(4)
    scheduler.advance(5)
    assert store.load(4).code == "fresh"
    assert store.writes == 1


def test_flush_writes_pending_immediately(storage, scheduler):
    store = DraftStore(storage, delay=2.0, scheduler=scheduler)
    store.schedule_save(5, "draft", "")

    assert store.flush(5) is True
    assert store.load(5).code == "draft"
    assert store.flush(5) is False


def test_blank_marker_counts_as_no_draft(storage, scheduler):
    storage.set_item(code_key(6), BLANK_CODE_MARKER)
    store = DraftStore(storage, scheduler=scheduler)
    assert store.load(6) is None


def test_clear_purges_scope_but_keeps_identity(storage, scheduler):
    storage.set_item(USER_EMAIL_KEY, "a@b.c")
    store = DraftStore(storage, scheduler=scheduler)
    store.save(1, "one", "")
    store.save(12, "twelve", "")
    store.schedule_save(3, "pending", "")

    assert store.clear() == 4
    assert store.load(1) is None
    assert store.load(12) is None
    assert storage.get_item(USER_EMAIL_KEY) == "a@b.c"

    scheduler.advance(10)
    assert store.load(3) is None


def test_debouncer_keys_are_independent(scheduler):
    written = []
    debouncer = Debouncer(1.0, lambda key, payload: written.append((key, payload)), scheduler=scheduler)

    debouncer.schedule("a", 1)
    debouncer.schedule("b", 2)
    debouncer.schedule("a", 3)
    scheduler.advance(1.0)

    assert sorted(written) == [("a", 3), ("b", 2)]
    assert len(debouncer) == 0


def test_debouncer_cancel_drops_payload(scheduler):
    written = []
    debouncer = Debouncer(1.0, lambda key, payload: written.append(payload), scheduler=scheduler)
    debouncer.schedule("k", "v")

    assert debouncer.cancel("k") == "v"
    scheduler.advance(2)
    assert written == []
