import pytest

from typerace.game import session as ops
from typerace.game.errors import InvalidTransition, UnknownPlayer
from typerace.game.models import Participant


WORDS = ["visit", "via"]


def _session():
    return ops.create_session(
        [Participant("a", "Alice"), Participant("b", "Bob")],
        WORDS,
        created_at=0,
    )


def _running(start=1000):
    s = _session()
    ops.set_ready(s, "a")
    ops.set_ready(s, "b")
    ops.start(s, start)
    return s


def test_create_session_builds_fresh_players():
    s = _session()
    assert s.status == "waiting"
    assert s.start_time is None
    assert s.words == ("visit", "via")
    assert set(s.players) == {"a", "b"}
    for p in s.players.values():
        assert (p.is_ready, p.current_word_index, p.score, p.current_text) == (False, 0, 0, "")


def test_create_session_ids_are_unique():
    assert _session().id != _session().id


def test_create_session_requires_players():
    with pytest.raises(ValueError):
        ops.create_session([], WORDS)


def test_all_ready_only_when_everyone_is_ready():
    s = _session()
    assert not ops.all_ready(s)
    ops.set_ready(s, "a")
    assert not ops.all_ready(s)
    ops.set_ready(s, "b")
    assert ops.all_ready(s)


def test_set_ready_unknown_player():
    s = _session()
    with pytest.raises(UnknownPlayer):
        ops.set_ready(s, "zed")


def test_set_ready_after_start_is_rejected():
    s = _running()
    with pytest.raises(InvalidTransition):
        ops.set_ready(s, "a")


def test_start_twice_is_rejected():
    s = _running(start=1000)
    with pytest.raises(InvalidTransition):
        ops.start(s, 2000)
    assert s.start_time == 1000


def test_set_text_overwrites_without_validation():
    s = _session()
    ops.set_text(s, "a", "vis")
    ops.set_text(s, "a", "xyz")
    assert s.players["a"].current_text == "xyz"


def test_complete_word_before_start_is_rejected():
    s = _session()
    with pytest.raises(InvalidTransition):
        ops.complete_word(s, "a", 0, 5000)
    assert s.players["a"].current_word_index == 0


def test_complete_word_accumulates_score():
    s = _running(start=1000)
    ops.set_text(s, "a", "visit")

    assert ops.complete_word(s, "a", 0, 3000) == 6250
    player = s.players["a"]
    assert (player.score, player.current_word_index, player.current_text) == (6250, 1, "")

    # via at 10s elapsed with 3 errors scores the floor
    assert ops.complete_word(s, "a", 3, 11000) == 1500
    assert player.score == 7750
    assert player.current_word_index == 2


def test_complete_word_after_last_word_is_rejected():
    s = _running()
    ops.complete_word(s, "a", 0, 2000)
    ops.complete_word(s, "a", 0, 3000)
    score = s.players["a"].score

    with pytest.raises(InvalidTransition):
        ops.complete_word(s, "a", 0, 4000)

    assert s.players["a"].score == score
    assert s.players["a"].current_word_index == len(WORDS)


def test_is_over_on_first_finisher():
    s = _running()
    assert not ops.is_over(s)
    ops.complete_word(s, "a", 0, 2000)
    ops.complete_word(s, "b", 0, 2000)
    assert not ops.is_over(s)
    ops.complete_word(s, "b", 0, 2500)
    assert ops.is_over(s)
    ops.complete_word(s, "a", 0, 3000)
    assert ops.is_over(s)


def test_finish_records_winner():
    s = _running()
    ops.complete_word(s, "b", 0, 2000)
    ops.complete_word(s, "b", 0, 2500)
    ops.finish(s, 2500)
    assert s.status == "finished"
    assert s.winner_id == "b"
    assert s.finished_at == 2500

    with pytest.raises(InvalidTransition):
        ops.set_text(s, "a", "late")


def test_public_state_is_complete():
    s = _running(start=1000)
    state = ops.session_public_state(s)
    assert state["id"] == s.id
    assert state["words"] == WORDS
    assert state["startTime"] == 1000
    assert state["status"] == "running"
    assert state["players"]["a"] == {
        "id": "a",
        "displayName": "Alice",
        "isReady": True,
        "currentText": "",
        "currentWordIndex": 0,
        "score": 0,
        "connected": True,
    }
