from __future__ import annotations

import itertools
import random

from pickrun_cli.actions import Action, load
from pickrun_cli.engine import Direction, Engine


def _actions(*names: str) -> list[Action]:
    return [Action(name=n, command=("true", n)) for n in names]


def _substring(label: str, query: str) -> int | None:
    return 0 if query in label else None


def _is_subsequence(sub: list[Action], full: tuple[Action, ...]) -> bool:
    it = iter(full)
    return all(any(a is b for b in it) for a in sub)


def test_new_engine_shows_full_registry() -> None:
    registry = load()
    engine = Engine(registry)
    assert engine.query == ""
    assert engine.filtered == registry
    assert engine.cursor == 0


def test_query_re_selects_reboot() -> None:
    engine = Engine(load())
    engine.insert_char("r")
    engine.insert_char("e")
    assert [a.name for a in engine.filtered] == ["reboot"]
    assert engine.cursor == 0
    selected = engine.confirm_selection()
    assert selected is not None
    assert selected.name == "reboot"
    assert selected.command == ("systemctl", "reboot")


def test_down_walks_and_wraps() -> None:
    engine = Engine(load())
    engine.move_selection(Direction.DOWN)
    engine.move_selection(Direction.DOWN)
    assert engine.cursor == 2
    assert engine.confirm_selection().name == "logout"
    engine.move_selection(Direction.DOWN)
    assert engine.cursor == 0
    assert engine.confirm_selection().name == "shutdown"


def test_up_from_first_wraps_to_last() -> None:
    engine = Engine(load())
    engine.move_selection(Direction.UP)
    assert engine.cursor == 2
    engine.move_selection(Direction.UP)
    assert engine.cursor == 1


def test_no_matches_confirms_nothing() -> None:
    engine = Engine(load())
    for ch in "xyz":
        engine.insert_char(ch)
    assert engine.filtered == []
    assert engine.cursor == 0
    assert engine.confirm_selection() is None
    for direction in Direction:
        engine.move_selection(direction)
        assert engine.cursor == 0
        assert engine.confirm_selection() is None


def test_delete_on_empty_query_is_noop() -> None:
    engine = Engine(load())
    engine.move_selection(Direction.DOWN)
    before = (engine.query, list(engine.filtered), engine.cursor)
    engine.delete_last_char()
    assert (engine.query, engine.filtered, engine.cursor) == before


def test_delete_restores_wider_list() -> None:
    engine = Engine(load())
    engine.insert_char("x")
    assert engine.filtered == []
    engine.delete_last_char()
    assert engine.query == ""
    assert engine.filtered == list(engine.registry)
    assert engine.cursor == 0


def test_shrinking_filter_clamps_cursor() -> None:
    engine = Engine(_actions("alpha", "beta", "gamma", "delta"), matcher=_substring)
    engine.move_selection(Direction.UP)
    assert engine.cursor == 3
    engine.insert_char("m")
    assert [a.name for a in engine.filtered] == ["gamma"]
    assert engine.cursor == 0
    engine.delete_last_char()
    # clamped, not reset to the old position
    assert engine.cursor == 0
    assert len(engine.filtered) == 4


def test_cursor_kept_when_still_in_range() -> None:
    engine = Engine(_actions("ab", "ac", "ad", "x"), matcher=_substring)
    engine.move_selection(Direction.DOWN)
    engine.insert_char("a")
    assert engine.cursor == 1
    assert engine.confirm_selection().name == "ac"


def test_filter_keeps_registry_order_not_score() -> None:
    def scored(label: str, query: str) -> int | None:
        # later labels score higher, which must not reorder anything
        return len(label) if query in label else None

    engine = Engine(_actions("a", "aaa", "aa"), matcher=scored)
    engine.insert_char("a")
    assert [a.name for a in engine.filtered] == ["a", "aaa", "aa"]


def test_matcher_receives_label_and_query() -> None:
    calls: list[tuple[str, str]] = []

    def spy(label: str, query: str) -> int | None:
        calls.append((label, query))
        return 0

    engine = Engine(_actions("one", "two"), matcher=spy)
    calls.clear()
    engine.insert_char("t")
    assert calls == [("one", "t"), ("two", "t")]


def test_unset_cursor_moves_to_first() -> None:
    engine = Engine(_actions("a", "b"))
    for direction in Direction:
        engine.cursor = None
        engine.move_selection(direction)
        assert engine.cursor == 0


def test_cancel_leaves_state_alone() -> None:
    engine = Engine(load())
    engine.insert_char("o")
    before = (engine.query, list(engine.filtered), engine.cursor)
    assert engine.cancel() is None
    assert (engine.query, engine.filtered, engine.cursor) == before


def test_random_sessions_keep_invariants() -> None:
    rng = random.Random(1234)
    registry = _actions("shutdown", "reboot", "logout", "lock", "suspend", "hibernate")
    engine = Engine(registry)
    ops = ["ins", "del", Direction.UP, Direction.DOWN, Direction.STAY]
    for op in (rng.choice(ops) for _ in range(2000)):
        if op == "ins":
            engine.insert_char(rng.choice("abcdehiklnorstuxz"))
        elif op == "del":
            engine.delete_last_char()
        else:
            engine.move_selection(op)

        assert _is_subsequence(engine.filtered, engine.registry)
        if engine.filtered:
            assert 0 <= engine.cursor < len(engine.filtered)
            assert engine.confirm_selection() is engine.filtered[engine.cursor]
        else:
            assert engine.cursor == 0
            assert engine.confirm_selection() is None
        if not engine.query:
            assert engine.filtered == list(engine.registry)


def test_empty_registry() -> None:
    engine = Engine([])
    assert engine.filtered == []
    assert engine.cursor == 0
    for direction in itertools.chain(Direction, Direction):
        engine.move_selection(direction)
    assert engine.confirm_selection() is None
