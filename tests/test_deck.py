from __future__ import annotations

import random

from sortdeck.engine.deck import (
    add_to_owned_deck,
    check_pile_invariant,
    deck_stats,
    discard,
    draw,
    draw_with_reshuffle,
    initialize_deck,
    reshuffle_discard_into_draw,
)
from sortdeck.engine.state import GameConfig, GameState, ShopConfig
from sortdeck.paths import get_paths
from sortdeck.services.content import ContentService


def _load_catalog():
    paths = get_paths()
    content = ContentService(paths.data_dir, paths.schema_dir)
    return content.load_catalog()


def _bare_state(seed: int = 1) -> GameState:
    return GameState(
        catalog=_load_catalog(),
        config=GameConfig(),
        shop_config=ShopConfig(),
        seed=seed,
        rng=random.Random(seed),
    )


def test_initialize_seeds_base_deck_once() -> None:
    state = _bare_state()
    initialize_deck(state)
    assert sorted(i.card_id for i in state.deck.owned) == ["reverse", "swap", "swap", "swap", "swap"]
    assert len(state.deck.draw_pile) == 5
    assert state.deck.discard_pile == []
    assert state.deck.committed == 5

    owned_uids = [i.uid for i in state.deck.owned]
    initialize_deck(state)
    assert [i.uid for i in state.deck.owned] == owned_uids
    assert len(state.deck.draw_pile) == 5


def test_draw_pile_holds_copies_not_owned_instances() -> None:
    state = _bare_state()
    initialize_deck(state)
    owned_uids = {i.uid for i in state.deck.owned}
    assert not owned_uids & {i.uid for i in state.deck.draw_pile}

    inst = draw(state)
    assert inst is not None
    discard(state, inst)
    assert len(state.deck.owned) == 5
    assert inst.uid not in owned_uids


def test_reshuffle_scenario_after_five_draws() -> None:
    state = _bare_state(seed=7)
    initialize_deck(state)

    drawn = []
    for _ in range(5):
        inst = draw(state)
        assert inst is not None
        drawn.append(inst)
    assert draw(state) is None

    copies = [discard(state, inst) for inst in drawn]
    assert draw(state) is None

    reshuffle_discard_into_draw(state)
    assert state.deck.discard_pile == []
    assert sorted(i.uid for i in state.deck.draw_pile) == sorted(i.uid for i in copies)
    assert sorted(i.card_id for i in state.deck.draw_pile) == sorted(i.card_id for i in drawn)

    sixth = draw(state)
    assert sixth is not None
    assert sixth.uid in {i.uid for i in copies}
    assert sixth.uid not in {i.uid for i in drawn}


def test_draw_with_reshuffle_falls_back_once() -> None:
    state = _bare_state()
    initialize_deck(state)
    held = [draw(state) for _ in range(5)]
    assert draw_with_reshuffle(state) is None

    first = held[0]
    assert first is not None
    discard(state, first)
    again = draw_with_reshuffle(state)
    assert again is not None
    assert again.card_id == first.card_id
    assert again.uid != first.uid


def test_discard_stores_copy_with_fresh_uid() -> None:
    state = _bare_state()
    initialize_deck(state)
    inst = draw(state)
    assert inst is not None

    copy = discard(state, inst)
    assert copy.card_id == inst.card_id
    assert copy.uid != inst.uid
    assert state.deck.discard_pile == [copy]
    assert inst not in state.deck.discard_pile
    assert state.event_log[-1]["uid"] == inst.uid
    assert state.event_log[-1]["copy_uid"] == copy.uid


def test_reshuffle_with_empty_discard_is_noop() -> None:
    state = _bare_state()
    initialize_deck(state)
    before = list(state.deck.draw_pile)
    n_events = len(state.event_log)
    reshuffle_discard_into_draw(state)
    assert state.deck.draw_pile == before
    assert len(state.event_log) == n_events


def test_add_to_owned_deck_is_drawable_now() -> None:
    state = _bare_state()
    initialize_deck(state)
    state.bank = []
    assert check_pile_invariant(state)

    inst = add_to_owned_deck(state, "upshift")
    assert len(state.deck.owned) == 6
    assert len(state.deck.draw_pile) == 6
    assert inst in state.deck.draw_pile
    assert state.deck.committed == 6
    assert check_pile_invariant(state)


def test_deck_stats_counts_piles() -> None:
    state = _bare_state()
    initialize_deck(state)
    inst = draw(state)
    assert inst is not None
    discard(state, inst)
    stats = deck_stats(state)
    assert stats["draw_pile"] == 4
    assert stats["discard_pile"] == 1
    assert stats["by_id"] == {"reverse": 1, "swap": 4}
