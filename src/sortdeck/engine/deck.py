from __future__ import annotations

from .state import GameState
from .types import ActionCardInstance


def _new_instance(state: GameState, card_id: str) -> ActionCardInstance:
    inst = ActionCardInstance(uid=state.deck.next_uid, card_id=card_id)
    state.deck.next_uid += 1
    return inst


def _fresh_copy(state: GameState, inst: ActionCardInstance) -> ActionCardInstance:
    return _new_instance(state, inst.card_id)


def initialize_deck(state: GameState) -> None:
    """Prepare the piles for a new round.

    Seeds the owned deck from the catalog's base composition the first time,
    then deals a shuffled copy of the owned deck into the draw pile.
    """
    deck = state.deck
    if not deck.owned:
        for card_id in state.catalog.base_deck:
            if card_id not in state.catalog.actions:
                state.event_log.append({"type": "UNKNOWN_BASE_CARD", "card_id": card_id})
                continue
            deck.owned.append(_new_instance(state, card_id))

    draw = [_fresh_copy(state, inst) for inst in deck.owned]
    state.rng.shuffle(draw)
    deck.draw_pile = draw
    deck.discard_pile = []
    deck.committed = len(draw)
    state.event_log.append({"type": "DECK_INITIALIZED", "owned": len(deck.owned), "draw_pile": len(draw)})


def draw(state: GameState) -> ActionCardInstance | None:
    pile = state.deck.draw_pile
    if not pile:
        return None
    inst = pile.pop(state.rng.randrange(len(pile)))
    state.event_log.append(
        {"type": "ACTION_DRAWN", "card_id": inst.card_id, "uid": inst.uid, "draw_pile": len(pile)}
    )
    return inst


def discard(state: GameState, inst: ActionCardInstance) -> ActionCardInstance:
    """Put a copy of a spent card on the discard pile; the spent uid is retired."""
    copy = _fresh_copy(state, inst)
    state.deck.discard_pile.append(copy)
    state.event_log.append(
        {
            "type": "ACTION_DISCARDED",
            "card_id": inst.card_id,
            "uid": inst.uid,
            "copy_uid": copy.uid,
            "discard_pile": len(state.deck.discard_pile),
        }
    )
    return copy


def reshuffle_discard_into_draw(state: GameState) -> None:
    deck = state.deck
    if not deck.discard_pile:
        return
    cards = list(deck.discard_pile)
    state.rng.shuffle(cards)
    deck.discard_pile = []
    deck.draw_pile.extend(cards)
    state.event_log.append({"type": "DISCARD_RESHUFFLED", "count": len(cards)})


def draw_with_reshuffle(state: GameState) -> ActionCardInstance | None:
    """Draw; on an empty draw pile reshuffle the discard pile once and retry."""
    inst = draw(state)
    if inst is not None:
        return inst
    reshuffle_discard_into_draw(state)
    return draw(state)


def add_to_owned_deck(state: GameState, card_id: str) -> ActionCardInstance:
    """Add a new card to the owned deck and make it drawable this round."""
    deck = state.deck
    owned = _new_instance(state, card_id)
    deck.owned.append(owned)
    in_play = _fresh_copy(state, owned)
    deck.draw_pile.append(in_play)
    deck.committed += 1
    state.event_log.append({"type": "ACTION_ADDED_TO_DECK", "card_id": card_id, "owned": len(deck.owned)})
    return in_play


def reset_owned_deck(state: GameState) -> None:
    state.deck.owned = []
    state.deck.draw_pile = []
    state.deck.discard_pile = []
    state.deck.committed = 0


def live_bank_count(state: GameState) -> int:
    return sum(1 for inst in state.bank if inst is not None)


def check_pile_invariant(state: GameState) -> bool:
    deck = state.deck
    draw_ids = {i.uid for i in deck.draw_pile}
    discard_ids = {i.uid for i in deck.discard_pile}
    if draw_ids & discard_ids:
        return False
    return len(deck.draw_pile) + len(deck.discard_pile) + live_bank_count(state) == deck.committed


def deck_stats(state: GameState) -> dict[str, object]:
    deck = state.deck
    by_id: dict[str, int] = {}
    for inst in deck.draw_pile + deck.discard_pile:
        by_id[inst.card_id] = by_id.get(inst.card_id, 0) + 1
    return {
        "owned": len(deck.owned),
        "draw_pile": len(deck.draw_pile),
        "discard_pile": len(deck.discard_pile),
        "committed": deck.committed,
        "by_id": dict(sorted(by_id.items())),
    }
