from __future__ import annotations

from .deck import discard, draw_with_reshuffle
from .state import GameState
from .types import ActionCardInstance, Requires


def is_playable(requires: Requires, selection_size: int) -> bool:
    if requires == "one":
        return selection_size == 1
    if requires == "two_or_more":
        return selection_size >= 2
    return selection_size >= 1


def slot_playable(state: GameState, slot: int) -> bool:
    if slot < 0 or slot >= len(state.bank):
        return False
    inst = state.bank[slot]
    if inst is None:
        return False
    template = state.catalog.get(inst.card_id)
    return is_playable(template.requires, len(state.selected_indices()))


def _fill_slot(state: GameState, slot: int) -> ActionCardInstance | None:
    inst = draw_with_reshuffle(state)
    state.bank[slot] = inst
    if inst is None:
        state.event_log.append({"type": "DECK_EXHAUSTED", "slot": slot})
    else:
        state.event_log.append({"type": "BANK_SLOT_FILLED", "slot": slot, "card_id": inst.card_id})
    return inst


def initialize_bank(state: GameState) -> None:
    state.bank = [None for _ in range(state.config.bank_size)]
    for slot in range(state.config.bank_size):
        _fill_slot(state, slot)


def consume_slot(state: GameState, slot: int) -> ActionCardInstance | None:
    """Discard the instance held in `slot` and refill the slot.

    Returns the replacement, or None when both piles are exhausted.
    """
    inst = state.bank[slot]
    if inst is not None:
        state.bank[slot] = None
        discard(state, inst)
    return _fill_slot(state, slot)
