from __future__ import annotations

from dataclasses import asdict

from .bank import slot_playable
from .commands import (
    AdvancePhaseCommand,
    Command,
    DeselectAllCommand,
    PurchaseCommand,
    RefreshShopCommand,
    ResetRunCommand,
    SelectCardCommand,
    UseActionCommand,
)
from .deck import deck_stats
from .state import GameState


def command_to_dict(c: Command) -> dict[str, object]:
    if isinstance(c, SelectCardCommand):
        return {"type": "select", "index": c.index}
    if isinstance(c, DeselectAllCommand):
        return {"type": "deselect_all"}
    if isinstance(c, UseActionCommand):
        return {"type": "use", "slot": c.slot}
    if isinstance(c, PurchaseCommand):
        return {"type": "purchase", "offer_id": c.offer_id}
    if isinstance(c, RefreshShopCommand):
        return {"type": "refresh_shop"}
    if isinstance(c, AdvancePhaseCommand):
        return {"type": "advance"}
    if isinstance(c, ResetRunCommand):
        return {"type": "reset_run"}
    # should be unreachable
    return {"type": "unknown"}


def _bank_to_list(state: GameState) -> list[dict[str, object] | None]:
    out: list[dict[str, object] | None] = []
    for slot, inst in enumerate(state.bank):
        if inst is None:
            out.append(None)
            continue
        template = state.catalog.get(inst.card_id)
        out.append(
            {
                "card_id": inst.card_id,
                "name": template.name,
                "requires": template.requires,
                "playable": slot_playable(state, slot) and not state.frozen and state.phase == "sorting",
            }
        )
    return out


def snapshot(state: GameState) -> dict[str, object]:
    """Return a JSON-serializable view of everything a UI may display."""
    return {
        "seed": state.seed,
        "phase": state.phase,
        "round": state.current_round,
        "cash": state.cash,
        "starting_hands": state.starting_hands,
        "remaining_hands": state.remaining_hands,
        "action_count": state.action_count,
        "is_won": state.is_won,
        "reward_pending": state.frozen,
        "cards": [{"index": c.index, "value": c.value, "selected": c.selected} for c in state.cards],
        "bank": _bank_to_list(state),
        "deck": deck_stats(state),
        "shop": {"offer": list(state.shop.offer), "purchased": list(state.shop.purchased)},
        "round_stats": asdict(state.round_stats),
        "run_stats": asdict(state.run_stats),
        "command_log": [command_to_dict(c) for c in state.command_log],
    }
