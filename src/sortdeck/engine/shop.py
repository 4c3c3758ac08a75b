from __future__ import annotations

from .deck import add_to_owned_deck
from .state import GameState, StepResult
from .types import ActionCardTemplate, ActionCatalog, Rarity, rarity_rank


def eligible_templates(catalog: ActionCatalog, max_rarity: Rarity) -> list[ActionCardTemplate]:
    limit = rarity_rank(max_rarity)
    out = [t for t in catalog.actions.values() if t.purchasable and rarity_rank(t.rarity) <= limit]
    # Stable base order so a seed always yields the same offer
    return sorted(out, key=lambda t: t.id)


def generate_offer(state: GameState) -> list[str]:
    cfg = state.shop_config
    pool = eligible_templates(state.catalog, cfg.max_rarity)
    count = max(0, min(cfg.items_per_round, len(pool)))
    chosen = state.rng.sample(pool, count)
    state.shop.offer = [t.id for t in chosen]
    state.shop.purchased = []
    state.event_log.append({"type": "SHOP_GENERATED", "offer": list(state.shop.offer)})
    return list(state.shop.offer)


def purchase(state: GameState, offer_id: str) -> StepResult:
    if offer_id not in state.shop.offer:
        return StepResult(ok=False, events=[], error=f"{offer_id} is not on offer.", code="item_not_found")
    if offer_id in state.shop.purchased:
        return StepResult(ok=False, events=[], error=f"{offer_id} already purchased.", code="already_purchased")

    template = state.catalog.get(offer_id)
    if state.cash < template.cost:
        return StepResult(
            ok=False,
            events=[],
            error=f"Need {template.cost} cash, have {state.cash}.",
            code="insufficient_cash",
        )

    start = len(state.event_log)
    state.cash -= template.cost
    state.shop.purchased.append(offer_id)
    add_to_owned_deck(state, offer_id)
    state.run_stats.deck_size = len(state.deck.owned)
    state.event_log.append(
        {"type": "ITEM_PURCHASED", "card_id": offer_id, "cost": template.cost, "cash": state.cash}
    )
    return StepResult(ok=True, events=state.event_log[start:])


def refresh_offer(state: GameState) -> StepResult:
    cost = state.shop_config.refresh_cost
    if state.cash < cost:
        return StepResult(
            ok=False,
            events=[],
            error=f"Need {cost} cash to refresh, have {state.cash}.",
            code="insufficient_cash",
        )
    start = len(state.event_log)
    state.cash -= cost
    state.event_log.append({"type": "SHOP_REFRESHED", "cost": cost, "cash": state.cash})
    generate_offer(state)
    return StepResult(ok=True, events=state.event_log[start:])
