from __future__ import annotations

import random
from collections.abc import Sequence
from typing import Iterable

from .bank import consume_slot, initialize_bank, is_playable
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
from .deck import initialize_deck, reset_owned_deck
from .shop import generate_offer, purchase, refresh_offer
from .state import Card, GameConfig, GameState, RoundStats, RunStats, ShopConfig, ShopState, StepResult
from .transforms import apply_transform
from .types import ActionCatalog

COMPLETE_ROUND_TASK = "complete_round"


def is_sorted(values: Sequence[int]) -> bool:
    return all(values[i - 1] <= values[i] for i in range(1, len(values)))


def card_values(state: GameState) -> list[int]:
    return [c.value for c in sorted(state.cards, key=lambda c: c.index)]


def _deal_cards(state: GameState) -> None:
    cfg = state.config
    pool = list(range(cfg.min_value, cfg.deal_max_value + 1))
    values = state.rng.sample(pool, cfg.number_of_cards)
    while is_sorted(values):
        state.rng.shuffle(values)
    state.cards = [Card(index=i, value=v) for i, v in enumerate(values)]
    state.event_log.append({"type": "CARDS_DEALT", "values": list(values)})


def _start_round(state: GameState) -> None:
    _deal_cards(state)
    initialize_deck(state)
    initialize_bank(state)
    state.phase = "sorting"
    state.starting_hands = state.config.number_of_cards
    state.remaining_hands = state.config.number_of_cards
    state.action_count = 0
    state.is_won = False
    state.pending_reward = None
    state.shop = ShopState()
    state.run_stats.deck_size = len(state.deck.owned)
    state.event_log.append(
        {"type": "ROUND_STARTED", "round": state.current_round, "hands": state.starting_hands}
    )


def complete_round(state: GameState) -> RoundStats:
    """Pay out the finished round and move to the reward phase."""
    remaining = state.remaining_hands
    solved = state.is_won
    cash_earned = remaining * state.config.cash_per_hand if solved else 0

    stats = RoundStats(
        hands_used=state.starting_hands - remaining,
        hands_remaining=remaining,
        cash_earned=cash_earned,
        actions_taken=state.action_count,
        solved=solved,
    )
    state.round_stats = stats
    state.cash += cash_earned

    run = state.run_stats
    run.total_rounds += 1
    run.total_cash_earned += cash_earned
    run.total_actions_used += state.action_count
    if solved:
        run.best_efficiency = max(run.best_efficiency, remaining)
    run.deck_size = len(state.deck.owned)

    state.pending_reward = None
    state.phase = "reward"
    state.event_log.append(
        {
            "type": "ROUND_COMPLETED",
            "round": state.current_round,
            "solved": solved,
            "cash_earned": cash_earned,
            "cash": state.cash,
        }
    )
    return stats


def _end_round(state: GameState, solved: bool) -> None:
    state.is_won = solved
    state.event_log.append(
        {"type": "ROUND_WON" if solved else "HANDS_EXHAUSTED", "round": state.current_round}
    )
    delay = state.config.reward_delay
    if delay <= 0:
        complete_round(state)
        return
    state.pending_reward = state.scheduler.schedule(COMPLETE_ROUND_TASK, delay)


def _require_sorting(state: GameState) -> StepResult | None:
    if state.phase != "sorting":
        return StepResult(ok=False, events=[], error=f"Not allowed during {state.phase}.", code="invalid_phase")
    if state.is_won or state.frozen:
        return StepResult(ok=False, events=[], error="Round is over.", code="round_frozen")
    return None


def _deselect_all(state: GameState) -> None:
    for c in state.cards:
        c.selected = False


def _select_card(state: GameState, cmd: SelectCardCommand) -> StepResult:
    blocked = _require_sorting(state)
    if blocked:
        return blocked
    if cmd.index < 0 or cmd.index >= len(state.cards):
        return StepResult(ok=False, events=[], error="Invalid card index.", code="invalid_card")
    card = state.cards[cmd.index]
    card.selected = not card.selected
    state.event_log.append({"type": "CARD_SELECTED", "index": cmd.index, "selected": card.selected})
    return StepResult(ok=True, events=state.event_log[-1:])


def _use_action(state: GameState, cmd: UseActionCommand) -> StepResult:
    blocked = _require_sorting(state)
    if blocked:
        return blocked
    if cmd.slot < 0 or cmd.slot >= len(state.bank):
        return StepResult(ok=False, events=[], error="Invalid action slot.", code="invalid_slot")
    inst = state.bank[cmd.slot]
    if inst is None:
        return StepResult(ok=False, events=[], error="That action slot is empty.", code="invalid_slot")

    start = len(state.event_log)
    template = state.catalog.get(inst.card_id)
    indices = state.selected_indices()
    before = [state.cards[i].value for i in indices]

    after: list[int] | None = None
    if is_playable(template.requires, len(indices)):
        after = apply_transform(template.transform, before, state.rng)
        if after is not None and any(v < state.config.min_value or v > state.config.max_value for v in after):
            after = None

    if after is not None:
        for i, value in zip(indices, after):
            state.cards[i].value = value

    state.action_count += 1
    state.remaining_hands = max(0, state.remaining_hands - 1)
    state.event_log.append(
        {
            "type": "ACTION_USED" if after is not None else "TRANSFORM_REJECTED",
            "slot": cmd.slot,
            "card_id": inst.card_id,
            "indices": indices,
            "before": before,
            "after": after,
            "remaining_hands": state.remaining_hands,
        }
    )

    replacement = consume_slot(state, cmd.slot)
    _deselect_all(state)

    if is_sorted(card_values(state)):
        _end_round(state, solved=True)
    elif state.remaining_hands == 0:
        _end_round(state, solved=False)

    events = state.event_log[start:]
    if after is None:
        return StepResult(
            ok=True,
            events=events,
            error=f"{template.name} cannot apply to {len(indices)} selected card(s).",
            code="transform_rejected",
        )
    if replacement is None:
        return StepResult(ok=True, events=events, error="No actions left to draw.", code="deck_exhausted")
    return StepResult(ok=True, events=events)


def _advance_phase(state: GameState) -> StepResult:
    start = len(state.event_log)
    if state.phase == "reward":
        state.phase = "shop"
        state.event_log.append({"type": "PHASE_CHANGED", "phase": "shop"})
        generate_offer(state)
        return StepResult(ok=True, events=state.event_log[start:])
    if state.phase == "shop":
        state.current_round += 1
        state.event_log.append({"type": "PHASE_CHANGED", "phase": "sorting"})
        _start_round(state)
        return StepResult(ok=True, events=state.event_log[start:])
    return StepResult(ok=False, events=[], error="Finish sorting first.", code="invalid_phase")


def _reset_run(state: GameState) -> StepResult:
    start = len(state.event_log)
    state.scheduler.cancel(state.pending_reward)
    state.pending_reward = None
    state.current_round = 1
    state.cash = 0
    state.round_stats = RoundStats()
    state.run_stats = RunStats()
    reset_owned_deck(state)
    state.event_log.append({"type": "RUN_RESET"})
    _start_round(state)
    return StepResult(ok=True, events=state.event_log[start:])


def _shop_only(state: GameState) -> StepResult | None:
    if state.phase != "shop":
        return StepResult(ok=False, events=[], error="The shop is closed.", code="invalid_phase")
    return None


def step(state: GameState, command: Command) -> StepResult:
    """Apply a single player command to the game state.

    Mutates `state` in place and is deterministic for a given
    (seed, catalog, config, command sequence). Rejected commands only show up
    in the command log.
    """
    state.command_log.append(command)

    if isinstance(command, SelectCardCommand):
        return _select_card(state, command)
    if isinstance(command, DeselectAllCommand):
        blocked = _require_sorting(state)
        if blocked:
            return blocked
        _deselect_all(state)
        return StepResult(ok=True, events=[])
    if isinstance(command, UseActionCommand):
        return _use_action(state, command)
    if isinstance(command, PurchaseCommand):
        return _shop_only(state) or purchase(state, command.offer_id)
    if isinstance(command, RefreshShopCommand):
        return _shop_only(state) or refresh_offer(state)
    if isinstance(command, AdvancePhaseCommand):
        return _advance_phase(state)
    if isinstance(command, ResetRunCommand):
        return _reset_run(state)
    return StepResult(ok=False, events=[], error="Unknown command.", code="unknown_command")


def tick(state: GameState, dt: float) -> StepResult:
    """Advance the game clock, running any deferred work that came due."""
    start = len(state.event_log)
    for task in state.scheduler.advance(dt):
        if task.name == COMPLETE_ROUND_TASK and task is state.pending_reward:
            complete_round(state)
    return StepResult(ok=True, events=state.event_log[start:])


def new_game(
    catalog: ActionCatalog,
    seed: int,
    config: GameConfig | None = None,
    shop_config: ShopConfig | None = None,
) -> GameState:
    cfg = config or GameConfig()
    shop_cfg = shop_config or ShopConfig()
    pool_size = cfg.deal_max_value - cfg.min_value + 1
    if cfg.number_of_cards < 2:
        raise ValueError("A round needs at least 2 cards.")
    if cfg.number_of_cards > pool_size:
        raise ValueError(f"Cannot deal {cfg.number_of_cards} unique values from a pool of {pool_size}.")
    if cfg.deal_max_value > cfg.max_value:
        raise ValueError("deal_max_value must not exceed max_value.")
    if cfg.bank_size < 1:
        raise ValueError("bank_size must be positive.")
    if not catalog.base_deck:
        raise ValueError("The catalog has no base deck.")

    state = GameState(
        catalog=catalog,
        config=cfg,
        shop_config=shop_cfg,
        seed=seed,
        rng=random.Random(seed),
    )
    _start_round(state)
    return state


def replay(
    catalog: ActionCatalog,
    seed: int,
    commands: Iterable[Command | float],
    config: GameConfig | None = None,
    shop_config: ShopConfig | None = None,
) -> GameState:
    """Rebuild a game from its seed; float entries are clock ticks."""
    state = new_game(catalog, seed=seed, config=config, shop_config=shop_config)
    for c in commands:
        if isinstance(c, (int, float)):
            tick(state, float(c))
        else:
            step(state, c)
    return state
