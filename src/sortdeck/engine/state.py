from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Literal

from .commands import Command
from .scheduler import ScheduledTask, Scheduler
from .types import ActionCardInstance, ActionCatalog, Phase, Rarity

Event = dict[str, object]

ErrorCode = Literal[
    "transform_rejected",
    "deck_exhausted",
    "already_purchased",
    "item_not_found",
    "insufficient_cash",
    "invalid_phase",
    "invalid_slot",
    "invalid_card",
    "round_frozen",
    "unknown_command",
]


@dataclass(frozen=True)
class GameConfig:
    number_of_cards: int = 9
    min_value: int = 1
    max_value: int = 20
    deal_max_value: int = 10  # cards are dealt from min_value..deal_max_value
    bank_size: int = 3
    cash_per_hand: int = 1
    reward_delay: float = 2.0


@dataclass(frozen=True)
class ShopConfig:
    items_per_round: int = 4
    max_rarity: Rarity = "epic"
    refresh_cost: int = 2


@dataclass
class Card:
    index: int
    value: int
    selected: bool = False


@dataclass
class DeckState:
    owned: list[ActionCardInstance] = field(default_factory=list)
    draw_pile: list[ActionCardInstance] = field(default_factory=list)
    discard_pile: list[ActionCardInstance] = field(default_factory=list)
    committed: int = 0  # instances in play this round (draw + discard + bank)
    next_uid: int = 0


@dataclass
class ShopState:
    offer: list[str] = field(default_factory=list)
    purchased: list[str] = field(default_factory=list)


@dataclass
class RoundStats:
    hands_used: int = 0
    hands_remaining: int = 0
    cash_earned: int = 0
    actions_taken: int = 0
    solved: bool = False


@dataclass
class RunStats:
    total_rounds: int = 0
    total_cash_earned: int = 0
    total_actions_used: int = 0
    best_efficiency: int = 0
    deck_size: int = 0


@dataclass
class StepResult:
    ok: bool
    events: list[Event]
    error: str | None = None
    code: ErrorCode | None = None


@dataclass
class GameState:
    catalog: ActionCatalog
    config: GameConfig
    shop_config: ShopConfig
    seed: int
    rng: random.Random
    cards: list[Card] = field(default_factory=list)
    deck: DeckState = field(default_factory=DeckState)
    bank: list[ActionCardInstance | None] = field(default_factory=list)
    shop: ShopState = field(default_factory=ShopState)
    phase: Phase = "sorting"
    starting_hands: int = 0
    remaining_hands: int = 0
    action_count: int = 0
    cash: int = 0
    current_round: int = 1
    is_won: bool = False
    round_stats: RoundStats = field(default_factory=RoundStats)
    run_stats: RunStats = field(default_factory=RunStats)
    scheduler: Scheduler = field(default_factory=Scheduler)
    pending_reward: ScheduledTask | None = None
    command_log: list[Command] = field(default_factory=list)
    event_log: list[Event] = field(default_factory=list)

    def selected_indices(self) -> list[int]:
        return [c.index for c in sorted(self.cards, key=lambda c: c.index) if c.selected]

    @property
    def frozen(self) -> bool:
        """True between the end of a round and its reward computation."""
        return self.pending_reward is not None and self.pending_reward.pending
