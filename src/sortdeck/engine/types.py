from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Rarity = Literal["common", "rare", "epic", "legendary"]
Requires = Literal["any", "one", "two_or_more"]
Phase = Literal["sorting", "reward", "shop"]

RARITY_ORDER: tuple[Rarity, ...] = ("common", "rare", "epic", "legendary")


@dataclass(frozen=True)
class ModifyTransform:
    type: Literal["modify"]
    delta: int


@dataclass(frozen=True)
class ShiftTransform:
    type: Literal["shift"]
    magnitude: int


@dataclass(frozen=True)
class ReverseTransform:
    type: Literal["reverse"]


@dataclass(frozen=True)
class SwapTransform:
    type: Literal["swap"]


@dataclass(frozen=True)
class DerangeTransform:
    type: Literal["derange"]


@dataclass(frozen=True)
class SplitSwapTransform:
    type: Literal["split_swap"]


@dataclass(frozen=True)
class MultiplyTransform:
    type: Literal["multiply"]
    factor: int


@dataclass(frozen=True)
class DivideTransform:
    type: Literal["divide"]
    divisor: int


Transform = (
    ModifyTransform
    | ShiftTransform
    | ReverseTransform
    | SwapTransform
    | DerangeTransform
    | SplitSwapTransform
    | MultiplyTransform
    | DivideTransform
)


@dataclass(frozen=True)
class ActionCardTemplate:
    id: str
    name: str
    description: str
    requires: Requires
    cost: int
    rarity: Rarity
    transform: Transform

    @property
    def purchasable(self) -> bool:
        return self.cost >= 0


@dataclass(frozen=True)
class ActionCardInstance:
    """One physical copy of a catalog entry sitting in a pile or bank slot."""

    uid: int
    card_id: str


@dataclass(frozen=True)
class ActionCatalog:
    """Immutable action catalog used by the engine."""

    actions: dict[str, ActionCardTemplate]
    base_deck: tuple[str, ...]

    def get(self, card_id: str) -> ActionCardTemplate:
        return self.actions[card_id]


def rarity_rank(rarity: Rarity) -> int:
    return RARITY_ORDER.index(rarity)
