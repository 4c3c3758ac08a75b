"""Deterministic, headless rules engine for SortDeck.

IMPORTANT: This package must never do file or terminal I/O.
"""

from .commands import (
    AdvancePhaseCommand,
    DeselectAllCommand,
    PurchaseCommand,
    RefreshShopCommand,
    ResetRunCommand,
    SelectCardCommand,
    UseActionCommand,
)
from .game import new_game, replay, step, tick
from .state import GameConfig, GameState, ShopConfig, StepResult
from .types import ActionCardTemplate, ActionCatalog, Rarity, Requires

__all__ = [
    "ActionCardTemplate",
    "ActionCatalog",
    "AdvancePhaseCommand",
    "DeselectAllCommand",
    "GameConfig",
    "GameState",
    "PurchaseCommand",
    "Rarity",
    "RefreshShopCommand",
    "Requires",
    "ResetRunCommand",
    "SelectCardCommand",
    "ShopConfig",
    "StepResult",
    "UseActionCommand",
    "new_game",
    "replay",
    "step",
    "tick",
]
