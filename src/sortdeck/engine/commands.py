from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SelectCardCommand:
    """Toggle the selection of the card at `index`."""

    index: int


@dataclass(frozen=True)
class DeselectAllCommand:
    pass


@dataclass(frozen=True)
class UseActionCommand:
    slot: int


@dataclass(frozen=True)
class PurchaseCommand:
    offer_id: str


@dataclass(frozen=True)
class RefreshShopCommand:
    pass


@dataclass(frozen=True)
class AdvancePhaseCommand:
    pass


@dataclass(frozen=True)
class ResetRunCommand:
    pass


Command = (
    SelectCardCommand
    | DeselectAllCommand
    | UseActionCommand
    | PurchaseCommand
    | RefreshShopCommand
    | AdvancePhaseCommand
    | ResetRunCommand
)
