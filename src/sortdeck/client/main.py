from __future__ import annotations

import argparse
import dataclasses
import random
import sys
from pathlib import Path
from typing import TextIO

from sortdeck.engine.bank import slot_playable
from sortdeck.engine.commands import (
    AdvancePhaseCommand,
    Command,
    DeselectAllCommand,
    PurchaseCommand,
    RefreshShopCommand,
    ResetRunCommand,
    SelectCardCommand,
    UseActionCommand,
)
from sortdeck.engine.game import new_game, step, tick
from sortdeck.engine.state import GameState
from sortdeck.paths import get_paths
from sortdeck.services.content import ContentError, ContentService
from sortdeck.services.telemetry import TelemetryService

HELP = """commands:
  s <i> [<i> ...]  toggle card selection
  d                deselect all
  u <slot>         use action in bank slot
  b <id>           buy shop item
  r                refresh shop
  n                next phase
  reset            restart the run
  q                quit"""


def parse_command(line: str) -> Command | list[Command] | None:
    parts = line.split()
    if not parts:
        return None
    head, args = parts[0].lower(), parts[1:]
    try:
        if head == "s" and args:
            return [SelectCardCommand(index=int(a)) for a in args]
        if head == "u" and len(args) == 1:
            return UseActionCommand(slot=int(args[0]))
    except ValueError:
        return None
    if head == "d":
        return DeselectAllCommand()
    if head == "b" and len(args) == 1:
        return PurchaseCommand(offer_id=args[0])
    if head == "r":
        return RefreshShopCommand()
    if head == "n":
        return AdvancePhaseCommand()
    if head == "reset":
        return ResetRunCommand()
    return None


def render(state: GameState, out: TextIO) -> None:
    out.write(f"\nRound {state.current_round} | {state.phase} | cash {state.cash}\n")
    if state.phase == "sorting":
        cards = " ".join(f"[{c.value}]" if c.selected else f" {c.value} " for c in state.cards)
        out.write(f"cards: {cards}\n")
        out.write(f"hands: {state.remaining_hands}/{state.starting_hands}\n")
        for slot, inst in enumerate(state.bank):
            if inst is None:
                out.write(f"  {slot}: --\n")
                continue
            t = state.catalog.get(inst.card_id)
            mark = "*" if slot_playable(state, slot) else " "
            out.write(f" {mark}{slot}: {t.name} ({t.description})\n")
    elif state.phase == "reward":
        rs = state.round_stats
        verdict = "sorted" if rs.solved else "out of hands"
        out.write(
            f"{verdict}: used {rs.hands_used} hands, {rs.hands_remaining} left, earned {rs.cash_earned}\n"
        )
    else:
        for card_id in state.shop.offer:
            t = state.catalog.get(card_id)
            sold = " (bought)" if card_id in state.shop.purchased else ""
            out.write(f"  {card_id}: {t.name} [{t.rarity}] ${t.cost}{sold}\n")
        out.write(f"refresh: ${state.shop_config.refresh_cost}\n")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="sortdeck")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--cards", type=int, default=None, help="number of cards per round")
    parser.add_argument("--telemetry", type=str, default=None, help="JSONL telemetry path")
    parser.add_argument("--validate", action="store_true", help="validate content and exit")
    args = parser.parse_args(argv)

    paths = get_paths()
    content = ContentService(data_dir=paths.data_dir, schema_dir=paths.schema_dir)
    try:
        catalog = content.load_catalog()
        config, shop_config = content.load_rules()
    except ContentError as e:
        print(e, file=sys.stderr)
        return 2
    if args.validate:
        print("Content OK.")
        return 0

    if args.cards is not None:
        config = dataclasses.replace(config, number_of_cards=args.cards)
    seed = args.seed if args.seed is not None else random.SystemRandom().randrange(1, 2**31 - 1)
    telemetry_path = args.telemetry or str(paths.userdata_dir / "telemetry.jsonl")
    telemetry = TelemetryService(path=Path(telemetry_path))

    try:
        state = new_game(catalog, seed=seed, config=config, shop_config=shop_config)
    except ValueError as e:
        print(e, file=sys.stderr)
        return 2
    telemetry.log("RUN_STARTED", {"seed": seed})
    telemetry.log_events(state.event_log)

    out = sys.stdout
    out.write(HELP + "\n")
    while True:
        render(state, out)
        try:
            line = input("> ")
        except EOFError:
            break
        if line.strip().lower() in ("q", "quit", "exit"):
            break
        parsed = parse_command(line)
        if parsed is None:
            out.write(HELP + "\n")
            continue
        for cmd in parsed if isinstance(parsed, list) else [parsed]:
            res = step(state, cmd)
            telemetry.log_events(res.events)
            if res.error:
                out.write(f"! {res.error}\n")
        if state.frozen:
            # No frame loop here: play out the celebration delay at once.
            out.write("Sorted!\n" if state.is_won else "Out of hands.\n")
            telemetry.log_events(tick(state, state.config.reward_delay).events)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
