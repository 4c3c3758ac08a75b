from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator

from sortdeck.engine.state import GameConfig, ShopConfig
from sortdeck.engine.types import (
    ActionCardTemplate,
    ActionCatalog,
    DerangeTransform,
    DivideTransform,
    ModifyTransform,
    MultiplyTransform,
    ReverseTransform,
    ShiftTransform,
    SplitSwapTransform,
    SwapTransform,
    Transform,
)


class ContentError(RuntimeError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ContentError(f"Missing content file: {path}") from e
    except json.JSONDecodeError as e:
        raise ContentError(f"Invalid JSON in {path}: {e}") from e


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: [str(p) for p in e.absolute_path])
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise ContentError("\n".join(lines))


def _require_str(obj: Mapping[str, object], key: str) -> str:
    v = obj.get(key)
    if not isinstance(v, str):
        raise ContentError(f"Expected string for {key}")
    return v


def _require_int(obj: Mapping[str, object], key: str) -> int:
    v = obj.get(key)
    if not isinstance(v, int) or isinstance(v, bool):
        raise ContentError(f"Expected int for {key}")
    return v


def _parse_transform(raw: Mapping[str, object]) -> Transform:
    t = raw.get("type")
    if not isinstance(t, str):
        raise ContentError("Transform missing type")
    if t == "modify":
        return ModifyTransform(type="modify", delta=_require_int(raw, "delta"))
    if t == "shift":
        return ShiftTransform(type="shift", magnitude=_require_int(raw, "magnitude"))
    if t == "multiply":
        return MultiplyTransform(type="multiply", factor=_require_int(raw, "factor"))
    if t == "divide":
        return DivideTransform(type="divide", divisor=_require_int(raw, "divisor"))
    if t == "reverse":
        return ReverseTransform(type="reverse")
    if t == "swap":
        return SwapTransform(type="swap")
    if t == "derange":
        return DerangeTransform(type="derange")
    if t == "split_swap":
        return SplitSwapTransform(type="split_swap")
    raise ContentError(f"Unknown transform type: {t}")


def parse_catalog(raw: object) -> ActionCatalog:
    if not isinstance(raw, dict):
        raise ContentError("actions.json must be an object")
    raw_actions = raw.get("actions")
    if not isinstance(raw_actions, list):
        raise ContentError("actions.json.actions must be a list")

    actions: dict[str, ActionCardTemplate] = {}
    for item in raw_actions:
        if not isinstance(item, dict):
            continue
        transform_raw = item.get("transform")
        if not isinstance(transform_raw, dict):
            raise ContentError("transform must be an object")
        template = ActionCardTemplate(
            id=_require_str(item, "id"),
            name=_require_str(item, "name"),
            description=_require_str(item, "description"),
            requires=_require_str(item, "requires"),  # type: ignore[arg-type]
            cost=_require_int(item, "cost"),
            rarity=_require_str(item, "rarity"),  # type: ignore[arg-type]
            transform=_parse_transform(transform_raw),
        )
        if template.id in actions:
            raise ContentError(f"Duplicate action id: {template.id}")
        actions[template.id] = template

    raw_base = raw.get("base_deck")
    if not isinstance(raw_base, list):
        raise ContentError("actions.json.base_deck must be a list")
    base_deck: list[str] = []
    for card_id in raw_base:
        if not isinstance(card_id, str) or card_id not in actions:
            raise ContentError(f"base_deck references unknown action: {card_id}")
        base_deck.append(card_id)

    return ActionCatalog(actions=actions, base_deck=tuple(base_deck))


def parse_rules(raw: object) -> tuple[GameConfig, ShopConfig]:
    if not isinstance(raw, dict):
        raise ContentError("rules.json must be an object")
    round_raw = raw.get("round", {})
    shop_raw = raw.get("shop", {})
    if not isinstance(round_raw, dict) or not isinstance(shop_raw, dict):
        raise ContentError("rules.json sections must be objects")

    # Missing keys fall back to the dataclass defaults
    round_fields = {k: v for k, v in round_raw.items() if k in GameConfig.__dataclass_fields__}
    if "reward_delay" in round_fields:
        round_fields["reward_delay"] = float(round_fields["reward_delay"])
    game = GameConfig(**round_fields)
    shop = ShopConfig(**{k: v for k, v in shop_raw.items() if k in ShopConfig.__dataclass_fields__})

    if game.min_value > game.deal_max_value or game.deal_max_value > game.max_value:
        raise ContentError("rules.json: expected min_value <= deal_max_value <= max_value")
    pool = game.deal_max_value - game.min_value + 1
    if game.number_of_cards > pool:
        raise ContentError(f"rules.json: cannot deal {game.number_of_cards} unique values from {pool}")
    return game, shop


class ContentService:
    def __init__(self, data_dir: Path, schema_dir: Path) -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir

    def load_catalog(self) -> ActionCatalog:
        path = self._data_dir / "actions.json"
        schema = _load_json(self._schema_dir / "actions.schema.json")
        raw = _load_json(path)
        validate_json(raw, schema, context=str(path))
        return parse_catalog(raw)

    def load_rules(self) -> tuple[GameConfig, ShopConfig]:
        path = self._data_dir / "rules.json"
        schema = _load_json(self._schema_dir / "rules.schema.json")
        raw = _load_json(path)
        validate_json(raw, schema, context=str(path))
        return parse_rules(raw)

    def validate_all(self) -> None:
        # Load is validation (schema + parse)
        _ = self.load_catalog()
        _ = self.load_rules()
