from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from importlib.resources import files as resource_files
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

from .errors import DataValidationError

logger = logging.getLogger(__name__)

ENV_TUNING_PATH = "DELVE_TUNING"


@dataclass(frozen=True)
class Rank:
    """One row of the rank table: title, cumulative xp, max-HP gain, regen modulus."""

    title: str
    xp: int
    hp: int
    regen: int


@dataclass(frozen=True)
class Tuning:
    """Balancing constants. Values are configuration, not design.

    Sections in the YAML file are only for readability; every key maps onto a
    single flat field here.
    """

    width: int
    height: int

    column_weights: Tuple[int, ...]
    row_weights: Tuple[int, ...]
    room_padding: int
    min_room_interior: int
    dark_level: int

    sight_radius: int
    monster_sight: int
    pursuit_sight: int

    miss_chance: float
    hit_bonus_step: float

    thief_miss_chance: float
    gold_steal_min_fraction: float
    gold_steal_spread: float
    gold_steal_cap: int

    start_hp: int
    start_attack: int
    base_defense: int
    arrows_min: int
    arrows_max: int

    ranks: Tuple[Rank, ...]

    food_start: int
    food_max: int
    ration_value: int
    hungry_at: int
    weak_at: int
    faint_at: int

    gold_chance: float
    gold_per_level: int
    gold_max: int
    item_chance: float

    teleport_confusion: int
    potion_confusion: int
    potion_blindness: int
    potion_haste: int
    scroll_sleep: int
    monster_scared: int
    monster_held: int
    monster_slept: int

    effect_radius: int
    bolt_range: int
    throw_range: int

    @property
    def rank_titles(self) -> Tuple[str, ...]:
        return tuple(r.title for r in self.ranks)

    @property
    def xp_thresholds(self) -> Tuple[int, ...]:
        return tuple(r.xp for r in self.ranks)

    @property
    def hp_per_rank(self) -> Tuple[int, ...]:
        return tuple(r.hp for r in self.ranks)

    @property
    def regen_rates(self) -> Tuple[int, ...]:
        return tuple(r.regen for r in self.ranks)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "Tuning":
        flat: Dict[str, Any] = {}
        for section, values in raw.items():
            if section == "ranks":
                flat["ranks"] = values
                continue
            if not isinstance(values, Mapping):
                raise DataValidationError(f"Tuning section '{section}' must be a mapping")
            flat.update(values)

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(flat) - known)
        if unknown:
            raise DataValidationError(f"Unknown tuning keys: {unknown}")
        missing = sorted(known - set(flat))
        if missing:
            raise DataValidationError(f"Missing tuning keys: {missing}")

        flat["column_weights"] = _weights(flat["column_weights"], "column_weights")
        flat["row_weights"] = _weights(flat["row_weights"], "row_weights")
        flat["ranks"] = _ranks(flat["ranks"])
        return cls(**flat)


def _weights(value: Any, name: str) -> Tuple[int, ...]:
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        raise DataValidationError(f"{name} must list exactly 3 weights")
    weights = tuple(int(v) for v in value)
    if any(w <= 0 for w in weights):
        raise DataValidationError(f"{name} must be positive")
    return weights


def _ranks(value: Any) -> Tuple[Rank, ...]:
    if not isinstance(value, list) or not value:
        raise DataValidationError("ranks must be a non-empty list")
    ranks = []
    for row in value:
        try:
            ranks.append(
                Rank(title=str(row["title"]), xp=int(row["xp"]), hp=int(row["hp"]), regen=int(row["regen"]))
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise DataValidationError(f"Malformed rank row {row!r}: {exc}") from exc
    if ranks[0].xp != 0:
        raise DataValidationError("The first rank must start at 0 xp")
    for prev, cur in zip(ranks, ranks[1:]):
        if cur.xp <= prev.xp:
            raise DataValidationError("Rank xp thresholds must be strictly increasing")
    if any(r.regen <= 0 for r in ranks):
        raise DataValidationError("Rank regen rates must be positive")
    return tuple(ranks)


def _merge(base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = _merge(dict(merged[key]), value)
        else:
            merged[key] = value
    return merged


def read_data_file(name: str) -> Any:
    """Parse one of the packaged YAML tables under delve/data."""
    text = resource_files("delve.data").joinpath(name).read_text(encoding="utf-8")
    return yaml.safe_load(text)


def load_tuning(path: Optional[str] = None) -> Tuning:
    """Load tuning from the packaged defaults, overlaid with an optional override file.

    If path is None, DELVE_TUNING is consulted.
    """
    raw = read_data_file("tuning.yaml") or {}
    override_path = path or os.getenv(ENV_TUNING_PATH)
    if override_path:
        with Path(override_path).open("r", encoding="utf-8") as f:
            override = yaml.safe_load(f) or {}
        if not isinstance(override, Mapping):
            raise DataValidationError(f"Tuning override {override_path} must be a mapping")
        raw = _merge(raw, override)
        logger.info("Loaded tuning overrides from %s", override_path)
    tuning = Tuning.from_mapping(raw)
    logger.debug("Tuning loaded: %d ranks, sight radius %d", len(tuning.ranks), tuning.sight_radius)
    return tuning


TUNING = load_tuning()
