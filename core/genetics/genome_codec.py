"""Genome serialization/deserialization helpers.

This module is the persistence/transfer boundary for `core.genetics.genome.Genome`.
Records use the camelCase field names the clients expect (``abdomenType``,
``accentHue`` ...).  Keeping codecs separate from the domain model reduces
coupling and makes it easier to evolve formats safely.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from core.config.genetics import STAT_NAMES
from core.exceptions import GeneticsError
from core.genetics.traits import CATEGORICAL_TRAIT_SPECS, NO_WINGS, WING_TYPES

logger = logging.getLogger(__name__)


def genome_to_dict(genome: Any) -> dict[str, Any]:
    """Serialize a genome into JSON-compatible primitives."""
    record: dict[str, Any] = {name: int(getattr(genome, name)) for name in STAT_NAMES}
    for spec in CATEGORICAL_TRAIT_SPECS:
        record[spec.key] = getattr(genome, spec.name)
    record["wingType"] = genome.wing_type
    record["color"] = {
        "hue": genome.color.hue,
        "saturation": genome.color.saturation,
        "lightness": genome.color.lightness,
    }
    record["accentHue"] = genome.accent_hue
    return record


def _require(data: Mapping[str, Any], key: str) -> Any:
    if key not in data:
        raise GeneticsError(f"genome record missing '{key}'")
    return data[key]


def _number(data: Mapping[str, Any], key: str, cast: Callable[[Any], Any]) -> Any:
    raw = _require(data, key)
    try:
        return cast(raw)
    except (TypeError, ValueError) as exc:
        raise GeneticsError(f"genome record '{key}' is not numeric: {raw!r}") from exc


def genome_from_dict(
    genome_cls: Callable[..., Any],
    color_cls: Callable[..., Any],
    data: Mapping[str, Any],
) -> Any:
    """Deserialize a genome record produced by `genome_to_dict`.

    Raises GeneticsError on a missing field, a non-numeric stat or an unknown
    categorical value.  Range problems are left to ``Genome.validate()``.
    """
    if not isinstance(data, Mapping):
        raise GeneticsError(f"genome record must be a mapping, got {type(data).__name__}")

    kwargs: dict[str, Any] = {name: _number(data, name, int) for name in STAT_NAMES}

    for spec in CATEGORICAL_TRAIT_SPECS:
        value = _require(data, spec.key)
        if value not in spec.options:
            raise GeneticsError(f"genome record '{spec.key}' has unknown value {value!r}")
        kwargs[spec.name] = value

    wing_type = data.get("wingType", NO_WINGS)
    if kwargs["mobility"] == "winged":
        if wing_type not in WING_TYPES:
            raise GeneticsError(f"winged genome has invalid wingType {wing_type!r}")
    elif wing_type != NO_WINGS:
        logger.warning(
            "Dropping wingType %r from non-winged genome (mobility=%s)", wing_type, kwargs["mobility"]
        )
        wing_type = NO_WINGS
    kwargs["wing_type"] = wing_type

    color = _require(data, "color")
    if not isinstance(color, Mapping):
        raise GeneticsError("genome record 'color' must be a mapping")
    kwargs["color"] = color_cls(
        hue=_number(color, "hue", float),
        saturation=_number(color, "saturation", float),
        lightness=_number(color, "lightness", float),
    )
    kwargs["accent_hue"] = _number(data, "accentHue", float)
    return genome_cls(**kwargs)
