# Copyright 2026 Firefly Software Solutions Inc
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Fuzzy fingerprint comparison.

Two inputs are normalized and then scored:

- If either side is only an identifier, the score is 1.0 when both sides are
  identifiers and equal, otherwise 0.0. Components on the other side are
  ignored; an unverifiable identifier never earns partial credit.
- Otherwise each field in ``SCORING_FIELDS`` adds its weight to the total,
  and to the score when both values are strictly equal. The result is
  ``score / total``.

``storageSalt`` and ``privateFlag`` are deliberately absent from the table:
they drift between runs on the same device.

Scoring itself is a pure function (``score_records``). Per-field match
events go to an optional observer after scoring; the default observer logs
mismatches at debug level.

Example:
    >>> comparator = Comparator()
    >>> comparator.compare(baseline, current)
    0.9230769230769231
    >>> comparator.explain(baseline, current).mismatches[0].name
    'canvasHash'
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from composite_fingerprint.config import ScoringWeights
from composite_fingerprint.models import IdentifierOnly, NormalizedRecord, NormalizedShape
from composite_fingerprint.normalizer import normalize
from composite_fingerprint.utils.logger import logger


class _Missing:
    """Placeholder for a value that is absent from a record."""

    _instance: Optional[_Missing] = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "<missing>"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


@dataclass(frozen=True)
class ScoringField:
    """
    One row of the scoring table.

    Attributes:
        name: Field name reported in match events
        path: Keys (and list indexes) leading to the value in a record
        weight_key: Attribute of ``ScoringWeights`` holding the weight
    """

    name: str
    path: Tuple[Union[str, int], ...]
    weight_key: str


SCORING_FIELDS: Tuple[ScoringField, ...] = (
    ScoringField("audioHash", ("audioHash",), "audio_hash"),
    ScoringField("drmHash", ("drmHash",), "drm_hash"),
    ScoringField("canvasHash", ("canvasHash",), "canvas_hash"),
    ScoringField("userAgent", ("deviceInfo", "userAgent"), "user_agent"),
    ScoringField("screenRes", ("deviceInfo", "screenRes"), "screen_res"),
    ScoringField("deviceMemory", ("deviceInfo", "deviceMemory"), "device_memory"),
    ScoringField("hardwareConcurrency", ("deviceInfo", "hardwareConcurrency"), "hardware_concurrency"),
    ScoringField("timezone", ("localeInfo", "timezone"), "timezone"),
    ScoringField("language", ("localeInfo", "language"), "language"),
    ScoringField("primaryLanguage", ("localeInfo", "languages", 0), "primary_language"),
)


@dataclass(frozen=True)
class FieldMatch:
    """Outcome for a single scored field."""

    name: str
    weight: int
    left: Any
    right: Any
    matched: bool


@dataclass
class ComparisonResult:
    """
    Score together with the per-field breakdown that produced it.

    Attributes:
        score: Similarity in [0, 1]
        matched_weight: Sum of weights of matching fields
        total_weight: Sum of weights of all evaluated fields
        mode: "components", "identifier" or "invalid"
        matches: Per-field outcomes (empty unless mode is "components")
    """

    score: float
    matched_weight: int = 0
    total_weight: int = 0
    mode: str = "components"
    matches: List[FieldMatch] = field(default_factory=list)

    @property
    def mismatches(self) -> List[FieldMatch]:
        return [m for m in self.matches if not m.matched]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format for JSON serialization."""
        return {
            "score": self.score,
            "mode": self.mode,
            "matched_weight": self.matched_weight,
            "total_weight": self.total_weight,
            "fields": [
                {
                    "name": m.name,
                    "weight": m.weight,
                    "matched": m.matched,
                    "left": None if m.left is MISSING else m.left,
                    "right": None if m.right is MISSING else m.right,
                }
                for m in self.matches
            ],
        }


MatchObserver = Callable[[FieldMatch], None]


def resolve_path(data: Any, path: Tuple[Union[str, int], ...]) -> Any:
    """Follow ``path`` into ``data``; any gap along the way yields ``MISSING``."""
    current = data
    for step in path:
        if isinstance(step, int):
            if isinstance(current, (list, tuple)) and len(current) > step:
                current = current[step]
                continue
            return MISSING
        if isinstance(current, Mapping) and step in current:
            current = current[step]
            continue
        return MISSING
    return current


def values_equal(left: Any, right: Any) -> bool:
    """
    Strict equality between two JSON values.

    Missing and null only equal themselves, booleans never equal numbers,
    ints and floats compare numerically, and other values must share a type.
    """
    if left is MISSING or right is MISSING or left is None or right is None:
        return left is right
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return left == right
    if isinstance(left, str) and isinstance(right, str):
        return left == right
    return type(left) is type(right) and left == right


def score_records(
    left: Mapping[str, Any],
    right: Mapping[str, Any],
    weights: Optional[ScoringWeights] = None,
    fields: Tuple[ScoringField, ...] = SCORING_FIELDS,
) -> ComparisonResult:
    """
    Weighted field-by-field comparison of two component mappings.

    Every field counts toward the total regardless of availability;
    sentinels match identical sentinels.
    """
    weights = weights or ScoringWeights()
    weight_table = weights.as_dict()

    matched_weight = 0
    total_weight = 0
    matches: List[FieldMatch] = []

    for scoring_field in fields:
        weight = weight_table.get(scoring_field.weight_key, 1)
        a = resolve_path(left, scoring_field.path)
        b = resolve_path(right, scoring_field.path)
        matched = values_equal(a, b)

        total_weight += weight
        if matched:
            matched_weight += weight
        matches.append(FieldMatch(scoring_field.name, weight, a, b, matched))

    score = matched_weight / total_weight if total_weight else 0.0
    return ComparisonResult(
        score=score,
        matched_weight=matched_weight,
        total_weight=total_weight,
        mode="components",
        matches=matches,
    )


def compare_identifiers(left: NormalizedShape, right: NormalizedShape) -> ComparisonResult:
    """Equality-only scoring used whenever one side is just an identifier."""
    if isinstance(left, IdentifierOnly) and isinstance(right, IdentifierOnly):
        same = bool(left.identifier) and left.identifier == right.identifier
    else:
        same = False
    return ComparisonResult(score=1.0 if same else 0.0, mode="identifier")


def log_field_mismatch(match: FieldMatch) -> None:
    """Default observer: log each mismatching field."""
    if match.matched:
        return
    logger.debug(
        f"Mismatch in {match.name}",
        extra={
            "field": match.name,
            "weight": match.weight,
            "left": repr(match.left),
            "right": repr(match.right),
        },
    )


def _is_well_formed(shape: Any) -> bool:
    if isinstance(shape, IdentifierOnly):
        return isinstance(shape.identifier, str)
    if isinstance(shape, NormalizedRecord):
        return isinstance(shape.data, Mapping)
    return False


class Comparator:
    """
    Scores how similar two fingerprints are.

    Args:
        weights: Field weights (default: the standard table, total 13)
        observer: Called with each ``FieldMatch`` after a component
            comparison. Defaults to ``log_field_mismatch``. Errors it raises
            are logged and don't affect the score.
    """

    def __init__(
        self,
        weights: Optional[ScoringWeights] = None,
        observer: Optional[MatchObserver] = None,
    ) -> None:
        self.weights = weights or ScoringWeights()
        self.observer = observer if observer is not None else log_field_mismatch

    def explain(self, left: Any, right: Any) -> ComparisonResult:
        """Compare two inputs and return the full breakdown."""
        a = normalize(left)
        b = normalize(right)

        if not (_is_well_formed(a) and _is_well_formed(b)):
            logger.warning("Normalization produced an invalid shape, scoring 0")
            return ComparisonResult(score=0.0, mode="invalid")

        if isinstance(a, IdentifierOnly) or isinstance(b, IdentifierOnly):
            return compare_identifiers(a, b)

        result = score_records(a.data, b.data, self.weights)
        for match in result.matches:
            try:
                self.observer(match)
            except Exception as e:
                logger.debug(f"Match observer failed on {match.name}: {type(e).__name__}: {e}")
        return result

    def compare(self, left: Any, right: Any) -> float:
        """Compare two inputs; returns a score in [0, 1]."""
        return self.explain(left, right).score
