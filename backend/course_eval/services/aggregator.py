# backend/course_eval/services/aggregator.py
"""
Rating aggregation.

Turns a flat list of rating rows into one MetricBucket per grouping key
(sentence text, subject id or calendar day): response count, score sum,
histogram over the fixed score domain, average and percentage per score.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

SCORE_DOMAIN: Tuple[int, ...] = (0, 1, 2, 3, 4, 5)

KeyFn = Callable[[Mapping[str, Any]], Optional[str]]


class ScoreOutOfRangeError(ValueError):
    """A record carries a score outside SCORE_DOMAIN."""


def _empty_bins() -> Dict[int, Any]:
    return {score: 0 for score in SCORE_DOMAIN}


@dataclass
class MetricBucket:
    key: str
    total: int = 0
    response_count: int = 0
    histogram: Dict[int, int] = field(default_factory=_empty_bins)
    average: float = 0.0
    percentage_by_score: Dict[int, float] = field(default_factory=_empty_bins)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "averageScore": round(self.average, 2),
            "numberOfResponses": self.response_count,
            "scoreDistribution": {str(s): c for s, c in self.histogram.items()},
            "percentageByScore": {str(s): round(p, 2) for s, p in self.percentage_by_score.items()},
        }


# ----------------------------------------------------------------------
# Grouping keys
# ----------------------------------------------------------------------
_WS_RE = re.compile(r"\s+")
# Postgres trims trailing zeros ("...00.12345+00:00"); fromisoformat on 3.10
# only takes 3 or 6 fraction digits
_FRACTION_RE = re.compile(r"\.(\d+)")


def _six_digit_fraction(match: "re.Match[str]") -> str:
    return "." + match.group(1)[:6].ljust(6, "0")


def parse_timestamp(ts: Any) -> Optional[datetime]:
    """Parse ISO-ish timestamps into aware UTC datetimes; None if invalid."""
    if isinstance(ts, datetime):
        dt = ts
    elif ts:
        text = _FRACTION_RE.sub(_six_digit_fraction, str(ts).replace("Z", "+00:00"), count=1)
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def by_sentence(record: Mapping[str, Any]) -> Optional[str]:
    sentence = record.get("sentence")
    if not isinstance(sentence, str):
        return None
    return _WS_RE.sub(" ", sentence).strip() or None


def by_subject(record: Mapping[str, Any]) -> Optional[str]:
    subject_id = record.get("subject_id")
    if subject_id is None:
        return None
    return str(subject_id).strip() or None


def by_day(record: Mapping[str, Any]) -> Optional[str]:
    dt = parse_timestamp(record.get("created_at"))
    return dt.date().isoformat() if dt else None


GROUPINGS: Dict[str, KeyFn] = {
    "sentence": by_sentence,
    "subject": by_subject,
    "day": by_day,
}


# ----------------------------------------------------------------------
# Aggregation
# ----------------------------------------------------------------------
def _checked_score(value: Any) -> int:
    # bool is an int subclass; True must not count as a 1
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ScoreOutOfRangeError(f"score {value!r} is not a number")
    if isinstance(value, float):
        if not value.is_integer():
            raise ScoreOutOfRangeError(f"score {value!r} is not an integer")
        value = int(value)
    if value not in SCORE_DOMAIN:
        raise ScoreOutOfRangeError(f"score {value!r} outside {SCORE_DOMAIN[0]}..{SCORE_DOMAIN[-1]}")
    return value


def aggregate(records: Iterable[Mapping[str, Any]], key_fn: KeyFn = by_sentence) -> Dict[str, MetricBucket]:
    """
    Group records with key_fn and compute per-group statistics.

    Records whose key is missing are skipped. Scores outside SCORE_DOMAIN raise
    ScoreOutOfRangeError. The returned mapping has no defined order; use
    ordered_buckets() when a stable order is needed.
    """
    buckets: Dict[str, MetricBucket] = {}
    skipped = 0

    for record in records:
        key = key_fn(record)
        if key is None:
            skipped += 1
            continue
        score = _checked_score(record.get("score"))
        bucket = buckets.get(key)
        if bucket is None:
            bucket = buckets[key] = MetricBucket(key=key)
        bucket.total += score
        bucket.histogram[score] += 1
        bucket.response_count += 1

    for bucket in buckets.values():
        n = bucket.response_count
        bucket.average = bucket.total / n if n else 0.0
        bucket.percentage_by_score = {
            score: (count * 100.0 / n if n else 0.0) for score, count in bucket.histogram.items()
        }

    if skipped:
        logger.debug("[aggregator] skipped %d record(s) without a grouping key", skipped)
    return buckets


def ordered_buckets(buckets: Mapping[str, MetricBucket]) -> List[Tuple[str, MetricBucket]]:
    """Buckets sorted by key ascending."""
    return sorted(buckets.items(), key=lambda kv: kv[0])


def overall(records: Iterable[Mapping[str, Any]]) -> MetricBucket:
    """Single bucket over every record."""
    return aggregate(records, lambda _r: "all").get("all", MetricBucket(key="all"))
