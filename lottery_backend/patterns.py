"""
Pattern detection over stored past results.

Produces plain-text observations (frequent pairs, numbers absent from
recent draws). They describe the data only. Lottery draws are random
and these patterns are expected to come and go.
"""

from __future__ import annotations

from collections import Counter
from itertools import combinations
from typing import Any, Dict, List

from lottery_backend.config import MIN_NUMBER, MAX_NUMBER
from lottery_backend.db import get_past_results, replace_patterns, insert_pattern
from lottery_backend.parse import split_numbers

MIN_RESULTS = 10
PAIR_THRESHOLD = 0.2     # share of results a pair must appear in
MAX_PAIR_PATTERNS = 5
RECENT_WINDOW = 10
ABSENT_CONFIDENCE = 0.5
MAX_ABSENT_LISTED = 5


def pair_frequencies(past_results: List[Dict[str, Any]]) -> Counter:
    pairs: Counter = Counter()
    for result in past_results:
        numbers = sorted(set(split_numbers(result["numbers"])))
        pairs.update(combinations(numbers, 2))
    return pairs


def frequent_pairs(past_results: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    total = len(past_results)
    pairs = pair_frequencies(past_results)
    frequent = [(pair, count) for pair, count in pairs.items() if count >= total * PAIR_THRESHOLD]
    frequent.sort(key=lambda kv: (-kv[1], kv[0]))

    return [
        {
            "description": f"Numbers {a},{b} appear together frequently",
            "confidence": count / total,
        }
        for (a, b), count in frequent[:MAX_PAIR_PATTERNS]
    ]


def absent_numbers(recent_results: List[Dict[str, Any]]) -> List[int]:
    """Numbers not drawn (main or bonus) in the given results."""
    seen = set()
    for result in recent_results:
        seen.update(split_numbers(result["numbers"]))
        seen.add(int(result["bonus_number"]))
    return [n for n in range(MIN_NUMBER, MAX_NUMBER + 1) if n not in seen]


def detect_patterns() -> Dict[str, Any]:
    """
    Recompute patterns from every stored past result and replace the stored set.
    Needs at least 10 results; below that nothing is written.
    """
    past_results = get_past_results()  # newest first

    if len(past_results) < MIN_RESULTS:
        return {"patterns": []}

    patterns = frequent_pairs(past_results)

    missing = absent_numbers(past_results[:RECENT_WINDOW])
    if missing:
        listed = ", ".join(str(n) for n in missing[:MAX_ABSENT_LISTED])
        patterns.append({
            "description": f"Numbers {listed} haven't appeared in the last {RECENT_WINDOW} draws",
            "confidence": ABSENT_CONFIDENCE,
        })

    replace_patterns(patterns)
    print(f"[PATTERNS] Detected {len(patterns)} patterns from {len(past_results)} results")
    return {"patterns": patterns}


def add_pattern(description: Any, confidence: Any) -> Dict[str, Any]:
    """Record a manually observed pattern."""
    if not isinstance(description, str) or not description.strip():
        raise ValueError("Pattern description is required")
    if isinstance(confidence, bool):
        raise ValueError("Confidence must be a number")
    try:
        confidence = float(confidence)
    except (TypeError, ValueError):
        raise ValueError("Confidence must be a number")
    if not 0 <= confidence <= 1:
        raise ValueError("Confidence must be between 0 and 1")
    return insert_pattern(description.strip(), confidence)
