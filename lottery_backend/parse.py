from __future__ import annotations

from typing import Any, Dict, List, Tuple

from lottery_backend.config import NUMBERS_PER_DRAW, MIN_NUMBER, MAX_NUMBER


def _to_int(p: Any) -> int:
    """int() without bool coercion or silent truncation of fractions."""
    if isinstance(p, bool):
        raise ValueError(f"Not a lottery number: {p!r}")
    if isinstance(p, float) and not p.is_integer():
        raise ValueError(f"Not a lottery number: {p!r}")
    try:
        return int(p)
    except (TypeError, ValueError, OverflowError):
        raise ValueError(f"Not a lottery number: {p!r}")


def parse_numbers(value: Any) -> List[int]:
    """
    Numbers arrive either as a list ([3, 7, 12, ...] or ["3", "7", ...])
    or as a single string like '3, 7, 12, 19, 25, 33, 41' / '3 7 12 19 25 33 41'.
    Returns the ints in the order given.
    """
    if isinstance(value, str):
        parts = [p.strip() for p in value.replace(",", " ").split() if p.strip()]
    elif isinstance(value, (list, tuple)):
        parts = list(value)
    else:
        raise ValueError("Numbers must be an array of 7 integers")

    return [_to_int(p) for p in parts]


def validate_draw(numbers: List[int], bonus: Any) -> Tuple[List[int], int]:
    if len(numbers) != NUMBERS_PER_DRAW:
        raise ValueError(f"Numbers must be an array of {NUMBERS_PER_DRAW} integers")
    for n in numbers:
        if not MIN_NUMBER <= n <= MAX_NUMBER:
            raise ValueError(f"Numbers must be between {MIN_NUMBER} and {MAX_NUMBER}")
    if len(set(numbers)) != len(numbers):
        raise ValueError("Numbers must not repeat within a draw")

    try:
        bonus_int = _to_int(bonus)
    except ValueError:
        raise ValueError("Bonus number must be an integer")
    if not MIN_NUMBER <= bonus_int <= MAX_NUMBER:
        raise ValueError(f"Bonus number must be between {MIN_NUMBER} and {MAX_NUMBER}")

    return sorted(numbers), bonus_int


def split_numbers(s: str) -> List[int]:
    """Decode a stored numbers column ('3,7,12')."""
    return [int(p) for p in s.split(",") if p.strip()]


def parse_results_csv(csv_content: str) -> Dict[str, Any]:
    """
    Parse manually uploaded past results.
    Expected format (header optional):
    n1,n2,n3,n4,n5,n6,n7,bonus
    3,7,12,19,25,33,41,8

    Returns {"draws": [(numbers, bonus), ...], "skipped": int}
    """
    draws: List[Tuple[List[int], int]] = []
    skipped = 0
    header_checked = False

    for line in csv_content.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        # Optional header on the first data line
        if not header_checked:
            header_checked = True
            lowered = line.lower()
            if lowered.startswith("n1") or lowered.startswith("numbers"):
                continue

        parts = [p.strip() for p in line.split(",")]
        if len(parts) != NUMBERS_PER_DRAW + 1:
            skipped += 1
            continue

        try:
            nums = parse_numbers(parts[:NUMBERS_PER_DRAW])
            draws.append(validate_draw(nums, parts[NUMBERS_PER_DRAW]))
        except ValueError:
            skipped += 1

    return {"draws": draws, "skipped": skipped}
