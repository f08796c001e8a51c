from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from lottery_backend.config import NUMBERS_PER_DRAW
from lottery_backend.db import (
    get_predictions,
    get_past_results,
    insert_model_accuracy,
    get_model_accuracy,
)
from lottery_backend.parse import split_numbers

# 7 main numbers + 1 bonus per prediction
NUMBERS_SCORED = NUMBERS_PER_DRAW + 1


def _empty() -> Dict[str, Any]:
    return {
        "accuracy": 0,
        "matches": 0,
        "totalPredictions": 0,
        "evaluatedPredictions": 0,
        "byModel": {},
    }


def count_matches(prediction: Dict[str, Any], result: Dict[str, Any]) -> int:
    drawn = set(split_numbers(result["numbers"]))
    matches = sum(1 for n in split_numbers(prediction["numbers"]) if n in drawn)
    if int(prediction["bonus_number"]) == int(result["bonus_number"]):
        matches += 1
    return matches


def first_result_after(prediction_date: datetime, results_asc: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Earliest result whose timestamp is strictly later than the prediction."""
    for result in results_asc:
        if datetime.fromisoformat(result["date"]) > prediction_date:
            return result
    return None


def calculate_accuracy() -> Dict[str, Any]:
    """
    Score each stored prediction against the first draw recorded after it.

    Predictions with no later draw are counted in totalPredictions but not
    scored. Accuracy is matched numbers over numbers scored (8 per
    evaluated prediction). The overall figure and each model's figure are
    appended to model_accuracy.
    """
    predictions = get_predictions()
    past_results = get_past_results()

    if not predictions or not past_results:
        return _empty()

    results_asc = sorted(past_results, key=lambda r: datetime.fromisoformat(r["date"]))

    total_matches = 0
    total_numbers = 0
    evaluated = 0
    per_model: Dict[str, Dict[str, int]] = {}

    for prediction in predictions:
        stats = per_model.setdefault(
            prediction["source"], {"matches": 0, "numbers": 0, "predictions": 0, "evaluated": 0}
        )
        stats["predictions"] += 1

        match_result = first_result_after(datetime.fromisoformat(prediction["date"]), results_asc)
        if match_result is None:
            continue

        matches = count_matches(prediction, match_result)
        total_matches += matches
        total_numbers += NUMBERS_SCORED
        evaluated += 1
        stats["matches"] += matches
        stats["numbers"] += NUMBERS_SCORED
        stats["evaluated"] += 1

    accuracy = total_matches / total_numbers if total_numbers > 0 else 0

    by_model = {}
    for source, stats in per_model.items():
        model_accuracy = stats["matches"] / stats["numbers"] if stats["numbers"] > 0 else 0
        by_model[source] = {
            "accuracy": model_accuracy,
            "matches": stats["matches"],
            "totalPredictions": stats["predictions"],
            "evaluatedPredictions": stats["evaluated"],
        }

    insert_model_accuracy("overall", accuracy)
    for source, stats in by_model.items():
        if stats["evaluatedPredictions"] > 0:
            insert_model_accuracy(source, stats["accuracy"])

    return {
        "accuracy": accuracy,
        "matches": total_matches,
        "totalPredictions": len(predictions),
        "evaluatedPredictions": evaluated,
        "byModel": by_model,
    }


def accuracy_history(limit: int = 50) -> List[Dict[str, Any]]:
    return get_model_accuracy(limit)
