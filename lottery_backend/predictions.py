"""
Prediction heuristics.

Three ways of producing a guess for the next draw:
  random           - uniform pick, the baseline
  machine_learning - frequency ranking over every stored past result
  neural_network   - recency-weighted ranking with a hot/cold adjustment

None of these can beat a fair draw. Every number has equal odds each time.
"""

from __future__ import annotations

import random
import sqlite3
import traceback
from typing import Any, Dict, List, Optional

import numpy as np

from lottery_backend.config import NUMBERS_PER_DRAW, MIN_NUMBER, MAX_NUMBER
from lottery_backend.db import get_past_results, insert_prediction
from lottery_backend.parse import split_numbers

# Minimum stored results before a heuristic trusts the data
FREQUENCY_MIN_RESULTS = 5
NEURAL_MIN_RESULTS = 10

NEURAL_LOOKBACK = 20
NEURAL_HOT_WINDOW = 5
NEURAL_TOP_POOL = 15
NEURAL_BONUS_POOL = 10

SOURCE_LABELS = {
    "random": "random",
    "ml": "machine_learning",
    "neural": "neural_network",
}


def _rank(weights: np.ndarray) -> List[int]:
    """Numbers MIN..MAX ordered by weight, highest first; ties go to the lower number."""
    return sorted(range(MIN_NUMBER, MAX_NUMBER + 1), key=lambda n: (-weights[n], n))


def random_prediction(rng: Optional[random.Random] = None) -> Dict[str, Any]:
    rng = rng or random
    numbers = sorted(rng.sample(range(MIN_NUMBER, MAX_NUMBER + 1), NUMBERS_PER_DRAW))
    bonus = rng.randint(MIN_NUMBER, MAX_NUMBER)
    return {"numbers": numbers, "bonusNumber": bonus}


def number_frequencies(past_results: List[Dict[str, Any]]) -> np.ndarray:
    """Occurrence counts indexed by number (index 0 unused). Bonus numbers count too."""
    counts = np.zeros(MAX_NUMBER + 1, dtype=int)
    for result in past_results:
        for n in split_numbers(result["numbers"]):
            if MIN_NUMBER <= n <= MAX_NUMBER:
                counts[n] += 1
        bonus = int(result["bonus_number"])
        if MIN_NUMBER <= bonus <= MAX_NUMBER:
            counts[bonus] += 1
    return counts


def frequency_prediction(rng: Optional[random.Random] = None, replace_chance: float = 0.3) -> Dict[str, Any]:
    """
    Most frequently drawn numbers, lightly shuffled.

    Takes the top 7 by frequency, uses the 8th as bonus, then swaps each of
    the 7 for a random number with probability `replace_chance` so repeated
    calls do not all return the same ticket.
    """
    rng = rng or random
    try:
        past_results = get_past_results()
    except sqlite3.Error as e:
        print(f"[PREDICT] Frequency model could not read past results, using random: {e}")
        return random_prediction(rng)

    if len(past_results) < FREQUENCY_MIN_RESULTS:
        return random_prediction(rng)

    ranked = _rank(number_frequencies(past_results))
    most_frequent = ranked[:NUMBERS_PER_DRAW]
    bonus = ranked[NUMBERS_PER_DRAW]

    picked = []
    for num in most_frequent:
        if rng.random() < replace_chance:
            num = rng.randint(MIN_NUMBER, MAX_NUMBER)
        if num not in picked:
            picked.append(num)

    # Replacements can collide; top up with unused random numbers
    while len(picked) < NUMBERS_PER_DRAW:
        candidate = rng.randint(MIN_NUMBER, MAX_NUMBER)
        if candidate not in picked:
            picked.append(candidate)

    return {"numbers": sorted(picked), "bonusNumber": bonus}


def recency_weights(past_results_desc: List[Dict[str, Any]]) -> np.ndarray:
    """
    Weight per number from results ordered newest first.

    The newest result contributes 1.0 to each of its numbers, decaying
    linearly towards 0.5 for the oldest; bonus numbers contribute half.
    Numbers seen in the newest five results are boosted by 1.2, the rest
    damped by 0.8.
    """
    weights = np.zeros(MAX_NUMBER + 1, dtype=float)
    total = len(past_results_desc)

    for index, result in enumerate(past_results_desc):
        recency = 1 - (index / total * 0.5)
        for n in split_numbers(result["numbers"]):
            if MIN_NUMBER <= n <= MAX_NUMBER:
                weights[n] += recency
        bonus = int(result["bonus_number"])
        if MIN_NUMBER <= bonus <= MAX_NUMBER:
            weights[bonus] += recency * 0.5

    hot = set()
    for result in past_results_desc[:NEURAL_HOT_WINDOW]:
        hot.update(split_numbers(result["numbers"]))

    for n in range(MIN_NUMBER, MAX_NUMBER + 1):
        weights[n] *= 1.2 if n in hot else 0.8

    return weights


def neural_network_prediction(rng: Optional[random.Random] = None) -> Dict[str, Any]:
    rng = rng or random
    try:
        past_results = get_past_results(limit=NEURAL_LOOKBACK)
    except sqlite3.Error as e:
        print(f"[PREDICT] Neural model could not read past results, using frequency model: {e}")
        return frequency_prediction(rng)

    if len(past_results) < NEURAL_MIN_RESULTS:
        return frequency_prediction(rng)

    ranked = _rank(recency_weights(past_results))

    # 70% of picks come from the top 15 ranks, 30% from the tail
    used = set()
    selected = []
    while len(selected) < NUMBERS_PER_DRAW:
        if rng.random() < 0.7:
            index = rng.randrange(NEURAL_TOP_POOL)
        else:
            index = NEURAL_TOP_POOL + rng.randrange(len(ranked) - NEURAL_TOP_POOL)
        if index not in used:
            used.add(index)
            selected.append(ranked[index])

    bonus_index = 0
    while bonus_index < NEURAL_BONUS_POOL and bonus_index in used:
        bonus_index += 1
    if bonus_index < NEURAL_BONUS_POOL:
        bonus = ranked[bonus_index]
    else:
        bonus = rng.randint(MIN_NUMBER, MAX_NUMBER)

    return {"numbers": sorted(selected), "bonusNumber": bonus}


def save_prediction(numbers: List[int], bonus_number: int, source: str) -> Dict[str, Any]:
    try:
        return insert_prediction(numbers, bonus_number, source)
    except sqlite3.Error:
        print(f"[PREDICT] Error saving prediction:\n{traceback.format_exc()}")
        raise


def generate_prediction(model: str = "neural", rng: Optional[random.Random] = None) -> Dict[str, Any]:
    """Run the requested heuristic, store the guess and return it. Unknown models use 'neural'."""
    if model == "random":
        prediction = random_prediction(rng)
    elif model == "ml":
        prediction = frequency_prediction(rng)
    else:
        model = "neural"
        prediction = neural_network_prediction(rng)

    source = SOURCE_LABELS[model]
    saved = save_prediction(prediction["numbers"], prediction["bonusNumber"], source)

    return {
        "numbers": prediction["numbers"],
        "bonusNumber": prediction["bonusNumber"],
        "source": source,
        "date": saved["date"],
    }
