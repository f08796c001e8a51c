import pytest

from lottery_backend import db
from lottery_backend.accuracy import calculate_accuracy, accuracy_history, count_matches


@pytest.fixture(autouse=True)
def _clock(fake_clock):
    yield


def test_no_data_scores_zero():
    assert calculate_accuracy() == {
        "accuracy": 0,
        "matches": 0,
        "totalPredictions": 0,
        "evaluatedPredictions": 0,
        "byModel": {},
    }
    assert accuracy_history() == []


def test_predictions_without_results_score_zero():
    db.insert_prediction([1, 2, 3, 4, 5, 6, 7], 8, "random")
    assert calculate_accuracy()["totalPredictions"] == 0


def test_count_matches_includes_bonus():
    prediction = {"numbers": "1,2,3,4,5,6,7", "bonus_number": 8}
    result = {"numbers": "1,2,3,10,11,12,13", "bonus_number": 8}
    assert count_matches(prediction, result) == 4


def test_scores_against_first_later_draw():
    db.insert_past_result([1, 2, 3, 4, 5, 6, 7], 8)           # before: ignored
    db.insert_prediction([1, 2, 3, 4, 5, 6, 7], 8, "neural_network")
    db.insert_past_result([1, 2, 3, 10, 11, 12, 13], 8)       # first after: 3 + bonus
    db.insert_past_result([1, 2, 3, 4, 5, 6, 7], 8)           # later: ignored

    result = calculate_accuracy()
    assert result["matches"] == 4
    assert result["accuracy"] == pytest.approx(0.5)
    assert result["totalPredictions"] == 1
    assert result["evaluatedPredictions"] == 1


def test_prediction_after_last_draw_is_counted_but_not_scored():
    db.insert_prediction([1, 2, 3, 4, 5, 6, 7], 8, "random")
    db.insert_past_result([1, 2, 10, 11, 12, 13, 14], 9)
    db.insert_prediction([1, 2, 3, 4, 5, 6, 7], 8, "machine_learning")

    result = calculate_accuracy()
    assert result["totalPredictions"] == 2
    assert result["evaluatedPredictions"] == 1
    assert result["matches"] == 2
    assert result["accuracy"] == pytest.approx(2 / 8)
    assert result["byModel"]["machine_learning"]["evaluatedPredictions"] == 0
    assert result["byModel"]["machine_learning"]["accuracy"] == 0


def test_by_model_breakdown_and_history_rows():
    db.insert_prediction([1, 2, 3, 4, 5, 6, 7], 8, "random")
    db.insert_prediction([20, 21, 22, 23, 24, 25, 26], 30, "neural_network")
    db.insert_past_result([1, 2, 3, 4, 5, 6, 7], 30)

    result = calculate_accuracy()
    assert result["matches"] == 8
    assert result["accuracy"] == pytest.approx(8 / 16)
    assert result["byModel"]["random"] == {
        "accuracy": pytest.approx(7 / 8),
        "matches": 7,
        "totalPredictions": 1,
        "evaluatedPredictions": 1,
    }
    assert result["byModel"]["neural_network"]["matches"] == 1

    history = accuracy_history()
    assert {row["model_name"] for row in history} == {"overall", "random", "neural_network"}
    overall = next(row for row in history if row["model_name"] == "overall")
    assert overall["accuracy"] == pytest.approx(0.5)
