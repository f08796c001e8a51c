import pytest

from lottery_backend.parse import parse_numbers, validate_draw, split_numbers, parse_results_csv


def test_parse_numbers_accepts_comma_and_space_separated_string():
    assert parse_numbers("3, 7,12 19 25,33 ,41") == [3, 7, 12, 19, 25, 33, 41]


def test_parse_numbers_accepts_list_of_int_like_values():
    assert parse_numbers(["3", 7, "12"]) == [3, 7, 12]


@pytest.mark.parametrize("value", ["1,2,x", [1, "two"], 42, None, [True, 2], [1.5, 2, 3, 4, 5, 6, 7], "1.5 2 3"])
def test_parse_numbers_rejects_non_integers(value):
    with pytest.raises(ValueError):
        parse_numbers(value)


def test_validate_draw_sorts_numbers_and_casts_bonus():
    numbers, bonus = validate_draw([41, 3, 25, 7, 33, 12, 19], "8")
    assert numbers == [3, 7, 12, 19, 25, 33, 41]
    assert bonus == 8


@pytest.mark.parametrize(
    "numbers,bonus,message",
    [
        ([1, 2, 3, 4, 5, 6], 8, "array of 7 integers"),
        ([1, 2, 3, 4, 5, 6, 7, 8], 9, "array of 7 integers"),
        ([0, 2, 3, 4, 5, 6, 7], 8, "between 1 and 49"),
        ([1, 2, 3, 4, 5, 6, 50], 8, "between 1 and 49"),
        ([1, 1, 3, 4, 5, 6, 7], 8, "must not repeat"),
        ([1, 2, 3, 4, 5, 6, 7], 50, "Bonus number must be between"),
        ([1, 2, 3, 4, 5, 6, 7], "x", "Bonus number must be an integer"),
        ([1, 2, 3, 4, 5, 6, 7], 8.5, "Bonus number must be an integer"),
        ([1, 2, 3, 4, 5, 6, 7], True, "Bonus number must be an integer"),
    ],
)
def test_validate_draw_rejects_bad_draws(numbers, bonus, message):
    with pytest.raises(ValueError, match=message):
        validate_draw(numbers, bonus)


def test_validate_draw_allows_bonus_equal_to_main_number():
    assert validate_draw([1, 2, 3, 4, 5, 6, 7], 7) == ([1, 2, 3, 4, 5, 6, 7], 7)


def test_split_numbers_decodes_stored_column():
    assert split_numbers("3,7,12") == [3, 7, 12]


def test_parse_results_csv_skips_header_comments_and_bad_lines():
    content = """n1,n2,n3,n4,n5,n6,n7,bonus
3,7,12,19,25,33,41,8
# copied from the newspaper

1,2,3,4,5,6,7,49
1,2,3,4,5,6,8
1,2,3,4,5,6,60,8
"""
    parsed = parse_results_csv(content)
    assert parsed["draws"] == [
        ([3, 7, 12, 19, 25, 33, 41], 8),
        ([1, 2, 3, 4, 5, 6, 7], 49),
    ]
    assert parsed["skipped"] == 2


def test_parse_results_csv_without_header():
    parsed = parse_results_csv("41,33,25,19,12,7,3,8")
    assert parsed["draws"] == [([3, 7, 12, 19, 25, 33, 41], 8)]
    assert parsed["skipped"] == 0


def test_parse_results_csv_empty():
    assert parse_results_csv("   ") == {"draws": [], "skipped": 0}


def test_parse_numbers_accepts_whole_floats():
    assert parse_numbers([1.0, 2, 3]) == [1, 2, 3]


def test_parse_results_csv_finds_header_after_leading_comment():
    content = """# exported 2026-01-01

n1,n2,n3,n4,n5,n6,n7,bonus
3,7,12,19,25,33,41,8
"""
    parsed = parse_results_csv(content)
    assert parsed["draws"] == [([3, 7, 12, 19, 25, 33, 41], 8)]
    assert parsed["skipped"] == 0
