import pytest

from app.models.issue import Severity
from app.services.scoring import score


def test_empty_description_scores_severity_only():
    assert score("high", "") == 3.0
    assert score("medium", "") == 2.0
    assert score("low", "") == 1.0


def test_description_adds_a_point_per_hundred_chars():
    assert score("medium", "x" * 50) == 2.5
    assert score("low", "x" * 150) == 2.5


def test_rounds_half_up_to_one_decimal():
    # 2 + 0.25 -> 2.25 -> 2.3
    assert score("medium", "x" * 25) == 2.3


@pytest.mark.parametrize("severity", ["low", "medium", "high"])
def test_monotonic_in_description_length_and_capped(severity):
    previous = 0.0
    for length in range(0, 320, 7):
        rating = score(severity, "x" * length)
        assert rating >= previous
        previous = rating

    capped = score(severity, "x" * 200)
    assert capped == score(severity, "x" * 1000)
    assert capped == score(severity, "") + 2.0


def test_accepts_enum_members():
    assert score(Severity.high, "x" * 100) == 4.0


def test_unknown_severity_is_rejected():
    with pytest.raises(ValueError):
        score("critical", "anything")
