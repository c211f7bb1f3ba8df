from __future__ import annotations

import pytest

from leaderboard.validation import ValidationError, clean_name, clean_score, parse_submission


def test_name_is_trimmed_and_truncated():
    assert clean_name("  Alice  ") == "Alice"
    assert clean_name("ABCDEFGHIJKLMNOP") == "ABCDEFGHIJKL"
    assert clean_name("Player 1") == "Player 1"


@pytest.mark.parametrize("raw", ["", "   ", "bad!", "<script>", None, 42])
def test_bad_names_rejected(raw):
    with pytest.raises(ValidationError, match="Invalid Name"):
        clean_name(raw)


@pytest.mark.parametrize("raw", [-1, 201, 3.5, "10", True, None])
def test_bad_scores_rejected(raw):
    with pytest.raises(ValidationError, match="Invalid Score"):
        clean_score(raw)


def test_score_bounds_inclusive():
    assert clean_score(0) == 0
    assert clean_score(200) == 200


def test_parse_submission():
    assert parse_submission({"name": " Bob ", "score": 70}) == ("Bob", 70)
    with pytest.raises(ValidationError):
        parse_submission(["Bob", 70])
