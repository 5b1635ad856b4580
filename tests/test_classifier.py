"""Tests for Expected/Upset classification and the gameweek summary."""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from main import (
    classify_result,
    classify_fixture,
    summarize_gameweek,
    ClassifierConfig,
    DifficultyBreakdown,
    DifficultyResult,
    ResultLabel,
)

import pytest


def _difficulty(score):
    """DifficultyResult with only the score mattering to the classifier."""
    return DifficultyResult(
        score=score,
        label="",
        breakdown=DifficultyBreakdown(
            form_avg=0.0, form_count=0, position=10,
            table_adjustment=0.0, home_away_adjustment=0.0, final=0.0,
        ),
    )


# =============================================================================
# classify_result
# =============================================================================

class TestClassifyResultNotPlayed:
    def test_home_score_missing(self):
        assert classify_result(None, 1, _difficulty(3), _difficulty(3)) is None

    def test_away_score_missing(self):
        assert classify_result(2, None, _difficulty(3), _difficulty(3)) is None

    def test_both_missing(self):
        assert classify_result(None, None, _difficulty(1), _difficulty(5)) is None


class TestClassifyResultHomeFavourite:
    """home_difficulty 2 (weak visitors), away_difficulty 4 (strong hosts): gap +2."""

    def test_home_win_expected(self):
        result = classify_result(2, 0, _difficulty(2), _difficulty(4))
        assert result.label == ResultLabel.EXPECTED
        assert result.is_favorite_home is True
        assert result.is_favorite_away is False

    def test_away_win_upset(self):
        result = classify_result(0, 1, _difficulty(2), _difficulty(4))
        assert result.label == ResultLabel.UPSET

    def test_draw_with_big_gap_is_upset(self):
        result = classify_result(1, 1, _difficulty(2), _difficulty(4))
        assert result.label == ResultLabel.UPSET

    def test_draw_with_small_gap_is_neutral(self):
        """gap 1 is a favourite but a draw isn't surprising enough."""
        result = classify_result(1, 1, _difficulty(3), _difficulty(4))
        assert result.label == ResultLabel.NEUTRAL
        assert result.is_favorite_home is True

    def test_gap_exactly_one_win(self):
        assert classify_result(1, 0, _difficulty(3), _difficulty(4)).label == ResultLabel.EXPECTED
        assert classify_result(0, 1, _difficulty(3), _difficulty(4)).label == ResultLabel.UPSET


class TestClassifyResultAwayFavourite:
    """home_difficulty 5 (strong visitors), away_difficulty 2 (weak hosts): gap -3."""

    def test_away_win_expected(self):
        result = classify_result(0, 3, _difficulty(5), _difficulty(2))
        assert result.label == ResultLabel.EXPECTED
        assert result.is_favorite_away is True
        assert result.is_favorite_home is False

    def test_home_win_upset(self):
        assert classify_result(2, 1, _difficulty(5), _difficulty(2)).label == ResultLabel.UPSET

    def test_draw_upset(self):
        assert classify_result(0, 0, _difficulty(5), _difficulty(2)).label == ResultLabel.UPSET

    def test_draw_small_gap_neutral(self):
        assert classify_result(0, 0, _difficulty(4), _difficulty(3)).label == ResultLabel.NEUTRAL


class TestClassifyResultNoFavourite:
    def test_draw_neutral(self):
        result = classify_result(2, 2, _difficulty(3), _difficulty(3))
        assert result.label == ResultLabel.NEUTRAL
        assert result.is_favorite_home is False
        assert result.is_favorite_away is False

    def test_win_from_easy_fixture_expected(self):
        """Home side faced an FDR 2 fixture and won."""
        assert classify_result(1, 0, _difficulty(2), _difficulty(2)).label == ResultLabel.EXPECTED

    def test_away_win_from_easy_fixture_expected(self):
        assert classify_result(0, 2, _difficulty(1), _difficulty(1)).label == ResultLabel.EXPECTED

    @pytest.mark.parametrize("score", [3, 4, 5])
    def test_win_from_harder_fixture_neutral(self, score):
        assert classify_result(3, 1, _difficulty(score), _difficulty(score)).label == ResultLabel.NEUTRAL
        assert classify_result(1, 3, _difficulty(score), _difficulty(score)).label == ResultLabel.NEUTRAL

    def test_never_confident_without_gap_or_easy_win(self):
        for score in range(1, 6):
            for home_goals, away_goals in [(0, 0), (1, 1), (2, 0), (0, 2)]:
                result = classify_result(home_goals, away_goals, _difficulty(score), _difficulty(score))
                winner_had_easy_fixture = home_goals != away_goals and score <= 2
                if not winner_had_easy_fixture:
                    assert result.label == ResultLabel.NEUTRAL

    def test_custom_gap(self):
        config = ClassifierConfig(favorite_gap=3.0)
        result = classify_result(0, 1, _difficulty(3), _difficulty(5), config)
        assert result.is_favorite_home is False
        assert result.label == ResultLabel.NEUTRAL


# =============================================================================
# classify_fixture / summarize_gameweek
# =============================================================================

@pytest.fixture
def lopsided_league(make_squad):
    """Team 1 in form and top, team 2 out of form and bottom."""
    players = make_squad(1, "6.0") + make_squad(2, "1.0")
    positions = {1: 1, 2: 20}
    return players, positions


class TestClassifyFixture:
    def test_favourite_wins(self, make_result, lopsided_league):
        players, positions = lopsided_league
        fixture = make_result(1, home=1, away=2, home_score=2, away_score=0)
        assert classify_fixture(fixture, players, positions).label == ResultLabel.EXPECTED

    def test_underdog_wins_away(self, make_result, lopsided_league):
        players, positions = lopsided_league
        fixture = make_result(1, home=1, away=2, home_score=0, away_score=1)
        assert classify_fixture(fixture, players, positions).label == ResultLabel.UPSET

    def test_unplayed(self, make_fixture, lopsided_league):
        players, positions = lopsided_league
        assert classify_fixture(make_fixture(team_h=1, team_a=2), players, positions) is None


class TestSummarizeGameweek:
    def test_totals_and_labels(self, make_result, make_fixture, lopsided_league):
        players, positions = lopsided_league
        fixtures = [
            make_result(1, home=1, away=2, home_score=2, away_score=0, event=24),
            make_result(2, home=3, away=4, home_score=1, away_score=1, event=24),
            make_result(3, home=2, away=1, home_score=0, away_score=0, event=24),
            make_fixture(id=4, team_h=5, team_a=6, event=24),
            make_result(5, home=1, away=3, home_score=5, away_score=0, event=25),
        ]
        summary = summarize_gameweek(24, fixtures, players, positions)
        assert summary.event == 24
        assert summary.matches == 3
        assert summary.total_goals == 4
        assert summary.clean_sheets == 3
        assert summary.home_wins == 1
        assert summary.home_win_pct == 33
        assert set(summary.classifications) == {1, 2, 3}
        assert summary.classifications[1].label == ResultLabel.EXPECTED
        assert summary.classifications[2].label == ResultLabel.NEUTRAL
        # Strong away side held to a draw
        assert summary.classifications[3].label == ResultLabel.UPSET

    def test_no_finished_fixtures(self, make_fixture):
        summary = summarize_gameweek(30, [make_fixture(event=30)], [], {})
        assert summary.matches == 0
        assert summary.home_win_pct == 0
        assert summary.classifications == {}

    def test_home_win_pct_rounds_half_up(self, make_result):
        """1 home win in 8 matches is 12.5% -> 13."""
        fixtures = [make_result(1, home=1, away=2, home_score=1, away_score=0, event=24)] + [
            make_result(i, home=2 * i, away=2 * i + 1, home_score=0, away_score=0, event=24)
            for i in range(2, 9)
        ]
        summary = summarize_gameweek(24, fixtures, [], {})
        assert summary.matches == 8
        assert summary.home_wins == 1
        assert summary.home_win_pct == 13

    def test_home_win_pct_rounds_down_below_half(self, make_result):
        fixtures = [make_result(1, home=1, away=2, home_score=2, away_score=1, event=24)] + [
            make_result(i, home=2 * i, away=2 * i + 1, home_score=1, away_score=1, event=24)
            for i in range(2, 10)
        ]
        # 1 in 9 = 11.1%
        assert summarize_gameweek(24, fixtures, [], {}).home_win_pct == 11
