"""
FDR Engine - Result Classifier

Labels finished fixtures Expected / Upset / Neutral against the dynamic FDR.
Only clear strength mismatches get a confident label.
"""

import logging
from typing import Optional, Dict, Sequence

from fdr_engine.config import MODEL_CONFIG, ClassifierConfig, FDRConfig
from fdr_engine.constants import LOGGER_NAME
from fdr_engine.calculators import rate_fixture
from fdr_engine.models import (
    Fixture, Player, DifficultyResult, ResultClassification, ResultLabel,
    GameweekSummary,
)

logger = logging.getLogger(LOGGER_NAME)

__all__ = [
    "classify_result",
    "classify_fixture",
    "summarize_gameweek",
]


def classify_result(
    home_score: Optional[int],
    away_score: Optional[int],
    home_difficulty: DifficultyResult,
    away_difficulty: DifficultyResult,
    config: Optional[ClassifierConfig] = None,
) -> Optional[ResultClassification]:
    """
    Classify a result relative to the two sides' FDR.

    home_difficulty is how hard the away team is for the home side (and vice
    versa), so each side's strength is read off the *other* side's rating:
        home_strength = away_difficulty.score
        away_strength = home_difficulty.score
        gap = home_strength - away_strength

    Rules, in order:
    - gap >= 1: home favourite. Home win Expected, away win Upset,
      draw Upset only when gap >= 1.5.
    - gap <= -1: mirror for the away side.
    - Any other draw: Neutral.
    - Other wins: Expected if the winner's fixture was rated <= 2,
      else Neutral.

    Returns None when either score is missing (not played yet).
    """
    if home_score is None or away_score is None:
        return None

    cfg = config or MODEL_CONFIG["classifier"]

    home_strength = away_difficulty.score
    away_strength = home_difficulty.score
    gap = home_strength - away_strength

    home_won = home_score > away_score
    away_won = away_score > home_score
    is_draw = not home_won and not away_won

    is_favorite_home = gap >= cfg.favorite_gap
    is_favorite_away = gap <= -cfg.favorite_gap

    def _result(label: ResultLabel) -> ResultClassification:
        return ResultClassification(
            label=label,
            is_favorite_home=is_favorite_home,
            is_favorite_away=is_favorite_away,
        )

    if is_favorite_home:
        if home_won:
            return _result(ResultLabel.EXPECTED)
        if away_won:
            return _result(ResultLabel.UPSET)
        if gap >= cfg.draw_upset_gap:
            return _result(ResultLabel.UPSET)
    elif is_favorite_away:
        if away_won:
            return _result(ResultLabel.EXPECTED)
        if home_won:
            return _result(ResultLabel.UPSET)
        if -gap >= cfg.draw_upset_gap:
            return _result(ResultLabel.UPSET)

    if is_draw:
        return _result(ResultLabel.NEUTRAL)

    # No clear favourite: a win from an easy fixture is still unsurprising
    winner_difficulty = home_difficulty.score if home_won else away_difficulty.score
    if winner_difficulty <= cfg.easy_win_max_difficulty:
        return _result(ResultLabel.EXPECTED)
    return _result(ResultLabel.NEUTRAL)


def classify_fixture(
    fixture: Fixture,
    players: Sequence[Player],
    position_map: Dict[int, int],
    config: Optional[ClassifierConfig] = None,
    fdr_config: Optional[FDRConfig] = None,
) -> Optional[ResultClassification]:
    """Rate both sides of a finished fixture and classify it. None if unplayed."""
    if not fixture.has_result:
        return None
    home_difficulty, away_difficulty = rate_fixture(fixture, players, position_map, fdr_config)
    return classify_result(
        fixture.team_h_score,
        fixture.team_a_score,
        home_difficulty,
        away_difficulty,
        config,
    )


def summarize_gameweek(
    event_id: int,
    fixtures: Sequence[Fixture],
    players: Sequence[Player],
    position_map: Dict[int, int],
    config: Optional[ClassifierConfig] = None,
    fdr_config: Optional[FDRConfig] = None,
) -> GameweekSummary:
    """
    Goals, clean sheets, home wins and a classification per finished fixture
    of one gameweek.
    """
    played = [f for f in fixtures if f.event == event_id and f.has_result]

    total_goals = 0
    clean_sheets = 0
    home_wins = 0
    classifications = {}

    for f in played:
        total_goals += f.team_h_score + f.team_a_score
        clean_sheets += int(f.team_h_score == 0) + int(f.team_a_score == 0)
        if f.team_h_score > f.team_a_score:
            home_wins += 1
        classifications[f.id] = classify_fixture(f, players, position_map, config, fdr_config)

    matches = len(played)
    # Halves round up (12.5% -> 13)
    home_win_pct = int(home_wins * 100 / matches + 0.5) if matches else 0

    logger.debug(f"GW{event_id}: {matches} finished fixtures summarized")
    return GameweekSummary(
        event=event_id,
        matches=matches,
        total_goals=total_goals,
        clean_sheets=clean_sheets,
        home_wins=home_wins,
        home_win_pct=home_win_pct,
        classifications=classifications,
    )
