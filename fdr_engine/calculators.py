"""
FDR Engine - Calculators Module

Opponent strength (top-N form average) and the dynamic 1-5 Fixture
Difficulty Rating built on top of it.
"""

import logging
from typing import Optional, Dict, Sequence, Tuple

from fdr_engine.config import MODEL_CONFIG, FDRConfig
from fdr_engine.constants import LOGGER_NAME
from fdr_engine.models import (
    Player, Fixture, TeamFormStrength, DifficultyBreakdown, DifficultyResult,
)

logger = logging.getLogger(LOGGER_NAME)

__all__ = [
    "team_form_strength",
    "table_adjustment",
    "score_from_final",
    "rate_difficulty",
    "rate_fixture",
]


# =============================================================================
# OPPONENT STRENGTH
# =============================================================================

def team_form_strength(
    team_id: int,
    players: Sequence[Player],
    top_n: Optional[int] = None,
) -> TeamFormStrength:
    """
    Average form of a team's top N players.

    A team's threat comes from its in-form regulars, not the fringe, so only
    the top N forms are kept. Unparseable or missing forms are excluded
    rather than counted as 0 so bad feed rows don't drag the average down.

    Returns avg=0, count=0 when no player has usable form. Callers should
    read count == 0 as "insufficient data", not "weakest team".
    """
    if top_n is None:
        top_n = MODEL_CONFIG["fdr"].top_n_players

    forms = sorted(
        (form for form in (p.form_value for p in players if p.team == team_id) if form is not None),
        reverse=True,
    )[:top_n]

    if not forms:
        return TeamFormStrength(avg=0.0, count=0)
    return TeamFormStrength(avg=sum(forms) / len(forms), count=len(forms))


# =============================================================================
# DYNAMIC FDR
# =============================================================================

def table_adjustment(position: int, config: Optional[FDRConfig] = None) -> float:
    """
    Convert league position to a small difficulty adjustment.

    Top of the table -> most positive (+1.50 with default weight),
    bottom -> most negative (-1.35). Positions outside 1..league_size
    are treated as mid-table.
    """
    cfg = config or MODEL_CONFIG["fdr"]
    if not 1 <= position <= cfg.league_size:
        position = cfg.default_position
    table_strength = (cfg.league_size - position) + 1   # 1..20
    return (table_strength - cfg.table_pivot) * cfg.table_weight


def score_from_final(final: float, config: Optional[FDRConfig] = None) -> Tuple[int, str]:
    """Map the continuous difficulty to a (1-5 score, label) pair."""
    cfg = config or MODEL_CONFIG["fdr"]
    score = cfg.min_score
    for threshold, threshold_score in cfg.score_thresholds:
        if final > threshold:
            score = threshold_score
            break
    return score, cfg.score_labels[score]


def rate_difficulty(
    opponent_id: int,
    players: Sequence[Player],
    position_map: Dict[int, int],
    is_away: bool = False,
    config: Optional[FDRConfig] = None,
) -> DifficultyResult:
    """
    Dynamic FDR for facing `opponent_id`.

    - Main: opponent's average form over its top 12 players
    - Supporting: opponent's table position (small)
    - Venue: playing away is slightly harder (+0.15), at home slightly
      easier (-0.10)

    `is_away` is from the rating side's perspective: True when the side
    facing `opponent_id` is the away team.

    Example:
        avg form 5.0, 1st in table, we are at home
        final = 5.0 + 1.50 - 0.10 = 6.40 -> 5 (Very Hard)
    """
    cfg = config or MODEL_CONFIG["fdr"]

    strength = team_form_strength(opponent_id, players, cfg.top_n_players)
    if strength.count == 0:
        logger.debug(f"No usable form data for team {opponent_id}, rating on table/venue only")

    position = position_map.get(opponent_id, cfg.default_position)
    table_adj = table_adjustment(position, cfg)
    ha_adj = cfg.away_adjustment if is_away else cfg.home_adjustment

    final = strength.avg + table_adj + ha_adj
    score, label = score_from_final(final, cfg)

    return DifficultyResult(
        score=score,
        label=label,
        breakdown=DifficultyBreakdown(
            form_avg=strength.avg,
            form_count=strength.count,
            position=position,
            table_adjustment=table_adj,
            home_away_adjustment=ha_adj,
            final=final,
        ),
    )


def rate_fixture(
    fixture: Fixture,
    players: Sequence[Player],
    position_map: Dict[int, int],
    config: Optional[FDRConfig] = None,
) -> Tuple[DifficultyResult, DifficultyResult]:
    """
    Rate both sides of a fixture.

    Returns (home_difficulty, away_difficulty): how hard the away team is for
    the home side, and how hard the home team is for the travelling side.
    """
    home_difficulty = rate_difficulty(fixture.team_a, players, position_map, is_away=False, config=config)
    away_difficulty = rate_difficulty(fixture.team_h, players, position_map, is_away=True, config=config)
    return home_difficulty, away_difficulty
