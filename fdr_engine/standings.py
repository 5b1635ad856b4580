"""
FDR Engine - Standings Module

League table from finished fixtures. Recomputed from scratch on every call;
caching across calls is the caller's business.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, List, Dict, Sequence, Union

from fdr_engine.config import MODEL_CONFIG, StandingsConfig
from fdr_engine.constants import (
    LOGGER_NAME, RESULT_WIN, RESULT_DRAW, RESULT_LOSS,
)
from fdr_engine.models import (
    Team, Fixture, StandingsRow, TeamResult, TeamPeriodStats, PeriodView,
)

logger = logging.getLogger(LOGGER_NAME)

__all__ = [
    "UnknownTeamError",
    "compute_standings",
    "compute_positions",
    "team_recent_results",
    "team_period_stats",
    "rank_period_stats",
]


class UnknownTeamError(KeyError):
    """A finished fixture references a team id that is not in the team list."""

    def __init__(self, team_id: int, fixture_id: int):
        super().__init__(team_id)
        self.team_id = team_id
        self.fixture_id = fixture_id

    def __str__(self) -> str:
        return f"Fixture {self.fixture_id} references unknown team {self.team_id}"


def compute_standings(
    teams: Sequence[Team],
    fixtures: Sequence[Fixture],
    config: Optional[StandingsConfig] = None,
) -> List[StandingsRow]:
    """
    Build the league table from finished fixtures.

    Only fixtures with finished=True and both scores count. Order is
    points desc, goal difference desc, goals for desc, then team id asc so
    the result is a strict total order even for identical records.

    Raises:
        UnknownTeamError: a counted fixture names a team not in `teams`.
    """
    cfg = config or MODEL_CONFIG["standings"]

    stats: Dict[int, Dict[str, int]] = {
        t.id: {"played": 0, "won": 0, "drawn": 0, "lost": 0, "gf": 0, "ga": 0, "pts": 0}
        for t in teams
    }

    for f in fixtures:
        if not f.has_result:
            continue
        for team_id in (f.team_h, f.team_a):
            if team_id not in stats:
                raise UnknownTeamError(team_id, f.id)

        h, a = f.team_h_score, f.team_a_score
        home, away = stats[f.team_h], stats[f.team_a]

        home["played"] += 1
        away["played"] += 1
        home["gf"] += h
        home["ga"] += a
        away["gf"] += a
        away["ga"] += h

        if h > a:
            home["won"] += 1
            away["lost"] += 1
            home["pts"] += cfg.win_points
            away["pts"] += cfg.loss_points
        elif h < a:
            away["won"] += 1
            home["lost"] += 1
            away["pts"] += cfg.win_points
            home["pts"] += cfg.loss_points
        else:
            home["drawn"] += 1
            away["drawn"] += 1
            home["pts"] += cfg.draw_points
            away["pts"] += cfg.draw_points

    ordered = sorted(
        stats.items(),
        key=lambda item: (
            -item[1]["pts"],
            -(item[1]["gf"] - item[1]["ga"]),
            -item[1]["gf"],
            item[0],
        ),
    )

    table = [
        StandingsRow(
            team_id=team_id,
            position=idx + 1,
            played=s["played"],
            won=s["won"],
            drawn=s["drawn"],
            lost=s["lost"],
            goals_for=s["gf"],
            goals_against=s["ga"],
            points=s["pts"],
        )
        for idx, (team_id, s) in enumerate(ordered)
    ]
    logger.debug(f"Standings computed for {len(table)} teams")
    return table


def compute_positions(
    teams: Sequence[Team],
    fixtures: Sequence[Fixture],
    config: Optional[StandingsConfig] = None,
) -> Dict[int, int]:
    """team_id -> league position (1 = top). Every team gets a unique rank."""
    return {row.team_id: row.position for row in compute_standings(teams, fixtures, config)}


def team_recent_results(
    team_id: int,
    fixtures: Sequence[Fixture],
    limit: Optional[int] = None,
) -> List[TeamResult]:
    """
    Last `limit` finished results for a team, oldest first (form guide).

    Ordered by kickoff time; fixtures with no kickoff time sort first, in
    gameweek order.
    """
    if limit is None:
        limit = MODEL_CONFIG["standings"].recent_results
    if limit <= 0:
        return []

    played = [
        f for f in fixtures
        if f.has_result and (f.team_h == team_id or f.team_a == team_id)
    ]
    played.sort(key=_fixture_order_key)

    results = []
    for f in played[-limit:]:
        is_home = f.team_h == team_id
        goals_for = f.team_h_score if is_home else f.team_a_score
        goals_against = f.team_a_score if is_home else f.team_h_score

        if goals_for > goals_against:
            result = RESULT_WIN
        elif goals_for < goals_against:
            result = RESULT_LOSS
        else:
            result = RESULT_DRAW

        results.append(TeamResult(
            fixture_id=f.id,
            event=f.event,
            opponent=f.team_a if is_home else f.team_h,
            is_home=is_home,
            goals_for=goals_for,
            goals_against=goals_against,
            result=result,
        ))
    return results


def team_period_stats(
    teams: Sequence[Team],
    fixtures: Sequence[Fixture],
    limit: Optional[int] = None,
) -> List[TeamPeriodStats]:
    """
    Scored/conceded totals over each team's own last `limit` finished
    matches (default 5), one row per team in `teams` order.

    Taken per team rather than per gameweek so blanks and doubles don't
    skew the sample.
    """
    rows = []
    for t in teams:
        recent = team_recent_results(t.id, fixtures, limit)
        rows.append(TeamPeriodStats(
            team_id=t.id,
            played=len(recent),
            scored=sum(r.goals_for for r in recent),
            conceded=sum(r.goals_against for r in recent),
            clean_sheets=sum(1 for r in recent if r.goals_against == 0),
            failed_to_score=sum(1 for r in recent if r.goals_for == 0),
            results=tuple(recent),
        ))
    return rows


def rank_period_stats(
    stats: Sequence[TeamPeriodStats],
    view: Union[PeriodView, str] = PeriodView.ATTACK,
) -> List[TeamPeriodStats]:
    """
    Order period stats for the attack or defence view.

    attack:  goals per game desc, then goals scored desc
    defense: conceded per game asc, then clean sheets desc

    Remaining ties keep input order.
    """
    view = PeriodView(view)
    if view is PeriodView.ATTACK:
        return sorted(stats, key=lambda s: (-s.goals_per_game, -s.scored))
    return sorted(stats, key=lambda s: (s.conceded_per_game, -s.clean_sheets))


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _fixture_order_key(f: Fixture):
    kickoff = f.kickoff_time
    if kickoff is not None and kickoff.tzinfo is None:
        kickoff = kickoff.replace(tzinfo=timezone.utc)
    return (
        kickoff or _EPOCH,
        f.event if f.event is not None else 0,
        f.id,
    )
