"""
FDR Engine - Transfer Index

Blends player form with the difficulty of the upcoming fixture run into a
0.0-1.0 index. Two horizons:

- next:  next fixture quality (50%) + availability (30%) + form (20%)
- next5: form (50%) + normalized difficulty of the whole run (50%)

Blank gameweeks score a fixed penalty worse than the hardest real fixture.
"""

import logging
from typing import Optional, List, Dict, Sequence, Tuple, Callable, Union

from fdr_engine.config import MODEL_CONFIG, TransferIndexConfig, FDRConfig, StandingsConfig
from fdr_engine.constants import LOGGER_NAME, clamp, parse_decimal_or_zero
from fdr_engine.calculators import rate_difficulty
from fdr_engine.gameweeks import resolve_start_gameweek, gameweek_window
from fdr_engine.models import (
    Player, Fixture, Team, Event, Horizon, Position, UpcomingFixture, TransferIndexResult,
)
from fdr_engine.standings import compute_positions

logger = logging.getLogger(LOGGER_NAME)

__all__ = [
    "build_fixture_lookup",
    "fixture_quality",
    "normalize_fixture_run",
    "next_gameweek_index",
    "fixture_run_index",
    "compute_transfer_index",
    "fixture_difficulty_grid",
]

# (team_id, gameweek) -> (opponent_id, is_home)
FixtureLookup = Dict[Tuple[int, int], Tuple[int, bool]]


# =============================================================================
# FIXTURE WINDOW
# =============================================================================

def build_fixture_lookup(fixtures: Sequence[Fixture], window: Sequence[int]) -> FixtureLookup:
    """
    Map (team, gameweek) to the opponent and venue for unfinished fixtures
    inside the window.

    One fixture per team per gameweek: a second fixture in the same
    gameweek (double gameweek) is logged and dropped, the first one wins.
    """
    gameweeks = set(window)
    lookup: FixtureLookup = {}

    for f in fixtures:
        if f.finished or f.event not in gameweeks:
            continue
        for team_id, opponent_id, is_home in ((f.team_h, f.team_a, True), (f.team_a, f.team_h, False)):
            key = (team_id, f.event)
            if key in lookup:
                logger.warning(
                    f"Double gameweek: team {team_id} has more than one fixture in GW{f.event}, "
                    f"keeping vs {lookup[key][0]} and ignoring fixture {f.id}"
                )
                continue
            lookup[key] = (opponent_id, is_home)

    return lookup


def _upcoming_fixtures(
    team_id: int,
    window: Sequence[int],
    lookup: FixtureLookup,
    rate: Callable[[int, bool], int],
    cfg: TransferIndexConfig,
) -> List[UpcomingFixture]:
    upcoming = []
    for gw in window:
        match = lookup.get((team_id, gw))
        if match is None:
            upcoming.append(UpcomingFixture(
                event=gw,
                opponent=cfg.blank_opponent_id,
                difficulty=cfg.blank_penalty,
                is_home=False,
            ))
            continue
        opponent_id, is_home = match
        upcoming.append(UpcomingFixture(
            event=gw,
            opponent=opponent_id,
            difficulty=rate(opponent_id, not is_home),
            is_home=is_home,
        ))
    return upcoming


def _difficulty_rater(
    players: Sequence[Player],
    positions: Dict[int, int],
    fdr_config: Optional[FDRConfig],
) -> Callable[[int, bool], int]:
    """FDR score per (opponent, is_away), memoised for the current call only."""
    scores: Dict[Tuple[int, bool], int] = {}

    def rate(opponent_id: int, is_away: bool) -> int:
        key = (opponent_id, is_away)
        if key not in scores:
            result = rate_difficulty(opponent_id, players, positions, is_away, fdr_config)
            if result.breakdown.form_count == 0:
                logger.warning(f"Team {opponent_id} has no players with usable form, FDR uses table/venue only")
            scores[key] = result.score
        return scores[key]

    return rate


# =============================================================================
# INDEX FORMULAS
# =============================================================================

def fixture_quality(difficulty: Optional[int], config: Optional[TransferIndexConfig] = None) -> float:
    """
    Next-fixture quality from its FDR.

    Easy/Good 0.85, Moderate 0.65, Hard 0.40, Very Hard/Blank 0.25.
    None (no fixture left in the window) counts as moderate.
    """
    cfg = config or MODEL_CONFIG["transfer_index"]
    if difficulty is None:
        return cfg.default_fixture_quality
    bucket = int(clamp(difficulty, min(cfg.fixture_quality), max(cfg.fixture_quality)))
    return cfg.fixture_quality[bucket]


def normalize_fixture_run(
    difficulty_sum: float,
    lookahead: int,
    config: Optional[TransferIndexConfig] = None,
) -> float:
    """
    Invert a summed run difficulty to 0..1 (1 = best).

    All-FDR-1 run -> 1.0, all-FDR-5 run -> 0.0. Blanks (6) push the raw
    value below zero before clamping.
    """
    cfg = config or MODEL_CONFIG["transfer_index"]
    best_sum = cfg.best_difficulty * lookahead
    worst_sum = cfg.worst_difficulty * lookahead
    return clamp((worst_sum - difficulty_sum) / (worst_sum - best_sum), 0.0, 1.0)


def next_gameweek_index(
    player: Player,
    upcoming: Sequence[UpcomingFixture],
    config: Optional[TransferIndexConfig] = None,
) -> float:
    """Single-fixture index: fixture quality, availability and form."""
    cfg = config or MODEL_CONFIG["transfer_index"]

    first = upcoming[0] if upcoming else None
    quality = fixture_quality(first.difficulty if first is not None else None, cfg)
    if first is not None and first.is_home:
        quality = min(1.0, quality + cfg.home_bonus)

    form = parse_decimal_or_zero(player.form)
    form_norm = clamp(form / cfg.next_form_scale, 0.0, 1.0)

    chance = player.chance_of_playing_next_round
    if chance is None:
        chance = cfg.default_availability
    availability = clamp(chance, 0.0, 100.0) / 100.0

    w = cfg.next_weights
    index = w["fixture"] * quality + w["availability"] * availability + w["form"] * form_norm
    return clamp(index, 0.0, 1.0)


def fixture_run_index(
    player: Player,
    difficulty_sum: float,
    lookahead: int,
    config: Optional[TransferIndexConfig] = None,
) -> float:
    """Multi-fixture index: 50/50 form and fixture run."""
    cfg = config or MODEL_CONFIG["transfer_index"]

    form = parse_decimal_or_zero(player.form)
    form_norm = clamp(form / cfg.run_form_scale, 0.0, 1.0)
    fixture_norm = normalize_fixture_run(difficulty_sum, lookahead, cfg)

    w = cfg.run_weights
    return clamp(w["form"] * form_norm + w["fixtures"] * fixture_norm, 0.0, 1.0)


# =============================================================================
# ENGINE
# =============================================================================

def compute_transfer_index(
    players: Sequence[Player],
    fixtures: Sequence[Fixture],
    teams: Sequence[Team],
    events: Sequence[Event],
    lookahead: Optional[int] = None,
    horizon: Union[Horizon, str] = Horizon.NEXT5,
    position: Optional[Union[Position, str]] = None,
    config: Optional[TransferIndexConfig] = None,
    fdr_config: Optional[FDRConfig] = None,
    standings_config: Optional[StandingsConfig] = None,
) -> List[TransferIndexResult]:
    """
    Transfer Index for every active player (total_points > 10).

    Args:
        lookahead: gameweeks to look ahead (default 1 for next, 5 for next5)
        horizon: "next" or "next5"
        position: only score players in this position (GKP/DEF/MID/FWD)

    Results keep input order; ranking is left to the caller.

    Raises:
        ValueError: unknown horizon or position, or lookahead < 1
    """
    cfg = config or MODEL_CONFIG["transfer_index"]
    horizon = Horizon(horizon)
    if lookahead is None:
        lookahead = cfg.horizon_lookahead[horizon.value]
    if lookahead < 1:
        raise ValueError(f"lookahead must be >= 1, got {lookahead}")
    if position is not None:
        position = Position(position)

    positions = compute_positions(teams, fixtures, standings_config)

    start_gw = resolve_start_gameweek(events)
    window = gameweek_window(start_gw, lookahead, cfg.season_length)
    lookup = build_fixture_lookup(fixtures, window)
    rate = _difficulty_rater(players, positions, fdr_config)

    eligible = [
        p for p in players
        if p.total_points > cfg.min_total_points
        and (position is None or p.position is position)
    ]
    logger.debug(
        f"Transfer index ({horizon.value}): GW{start_gw} x{lookahead}, window {window}, "
        f"{len(eligible)}/{len(players)} players eligible"
    )

    results = []
    for p in eligible:
        upcoming = _upcoming_fixtures(p.team, window, lookup, rate, cfg)
        difficulty_sum = sum(f.difficulty for f in upcoming)

        if horizon is Horizon.NEXT:
            index = next_gameweek_index(p, upcoming, cfg)
        else:
            index = fixture_run_index(p, difficulty_sum, lookahead, cfg)

        form = parse_decimal_or_zero(p.form)
        ownership = p.ownership

        results.append(TransferIndexResult(
            **p.model_dump(),
            transfer_index=index,
            fixture_difficulty_sum=difficulty_sum,
            next_fixtures=upcoming,
            eo_form_ratio=ownership / form if form > 0 else 0.0,
            eo_pts_ratio=ownership / p.total_points if p.total_points > 0 else 0.0,
        ))

    return results


def fixture_difficulty_grid(
    teams: Sequence[Team],
    fixtures: Sequence[Fixture],
    players: Sequence[Player],
    events: Sequence[Event],
    lookahead: int = 5,
    config: Optional[TransferIndexConfig] = None,
    fdr_config: Optional[FDRConfig] = None,
    standings_config: Optional[StandingsConfig] = None,
) -> Dict[int, List[UpcomingFixture]]:
    """
    Fixture planner: every team's upcoming FDR over the window, same rating
    and blank rules as the transfer index.
    """
    cfg = config or MODEL_CONFIG["transfer_index"]
    if lookahead < 1:
        raise ValueError(f"lookahead must be >= 1, got {lookahead}")

    positions = compute_positions(teams, fixtures, standings_config)
    window = gameweek_window(resolve_start_gameweek(events), lookahead, cfg.season_length)
    lookup = build_fixture_lookup(fixtures, window)
    rate = _difficulty_rater(players, positions, fdr_config)

    return {t.id: _upcoming_fixtures(t.id, window, lookup, rate, cfg) for t in teams}
