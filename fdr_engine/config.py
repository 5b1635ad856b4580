from dataclasses import dataclass, field
from typing import Dict, List, Tuple


# =============================================================================
# MODEL CONFIGURATION - All calibration constants with documentation
# =============================================================================

@dataclass
class FDRConfig:
    """
    Dynamic Fixture Difficulty Rating configuration.
    FDR 1-5 scale where 5 = hardest fixture.

    Main signal is the opponent's average form over its top N players.
    League position and venue are small supporting adjustments on top.
    """

    # Top-N most in-form players per team (mean, not sum, so squad size
    # does not move the scale)
    top_n_players: int = 12

    # Table adjustment: ((league_size - pos) + 1 - table_pivot) * table_weight
    # With weight 0.15 => approx [-1.35 .. +1.50]
    league_size: int = 20
    table_pivot: int = 10
    table_weight: float = 0.15
    default_position: int = 10  # Unranked teams sit mid-table

    # Opponent venue adjustment (asymmetric: away penalty > home bonus)
    away_adjustment: float = 0.15
    home_adjustment: float = -0.10

    # Thresholds tuned to the 0-10 average-form scale, checked top down
    # (final > threshold -> score)
    score_thresholds: List[Tuple[float, int]] = field(default_factory=lambda: [
        (4.2, 5),
        (3.7, 4),
        (3.2, 3),
        (2.7, 2),
    ])
    min_score: int = 1

    score_labels: Dict[int, str] = field(default_factory=lambda: {
        1: "Easy",
        2: "Good",
        3: "Moderate",
        4: "Hard",
        5: "Very Hard",
    })


@dataclass
class StandingsConfig:
    """League table scoring."""

    win_points: int = 3
    draw_points: int = 1
    loss_points: int = 0

    # Last-N results shown in a team's form guide
    recent_results: int = 5


@dataclass
class ClassifierConfig:
    """
    Expected / Upset classification of finished fixtures.

    Only clear strength mismatches produce confident labels. Strength is the
    1-5 FDR score of each side as seen by its opponent.
    """

    favorite_gap: float = 1.0        # |gap| >= this -> clear favourite
    draw_upset_gap: float = 1.5      # Favourite drawing at this gap = Upset
    easy_win_max_difficulty: int = 2  # Win vs FDR <= this is Expected


@dataclass
class TransferIndexConfig:
    """
    Transfer Index configuration.

    Two horizons:
    - next:  single next fixture, availability-aware
    - next5: form + difficulty of the whole fixture run
    """

    season_length: int = 38
    min_total_points: int = 10     # Players at or below this are noise
    blank_penalty: int = 6         # Worse than the hardest real fixture (5)
    blank_opponent_id: int = 0

    horizon_lookahead: Dict[str, int] = field(default_factory=lambda: {
        "next": 1,
        "next5": 5,
    })

    # --- next ---
    # Fixture quality by FDR score. Scores >= 5 (incl. blank 6) -> hardest bucket,
    # scores <= 2 -> easiest bucket
    fixture_quality: Dict[int, float] = field(default_factory=lambda: {
        5: 0.25,
        4: 0.40,
        3: 0.65,
        2: 0.85,
    })
    default_fixture_quality: float = 0.65  # No fixture in window -> moderate
    home_bonus: float = 0.05
    next_form_scale: float = 8.0
    default_availability: float = 100.0  # chance_of_playing null => 100%
    next_weights: Dict[str, float] = field(default_factory=lambda: {
        "fixture": 0.50,
        "availability": 0.30,
        "form": 0.20,
    })

    # --- next5 ---
    run_form_scale: float = 10.0
    best_difficulty: int = 1
    worst_difficulty: int = 5
    run_weights: Dict[str, float] = field(default_factory=lambda: {
        "form": 0.5,
        "fixtures": 0.5,
    })


# Initialize global config
MODEL_CONFIG = {
    "fdr": FDRConfig(),
    "standings": StandingsConfig(),
    "classifier": ClassifierConfig(),
    "transfer_index": TransferIndexConfig(),
}
