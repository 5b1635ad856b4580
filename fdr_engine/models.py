from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Tuple, Any

from pydantic import BaseModel, Field, field_validator

from fdr_engine.constants import (
    POSITION_MAP, parse_decimal, parse_decimal_or_zero,
)


# ============ ENUMS ============

class Position(str, Enum):
    GKP = "GKP"
    DEF = "DEF"
    MID = "MID"
    FWD = "FWD"


class Horizon(str, Enum):
    NEXT = "next"      # Single next fixture
    NEXT5 = "next5"    # 5-fixture run


class ResultLabel(str, Enum):
    EXPECTED = "Expected"
    UPSET = "Upset"
    NEUTRAL = "Neutral"


class PeriodView(str, Enum):
    ATTACK = "attack"     # Goals scored per game, highest first
    DEFENSE = "defense"   # Goals conceded per game, lowest first


# ============ INPUT RECORDS ============
# Shapes follow the fantasy feed (bootstrap-static + fixtures). Extra feed
# keys are kept but never read.

class Team(BaseModel):
    id: int
    name: str = ""
    short_name: str = ""

    class Config:
        extra = "allow"
        frozen = True


class Event(BaseModel):
    """A gameweek."""
    id: int = Field(..., ge=1)
    name: str = ""
    deadline_time: Optional[datetime] = None
    is_current: bool = False
    is_next: bool = False
    finished: bool = False

    class Config:
        extra = "allow"
        frozen = True


class Fixture(BaseModel):
    id: int
    event: Optional[int] = None  # None = not yet scheduled into a gameweek
    team_h: int
    team_a: int
    finished: bool = False
    team_h_score: Optional[int] = None
    team_a_score: Optional[int] = None
    kickoff_time: Optional[datetime] = None

    class Config:
        extra = "allow"
        frozen = True

    @property
    def has_result(self) -> bool:
        """Counts for standings/classification: finished with both scores."""
        return (
            self.finished
            and self.team_h_score is not None
            and self.team_a_score is not None
        )


class Player(BaseModel):
    id: int
    web_name: str = ""
    team: int
    element_type: int = Field(3, ge=1, le=4)  # 1=GKP, 2=DEF, 3=MID, 4=FWD
    form: Optional[str] = None
    total_points: int = 0
    minutes: int = 0
    selected_by_percent: Optional[str] = None
    chance_of_playing_next_round: Optional[float] = None  # None = fully available

    class Config:
        extra = "allow"
        frozen = True

    @field_validator("form", "selected_by_percent", mode="before")
    @classmethod
    def keep_decimal_text(cls, v: Any) -> Optional[str]:
        """Feed sends decimals as text; accept bare numbers too."""
        if v is None or isinstance(v, str):
            return v
        return str(v)

    @property
    def position(self) -> Position:
        return Position(POSITION_MAP[self.element_type])

    @property
    def form_value(self) -> Optional[float]:
        """Parsed form, None if missing or unparseable."""
        return parse_decimal(self.form)

    @property
    def ownership(self) -> float:
        """Parsed selected_by_percent, 0.0 if unparseable."""
        return parse_decimal_or_zero(self.selected_by_percent)


# =============================================================================
# RESULT DATA CLASSES
# =============================================================================

@dataclass(frozen=True)
class TeamFormStrength:
    """Average form of a team's top-N players."""
    avg: float = 0.0
    count: int = 0  # 0 = insufficient data, not "weakest team"


@dataclass(frozen=True)
class DifficultyBreakdown:
    """Every term of the difficulty formula (unrounded)."""
    form_avg: float
    form_count: int
    position: int
    table_adjustment: float
    home_away_adjustment: float
    final: float


@dataclass(frozen=True)
class DifficultyResult:
    """FDR for one opponent from one perspective."""
    score: int  # 1-5
    label: str
    breakdown: DifficultyBreakdown


@dataclass(frozen=True)
class ResultClassification:
    label: ResultLabel
    is_favorite_home: bool
    is_favorite_away: bool


@dataclass(frozen=True)
class StandingsRow:
    """One line of the league table."""
    team_id: int
    position: int = 0
    played: int = 0
    won: int = 0
    drawn: int = 0
    lost: int = 0
    goals_for: int = 0
    goals_against: int = 0
    points: int = 0

    @property
    def goal_difference(self) -> int:
        return self.goals_for - self.goals_against


@dataclass(frozen=True)
class TeamResult:
    """A finished match from one team's perspective (form guide entry)."""
    fixture_id: int
    event: Optional[int]
    opponent: int
    is_home: bool
    goals_for: int
    goals_against: int
    result: str  # W / D / L


@dataclass(frozen=True)
class TeamPeriodStats:
    """Attack/defence totals over a team's last N finished matches."""
    team_id: int
    played: int = 0
    scored: int = 0
    conceded: int = 0
    clean_sheets: int = 0
    failed_to_score: int = 0
    results: Tuple[TeamResult, ...] = ()  # Oldest first

    @property
    def goals_per_game(self) -> float:
        return self.scored / (self.played or 1)

    @property
    def conceded_per_game(self) -> float:
        return self.conceded / (self.played or 1)


@dataclass(frozen=True)
class GameweekSummary:
    """Totals for the finished fixtures of a single gameweek."""
    event: int
    matches: int = 0
    total_goals: int = 0
    clean_sheets: int = 0
    home_wins: int = 0
    home_win_pct: int = 0
    classifications: Dict[int, ResultClassification] = field(default_factory=dict)


# ============ RESPONSE SCHEMAS ============
# Serializable projections handed back to callers

class UpcomingFixture(BaseModel):
    """One gameweek of a lookahead window. opponent 0 / difficulty 6 = blank."""
    event: int
    opponent: int
    difficulty: int
    is_home: bool

    class Config:
        frozen = True


class TransferIndexResult(Player):
    """Schema for a player in transfer index output."""
    transfer_index: float
    fixture_difficulty_sum: int
    next_fixtures: List[UpcomingFixture] = []
    eo_form_ratio: float = 0.0
    eo_pts_ratio: float = 0.0
