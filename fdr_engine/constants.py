"""
FDR Engine - Constants Module

Named constants pulled from MODEL_CONFIG plus the small parsing and
clamping utilities shared by every calculator.
"""

import math
from typing import Optional, Union

from fdr_engine.config import MODEL_CONFIG


# ============ PARSING UTILITIES ============

def parse_decimal(value: Union[str, float, int, None]) -> Optional[float]:
    """
    Parse a feed decimal ("5.4", 5.4, "") to float.

    Returns None for missing, non-numeric or non-finite values so callers
    decide whether "unknown" means exclude or zero.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(parsed):
        return None
    return parsed


def parse_decimal_or_zero(value: Union[str, float, int, None]) -> float:
    """Parse a feed decimal, treating anything unparseable as 0.0."""
    parsed = parse_decimal(value)
    return 0.0 if parsed is None else parsed


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


# ============ CONSTANTS ============

LOGGER_NAME = "fdr_engine"

POSITION_MAP = {1: "GKP", 2: "DEF", 3: "MID", 4: "FWD"}

# Season / transfer index defaults
LAST_GAMEWEEK = MODEL_CONFIG["transfer_index"].season_length
BLANK_GW_PENALTY = MODEL_CONFIG["transfer_index"].blank_penalty

# Result letters for a team's form guide
RESULT_WIN = "W"
RESULT_DRAW = "D"
RESULT_LOSS = "L"
