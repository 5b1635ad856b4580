"""
FDR Engine - public API re-exports.

Code lives in fdr_engine/ modules:
- config.py:         MODEL_CONFIG + 4 dataclass configs
- constants.py:      Named constants, parsing/clamping utilities
- models.py:         Pydantic feed records, enums, result dataclasses
- gameweeks.py:      Current/next/active gameweek, lookahead windows
- standings.py:      League table and positions, form guide, last-5 period stats
- calculators.py:    Opponent form strength, dynamic FDR
- classifier.py:     Expected/Upset classification, gameweek summary
- transfer_index.py: Transfer Index engine, fixture difficulty grid

Callers and tests import from `main`.
"""

from fdr_engine.config import *          # noqa: F401,F403
from fdr_engine.constants import *       # noqa: F401,F403
from fdr_engine.models import *          # noqa: F401,F403
from fdr_engine.gameweeks import *       # noqa: F401,F403
from fdr_engine.standings import *       # noqa: F401,F403
from fdr_engine.calculators import *     # noqa: F401,F403
from fdr_engine.classifier import *      # noqa: F401,F403
from fdr_engine.transfer_index import *  # noqa: F401,F403
