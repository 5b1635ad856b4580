"""
FDR Engine - Gameweek Resolution

Picks the reference gameweek out of the event list and builds lookahead
windows. The feed flags at most one event as next; pre-season and
end-of-season snapshots flag none, so every resolver has a fallback.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, List, Sequence

from fdr_engine.constants import LAST_GAMEWEEK, LOGGER_NAME
from fdr_engine.models import Event

logger = logging.getLogger(LOGGER_NAME)


def resolve_start_gameweek(events: Sequence[Event]) -> int:
    """Id of the event flagged is_next, else the first event in the list, else GW1."""
    for event in events:
        if event.is_next:
            return event.id
    if not events:
        logger.warning("No events supplied, starting from GW1")
        return 1
    logger.warning(f"No next gameweek flagged, falling back to GW{events[0].id}")
    return events[0].id


def get_current_gameweek(events: Sequence[Event]) -> int:
    for event in events:
        if event.is_current:
            return event.id
    for event in events:
        if event.is_next:
            return event.id
    return 1


def get_next_gameweek(events: Sequence[Event]) -> int:
    for event in events:
        if event.is_next:
            return event.id
    return min(get_current_gameweek(events) + 1, LAST_GAMEWEEK)


def get_active_gameweek_id(events: Sequence[Event], now: Optional[datetime] = None) -> int:
    """
    Deadline-based active gameweek.

    After GW X's deadline and before GW X+1's, the active gameweek is X.
    Before the first deadline it is the first gameweek (pre-season), after
    the last deadline it is the last one (season end).
    """
    if not events:
        return 1
    if now is None:
        now = datetime.now(timezone.utc)

    ordered = sorted(events, key=lambda e: e.id)
    upcoming_index = None
    for i, event in enumerate(ordered):
        if event.deadline_time is not None and _as_utc(event.deadline_time) > _as_utc(now):
            upcoming_index = i
            break

    if upcoming_index is None:
        return ordered[-1].id
    if upcoming_index == 0:
        return ordered[0].id
    return ordered[upcoming_index - 1].id


def gameweek_window(start_gw: int, lookahead: int, season_length: int = LAST_GAMEWEEK) -> List[int]:
    """Gameweeks start_gw .. start_gw + lookahead - 1, cut at the season end."""
    end_gw = min(season_length, start_gw + lookahead - 1)
    return list(range(start_gw, end_gw + 1))


def _as_utc(moment: datetime) -> datetime:
    # Naive timestamps are taken as UTC (the feed always sends Z-suffixed times)
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment
