"""Shared fixtures for the FDR engine test suite."""
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from main import Team, Fixture, Player, Event


@pytest.fixture
def make_team():
    """Factory for Team models matching the feed shape."""
    def _make(**overrides):
        base = {
            "id": 1,
            "name": "Test FC",
            "short_name": "TST",
            "strength": 3,
        }
        base.update(overrides)
        return Team(**base)
    return _make


@pytest.fixture
def make_teams(make_team):
    """n teams with ids 1..n."""
    def _make(n=20):
        return [make_team(id=i, name=f"Team {i}", short_name=f"T{i:02d}") for i in range(1, n + 1)]
    return _make


@pytest.fixture
def make_player():
    """Factory for Player models matching the feed shape."""
    def _make(**overrides):
        base = {
            "id": 1,
            "web_name": "TestPlayer",
            "team": 1,
            "element_type": 3,  # MID
            "now_cost": 70,
            "form": "5.0",
            "total_points": 50,
            "minutes": 900,
            "selected_by_percent": "10.0",
            "chance_of_playing_next_round": None,
        }
        base.update(overrides)
        return Player(**base)
    return _make


@pytest.fixture
def make_squad(make_player):
    """n players on one team, all with the same form."""
    def _make(team_id, form, n=12, start_id=None):
        first = start_id if start_id is not None else team_id * 100
        return [
            make_player(id=first + i, team=team_id, form=form, total_points=0)
            for i in range(n)
        ]
    return _make


@pytest.fixture
def make_fixture():
    """Factory for Fixture models. Unfinished, no scores by default."""
    def _make(**overrides):
        base = {
            "id": 1,
            "event": 24,
            "team_h": 1,
            "team_a": 2,
            "team_h_difficulty": 3,
            "team_a_difficulty": 3,
            "finished": False,
            "team_h_score": None,
            "team_a_score": None,
            "kickoff_time": "2025-02-01T15:00:00Z",
        }
        base.update(overrides)
        return Fixture(**base)
    return _make


@pytest.fixture
def make_result(make_fixture):
    """Factory for a finished fixture with a score."""
    def _make(fixture_id, home, away, home_score, away_score, **overrides):
        return make_fixture(
            id=fixture_id, team_h=home, team_a=away,
            team_h_score=home_score, team_a_score=away_score,
            finished=True, **overrides,
        )
    return _make


@pytest.fixture
def make_event():
    """Factory for Event (gameweek) models."""
    def _make(**overrides):
        base = {
            "id": 24,
            "name": "Gameweek 24",
            "deadline_time": "2025-02-01T11:00:00Z",
            "is_current": False,
            "is_next": False,
            "finished": False,
        }
        base.update(overrides)
        return Event(**base)
    return _make
