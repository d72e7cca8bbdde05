"""
Pytest configuration and fixtures for testing
"""
import random
import pytest
from typing import Any, Dict
from config.settings import Settings
from services.games.soccer_engine import SoccerEngine
from services.match_service import MatchService


@pytest.fixture
def engine() -> SoccerEngine:
    """Default 9x13 engine"""
    return SoccerEngine()


@pytest.fixture
def state(engine: SoccerEngine) -> Dict[str, Any]:
    return engine.initialize_game_state()


@pytest.fixture
def test_settings() -> Settings:
    """Settings without pacing delays and without reading a .env file"""
    return Settings(
        _env_file=None,
        AI_MOVE_DELAY_SECONDS=0.0,
        RESIZE_TRANSITION_SECONDS=0.0,
    )


@pytest.fixture
def match(test_settings: Settings) -> MatchService:
    return MatchService(test_settings, rng=random.Random(1234))


@pytest.fixture
def ai_match(test_settings: Settings) -> MatchService:
    """Match against the AI, which plays as player 2"""
    service = MatchService(test_settings, rng=random.Random(1234))
    service.set_game_mode("ai")
    return service
