# app/config/settings.py

from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from typing import List, Tuple


class Settings(BaseSettings):
    model_config = ConfigDict(
        env_file=".env",
        case_sensitive=True
    )

    # Application Configuration
    APP_NAME: str = "Paper Soccer"
    DEBUG: bool = False

    # Field Configuration (rows, cols)
    DEFAULT_FIELD_ROWS: int = 9
    DEFAULT_FIELD_COLS: int = 13
    FIELD_SIZE_PRESETS: List[Tuple[int, int]] = [(7, 11), (9, 13), (11, 15), (13, 17)]

    # Match Configuration
    DEFAULT_GAME_MODE: str = "player"  # "player" or "ai"

    # AI Configuration
    AI_DIFFICULTY: str = "medium"  # "easy" or "medium"
    AI_PLAYER_ID: int = 2
    AI_MOVE_DELAY_SECONDS: float = 0.5  # Pacing only, the engine never waits
    RESIZE_TRANSITION_SECONDS: float = 0.5

    @property
    def DEFAULT_FIELD_SIZE(self) -> Tuple[int, int]:
        """Default field dimensions as a (rows, cols) pair"""
        return (self.DEFAULT_FIELD_ROWS, self.DEFAULT_FIELD_COLS)


settings = Settings()
