# app/schemas/game_schema.py

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Dict, Any, List, Union


# Game Info DTOs
class GameRuleOption(BaseModel):
    """Schema for a configurable game rule option"""
    type: str = Field(..., description="Data type of the rule (e.g., 'integer', 'boolean', 'string')")
    min: Optional[Union[int, float]] = Field(None, description="Minimum value for numeric rules")
    max: Optional[Union[int, float]] = Field(None, description="Maximum value for numeric rules")
    allowed_values: Optional[List[Any]] = Field(None, description="Closed set of accepted values, if any")
    default: Any = Field(..., description="Default value for the rule")
    description: str = Field(..., description="Human-readable description of the rule")


class GameInfo(BaseModel):
    """Static information about a game type"""
    game_name: str = Field(..., description="Unique identifier for the game type")
    display_name: str = Field(..., description="Human-readable display name")
    description: str = Field(..., description="Description of the game")
    min_players: int = Field(..., description="Minimum number of players required")
    max_players: int = Field(..., description="Maximum number of players allowed")
    supported_rules: Dict[str, GameRuleOption] = Field(default_factory=dict, description="Configurable rules for the game")
    turn_based: bool = Field(..., description="Whether the game is turn-based")
    category: str = Field(..., description="Game category (e.g., 'strategy', 'action', 'puzzle')")


# Field DTOs
class Position(BaseModel):
    """A grid intersection"""
    model_config = ConfigDict(frozen=True)

    x: int
    y: int

    def to_move_data(self) -> Dict[str, int]:
        return {"to_x": self.x, "to_y": self.y}


class Line(BaseModel):
    """A drawn segment; player 0 marks a boundary line"""
    start: Position
    end: Position
    player: int = Field(..., description="0 for boundary, otherwise the player who drew it")


class FieldSize(BaseModel):
    """A field size preset"""
    model_config = ConfigDict(frozen=True)

    rows: int
    cols: int


class MatchScore(BaseModel):
    """Games won by each player during the current session"""
    player1: int = 0
    player2: int = 0

    def record_win(self, player_id: int) -> None:
        if player_id == 1:
            self.player1 += 1
        elif player_id == 2:
            self.player2 += 1
        else:
            raise ValueError(f"Unknown player id: {player_id}")


# Query surface for renderers
class GameSnapshot(BaseModel):
    """Read-only view of the match used to draw the field"""
    rows: int
    cols: int
    goal_low: int
    goal_high: int
    lines: List[Line]
    ball_position: Position
    visited_points: List[Position]
    current_player: int
    result: str
    winner_id: Optional[int]
    scores: MatchScore
    game_mode: str
    ai_difficulty: str
    generation: int
