# app/services/match_service.py

import random
from enum import Enum
from typing import Dict, Any, Optional, List, Union
from config.settings import Settings, settings as default_settings
from services.game_engine_interface import GameResult, MoveOutcome
from services.games.soccer_engine import SoccerEngine
from services.soccer_ai import SoccerAI, AIDifficulty
from schemas.game_schema import (
    FieldSize,
    GameSnapshot,
    Line,
    MatchScore,
    Position,
)
from exceptions.domain_exceptions import (
    BadRequestException,
    ConflictException,
    ValidationException,
)
import logging

logger = logging.getLogger(__name__)

Target = Union[Position, Dict[str, Any]]


class GameMode(Enum):
    """Who controls player 2"""
    PLAYER = "player"
    AI = "ai"


class MatchService:
    """
    Owns one local match: the current game, the field size and the score
    accumulated across games.

    All game mutation goes through start_game, resize and submit_move. The
    service never moves for the AI on its own; callers check is_ai_turn after
    every accepted move and ask choose_ai_move (or play_ai_turn) themselves.
    """

    PLAYER_IDS = [1, 2]

    def __init__(self, config: Optional[Settings] = None, rng: Optional[random.Random] = None):
        self.settings = config or default_settings
        self.presets: List[FieldSize] = [
            FieldSize(rows=rows, cols=cols) for rows, cols in self.settings.FIELD_SIZE_PRESETS
        ]
        if not self.presets:
            raise ValidationException(message="At least one field size preset is required")

        self.game_mode = self._parse_game_mode(self.settings.DEFAULT_GAME_MODE)
        self.ai = SoccerAI(self._parse_difficulty(self.settings.AI_DIFFICULTY), rng=rng)
        self.ai_player_id = self.settings.AI_PLAYER_ID
        if self.ai_player_id not in self.PLAYER_IDS:
            raise ValidationException(
                message="AI player must be player 1 or 2",
                details={"ai_player_id": self.ai_player_id}
            )

        self.scores = MatchScore()
        # Bumped on every new game so callers can drop AI moves computed for an old one
        self.generation = 0
        self.is_resizing = False

        self.engine: Optional[SoccerEngine] = None
        self.game_state: Dict[str, Any] = {}
        self.start_game(self.settings.DEFAULT_FIELD_ROWS, self.settings.DEFAULT_FIELD_COLS)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def start_game(self, rows: Optional[int] = None, cols: Optional[int] = None) -> Dict[str, Any]:
        """
        Start a fresh game, keeping the match score.

        Args:
            rows: Field rows, defaults to the current size
            cols: Field columns, defaults to the current size

        Returns:
            The new game state

        Raises:
            BadRequestException: If the engine rejects the dimensions
            ValidationException: If the dimensions cannot form a field
        """
        if rows is None:
            rows = self.engine.rows if self.engine else self.settings.DEFAULT_FIELD_ROWS
        if cols is None:
            cols = self.engine.cols if self.engine else self.settings.DEFAULT_FIELD_COLS

        try:
            engine = SoccerEngine(list(self.PLAYER_IDS), rules={"rows": rows, "cols": cols})
        except ValueError as e:
            raise BadRequestException(
                message=f"Failed to create game: {str(e)}",
                details={"rows": rows, "cols": cols}
            )

        self.engine = engine
        self.game_state = engine.initialize_game_state()
        self.generation += 1
        logger.info(f"Game {self.generation} started on a {rows}x{cols} field (mode: {self.game_mode.value})")
        return self.game_state

    def new_game(self) -> Dict[str, Any]:
        """Restart on the current field size"""
        if self.is_resizing:
            raise ConflictException(message="Cannot start a new game while the field is being resized")
        return self.start_game()

    def resize(self, direction: int) -> Optional[FieldSize]:
        """
        Step to the previous (-1) or next (+1) field size preset and start a new game.

        Returns:
            The selected preset, or None if a resize is already in flight
        """
        if self.is_resizing:
            logger.warning(f"Ignoring resize({direction}): a resize is already in progress")
            return None

        self.is_resizing = True
        try:
            return self.apply_resize(direction)
        finally:
            self.is_resizing = False

    def apply_resize(self, direction: int) -> FieldSize:
        """Resize without the re-entrancy guard; the caller owns is_resizing."""
        if direction not in (-1, 1):
            raise BadRequestException(
                message="Resize direction must be -1 or 1",
                details={"direction": direction}
            )

        new_index = self.current_size_index + direction
        if new_index < 0:
            new_index = len(self.presets) - 1
        if new_index >= len(self.presets):
            new_index = 0

        preset = self.presets[new_index]
        logger.info(f"Resizing field to {preset.rows}x{preset.cols}")
        self.start_game(preset.rows, preset.cols)
        return preset

    def submit_move(self, player_id: int, target: Target) -> MoveOutcome:
        """
        Move the ball for player_id.

        Out-of-turn and illegal moves come back as a rejected outcome and leave
        the game untouched.
        """
        outcome = self.engine.process_move(self.game_state, player_id, self._to_move_data(target))
        if not outcome.accepted:
            return outcome

        if outcome.game_over and outcome.winner_id is not None:
            self.scores.record_win(outcome.winner_id)
            logger.info(
                f"Game {self.generation} won by player {outcome.winner_id}. "
                f"Score: {self.scores.player1} - {self.scores.player2}"
            )
        return outcome

    def forfeit(self, player_id: int) -> Optional[int]:
        """
        Concede the current game.

        Returns:
            The winner, or None if the game was already over
        """
        if player_id not in self.PLAYER_IDS:
            raise BadRequestException(
                message=f"Unknown player: {player_id}",
                details={"allowed": list(self.PLAYER_IDS)}
            )
        if self.is_game_over:
            return None
        result, winner_id = self.engine.forfeit_game(player_id)
        self.game_state["result"] = result.value
        self.game_state["winner_id"] = winner_id
        self.game_state["end_reason"] = "forfeit"
        self.scores.record_win(winner_id)
        logger.info(f"Player {player_id} forfeited game {self.generation}")
        return winner_id

    def choose_ai_move(self, difficulty: Optional[Union[str, AIDifficulty]] = None) -> Optional[Position]:
        """
        Ask the AI for a move for the side to move.

        Returns:
            The proposed position, or None when the game is over or no legal move exists
        """
        if self.is_game_over:
            return None

        ai = self.ai
        if difficulty is not None:
            ai = SoccerAI(self._parse_difficulty(difficulty), rng=self.ai.rng)

        move = ai.choose_move(self.engine, self.game_state, self.engine.current_player_id)
        if move is None:
            return None
        return Position(x=move["x"], y=move["y"])

    def play_ai_turn(self) -> Optional[MoveOutcome]:
        """Choose and submit one AI move if the AI is to move."""
        if not self.is_ai_turn:
            return None
        move = self.choose_ai_move()
        if move is None:
            return None
        return self.submit_move(self.ai_player_id, move)

    def set_game_mode(self, mode: Union[str, GameMode]) -> None:
        """Switch between two humans and human vs AI; starts a new game."""
        if self.is_resizing:
            raise ConflictException(message="Cannot change game mode while the field is being resized")
        self.game_mode = self._parse_game_mode(mode)
        self.start_game()

    def set_ai_difficulty(self, difficulty: Union[str, AIDifficulty]) -> None:
        self.ai.difficulty = self._parse_difficulty(difficulty)

    def reset_scores(self) -> None:
        self.scores = MatchScore()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def rows(self) -> int:
        return self.engine.rows

    @property
    def cols(self) -> int:
        return self.engine.cols

    @property
    def field_size(self) -> FieldSize:
        return FieldSize(rows=self.rows, cols=self.cols)

    @property
    def current_size_index(self) -> int:
        """Index of the current size in the presets, -1 for a custom size"""
        try:
            return self.presets.index(self.field_size)
        except ValueError:
            return -1

    @property
    def ball_position(self) -> Position:
        return Position(**self.game_state["ball_position"])

    @property
    def current_player(self) -> int:
        return self.engine.current_player_id

    @property
    def result(self) -> GameResult:
        return self.engine.game_result

    @property
    def winner_id(self) -> Optional[int]:
        return self.engine.winner_id

    @property
    def is_game_over(self) -> bool:
        return self.engine.game_result != GameResult.IN_PROGRESS

    @property
    def is_ai_turn(self) -> bool:
        return (
            self.game_mode == GameMode.AI
            and not self.is_game_over
            and self.current_player == self.ai_player_id
        )

    @property
    def lines(self) -> List[Line]:
        return [
            Line(start=Position(**line["from"]), end=Position(**line["to"]), player=line["player"])
            for line in self.game_state["lines"]
        ]

    def is_visited(self, target: Target) -> bool:
        position = self._to_position(target)
        return f"{position.x},{position.y}" in self.game_state["visited_points"]

    def legal_moves(self) -> List[Position]:
        """Legal destinations for the side to move"""
        if self.is_game_over:
            return []
        return [Position(**move) for move in self.game_state["available_moves"]]

    def snapshot(self) -> GameSnapshot:
        field = self.game_state["field"]
        visited = []
        for key in self.game_state["visited_points"]:
            x, y = key.split(",")
            visited.append(Position(x=int(x), y=int(y)))
        return GameSnapshot(
            rows=field["rows"],
            cols=field["cols"],
            goal_low=field["goal_low"],
            goal_high=field["goal_high"],
            lines=self.lines,
            ball_position=self.ball_position,
            visited_points=visited,
            current_player=self.current_player,
            result=self.result.value,
            winner_id=self.winner_id,
            scores=self.scores.model_copy(),
            game_mode=self.game_mode.value,
            ai_difficulty=self.ai.difficulty.value,
            generation=self.generation,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _to_position(target: Target) -> Position:
        if isinstance(target, Position):
            return target
        return Position(x=target["x"], y=target["y"])

    @staticmethod
    def _to_move_data(target: Target) -> Dict[str, Any]:
        """Accept a Position, an {"x", "y"} dict, or raw engine move data"""
        if isinstance(target, Position):
            return target.to_move_data()
        if "direction" in target or "to_x" in target:
            return dict(target)
        return {"to_x": target.get("x"), "to_y": target.get("y")}

    @staticmethod
    def _parse_game_mode(mode: Union[str, GameMode]) -> GameMode:
        try:
            return GameMode(mode)
        except ValueError:
            raise BadRequestException(
                message=f"Unknown game mode: {mode}",
                details={"allowed": [m.value for m in GameMode]}
            )

    @staticmethod
    def _parse_difficulty(difficulty: Union[str, AIDifficulty]) -> AIDifficulty:
        try:
            return AIDifficulty(difficulty)
        except ValueError:
            raise BadRequestException(
                message=f"Unknown AI difficulty: {difficulty}",
                details={"allowed": [d.value for d in AIDifficulty]}
            )
