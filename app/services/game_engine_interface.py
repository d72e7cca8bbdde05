# app/services/game_engine_interface.py

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, List
from enum import Enum
from schemas.game_schema import GameInfo
import logging

logger = logging.getLogger(__name__)


class GameResult(Enum):
    """Possible game results"""
    IN_PROGRESS = "in_progress"
    PLAYER_WIN = "player_win"
    FORFEIT = "forfeit"


class MoveValidationResult:
    """Result of move validation"""
    def __init__(self, valid: bool, error_message: Optional[str] = None):
        self.valid = valid
        self.error_message = error_message


class MoveOutcome:
    """
    Result of submitting a move.

    A rejected move leaves the game state untouched. An accepted move reports
    whether the mover keeps the turn and the game result after the move.
    """
    def __init__(
        self,
        accepted: bool,
        extra_turn: bool = False,
        result: GameResult = GameResult.IN_PROGRESS,
        winner_id: Optional[int] = None,
        error_message: Optional[str] = None,
    ):
        self.accepted = accepted
        self.extra_turn = extra_turn
        self.result = result
        self.winner_id = winner_id
        self.error_message = error_message

    @classmethod
    def rejected(cls, error_message: Optional[str] = None) -> "MoveOutcome":
        return cls(accepted=False, error_message=error_message)

    @property
    def game_over(self) -> bool:
        return self.accepted and self.result != GameResult.IN_PROGRESS

    def __repr__(self) -> str:
        if not self.accepted:
            return f"MoveOutcome(rejected, {self.error_message!r})"
        return f"MoveOutcome(accepted, extra_turn={self.extra_turn}, result={self.result.value}, winner_id={self.winner_id})"


class GameEngineInterface(ABC):
    """
    Abstract interface for turn-based game engines.

    Each game implementation should:
    - Validate moves according to game rules
    - Track game state
    - Determine win conditions
    - Support custom rule configurations
    """

    def __init__(self, player_ids: List[int], rules: Optional[Dict[str, Any]] = None):
        """
        Initialize the game engine.

        Args:
            player_ids: List of player IDs participating in the game
            rules: Optional dictionary of custom rules for this game instance
        """
        self.player_ids = player_ids
        self.rules = rules or {}
        self.current_turn_index = 0
        self.game_result = GameResult.IN_PROGRESS
        self.winner_id: Optional[int] = None
        # Set by apply_move when the mover keeps the turn, consumed by advance_turn
        self.extra_turn_granted = False

        # Validate custom rules against game info
        self._validate_rules()

    def _validate_rules(self):
        """
        Validate custom rules against the game's supported rules.
        This uses the GameRuleOption definitions from get_game_info().
        Only validates rules that are explicitly provided by the caller.
        """
        game_info = self.get_game_info()

        for rule_name, rule_value in self.rules.items():
            # Skip validation for rules not defined in game info
            if rule_name not in game_info.supported_rules:
                continue

            # Skip validation for None values - they'll use defaults
            if rule_value is None:
                continue

            rule_option = game_info.supported_rules[rule_name]

            # Type validation
            if rule_option.type == "integer":
                if not isinstance(rule_value, int) or isinstance(rule_value, bool):
                    raise ValueError(f"{rule_name} must be an integer, got {type(rule_value).__name__}")
            elif rule_option.type == "string":
                if not isinstance(rule_value, str):
                    raise ValueError(f"{rule_name} must be a string, got {type(rule_value).__name__}")

            # Range validation
            if rule_option.min is not None and rule_value < rule_option.min:
                raise ValueError(f"{rule_name} must be at least {rule_option.min}, got {rule_value}")
            if rule_option.max is not None and rule_value > rule_option.max:
                raise ValueError(f"{rule_name} must be at most {rule_option.max}, got {rule_value}")

            # Allowed values validation
            if rule_option.allowed_values is not None:
                if rule_value not in rule_option.allowed_values:
                    raise ValueError(f"{rule_name} value '{rule_value}' is not in allowed values: {rule_option.allowed_values}")

    @property
    def current_player_id(self) -> int:
        """Get the ID of the player whose turn it is"""
        return self.player_ids[self.current_turn_index]

    def initialize_game_state(self) -> Dict[str, Any]:
        """
        Initialize and return the starting game state.

        Returns:
            Dictionary representing the initial game state
        """
        game_state = self._initialize_game_specific_state()
        game_state["current_player"] = self.current_player_id
        game_state["result"] = self.game_result.value
        game_state["winner_id"] = self.winner_id
        return game_state

    @abstractmethod
    def _initialize_game_specific_state(self) -> Dict[str, Any]:
        """
        Initialize game-specific state (to be implemented by subclasses).

        Returns:
            Dictionary representing the game-specific initial state
        """
        pass

    def validate_move(self, game_state: Dict[str, Any], player_id: int, move_data: Dict[str, Any]) -> MoveValidationResult:
        """
        Validate if a move is legal according to game rules.

        Args:
            game_state: Current game state
            player_id: ID of the player making the move
            move_data: Data describing the move

        Returns:
            MoveValidationResult indicating if the move is valid
        """
        # Check if game is still in progress
        if self.game_result != GameResult.IN_PROGRESS:
            return MoveValidationResult(False, "Game has already ended")

        # Check if it's the player's turn
        if player_id != self.current_player_id:
            return MoveValidationResult(False, "It's not your turn")

        # Delegate to game-specific validation
        return self._validate_game_specific_move(game_state, player_id, move_data)

    @abstractmethod
    def _validate_game_specific_move(self, game_state: Dict[str, Any], player_id: int, move_data: Dict[str, Any]) -> MoveValidationResult:
        """
        Validate game-specific move rules (to be implemented by subclasses).

        Args:
            game_state: Current game state
            player_id: ID of the player making the move
            move_data: Data describing the move

        Returns:
            MoveValidationResult indicating if the move is valid
        """
        pass

    @abstractmethod
    def apply_move(self, game_state: Dict[str, Any], player_id: int, move_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply a validated move to the game state.

        Args:
            game_state: Current game state
            player_id: ID of the player making the move
            move_data: Data describing the move

        Returns:
            Updated game state after the move is applied
        """
        pass

    @abstractmethod
    def check_game_result(self, game_state: Dict[str, Any]) -> tuple[GameResult, Optional[int]]:
        """
        Check if the game has ended and determine the result.

        Args:
            game_state: Current game state

        Returns:
            Tuple of (GameResult, winner_id or None)
        """
        pass

    def advance_turn(self):
        """Advance to the next player's turn, unless the last move earned an extra turn"""
        if self.extra_turn_granted:
            self.extra_turn_granted = False
            return
        self.current_turn_index = (self.current_turn_index + 1) % len(self.player_ids)

    def process_move(self, game_state: Dict[str, Any], player_id: int, move_data: Dict[str, Any]) -> MoveOutcome:
        """
        Validate, apply and resolve a single move.

        Illegal moves and out-of-turn moves are rejected without touching the
        game state; no exception is raised for them.

        Args:
            game_state: Current game state, mutated in place when accepted
            player_id: ID of the player making the move
            move_data: Data describing the move

        Returns:
            MoveOutcome describing what happened
        """
        validation_result = self.validate_move(game_state, player_id, move_data)
        if not validation_result.valid:
            logger.debug(f"Rejected move {move_data} by player {player_id}: {validation_result.error_message}")
            return MoveOutcome.rejected(validation_result.error_message)

        game_state = self.apply_move(game_state, player_id, move_data)
        extra_turn = self.extra_turn_granted

        result, winner_id = self.check_game_result(game_state)
        game_state["result"] = result.value
        game_state["winner_id"] = winner_id

        if result == GameResult.IN_PROGRESS:
            self.advance_turn()
        else:
            # The turn stays frozen at the winner once the game is decided
            self.extra_turn_granted = False
            extra_turn = False
            if winner_id in self.player_ids:
                self.current_turn_index = self.player_ids.index(winner_id)
        game_state["current_player"] = self.current_player_id

        return MoveOutcome(
            accepted=True,
            extra_turn=extra_turn,
            result=result,
            winner_id=winner_id,
        )

    @classmethod
    @abstractmethod
    def get_game_name(cls) -> str:
        """
        Get the unique name identifier for this game type.

        Returns:
            String name of the game
        """
        pass

    @classmethod
    @abstractmethod
    def get_game_info(cls) -> GameInfo:
        """
        Get static game information without requiring an instance.

        Returns:
            GameInfo DTO with static game information
        """
        pass

    def forfeit_game(self, player_id: int) -> tuple[GameResult, Optional[int]]:
        """
        Handle a player forfeiting the game.

        Args:
            player_id: ID of the player forfeiting

        Returns:
            Tuple of (GameResult.FORFEIT, winner_id)
        """
        self.game_result = GameResult.FORFEIT
        # Winner is the other player(s) - for 2-player games
        if len(self.player_ids) == 2:
            self.winner_id = next(pid for pid in self.player_ids if pid != player_id)
        return GameResult.FORFEIT, self.winner_id
