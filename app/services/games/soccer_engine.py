# app/services/games/soccer_engine.py

from typing import Dict, Any, Optional, List, Tuple, Iterable
from services.game_engine_interface import (
    GameEngineInterface,
    MoveValidationResult,
    GameResult,
)
from services.games.pitch_geometry import PitchGeometry
from schemas.game_schema import GameInfo, GameRuleOption
import logging

logger = logging.getLogger(__name__)


class SoccerEngine(GameEngineInterface):
    """
    Paper soccer game engine implementation.

    Rules implemented:
    - Start from the center of the field
    - Move the ball to one of the 8 neighbouring points (king move)
    - You cannot draw the same segment twice, boundary segments included
    - The outer frame may only be touched strictly inside a goal mouth
    - If you land on a point the ball already visited, you keep the turn
    - Player 1 scores on the right goal (x = cols), player 2 on the left (x = 0)
    - A player who has no legal move when it is their turn loses
    """

    # Direction vectors (dx, dy), y grows downwards
    DIRECTIONS: Dict[str, Tuple[int, int]] = {
        "N": (0, -1),
        "NE": (1, -1),
        "E": (1, 0),
        "SE": (1, 1),
        "S": (0, 1),
        "SW": (-1, 1),
        "W": (-1, 0),
        "NW": (-1, -1),
    }

    DEFAULT_ROWS = 9
    DEFAULT_COLS = 13

    def __init__(self, player_ids: Optional[List[int]] = None, rules: Optional[Dict[str, Any]] = None):
        player_ids = player_ids if player_ids is not None else [1, 2]
        super().__init__(player_ids, rules)

        if len(player_ids) != 2:
            raise ValueError("Paper soccer requires exactly 2 players")

        self.rows = self.rules.get("rows") or self.DEFAULT_ROWS
        self.cols = self.rules.get("cols") or self.DEFAULT_COLS
        self.geometry = PitchGeometry(self.rows, self.cols)

        # Player 1 attacks the right goal, player 2 attacks the left goal
        self.right_goal_attacker = player_ids[0]
        self.left_goal_attacker = player_ids[1]

    def _initialize_game_specific_state(self) -> Dict[str, Any]:
        """Set up the framed field, ball position, and tracking structures."""
        start_pos = self.geometry.center
        lines = self.geometry.boundary_lines()
        visited_edges = [self.edge_key(line["from"], line["to"]) for line in lines]
        return {
            "field": self.geometry.to_dict(),
            "ball_position": start_pos,
            "move_count": 0,
            "lines": lines,  # List of {"from": {...}, "to": {...}, "player": ...}
            "visited_edges": visited_edges,  # Undirected string keys for quick lookup
            "visited_points": [self._node_key(start_pos)],
            "last_move": None,
            "extra_turn_awarded": False,
            "end_reason": None,
            "available_moves": self._legal_moves_from_position(visited_edges, start_pos),
        }

    def _validate_game_specific_move(self, game_state: Dict[str, Any], player_id: int, move_data: Dict[str, Any]) -> MoveValidationResult:
        """
        Validate a paper soccer move.

        Move data can be provided as:
        - {"direction": "N" | "NE" | "E" | "SE" | "S" | "SW" | "W" | "NW"}
        - {"to_x": int, "to_y": int}
        """
        ball_pos = game_state["ball_position"]

        target = self._resolve_target(ball_pos, move_data)
        if target is None:
            return MoveValidationResult(False, "Move must include 'direction' or 'to_x'/'to_y'")

        return self._check_target(set(game_state["visited_edges"]), ball_pos, target)

    def is_legal(self, game_state: Dict[str, Any], target: Dict[str, int]) -> bool:
        """Pure legality check of moving the ball to target, ignoring whose turn it is."""
        visited = set(game_state["visited_edges"])
        return self._check_target(visited, game_state["ball_position"], target).valid

    def legal_moves_from(
        self,
        game_state: Dict[str, Any],
        position: Dict[str, int],
        extra_edges: Iterable[str] = (),
    ) -> List[Dict[str, int]]:
        """
        List legal destinations from position.

        extra_edges are edge keys treated as already drawn, which lets callers
        look one move ahead without mutating the game state.
        """
        visited = set(game_state["visited_edges"])
        visited.update(extra_edges)
        return self._legal_moves_from_position(visited, position)

    def apply_move(self, game_state: Dict[str, Any], player_id: int, move_data: Dict[str, Any]) -> Dict[str, Any]:
        """Apply a validated move, update tracking, and flag bonus turns."""
        ball_pos = game_state["ball_position"]
        target = self._resolve_target(ball_pos, move_data)
        if target is None:
            return game_state  # Should not happen after validation

        # Check the destination before recording it
        dest_key = self._node_key(target)
        revisited = dest_key in game_state["visited_points"]

        # Register the new edge
        game_state["visited_edges"].append(self.edge_key(ball_pos, target))
        if not revisited:
            game_state["visited_points"].append(dest_key)

        # Record the line and move metadata
        line_entry = {
            "from": {"x": ball_pos["x"], "y": ball_pos["y"]},
            "to": {"x": target["x"], "y": target["y"]},
            "player": player_id,
        }
        game_state["lines"].append(line_entry)
        game_state["move_count"] += 1
        game_state["last_move"] = {
            "player_id": player_id,
            "from": line_entry["from"],
            "to": line_entry["to"],
        }

        # Move the ball
        game_state["ball_position"] = target

        self.extra_turn_granted = revisited
        game_state["extra_turn_awarded"] = revisited

        # Pre-compute available moves for whoever moves next (use updated edges)
        game_state["available_moves"] = self._legal_moves_from_position(set(game_state["visited_edges"]), target)

        return game_state

    def check_game_result(self, game_state: Dict[str, Any]) -> tuple[GameResult, Optional[int]]:
        """Check if the last move scored or if the player to move is stuck."""
        last_move = game_state.get("last_move")
        if last_move is None:
            return GameResult.IN_PROGRESS, None

        mover = last_move["player_id"]
        if self._is_winning_point(mover, game_state["ball_position"]):
            return self._finish(game_state, mover, "goal")

        # No-move check for the player whose turn is next
        available = game_state.get("available_moves")
        if available is None:
            available = self.legal_moves_from(game_state, game_state["ball_position"])

        if not available:
            next_player = mover if self.extra_turn_granted else self._opponent_of(mover)
            return self._finish(game_state, self._opponent_of(next_player), "no_moves")

        return GameResult.IN_PROGRESS, None

    def goal_x_for(self, player_id: int) -> int:
        """Column the given player scores on"""
        return self.cols if player_id == self.right_goal_attacker else 0

    # Helpers
    def _finish(self, game_state: Dict[str, Any], winner_id: int, reason: str) -> tuple[GameResult, Optional[int]]:
        self.game_result = GameResult.PLAYER_WIN
        self.winner_id = winner_id
        game_state["end_reason"] = reason
        logger.info(f"Player {winner_id} wins ({reason}) after {game_state['move_count']} moves")
        return GameResult.PLAYER_WIN, winner_id

    def _opponent_of(self, player_id: int) -> int:
        return next(pid for pid in self.player_ids if pid != player_id)

    def _is_winning_point(self, player_id: int, pos: Dict[str, int]) -> bool:
        """
        The mover wins by reaching the goal line they attack inside the goal
        band, or by grazing the point one column in front of that goal just
        below the lower post.
        """
        x, y = pos["x"], pos["y"]
        geometry = self.geometry

        if player_id == self.left_goal_attacker and x == 0 and geometry.in_goal_band(y):
            return True
        if player_id == self.right_goal_attacker and x == self.cols and geometry.in_goal_band(y):
            return True

        graze_y = geometry.goal_high + 1
        if player_id == self.right_goal_attacker and x == self.cols - 1 and y == graze_y:
            return True
        if player_id == self.left_goal_attacker and x == 1 and y == graze_y:
            return True

        return False

    def _check_target(self, visited_edges: set, ball_pos: Dict[str, int], target: Dict[str, int]) -> MoveValidationResult:
        x, y = target["x"], target["y"]

        if not self.geometry.in_bounds(x, y):
            return MoveValidationResult(False, "Target position is outside the playable area")

        dx = x - ball_pos["x"]
        dy = y - ball_pos["y"]
        if dx == 0 and dy == 0:
            return MoveValidationResult(False, "Move cannot stay in place")
        if abs(dx) > 1 or abs(dy) > 1:
            return MoveValidationResult(False, "Move must be to an adjacent node (8 directions)")

        if self.edge_key(ball_pos, target) in visited_edges:
            return MoveValidationResult(False, "This line segment has already been used")

        if not self._frame_move_allowed(x, y):
            return MoveValidationResult(False, "The field edge can only be touched inside a goal mouth")

        return MoveValidationResult(True)

    def _frame_move_allowed(self, x: int, y: int) -> bool:
        """Points on the outer frame are only reachable strictly inside a goal mouth."""
        if not self.geometry.is_boundary_point(x, y):
            return True
        return x in (0, self.cols) and self.geometry.inside_goal_mouth(y)

    def _resolve_target(self, ball_pos: Dict[str, int], move_data: Dict[str, Any]) -> Optional[Dict[str, int]]:
        """Return the target position based on direction or explicit coordinates."""
        if "direction" in move_data:
            direction = str(move_data["direction"]).upper()
            if direction not in self.DIRECTIONS:
                return None
            dx, dy = self.DIRECTIONS[direction]
            return {"x": ball_pos["x"] + dx, "y": ball_pos["y"] + dy}

        if "to_x" in move_data and "to_y" in move_data:
            to_x = move_data["to_x"]
            to_y = move_data["to_y"]
            # Coordinates must be real integers, bool and float are not coerced
            for value in (to_x, to_y):
                if not isinstance(value, int) or isinstance(value, bool):
                    return None
            return {"x": to_x, "y": to_y}

        return None

    def _legal_moves_from_position(self, visited_edges: Iterable[str], position: Dict[str, int]) -> List[Dict[str, int]]:
        """List all legal destinations from a position, scanning columns then rows."""
        visited = visited_edges if isinstance(visited_edges, set) else set(visited_edges)
        moves = []
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                if dx == 0 and dy == 0:
                    continue
                target = {"x": position["x"] + dx, "y": position["y"] + dy}
                if self._check_target(visited, position, target).valid:
                    moves.append(target)
        return moves

    @staticmethod
    def edge_key(start: Dict[str, int], end: Dict[str, int]) -> str:
        """Store edges as undirected strings for fast repeat checks."""
        a = (start["x"], start["y"])
        b = (end["x"], end["y"])
        first, second = (a, b) if a <= b else (b, a)
        return f"{first[0]},{first[1]}-{second[0]},{second[1]}"

    @staticmethod
    def _node_key(pos: Dict[str, int]) -> str:
        return f"{pos['x']},{pos['y']}"

    @classmethod
    def get_game_name(cls) -> str:
        return "soccer"

    @classmethod
    def get_game_info(cls) -> GameInfo:
        """Expose static info for the paper soccer game."""
        return GameInfo(
            game_name=cls.get_game_name(),
            display_name="Paper Soccer",
            description="Draw lines to move the ball across the grid. Reach your opponent's goal or trap them without moves.",
            min_players=2,
            max_players=2,
            supported_rules={
                "rows": GameRuleOption(
                    type="integer",
                    min=PitchGeometry.MIN_ROWS,
                    default=cls.DEFAULT_ROWS,
                    description="Number of grid rows; the goal band spans rows // 3 to 2 * rows // 3."
                ),
                "cols": GameRuleOption(
                    type="integer",
                    min=PitchGeometry.MIN_COLS,
                    default=cls.DEFAULT_COLS,
                    description="Number of grid columns between the two goals."
                ),
            },
            turn_based=True,
            category="strategy",
        )
