# app/services/soccer_ai.py

import random
from enum import Enum
from typing import Dict, Any, Optional, List
from services.games.soccer_engine import SoccerEngine
import logging

logger = logging.getLogger(__name__)


class AIDifficulty(Enum):
    """AI strength presets"""
    EASY = "easy"
    MEDIUM = "medium"

    @property
    def strategic_probability(self) -> float:
        """Chance of playing the heuristic best move instead of a random one"""
        return 0.2 if self is AIDifficulty.EASY else 0.8


class SoccerAI:
    """
    One-ply heuristic opponent for paper soccer.

    Candidates are scored as 2 * distance to the attacked goal column plus the
    number of moves left open from the candidate point; the lowest score wins
    and ties keep the first candidate found. Difficulty decides how often the
    heuristic is used at all, the remaining moves are picked uniformly.
    """

    def __init__(self, difficulty: AIDifficulty = AIDifficulty.MEDIUM, rng: Optional[random.Random] = None):
        self.difficulty = AIDifficulty(difficulty)
        self.rng = rng or random.Random()

    def choose_move(self, engine: SoccerEngine, game_state: Dict[str, Any], player_id: int) -> Optional[Dict[str, int]]:
        """
        Pick a destination for the ball.

        Returns:
            The chosen position, or None when no legal move exists
        """
        candidates = engine.legal_moves_from(game_state, game_state["ball_position"])
        if not candidates:
            logger.info(f"AI player {player_id} has no legal move")
            return None

        if self.rng.random() < self.difficulty.strategic_probability:
            move = self.best_move(engine, game_state, player_id, candidates)
        else:
            move = candidates[self.rng.randrange(len(candidates))]

        logger.debug(f"AI player {player_id} ({self.difficulty.value}) chose {move} from {len(candidates)} candidates")
        return move

    def best_move(
        self,
        engine: SoccerEngine,
        game_state: Dict[str, Any],
        player_id: int,
        candidates: List[Dict[str, int]],
    ) -> Dict[str, int]:
        best = None
        best_score = None
        for candidate in candidates:
            score = self.score_move(engine, game_state, player_id, candidate)
            if best_score is None or score < best_score:
                best, best_score = candidate, score
        return best

    def score_move(self, engine: SoccerEngine, game_state: Dict[str, Any], player_id: int, candidate: Dict[str, int]) -> int:
        distance_to_goal = abs(candidate["x"] - engine.goal_x_for(player_id))
        # Mobility is counted as if the candidate line were already drawn
        drawn = engine.edge_key(game_state["ball_position"], candidate)
        mobility = len(engine.legal_moves_from(game_state, candidate, extra_edges=[drawn]))
        return distance_to_goal * 2 + mobility
