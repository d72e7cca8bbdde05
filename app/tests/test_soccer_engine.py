# app/tests/test_soccer_engine.py

import pytest
from services.games.soccer_engine import SoccerEngine
from services.game_engine_interface import GameResult
from test_helpers import play, block_edges


class TestSoccerEngineSetup:
    """Tests for SoccerEngine construction and initial state"""

    def test_initialization_default(self):
        """Test default 9x13 field"""
        engine = SoccerEngine()

        assert engine.player_ids == [1, 2]
        assert engine.rows == 9
        assert engine.cols == 13
        assert engine.geometry.goal_low == 3
        assert engine.geometry.goal_high == 6
        assert engine.right_goal_attacker == 1
        assert engine.left_goal_attacker == 2
        assert engine.extra_turn_granted is False

    def test_initialization_custom_size(self):
        """Test custom field size through rules"""
        engine = SoccerEngine(rules={"rows": 11, "cols": 15})

        assert engine.rows == 11
        assert engine.cols == 15

    def test_initialization_rows_below_minimum(self):
        """Test that rule validation rejects a too small field"""
        with pytest.raises(ValueError, match="at least"):
            SoccerEngine(rules={"rows": 2, "cols": 13})

    def test_initialization_rows_wrong_type(self):
        """Test that rule validation rejects non-integer sizes"""
        with pytest.raises(ValueError, match="must be an integer"):
            SoccerEngine(rules={"rows": "nine"})

    def test_initialization_invalid_player_count(self):
        """Test that initialization fails with wrong number of players"""
        with pytest.raises(ValueError, match="exactly 2 players"):
            SoccerEngine([1, 2, 3])

    def test_initialize_game_state(self, engine, state):
        """Test game state initialization"""
        assert state["field"] == {"rows": 9, "cols": 13, "goal_low": 3, "goal_high": 6}
        assert state["ball_position"] == {"x": 6, "y": 4}
        assert state["visited_points"] == ["6,4"]
        assert state["move_count"] == 0
        assert len(state["lines"]) == 36
        assert len(state["visited_edges"]) == 36
        assert state["last_move"] is None
        assert state["extra_turn_awarded"] is False
        assert state["current_player"] == 1
        assert state["result"] == "in_progress"
        assert state["winner_id"] is None
        assert len(state["available_moves"]) == 8  # All 8 directions from center

    def test_game_info(self):
        """Test static game info"""
        info = SoccerEngine.get_game_info()

        assert info.game_name == "soccer"
        assert info.min_players == 2
        assert info.max_players == 2
        assert set(info.supported_rules) == {"rows", "cols"}


class TestSoccerEngineValidation:
    """Tests for move legality"""

    def test_validate_move_valid_direction(self, engine, state):
        """Test valid move validation using direction"""
        result = engine.validate_move(state, 1, {"direction": "N"})

        assert result.valid is True
        assert result.error_message is None

    def test_validate_move_lowercase_direction(self, engine, state):
        """Test lowercase direction is accepted"""
        assert engine.validate_move(state, 1, {"direction": "se"}).valid is True

    def test_validate_move_all_directions(self, engine, state):
        """Test all 8 direction moves are valid from center"""
        for direction in SoccerEngine.DIRECTIONS:
            assert engine.validate_move(state, 1, {"direction": direction}).valid, direction

    def test_validate_move_invalid_direction(self, engine, state):
        """Test validation fails for invalid direction"""
        result = engine.validate_move(state, 1, {"direction": "UP"})

        assert result.valid is False
        assert "direction" in result.error_message

    def test_validate_move_no_move_data(self, engine, state):
        """Test validation fails when no direction or coordinates provided"""
        assert engine.validate_move(state, 1, {}).valid is False

    def test_validate_move_invalid_coordinates_type(self, engine, state):
        """Test validation fails for invalid coordinate types"""
        assert engine.validate_move(state, 1, {"to_x": "left", "to_y": 4}).valid is False

    def test_validate_move_non_integer_coordinates(self, engine, state):
        """Test float, bool and numeric string coordinates are rejected, not truncated"""
        assert engine.validate_move(state, 1, {"to_x": 7.9, "to_y": 4}).valid is False
        assert engine.validate_move(state, 1, {"to_x": 7, "to_y": 4.0}).valid is False
        assert engine.validate_move(state, 1, {"to_x": True, "to_y": 4}).valid is False
        assert engine.validate_move(state, 1, {"to_x": "7", "to_y": "4"}).valid is False
        assert engine.validate_move(state, 1, {"to_x": 7, "to_y": 4}).valid is True

    def test_validate_move_stay_in_place(self, engine, state):
        """Test validation fails for zero movement"""
        result = engine.validate_move(state, 1, {"to_x": 6, "to_y": 4})

        assert result.valid is False
        assert "stay in place" in result.error_message

    def test_validate_move_too_far(self, engine, state):
        """Test validation fails for movement beyond adjacent nodes"""
        result = engine.validate_move(state, 1, {"to_x": 8, "to_y": 4})

        assert result.valid is False
        assert "adjacent node" in result.error_message

    def test_validate_move_out_of_bounds(self, engine, state):
        """Test validation fails for out of bounds position"""
        result = engine.validate_move(state, 1, {"to_x": 20, "to_y": 20})

        assert result.valid is False
        assert "outside the playable area" in result.error_message

    def test_validate_move_wrong_player(self, engine, state):
        """Test that player 2 cannot open the game"""
        result = engine.validate_move(state, 2, {"direction": "E"})

        assert result.valid is False
        assert "not your turn" in result.error_message

    def test_is_legal_ignores_turn(self, engine, state):
        """Test that is_legal only looks at the board"""
        assert engine.is_legal(state, {"x": 7, "y": 5}) is True
        assert engine.is_legal(state, {"x": 6, "y": 4}) is False

    def test_frame_points_outside_goal_mouth_are_illegal(self, engine, state):
        """Test that every left/right frame point outside the mouth is unreachable"""
        for goal_x, inner_x in ((0, 1), (13, 12)):
            for y in range(0, 10):
                if 3 < y < 6:
                    continue
                for from_y in (y - 1, y, y + 1):
                    if not 0 <= from_y <= 9:
                        continue
                    state["ball_position"] = {"x": inner_x, "y": from_y}
                    assert engine.is_legal(state, {"x": goal_x, "y": y}) is False, (goal_x, y, from_y)

    def test_top_and_bottom_frame_are_closed(self, engine, state):
        """Test that the top and bottom sides never open"""
        for x in range(1, 13):
            state["ball_position"] = {"x": x, "y": 1}
            assert engine.is_legal(state, {"x": x, "y": 0}) is False
            state["ball_position"] = {"x": x, "y": 8}
            assert engine.is_legal(state, {"x": x, "y": 9}) is False

    def test_goal_mouth_is_open(self, engine, state):
        """Test that points strictly inside the mouth can be reached"""
        state["ball_position"] = {"x": 1, "y": 4}
        assert engine.is_legal(state, {"x": 0, "y": 4}) is True
        assert engine.is_legal(state, {"x": 0, "y": 5}) is True
        assert engine.is_legal(state, {"x": 0, "y": 3}) is False

    def test_move_along_goal_line_inside_mouth(self, engine, state):
        """Test that the ball can slide along an open goal line"""
        state["ball_position"] = {"x": 13, "y": 4}

        assert engine.is_legal(state, {"x": 13, "y": 5}) is True
        assert engine.is_legal(state, {"x": 13, "y": 3}) is False

    def test_duplicate_edge_either_direction(self, engine, state):
        """Test that an edge is blocked in both directions once drawn"""
        play(engine, state, [(7, 4)])

        result = engine.validate_move(state, 2, {"to_x": 6, "to_y": 4})

        assert result.valid is False
        assert "already been used" in result.error_message

    def test_legal_moves_from_with_extra_edges(self, engine, state):
        """Test look-ahead without mutating the state"""
        drawn = engine.edge_key({"x": 6, "y": 4}, {"x": 7, "y": 4})

        moves = engine.legal_moves_from(state, {"x": 7, "y": 4}, extra_edges=[drawn])

        assert len(moves) == 7
        assert {"x": 6, "y": 4} not in moves
        assert drawn not in state["visited_edges"]


class TestSoccerEngineTurns:
    """Tests for move execution and turn resolution"""

    def test_apply_move_basic(self, engine, state):
        """Test applying a basic move"""
        outcome = engine.process_move(state, 1, {"to_x": 7, "to_y": 4})

        assert outcome.accepted is True
        assert outcome.extra_turn is False
        assert outcome.result == GameResult.IN_PROGRESS
        assert state["ball_position"] == {"x": 7, "y": 4}
        assert state["move_count"] == 1
        assert len(state["lines"]) == 37
        assert state["lines"][-1] == {"from": {"x": 6, "y": 4}, "to": {"x": 7, "y": 4}, "player": 1}
        assert "7,4" in state["visited_points"]
        assert engine.current_player_id == 2
        assert state["current_player"] == 2

    def test_apply_move_with_direction(self, engine, state):
        """Test applying a move using a direction"""
        engine.process_move(state, 1, {"direction": "N"})

        assert state["ball_position"] == {"x": 6, "y": 3}

    def test_rejected_move_leaves_state_untouched(self, engine, state):
        """Test that a rejected move does not mutate anything"""
        outcome = engine.process_move(state, 2, {"to_x": 7, "to_y": 4})

        assert outcome.accepted is False
        assert "not your turn" in outcome.error_message
        assert state["ball_position"] == {"x": 6, "y": 4}
        assert len(state["lines"]) == 36
        assert engine.current_player_id == 1

    def test_extra_turn_on_visited_point(self, engine, state):
        """Test that landing on a visited point keeps the turn"""
        outcomes = play(engine, state, [(7, 4), (7, 5), (6, 4)])

        assert outcomes[-1].accepted is True
        assert outcomes[-1].extra_turn is True
        assert state["extra_turn_awarded"] is True
        assert engine.current_player_id == 1

        # The next fresh point hands the turn over again
        outcome = engine.process_move(state, 1, {"to_x": 5, "to_y": 4})
        assert outcome.extra_turn is False
        assert engine.current_player_id == 2

    def test_fresh_points_alternate_players(self, engine, state):
        """Test that every fresh point flips the turn"""
        players = []
        for x, y in [(7, 4), (8, 4), (9, 4)]:
            players.append(engine.current_player_id)
            engine.process_move(state, engine.current_player_id, {"to_x": x, "to_y": y})

        assert players == [1, 2, 1]
        assert engine.current_player_id == 2

    def test_rejects_duplicate_edge_scenario(self, engine, state):
        """Test the classic immediate take-back is rejected"""
        play(engine, state, [(7, 4)])

        outcome = engine.process_move(state, 2, {"to_x": 6, "to_y": 4})

        assert outcome.accepted is False
        assert engine.current_player_id == 2


class TestSoccerEngineResult:
    """Tests for win detection"""

    def test_check_game_result_in_progress(self, engine, state):
        """Test game result when game is still in progress"""
        result, winner = engine.check_game_result(state)

        assert result == GameResult.IN_PROGRESS
        assert winner is None

    def test_player_one_scores_right_goal(self, engine, state):
        """Test player 1 scoring through the right goal mouth"""
        outcomes = play(engine, state, [(7, 4), (8, 4), (9, 4), (10, 4), (11, 4), (12, 4), (13, 4)])

        assert all(outcome.accepted for outcome in outcomes)
        assert outcomes[-1].result == GameResult.PLAYER_WIN
        assert outcomes[-1].winner_id == 1
        assert outcomes[-1].extra_turn is False
        assert state["end_reason"] == "goal"
        assert state["result"] == "player_win"
        assert engine.current_player_id == 1

    def test_player_two_scores_left_goal(self, engine, state):
        """Test player 2 scoring through the left goal mouth"""
        outcomes = play(engine, state, [(5, 4), (4, 4), (3, 4), (2, 4), (1, 4), (0, 4)])

        assert outcomes[-1].winner_id == 2
        assert engine.game_result == GameResult.PLAYER_WIN
        assert engine.current_player_id == 2

    def test_own_goal_does_not_win(self, engine, state):
        """Test player 1 entering the left goal mouth is just a move"""
        state["ball_position"] = {"x": 1, "y": 4}

        outcome = engine.process_move(state, 1, {"to_x": 0, "to_y": 4})

        assert outcome.accepted is True
        assert outcome.result == GameResult.IN_PROGRESS
        assert engine.current_player_id == 2

    def test_player_one_grazing_win(self, engine, state):
        """Test player 1 winning at the point in front of the lower right post"""
        outcomes = play(engine, state, [(7, 5), (8, 6), (9, 7), (10, 7), (11, 7), (12, 6), (12, 7)])

        assert outcomes[-1].result == GameResult.PLAYER_WIN
        assert outcomes[-1].winner_id == 1
        assert state["end_reason"] == "goal"

    def test_player_two_grazing_win(self, engine, state):
        """Test player 2 winning at the point in front of the lower left post"""
        outcomes = play(engine, state, [(5, 5), (4, 6), (3, 7), (2, 7), (1, 6), (1, 7)])

        assert outcomes[-1].result == GameResult.PLAYER_WIN
        assert outcomes[-1].winner_id == 2

    def test_grazing_point_is_not_symmetric(self, engine, state):
        """Test that the opponent's graze point and the mirrored upper point do not win"""
        state["ball_position"] = {"x": 2, "y": 7}
        outcome = engine.process_move(state, 1, {"to_x": 1, "to_y": 7})
        assert outcome.result == GameResult.IN_PROGRESS

        state["ball_position"] = {"x": 11, "y": 7}
        outcome = engine.process_move(state, 2, {"to_x": 12, "to_y": 7})
        assert outcome.result == GameResult.IN_PROGRESS

        state["ball_position"] = {"x": 11, "y": 3}
        outcome = engine.process_move(state, 1, {"to_x": 12, "to_y": 2})
        assert outcome.result == GameResult.IN_PROGRESS

    def test_no_moves_loses_for_side_to_move(self, engine, state):
        """Test that the player left without a legal move loses"""
        state["ball_position"] = {"x": 2, "y": 1}
        block_edges(engine, state, [((1, 1), (2, 2)), ((1, 1), (1, 2))])

        outcome = engine.process_move(state, 1, {"to_x": 1, "to_y": 1})

        assert outcome.result == GameResult.PLAYER_WIN
        assert outcome.winner_id == 1
        assert state["end_reason"] == "no_moves"

    def test_no_moves_after_extra_turn_loses_for_mover(self, engine, state):
        """Test that a stuck player keeping the turn loses"""
        state["ball_position"] = {"x": 2, "y": 1}
        state["visited_points"].append("1,1")
        block_edges(engine, state, [((1, 1), (2, 2)), ((1, 1), (1, 2))])

        outcome = engine.process_move(state, 1, {"to_x": 1, "to_y": 1})

        assert outcome.result == GameResult.PLAYER_WIN
        assert outcome.winner_id == 2
        assert outcome.extra_turn is False
        assert engine.current_player_id == 2
        assert state["current_player"] == 2

    def test_moves_rejected_after_win(self, engine, state):
        """Test that the result is final until a new game"""
        play(engine, state, [(7, 4), (8, 4), (9, 4), (10, 4), (11, 4), (12, 4), (13, 4)])

        outcome = engine.process_move(state, 1, {"to_x": 12, "to_y": 5})
        assert outcome.accepted is False
        assert "already ended" in outcome.error_message

        outcome = engine.process_move(state, 2, {"to_x": 12, "to_y": 5})
        assert outcome.accepted is False

    def test_forfeit(self, engine, state):
        """Test forfeiting hands the win to the opponent"""
        result, winner = engine.forfeit_game(1)

        assert result == GameResult.FORFEIT
        assert winner == 2
        assert engine.process_move(state, 1, {"to_x": 7, "to_y": 4}).accepted is False
