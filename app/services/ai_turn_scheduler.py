# app/services/ai_turn_scheduler.py

import asyncio
import logging
from typing import List, Optional
from services.match_service import MatchService
from services.game_engine_interface import MoveOutcome
from schemas.game_schema import FieldSize

logger = logging.getLogger(__name__)


class AITurnScheduler:
    """
    Paces AI moves for an interactive caller.

    After every accepted human move (or a new game) the caller calls
    schedule(). If the AI is to move, a task waits the configured delay and
    then plays, continuing while the AI keeps the turn. A result computed for
    a game that has since been replaced is dropped, never applied.
    """

    def __init__(self, match: MatchService, delay_seconds: Optional[float] = None,
                 transition_seconds: Optional[float] = None):
        self.match = match
        self.delay_seconds = match.settings.AI_MOVE_DELAY_SECONDS if delay_seconds is None else delay_seconds
        self.transition_seconds = (
            match.settings.RESIZE_TRANSITION_SECONDS if transition_seconds is None else transition_seconds
        )
        self._task: Optional[asyncio.Task] = None
        self._task_generation: Optional[int] = None

    @property
    def is_pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def schedule(self) -> Optional[asyncio.Task]:
        """Start the AI turn if it is the AI's move and nothing is pending already"""
        if not self.match.is_ai_turn:
            return None
        if self.is_pending:
            if self._task_generation == self.match.generation:
                return self._task
            # Pending turn belongs to a replaced game
            self.cancel()

        self._task_generation = self.match.generation
        self._task = asyncio.create_task(self._run(self._task_generation))
        return self._task

    def cancel(self):
        """Drop any pending AI move"""
        if self.is_pending:
            self._task.cancel()
            logger.info("Pending AI move cancelled")
        self._task = None
        self._task_generation = None

    async def wait(self) -> List[MoveOutcome]:
        """Wait for the pending AI turn, if any, and return its outcomes"""
        if self._task is None:
            return []
        try:
            return await self._task
        except asyncio.CancelledError:
            return []

    async def resize(self, direction: int) -> Optional[FieldSize]:
        """
        Resize with a transition: the field is marked busy for the transition
        time, any pending AI move is discarded, then the new game starts.
        """
        if self.match.is_resizing:
            logger.warning(f"Ignoring resize({direction}): a resize is already in progress")
            return None

        self.match.is_resizing = True
        try:
            self.cancel()
            await asyncio.sleep(self.transition_seconds)
            preset = self.match.apply_resize(direction)
        finally:
            self.match.is_resizing = False

        self.schedule()
        return preset

    async def _run(self, generation: int) -> List[MoveOutcome]:
        outcomes = []
        try:
            while True:
                await asyncio.sleep(self.delay_seconds)

                if generation != self.match.generation:
                    logger.warning(f"Discarding AI move for superseded game {generation}")
                    break
                if not self.match.is_ai_turn:
                    break

                outcome = self.match.play_ai_turn()
                if outcome is None:
                    break
                outcomes.append(outcome)

                if not outcome.accepted:
                    logger.warning(f"AI move rejected: {outcome.error_message}")
                    break
                if not outcome.extra_turn:
                    break
        except Exception as e:
            logger.error(f"Error while playing AI turn: {e}", exc_info=True)
            raise
        return outcomes
