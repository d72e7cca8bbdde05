# app/services/games/pitch_geometry.py

from typing import Dict, Any, List, Tuple
from exceptions.domain_exceptions import ValidationException


class PitchGeometry:
    """
    Static geometry of a paper soccer field.

    The field is a grid of (cols + 1) x (rows + 1) points. Goals sit on the
    left (x = 0) and right (x = cols) sides, spanning the goal band
    [rows // 3, 2 * rows // 3]. Boundary lines frame the field everywhere
    except along the goal mouths.
    """

    MIN_ROWS = 3
    MIN_COLS = 2

    def __init__(self, rows: int, cols: int):
        if rows < self.MIN_ROWS or cols < self.MIN_COLS:
            raise ValidationException(
                message=f"Field must be at least {self.MIN_ROWS} rows by {self.MIN_COLS} cols",
                details={"rows": rows, "cols": cols}
            )
        self._rows = rows
        self._cols = cols
        self._goal_low = rows // 3
        self._goal_high = (2 * rows) // 3

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def goal_low(self) -> int:
        return self._goal_low

    @property
    def goal_high(self) -> int:
        return self._goal_high

    @property
    def goal_band_height(self) -> int:
        """Number of points in each goal band, both ends included"""
        return self._goal_high - self._goal_low + 1

    @property
    def center(self) -> Dict[str, int]:
        return {"x": self._cols // 2, "y": self._rows // 2}

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x <= self._cols and 0 <= y <= self._rows

    def is_boundary_point(self, x: int, y: int) -> bool:
        """Points on the outer frame of the field, goal lines included"""
        return x in (0, self._cols) or y in (0, self._rows)

    def in_goal_band(self, y: int) -> bool:
        return self._goal_low <= y <= self._goal_high

    def inside_goal_mouth(self, y: int) -> bool:
        """Strictly between the goal posts, where the frame may be crossed"""
        return self._goal_low < y < self._goal_high

    def boundary_lines(self) -> List[Dict[str, Any]]:
        """Pre-seeded frame lines, owned by player 0"""
        lines = []
        for i in range(self._rows):
            if i < self._goal_low or i > self._goal_high:
                lines.append(self._line((0, i), (0, i + 1)))
                lines.append(self._line((self._cols, i), (self._cols, i + 1)))
        for j in range(self._cols):
            lines.append(self._line((j, 0), (j + 1, 0)))
            lines.append(self._line((j, self._rows), (j + 1, self._rows)))
        return lines

    def to_dict(self) -> Dict[str, int]:
        return {
            "rows": self._rows,
            "cols": self._cols,
            "goal_low": self._goal_low,
            "goal_high": self._goal_high,
        }

    @staticmethod
    def _line(start: Tuple[int, int], end: Tuple[int, int]) -> Dict[str, Any]:
        return {
            "from": {"x": start[0], "y": start[1]},
            "to": {"x": end[0], "y": end[1]},
            "player": 0,
        }
