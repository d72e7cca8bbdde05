# app/services/games/__init__.py

from services.games.pitch_geometry import PitchGeometry
from services.games.soccer_engine import SoccerEngine

__all__ = ["PitchGeometry", "SoccerEngine"]
