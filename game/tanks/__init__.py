"""Neon Tanks - top-down tank survival game core"""

from .game_state import TankGame, GameState, GamePhase, GameStateError, InputSnapshot, HudState
from .tank_env import TankEnv, run_random_episode

__all__ = [
    'TankGame', 'GameState', 'GamePhase', 'GameStateError', 'InputSnapshot', 'HudState',
    'TankEnv', 'run_random_episode',
]
