"""
TankEnv - gymnasium adapter around the tank game loop
-----------------------------------------------------
- One env step = one game tick on a simulated clock
- Discrete MultiDiscrete action space: [move(9), fire(2), aim(8)]
- Vector observation: player state + top-K nearest enemies
  + top-M nearest pickups + top-N nearest enemy projectiles
- Reward from score gained, pickups, damage taken and death

Quick test:
    python -m game.tanks.tank_env
"""

from __future__ import annotations

import math
from typing import List, Optional, Dict, Any

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from .bullets import BulletKind, Owner
from .entities import BulletPackage
from .game_state import TankGame, GamePhase, InputSnapshot
from .utils import clamp, seed_everything
from game.configs.tank_config import ENV_CONFIG, SPAWN_CONFIG, REWARD_CONFIG

# move index -> (up, down, left, right)
MOVES = [
    (False, False, False, False),  # stay
    (True, False, False, False),   # up
    (False, True, False, False),   # down
    (False, False, True, False),   # left
    (False, False, False, True),   # right
    (True, False, True, False),    # up-left
    (True, False, False, True),    # up-right
    (False, True, True, False),    # down-left
    (False, True, False, True),    # down-right
]

AIM_REACH = 100.0
MAX_AMMO = 50


class TankEnv(gym.Env):
    """Tank survival game exposed through the Gymnasium API"""

    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 60}

    def __init__(
        self,
        render_mode: Optional[str] = None,
        width: int = 800,
        height: int = 600,
        dt: float = 1000 / 60,  # ms per step
        max_steps: int = 3600,
        k_enemies: int = 5,
        m_pickups: int = 3,
        n_projectiles: int = 5,
        spawn_config: Optional[Dict[str, Any]] = None,
        reward_config: Optional[Dict[str, float]] = None,
    ):
        super().__init__()

        assert render_mode is None or render_mode in self.metadata["render_modes"]
        assert dt > 0, "dt must be positive"
        self.render_mode = render_mode

        self.width = width
        self.height = height
        self.dt = dt
        self.max_steps = max_steps

        self.k_enemies = k_enemies
        self.m_pickups = m_pickups
        self.n_projectiles = n_projectiles

        self.spawn_config = dict(SPAWN_CONFIG, **(spawn_config or {}))
        self.reward_config = dict(REWARD_CONFIG, **(reward_config or {}))

        self.action_space = spaces.MultiDiscrete([len(MOVES), 2, 8])

        # Player: pos(2) health(1) cooldown(1) special(1) ammo(1)
        # Each enemy: rel pos(2)
        # Each pickup: rel pos(2) type(1)
        # Each enemy projectile: rel pos(2) vel(2)
        obs_dim = 6 + (self.k_enemies * 2) + (self.m_pickups * 3) + (self.n_projectiles * 4)
        self.observation_space = spaces.Box(
            low=-1.0, high=1.0, shape=(obs_dim,), dtype=np.float32
        )

        self._aim_dirs = []
        for i in range(8):
            ang = (math.pi * 2) * (i / 8.0)
            self._aim_dirs.append((math.cos(ang), math.sin(ang)))

        self.game: TankGame = None  # type: ignore
        self._now = 0.0
        self._step_count = 0
        self._last_counters: Dict[str, float] = {}

        self._window = None

    # ----------------------------
    # Gym API
    # ----------------------------

    def reset(self, seed: Optional[int] = None, options: Optional[dict] = None):
        super().reset(seed=seed)
        seed_everything(seed)

        game_seed = int(self.np_random.integers(0, 2**31 - 1))
        self.game = TankGame(
            width=self.width,
            height=self.height,
            seed=game_seed,
            spawn_config=self.spawn_config,
        )
        self.game.start()

        self._now = 0.0
        self._step_count = 0
        self._last_counters = self._counters()

        return self._get_obs(), self._get_info()

    def step(self, action):
        assert self.game is not None, "Call reset() before step()"
        assert self.action_space.contains(np.asarray(action, dtype=np.int64)), f"Invalid action: {action}"

        move, fire, aim = int(action[0]), int(action[1]), int(action[2])
        snapshot = self._snapshot(move, fire, aim)

        was_active = self.game.phase is GamePhase.ACTIVE
        self._now += self.dt
        self.game.tick(snapshot, self._now, self.dt)

        terminated = self.game.phase is GamePhase.GAME_OVER
        reward = self._compute_reward(died=was_active and terminated)

        self._step_count += 1
        truncated = self._step_count >= self.max_steps

        obs = self._get_obs()
        info = self._get_info()

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, truncated, info

    # ----------------------------
    # Action / observation / reward
    # ----------------------------

    def _snapshot(self, move: int, fire: int, aim: int) -> InputSnapshot:
        up, down, left, right = MOVES[move]
        player = self.game.player
        dx, dy = self._aim_dirs[aim % 8]
        return InputSnapshot(
            up=up, down=down, left=left, right=right,
            aim_x=player.x + dx * AIM_REACH,
            aim_y=player.y + dy * AIM_REACH,
            fire=bool(fire),
        )

    def _rel(self, x: float, y: float) -> List[float]:
        player = self.game.player
        return [clamp((x - player.x) / self.width, -1, 1),
                clamp((y - player.y) / self.height, -1, 1)]

    def _nearest(self, entities, n: int):
        player = self.game.player
        return sorted(
            entities,
            key=lambda e: (e.x - player.x) ** 2 + (e.y - player.y) ** 2
        )[:n]

    def _get_obs(self) -> np.ndarray:
        state = self.game.state
        player = state.player

        cooldown = clamp((self._now - player.last_shot) / player.fire_rate, 0.0, 1.0)
        special = player.bullet_kind is not BulletKind.DEFAULT

        obs_parts = [
            (player.x / self.width) * 2 - 1,
            (player.y / self.height) * 2 - 1,
            (player.health / player.max_health) * 2 - 1,
            cooldown * 2 - 1,
            1.0 if special else -1.0,
            clamp(player.special_ammo / MAX_AMMO, 0.0, 1.0) * 2 - 1,
        ]

        enemies = self._nearest(state.enemies, self.k_enemies)
        for i in range(self.k_enemies):
            if i < len(enemies):
                obs_parts += self._rel(enemies[i].x, enemies[i].y)
            else:
                obs_parts += [0.0, 0.0]

        pickups = self._nearest(state.pickups(), self.m_pickups)
        for i in range(self.m_pickups):
            if i < len(pickups):
                p = pickups[i]
                obs_parts += self._rel(p.x, p.y)
                obs_parts.append(1.0 if isinstance(p, BulletPackage) else -1.0)
            else:
                obs_parts += [0.0, 0.0, 0.0]

        hostile = [p for p in state.projectiles if p.owner is Owner.ENEMY]
        hostile = self._nearest(hostile, self.n_projectiles)
        for i in range(self.n_projectiles):
            if i < len(hostile):
                p = hostile[i]
                obs_parts += self._rel(p.x, p.y)
                obs_parts += [clamp(p.vx / 25.0, -1, 1), clamp(p.vy / 25.0, -1, 1)]
            else:
                obs_parts += [0.0, 0.0, 0.0, 0.0]

        return np.array(obs_parts, dtype=np.float32)

    def _counters(self) -> Dict[str, float]:
        state = self.game.state
        return {
            "score": float(state.score),
            "pickups": float(state.pickups_collected),
            "damage": float(state.damage_taken),
            "shots": float(state.shots_fired),
        }

    def _compute_reward(self, died: bool = False) -> float:
        rc = self.reward_config
        counters = self._counters()
        delta = {k: counters[k] - self._last_counters[k] for k in counters}
        self._last_counters = counters

        reward = 0.0
        reward += rc["R_SCORE"] * delta["score"]
        reward += rc["R_PICKUP"] * delta["pickups"]
        reward -= rc["R_DAMAGE"] * delta["damage"]
        reward -= rc["R_SHOT"] * delta["shots"]
        reward -= rc["R_TIME"]

        if died:
            reward -= rc["R_DEATH"]

        return float(reward)

    def _get_info(self) -> Dict[str, Any]:
        state = self.game.state
        return {
            "score": state.score,
            "health": state.player.health,
            "bullet_kind": state.player.bullet_kind.value,
            "special_ammo": state.player.special_ammo,
            "enemies_killed": state.kills,
            "damage_taken": state.damage_taken,
            "pickups_collected": state.pickups_collected,
            "num_enemies": len(state.enemies),
            "num_projectiles": len(state.projectiles),
            "step": self._step_count,
        }

    # ----------------------------
    # Rendering with Arcade
    # ----------------------------

    def render(self):
        if self.render_mode is None or self.game is None:
            return None

        if self._window is None:
            # Deferred so headless training never needs a display
            from .window import TankWindow
            self._window = TankWindow(
                self.game, interactive=False, visible=self.render_mode == "human"
            )

        self._window.show_game(self.game)
        self._window.on_draw()

        if self.render_mode == "rgb_array":
            return self._window.grab_frame()
        return None

    def close(self):
        if self._window is not None:
            self._window.close()
            self._window = None


# ----------------------------
# Quick sanity test
# ----------------------------

def run_random_episode(render: bool = True, seed: Optional[int] = 42):
    """Run a random episode for testing"""
    env = TankEnv(render_mode="human" if render else None, **ENV_CONFIG)
    obs, info = env.reset(seed=seed)

    terminated = False
    truncated = False
    total = 0.0

    print("Running episode... close the window to exit early.")

    import time
    while not (terminated or truncated):
        action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total += reward

        if render and env._window:
            env._window.dispatch_events()
            env._window.flip()
            time.sleep(1 / 60)

    print(f"Random episode return: {total:.2f}  score: {info['score']}  steps: {info['step']}")
    env.close()
    return total, info


if __name__ == "__main__":
    run_random_episode(render=True)
