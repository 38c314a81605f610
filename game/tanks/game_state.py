"""
Frame loop and game lifecycle.

TankGame owns every entity collection through an explicit GameState and is
driven by a host callback (an arcade window, a gym step, a test) that calls
``tick`` once per frame. Renderer and HUD are injected collaborators.

Lifecycle:
    IDLE --start()--> ACTIVE --player dies--> GAME_OVER --restart()--> ACTIVE
"""

import logging
import random
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional, Protocol, Dict, Any

from . import combat
from .entities import (
    Player, Enemy, Projectile, Particle, BulletPackage, FirstAidKit, MovementKeys,
)
from .spawner import Spawner

logger = logging.getLogger(__name__)


class GamePhase(Enum):
    IDLE = auto()       # Nothing spawned, no ticking
    ACTIVE = auto()     # Running, advancing every tick
    GAME_OVER = auto()  # Frozen on the final frame


class GameStateError(RuntimeError):
    """Lifecycle command issued in a phase that does not accept it"""


@dataclass
class InputSnapshot:
    """Input state polled once per tick"""
    up: bool = False
    down: bool = False
    left: bool = False
    right: bool = False
    aim_x: Optional[float] = None
    aim_y: Optional[float] = None
    fire: bool = False

    def movement_keys(self) -> MovementKeys:
        return MovementKeys(up=self.up, down=self.down, left=self.left, right=self.right)


@dataclass
class HudState:
    """What the HUD shows after a tick; ammo None means unlimited"""
    score: int
    health_percent: float
    bullet_label: str
    ammo: Optional[int]


class Renderer(Protocol):
    def draw(self, state: "GameState") -> None:
        ...


class Hud(Protocol):
    def update(self, hud: HudState) -> None:
        ...

    def game_over(self, score: int) -> None:
        ...


@dataclass
class GameState:
    """All mutable state of one game, replaced wholesale on restart"""
    width: float
    height: float
    rng: random.Random = field(default_factory=random.Random, repr=False)
    phase: GamePhase = GamePhase.IDLE
    player: Optional[Player] = None
    score: int = 0
    projectiles: List[Projectile] = field(default_factory=list)
    enemies: List[Enemy] = field(default_factory=list)
    particles: List[Particle] = field(default_factory=list)
    bullet_packages: List[BulletPackage] = field(default_factory=list)
    first_aid_kits: List[FirstAidKit] = field(default_factory=list)

    # Per-game counters
    tick_count: int = 0
    kills: int = 0
    shots_fired: int = 0
    damage_taken: float = 0.0
    pickups_collected: int = 0

    def pickups(self) -> list:
        return [*self.bullet_packages, *self.first_aid_kits]

    def clear(self):
        self.player = None
        self.score = 0
        self.projectiles = []
        self.enemies = []
        self.particles = []
        self.bullet_packages = []
        self.first_aid_kits = []
        self.tick_count = 0
        self.kills = 0
        self.shots_fired = 0
        self.damage_taken = 0.0
        self.pickups_collected = 0


class TankGame:
    """
    The per-frame game loop.

    Usage:
        game = TankGame(width=800, height=600, renderer=r, hud=h)
        game.start()
        while game.phase is GamePhase.ACTIVE:
            game.tick(input_source.poll(), clock.now(), clock.dt())
    """

    def __init__(
        self,
        width: float = 800,
        height: float = 600,
        renderer: Optional[Renderer] = None,
        hud: Optional[Hud] = None,
        seed: Optional[int] = None,
        spawn_config: Optional[Dict[str, Any]] = None,
    ):
        assert width > 0 and height > 0, "playfield must have a positive size"

        self.rng = random.Random(seed)
        self.spawner = Spawner(rng=self.rng, **(spawn_config or {}))
        self.state = GameState(width=width, height=height, rng=self.rng)
        self.renderer = renderer
        self.hud = hud

    @property
    def phase(self) -> GamePhase:
        return self.state.phase

    @property
    def player(self) -> Optional[Player]:
        return self.state.player

    @property
    def score(self) -> int:
        return self.state.score

    # ----------------------------
    # Lifecycle
    # ----------------------------

    def start(self):
        """Begin a fresh game; valid from IDLE or GAME_OVER"""
        if self.state.phase is GamePhase.ACTIVE:
            raise GameStateError("Cannot start: a game is already running")

        self.state.clear()
        self.state.player = Player(x=self.state.width / 2, y=self.state.height / 2)
        self.spawner.reset()
        self.state.phase = GamePhase.ACTIVE
        logger.info(f"Game started on a {self.state.width:.0f}x{self.state.height:.0f} field")

        if self.hud is not None:
            self.hud.update(self.hud_state())

    def restart(self):
        """Full reset into a new ACTIVE game (never a resume)"""
        self.start()

    # ----------------------------
    # Tick
    # ----------------------------

    def tick(self, snapshot: InputSnapshot, now: float, dt: float) -> bool:
        """
        Advance the game by one frame.

        Args:
            snapshot: Input state for this frame
            now: Monotonic clock in ms (cooldowns, pickup lifespans)
            dt: Time since the previous frame in ms (spawn timers)

        Returns:
            False when the game is not ACTIVE and nothing happened
        """
        if self.state.phase is not GamePhase.ACTIVE:
            return False

        state = self.state
        player = state.player

        player.keys = snapshot.movement_keys()
        if snapshot.aim_x is not None and snapshot.aim_y is not None:
            player.aim_at(snapshot.aim_x, snapshot.aim_y)
        player.update(state.width, state.height)
        if snapshot.fire and player.shoot(state.projectiles, now):
            state.shots_fired += 1

        self.spawner.update(state, dt, now)

        player_died = combat.resolve(state, now)
        state.tick_count += 1

        if player_died:
            state.phase = GamePhase.GAME_OVER
            logger.info(f"Game over after {state.tick_count} ticks, score {state.score}")

        if self.renderer is not None:
            self.renderer.draw(state)
        if self.hud is not None:
            self.hud.update(self.hud_state())
            if player_died:
                self.hud.game_over(state.score)

        return True

    def hud_state(self) -> HudState:
        player = self.state.player
        return HudState(
            score=self.state.score,
            health_percent=player.health_percent,
            bullet_label=player.bullet_kind.value.upper(),
            ammo=player.ammo_label,
        )
