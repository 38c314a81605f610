"""
Timer-driven spawning of enemies and pickups
"""

import logging
import random
from typing import Optional

from .bullets import SPECIAL_KINDS
from .entities import Enemy, BulletPackage, FirstAidKit

logger = logging.getLogger(__name__)


class Spawner:
    """
    Fixed-interval spawn timers.

    Each timer accumulates the frame delta (ms) and fires once it exceeds its
    interval. Firing resets the timer to zero, so a long stalled frame yields
    a single spawn and the overshoot is dropped.
    """

    def __init__(
        self,
        enemy_interval: float = 2000.0,
        bullet_package_interval: float = 8000.0,
        first_aid_interval: float = 10000.0,
        pickup_margin: float = 100.0,
        ammo_range: tuple = (20, 50),
        heal_amount: float = 30.0,
        pickup_lifespan: float = 15000.0,
        rng: Optional[random.Random] = None,
    ):
        assert enemy_interval > 0 and bullet_package_interval > 0 and first_aid_interval > 0
        assert ammo_range[0] <= ammo_range[1]

        self.enemy_interval = enemy_interval
        self.bullet_package_interval = bullet_package_interval
        self.first_aid_interval = first_aid_interval
        self.pickup_margin = pickup_margin
        self.ammo_range = ammo_range
        self.heal_amount = heal_amount
        self.pickup_lifespan = pickup_lifespan
        self.rng = rng or random.Random()

        self.enemy_timer = 0.0
        self.bullet_package_timer = 0.0
        self.first_aid_timer = 0.0

    def reset(self):
        self.enemy_timer = 0.0
        self.bullet_package_timer = 0.0
        self.first_aid_timer = 0.0

    def update(self, state, dt: float, now: float):
        """Advance all timers by dt and spawn into the state's collections"""
        self.enemy_timer += dt
        if self.enemy_timer > self.enemy_interval:
            state.enemies.append(self.spawn_enemy(state))
            self.enemy_timer = 0.0

        self.bullet_package_timer += dt
        if self.bullet_package_timer > self.bullet_package_interval:
            state.bullet_packages.append(self.spawn_bullet_package(state, now))
            self.bullet_package_timer = 0.0

        self.first_aid_timer += dt
        if self.first_aid_timer > self.first_aid_interval:
            state.first_aid_kits.append(self.spawn_first_aid_kit(state, now))
            self.first_aid_timer = 0.0

    def spawn_enemy(self, state) -> Enemy:
        # Just outside a random screen edge
        enemy = Enemy(x=0.0, y=0.0, target=state.player)
        r = enemy.radius
        side = self.rng.choice(["top", "bottom", "left", "right"])

        if side == "top":
            enemy.x = self.rng.uniform(0, state.width)
            enemy.y = -r
        elif side == "bottom":
            enemy.x = self.rng.uniform(0, state.width)
            enemy.y = state.height + r
        elif side == "left":
            enemy.x = -r
            enemy.y = self.rng.uniform(0, state.height)
        else:
            enemy.x = state.width + r
            enemy.y = self.rng.uniform(0, state.height)

        logger.debug(f"Enemy spawned on {side} edge at ({enemy.x:.0f}, {enemy.y:.0f})")
        return enemy

    def _interior_point(self, state):
        m = self.pickup_margin
        x = self.rng.uniform(m, max(m, state.width - m))
        y = self.rng.uniform(m, max(m, state.height - m))
        return x, y

    def spawn_bullet_package(self, state, now: float) -> BulletPackage:
        x, y = self._interior_point(state)
        kind = self.rng.choice(SPECIAL_KINDS)
        ammo = self.rng.randint(*self.ammo_range)
        logger.debug(f"Bullet package ({kind.value} x{ammo}) spawned at ({x:.0f}, {y:.0f})")
        return BulletPackage(
            x=x, y=y, kind=kind, ammo_count=ammo,
            spawn_time=now, lifespan=self.pickup_lifespan,
        )

    def spawn_first_aid_kit(self, state, now: float) -> FirstAidKit:
        x, y = self._interior_point(state)
        logger.debug(f"First aid kit spawned at ({x:.0f}, {y:.0f})")
        return FirstAidKit(
            x=x, y=y, heal_amount=self.heal_amount,
            spawn_time=now, lifespan=self.pickup_lifespan,
        )
