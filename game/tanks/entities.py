"""
Game entity dataclasses
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

from .bullets import BulletKind, Owner, BULLET_TYPES, bullet_kind
from .utils import clamp, normalize, vec_len


PLAYER_COLOR = "#00f3ff"
ENEMY_COLOR = "#ff0000"
FIRST_AID_COLOR = "#39ff14"


@dataclass
class Entity:
    """Anything with a position and a collision circle"""
    x: float
    y: float
    radius: float = 0.0
    color: str = "#ffffff"
    marked_for_deletion: bool = False

    def __post_init__(self):
        assert self.radius >= 0, "radius must be non-negative"


@dataclass
class Projectile(Entity):
    """Bullet travelling in a straight line until it leaves the playfield"""
    vx: float = 0.0
    vy: float = 0.0
    angle: float = 0.0
    owner: Owner = Owner.PLAYER
    kind: BulletKind = BulletKind.DEFAULT
    damage: int = 10

    @classmethod
    def fire(cls, x: float, y: float, angle: float, kind: BulletKind,
             owner: Owner, color: Optional[str] = None) -> "Projectile":
        profile = BULLET_TYPES[kind]
        return cls(
            x=x,
            y=y,
            radius=profile.width,
            color=color or profile.color,
            vx=math.cos(angle) * profile.speed,
            vy=math.sin(angle) * profile.speed,
            angle=angle,
            owner=owner,
            kind=kind,
            damage=profile.damage,
        )

    def update(self, width: float, height: float):
        self.x += self.vx
        self.y += self.vy

        if self.x < 0 or self.x > width or self.y < 0 or self.y > height:
            self.marked_for_deletion = True


@dataclass
class Particle(Entity):
    """Cosmetic debris that slows down and fades out"""
    vx: float = 0.0
    vy: float = 0.0
    alpha: float = 1.0
    friction: float = 0.95
    fade: float = 0.02

    def update(self):
        self.vx *= self.friction
        self.vy *= self.friction
        self.x += self.vx
        self.y += self.vy
        self.alpha -= self.fade
        if self.alpha <= 0:
            self.marked_for_deletion = True


@dataclass
class Tank(Entity):
    """Shared state for the player and enemy tanks"""
    speed: float = 0.0
    angle: float = 0.0
    turret_angle: float = 0.0
    health: float = 100.0
    max_health: float = 100.0
    last_shot: float = -math.inf  # ms
    fire_rate: float = 500.0  # ms

    def __post_init__(self):
        super().__post_init__()
        assert self.max_health > 0, "max_health must be positive"
        self.health = clamp(self.health, 0.0, self.max_health)

    @property
    def owner(self) -> Owner:
        return Owner.ENEMY

    @property
    def alive(self) -> bool:
        return self.health > 0

    @property
    def health_percent(self) -> float:
        return 100.0 * self.health / self.max_health

    def turret_tip(self):
        reach = self.radius * 1.5
        return (self.x + math.cos(self.turret_angle) * reach,
                self.y + math.sin(self.turret_angle) * reach)

    def can_shoot(self, now: float) -> bool:
        return now - self.last_shot > self.fire_rate

    def _fire(self, sink: List[Projectile], now: float, kind: BulletKind,
              color: Optional[str] = None) -> bool:
        if not self.can_shoot(now):
            return False
        tx, ty = self.turret_tip()
        sink.append(Projectile.fire(tx, ty, self.turret_angle, kind, self.owner, color))
        self.last_shot = now
        return True

    def shoot(self, sink: List[Projectile], now: float) -> bool:
        return self._fire(sink, now, BulletKind.DEFAULT, self.color)

    def damage(self, amount: float) -> float:
        """Apply damage; returns the health actually lost"""
        before = self.health
        self.health = clamp(self.health - amount, 0.0, self.max_health)
        return before - self.health

    def heal(self, amount: float) -> float:
        """Heal up to max_health; returns the amount actually restored"""
        before = self.health
        self.health = clamp(self.health + amount, 0.0, self.max_health)
        return self.health - before


@dataclass
class MovementKeys:
    up: bool = False
    down: bool = False
    left: bool = False
    right: bool = False

    def any(self) -> bool:
        return self.up or self.down or self.left or self.right


@dataclass
class Player(Tank):
    """Player tank steered by movement keys, with swappable ammo"""
    radius: float = 20.0
    color: str = PLAYER_COLOR
    speed: float = 3.0
    keys: MovementKeys = field(default_factory=MovementKeys)
    bullet_kind: BulletKind = BulletKind.DEFAULT
    special_ammo: int = 0

    def __post_init__(self):
        super().__post_init__()
        self.bullet_kind = bullet_kind(self.bullet_kind)
        assert self.bullet_kind is BulletKind.DEFAULT or self.special_ammo > 0, \
            "special bullet kinds need ammo"

    @property
    def owner(self) -> Owner:
        return Owner.PLAYER

    def update(self, width: float, height: float):
        # No diagonal normalization: diagonals move sqrt(2) faster
        if self.keys.up:
            self.y -= self.speed
        if self.keys.down:
            self.y += self.speed
        if self.keys.left:
            self.x -= self.speed
        if self.keys.right:
            self.x += self.speed

        r = self.radius
        self.x = clamp(self.x, r, width - r)
        self.y = clamp(self.y, r, height - r)

    def aim_at(self, tx: float, ty: float):
        self.turret_angle = math.atan2(ty - self.y, tx - self.x)

    def equip(self, kind, ammo: int):
        kind = bullet_kind(kind)
        if kind is BulletKind.DEFAULT or ammo <= 0:
            self.bullet_kind = BulletKind.DEFAULT
            self.special_ammo = 0
            return
        self.bullet_kind = kind
        self.special_ammo = int(ammo)

    @property
    def ammo_label(self) -> Optional[int]:
        """Remaining special ammo, or None when firing unlimited default rounds"""
        if self.bullet_kind is BulletKind.DEFAULT:
            return None
        return self.special_ammo

    def shoot(self, sink: List[Projectile], now: float) -> bool:
        if not self._fire(sink, now, self.bullet_kind):
            return False

        if self.bullet_kind is not BulletKind.DEFAULT:
            self.special_ammo -= 1
            if self.special_ammo <= 0:
                self.bullet_kind = BulletKind.DEFAULT
                self.special_ammo = 0
        return True


@dataclass
class Enemy(Tank):
    """Enemy tank that closes in on the player and holds at standoff range"""
    radius: float = 20.0
    color: str = ENEMY_COLOR
    speed: float = 1.5
    fire_rate: float = 2000.0
    standoff: float = 150.0
    target: Optional[Player] = field(default=None, repr=False, compare=False)

    def update(self):
        if self.target is None:
            return

        dx = self.target.x - self.x
        dy = self.target.y - self.y
        angle = math.atan2(dy, dx)

        self.turret_angle = angle
        self.angle = angle

        if vec_len(dx, dy) > self.standoff:
            nx, ny = normalize(dx, dy)
            self.x += nx * self.speed
            self.y += ny * self.speed


@dataclass
class Pickup(Entity, ABC):
    """Collectible that bobs in place and expires after its lifespan"""
    spawn_time: float = 0.0  # ms
    lifespan: float = 15000.0  # ms
    float_offset: float = 0.0

    def expired(self, now: float) -> bool:
        return now - self.spawn_time > self.lifespan

    def update(self, now: float):
        self.float_offset += 0.05
        if self.expired(now):
            self.marked_for_deletion = True

    @abstractmethod
    def apply(self, player: Player):
        ...


@dataclass
class BulletPackage(Pickup):
    """Grants a special bullet kind with a fixed amount of ammo"""
    radius: float = 25.0
    color: str = ""
    kind: BulletKind = BulletKind.STAR
    ammo_count: int = 20

    def __post_init__(self):
        super().__post_init__()
        self.kind = bullet_kind(self.kind)
        assert self.kind is not BulletKind.DEFAULT, "packages never carry default rounds"
        assert self.ammo_count > 0, "ammo_count must be positive"
        if not self.color:
            self.color = BULLET_TYPES[self.kind].color

    def apply(self, player: Player):
        player.equip(self.kind, self.ammo_count)


@dataclass
class FirstAidKit(Pickup):
    """Restores health, never past the player's max_health"""
    radius: float = 20.0
    color: str = FIRST_AID_COLOR
    heal_amount: float = 30.0

    def apply(self, player: Player):
        player.heal(self.heal_amount)
