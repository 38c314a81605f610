"""
Bullet kind profiles
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union


class BulletKind(Enum):
    """Projectile profile selectable through pickups"""
    DEFAULT = "default"
    STAR = "star"
    HEART = "heart"
    LASER = "laser"


class Owner(Enum):
    """Which side fired a projectile"""
    PLAYER = "player"
    ENEMY = "enemy"


@dataclass(frozen=True)
class BulletProfile:
    speed: float
    width: float
    damage: int
    color: str
    shape: str


BULLET_TYPES = {
    BulletKind.DEFAULT: BulletProfile(speed=10, width=4, damage=10, color="#00f3ff", shape="circle"),
    BulletKind.STAR: BulletProfile(speed=15, width=12, damage=15, color="#ffff00", shape="star"),
    BulletKind.HEART: BulletProfile(speed=8, width=16, damage=20, color="#ff69b4", shape="heart"),
    BulletKind.LASER: BulletProfile(speed=25, width=8, damage=8, color="#00ff00", shape="line"),
}

# Kinds a bullet package can grant
SPECIAL_KINDS = (BulletKind.STAR, BulletKind.HEART, BulletKind.LASER)


def bullet_kind(kind: Union[BulletKind, str]) -> BulletKind:
    """Resolve a kind or its config key, failing loudly on unknown names"""
    if isinstance(kind, BulletKind):
        return kind
    try:
        return BulletKind(str(kind).lower())
    except ValueError:
        raise ValueError(f"Unknown bullet kind: {kind}") from None


def bullet_profile(kind: Union[BulletKind, str]) -> BulletProfile:
    return BULLET_TYPES[bullet_kind(kind)]
