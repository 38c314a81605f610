"""
Per-tick combat resolution: movement, collisions, damage and pickups.

The order of the passes is fixed so that a seeded game replays identically:

1. projectiles advance (out-of-bounds ones are marked)
2. pickups bob, expire, and are collected by the player
3. enemies steer toward the player and try to fire
4. enemy bodies deal contact damage to the player
5. player projectiles destroy enemies
6. enemy projectiles damage the player
7. a dead player explodes
8. particles drift and fade

Nothing is removed while a pass iterates. Entities are only marked, and
every collection is compacted once at the end of the tick.
"""

import logging

from .bullets import Owner
from .entities import Particle
from .utils import circle_collision, random_range

logger = logging.getLogger(__name__)

CONTACT_DAMAGE = 1
KILL_SCORE = 100
EXPLOSION_PARTICLES = 10
HIT_COLOR = "#ff0000"


def create_explosion(state, x: float, y: float, color: str, count: int = EXPLOSION_PARTICLES):
    rng = state.rng
    for _ in range(count):
        state.particles.append(Particle(
            x=x,
            y=y,
            radius=random_range(0, 3, rng),
            color=color,
            vx=random_range(-2.5, 2.5, rng),
            vy=random_range(-2.5, 2.5, rng),
        ))


def advance_projectiles(state):
    for p in state.projectiles:
        if not p.marked_for_deletion:
            p.update(state.width, state.height)


def advance_pickups(state, now: float):
    player = state.player
    for pickup in state.pickups():
        if pickup.marked_for_deletion:
            continue
        pickup.update(now)
        if pickup.marked_for_deletion:
            continue
        if circle_collision(player, pickup):
            pickup.apply(player)
            pickup.marked_for_deletion = True
            state.pickups_collected += 1


def advance_enemies(state, now: float):
    for enemy in state.enemies:
        if enemy.marked_for_deletion:
            continue
        enemy.update()
        enemy.shoot(state.projectiles, now)


def apply_contact_damage(state):
    # Per tick, not per second: overlap damage scales with frame rate
    player = state.player
    for enemy in state.enemies:
        if enemy.marked_for_deletion:
            continue
        if circle_collision(player, enemy):
            state.damage_taken += player.damage(CONTACT_DAMAGE)


def resolve_player_hits(state):
    for enemy in state.enemies:
        if enemy.marked_for_deletion:
            continue
        for p in state.projectiles:
            if p.marked_for_deletion or p.owner is not Owner.PLAYER:
                continue
            if circle_collision(p, enemy):
                create_explosion(state, enemy.x, enemy.y, enemy.color)
                enemy.marked_for_deletion = True
                p.marked_for_deletion = True
                state.score += KILL_SCORE
                state.kills += 1
                break


def resolve_enemy_hits(state):
    player = state.player
    for p in state.projectiles:
        if p.marked_for_deletion or p.owner is not Owner.ENEMY:
            continue
        if circle_collision(p, player):
            create_explosion(state, player.x, player.y, HIT_COLOR)
            p.marked_for_deletion = True
            state.damage_taken += player.damage(p.damage)


def advance_particles(state):
    for p in state.particles:
        if not p.marked_for_deletion:
            p.update()


def cull(state):
    state.projectiles = [p for p in state.projectiles if not p.marked_for_deletion]
    state.enemies = [e for e in state.enemies if not e.marked_for_deletion]
    state.particles = [p for p in state.particles if not p.marked_for_deletion]
    state.bullet_packages = [b for b in state.bullet_packages if not b.marked_for_deletion]
    state.first_aid_kits = [k for k in state.first_aid_kits if not k.marked_for_deletion]


def resolve(state, now: float) -> bool:
    """
    Run one tick of combat over the state's collections.

    Returns True when the player died this tick.
    """
    advance_projectiles(state)
    advance_pickups(state, now)
    advance_enemies(state, now)
    apply_contact_damage(state)
    resolve_player_hits(state)
    resolve_enemy_hits(state)

    player_died = state.player.health <= 0
    if player_died:
        create_explosion(state, state.player.x, state.player.y, state.player.color)
        logger.info(f"Player destroyed at ({state.player.x:.0f}, {state.player.y:.0f})")

    advance_particles(state)
    cull(state)
    return player_died
