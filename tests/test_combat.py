"""
Tests for per-tick combat resolution.
"""
import math
import random

import pytest
from game.tanks import combat
from game.tanks.bullets import BulletKind, Owner
from game.tanks.entities import (
    Player, Enemy, Projectile, BulletPackage, FirstAidKit, PLAYER_COLOR,
)
from game.tanks.game_state import GameState


@pytest.fixture
def state():
    return GameState(width=800, height=600, rng=random.Random(0), player=Player(x=400, y=300))


def quiet_enemy(x, y, player, now):
    """Enemy that cannot fire during the test tick."""
    return Enemy(x=x, y=y, target=player, last_shot=now)


class TestProjectiles:
    """Tests for projectile movement and culling."""

    def test_out_of_bounds_projectile_culled(self, state):
        state.projectiles.append(Projectile.fire(795, 100, 0.0, BulletKind.DEFAULT, Owner.PLAYER))
        combat.resolve(state, now=100)
        assert state.projectiles == []

    def test_player_projectile_kills_enemy(self, state):
        """Hit destroys both, awards 100 and spawns an explosion."""
        now = 100
        enemy = quiet_enemy(200, 200, state.player, now)
        state.enemies.append(enemy)
        state.projectiles.append(Projectile.fire(190, 200, 0.0, BulletKind.DEFAULT, Owner.PLAYER))

        assert not combat.resolve(state, now)

        assert state.enemies == []
        assert state.projectiles == []
        assert state.score == 100
        assert state.kills == 1
        assert len(state.particles) == 10
        assert all(p.color == enemy.color for p in state.particles)

    def test_one_projectile_per_enemy(self, state):
        """A dead enemy does not absorb a second projectile."""
        now = 100
        state.enemies.append(quiet_enemy(200, 200, state.player, now))
        state.projectiles.append(Projectile(x=200, y=200, radius=4, owner=Owner.PLAYER))
        state.projectiles.append(Projectile(x=201, y=200, radius=4, owner=Owner.PLAYER))

        combat.resolve(state, now)

        assert state.score == 100
        assert len(state.projectiles) == 1

    def test_enemy_projectile_ignores_enemies(self, state):
        now = 100
        state.enemies.append(quiet_enemy(200, 200, state.player, now))
        state.projectiles.append(Projectile(x=200, y=200, radius=4, owner=Owner.ENEMY))

        combat.resolve(state, now)

        assert len(state.enemies) == 1
        assert state.score == 0

    def test_enemy_projectile_damages_player(self, state):
        state.projectiles.append(Projectile.fire(390, 300, 0.0, BulletKind.DEFAULT, Owner.ENEMY))

        assert not combat.resolve(state, now=100)

        assert state.player.health == 90
        assert state.projectiles == []
        assert len(state.particles) == 10
        assert all(p.color == combat.HIT_COLOR for p in state.particles)

    def test_player_ignores_own_projectiles(self, state):
        state.projectiles.append(Projectile(x=400, y=300, radius=4, owner=Owner.PLAYER))
        combat.resolve(state, now=100)
        assert state.player.health == 100


class TestContactDamage:
    """Tests for body contact between player and enemies."""

    def test_one_point_per_tick(self, state):
        now = 100
        state.enemies.append(quiet_enemy(410, 300, state.player, now))

        combat.resolve(state, now)
        assert state.player.health == 99
        combat.resolve(state, now)
        assert state.player.health == 98

    def test_stacks_per_enemy(self, state):
        now = 100
        state.enemies.append(quiet_enemy(410, 300, state.player, now))
        state.enemies.append(quiet_enemy(390, 300, state.player, now))

        combat.resolve(state, now)
        assert state.player.health == 98
        assert state.damage_taken == 2

    def test_no_damage_without_overlap(self, state):
        now = 100
        state.enemies.append(quiet_enemy(400, 100, state.player, now))
        combat.resolve(state, now)
        assert state.player.health == 100


class TestEnemyFire:
    def test_enemies_fire_each_cooldown(self, state):
        enemy = Enemy(x=100, y=100, target=state.player)
        state.enemies.append(enemy)

        combat.resolve(state, now=0)
        assert len([p for p in state.projectiles if p.owner is Owner.ENEMY]) == 1
        combat.resolve(state, now=1000)
        assert len([p for p in state.projectiles if p.owner is Owner.ENEMY]) == 1


class TestPickups:
    """Tests for pickup collection and expiry."""

    def test_bullet_package_collected(self, state):
        state.bullet_packages.append(
            BulletPackage(x=410, y=300, kind=BulletKind.LASER, ammo_count=25, spawn_time=0)
        )
        combat.resolve(state, now=100)

        assert state.bullet_packages == []
        assert state.player.bullet_kind is BulletKind.LASER
        assert state.player.special_ammo == 25
        assert state.pickups_collected == 1

    def test_first_aid_kit_collected(self, state):
        state.player.health = 90
        state.first_aid_kits.append(FirstAidKit(x=400, y=300, heal_amount=30, spawn_time=0))
        combat.resolve(state, now=100)

        assert state.first_aid_kits == []
        assert state.player.health == 100

    def test_uncollected_pickup_expires(self, state):
        """Expired pickups disappear on the first tick past their lifespan."""
        state.bullet_packages.append(BulletPackage(x=100, y=100, spawn_time=0))

        combat.resolve(state, now=15000)
        assert len(state.bullet_packages) == 1

        combat.resolve(state, now=15016)
        assert state.bullet_packages == []
        assert state.player.bullet_kind is BulletKind.DEFAULT
        assert state.player.health == 100
        assert state.pickups_collected == 0

    def test_expired_pickup_under_player_has_no_effect(self, state):
        state.player.health = 50
        state.first_aid_kits.append(FirstAidKit(x=400, y=300, spawn_time=0))

        combat.resolve(state, now=15001)

        assert state.first_aid_kits == []
        assert state.player.health == 50


class TestDeath:
    """Tests for the fatal hit."""

    def test_fatal_hit_reports_death(self, state):
        """20 damage against 15 health kills, with an explosion at the player."""
        state.player.health = 15
        state.projectiles.append(
            Projectile(x=390, y=300, radius=4, vx=10, owner=Owner.ENEMY, damage=20)
        )

        assert combat.resolve(state, now=100)

        assert state.player.health == 0
        death = [p for p in state.particles if p.color == PLAYER_COLOR]
        assert len(death) == 10
        for p in death:
            assert math.hypot(p.x - 400, p.y - 300) < 4

    def test_contact_death_also_explodes(self, state):
        now = 100
        state.player.health = 1
        state.enemies.append(quiet_enemy(410, 300, state.player, now))

        assert combat.resolve(state, now)
        assert len([p for p in state.particles if p.color == PLAYER_COLOR]) == 10

    def test_overkill_counts_remaining_health(self, state):
        """damage_taken only grows by the health the player actually had."""
        state.player.health = 1
        state.projectiles.append(
            Projectile(x=390, y=300, radius=4, vx=10, owner=Owner.ENEMY, damage=20)
        )

        assert combat.resolve(state, now=100)

        assert state.player.health == 0
        assert state.damage_taken == 1

    def test_contact_after_death_adds_nothing(self, state):
        now = 100
        state.player.health = 1
        state.enemies.append(quiet_enemy(410, 300, state.player, now))
        state.enemies.append(quiet_enemy(390, 300, state.player, now))

        assert combat.resolve(state, now)
        assert state.damage_taken == 1


class TestParticles:
    def test_particles_fade_out(self, state):
        combat.create_explosion(state, 100, 100, "#ffffff")
        assert len(state.particles) == 10

        for i in range(60):
            combat.resolve(state, now=i)
        assert state.particles == []
