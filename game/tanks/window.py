"""
Arcade front end: renderer, HUD and input source for the tank game.

Game coordinates have y pointing down (screen space); arcade has y pointing
up, so everything is flipped on the way in and out.

Play:
    python -m game.tanks.window
"""

import argparse
import logging
import math
import time
from typing import Optional, Tuple

import numpy as np
import arcade

from .bullets import BulletKind
from .entities import BulletPackage, Tank
from .game_state import TankGame, GamePhase, GameState, HudState, InputSnapshot
from game.configs.tank_config import GAME_CONFIG, SPAWN_CONFIG

logger = logging.getLogger(__name__)

BG = (10, 10, 10)
HUD_C = (220, 220, 220)
HEALTH_BG = (60, 60, 60)
HEALTH_FG = (0, 243, 255)


def hex_to_rgb(color: str, alpha: Optional[int] = None) -> Tuple[int, ...]:
    color = color.lstrip("#")
    rgb = tuple(int(color[i:i + 2], 16) for i in (0, 2, 4))
    if alpha is None:
        return rgb
    return rgb + (alpha,)


class ArcadeRenderer:
    """Draws the most recent frame handed over by the game loop"""

    def __init__(self, height: float):
        self.height = height
        self.frame: Optional[GameState] = None

    def draw(self, state: GameState):
        self.frame = state

    def _y(self, y: float) -> float:
        return self.height - y

    def render(self):
        state = self.frame
        if state is None or state.player is None:
            return

        for pickup in state.pickups():
            self._draw_pickup(pickup)
        for p in state.projectiles:
            self._draw_projectile(p)
        for enemy in state.enemies:
            self._draw_tank(enemy)
        if state.phase is not GamePhase.GAME_OVER:
            self._draw_tank(state.player)
        for p in state.particles:
            alpha = int(255 * max(0.0, min(1.0, p.alpha)))
            arcade.draw_circle_filled(p.x, self._y(p.y), max(p.radius, 0.5), hex_to_rgb(p.color, alpha))

    def _draw_tank(self, tank: Tank):
        x, y = tank.x, self._y(tank.y)
        color = hex_to_rgb(tank.color)
        r = tank.radius

        # Body square rotated by the facing angle
        corners = []
        for cx, cy in ((-r, -r), (r, -r), (r, r), (-r, r)):
            ca, sa = math.cos(tank.angle), math.sin(tank.angle)
            corners.append((x + cx * ca - cy * sa, y - (cx * sa + cy * ca)))
        arcade.draw_polygon_filled(corners, (0, 0, 0))
        arcade.draw_polygon_outline(corners, color, 3)

        tx, ty = tank.turret_tip()
        arcade.draw_line(x, y, tx, self._y(ty), color, 10)
        arcade.draw_circle_filled(x, y, 10, color)

    def _draw_projectile(self, p):
        color = hex_to_rgb(p.color)
        x, y = p.x, self._y(p.y)
        if p.kind is BulletKind.LASER:
            dx, dy = math.cos(p.angle) * p.radius * 2, -math.sin(p.angle) * p.radius * 2
            arcade.draw_line(x - dx, y - dy, x + dx, y + dy, color, p.radius)
            arcade.draw_line(x - dx, y - dy, x + dx, y + dy, (255, 255, 255), p.radius / 2)
        else:
            arcade.draw_circle_filled(x, y, p.radius, color)

    def _draw_pickup(self, pickup):
        color = hex_to_rgb(pickup.color)
        x = pickup.x
        y = self._y(pickup.y + math.sin(pickup.float_offset) * 5)
        arcade.draw_circle_filled(x, y, pickup.radius, (0, 0, 0, 180))
        arcade.draw_circle_outline(x, y, pickup.radius, color, 3)
        if isinstance(pickup, BulletPackage):
            arcade.draw_text(f"x{pickup.ammo_count}", x, y - pickup.radius - 15, (255, 255, 255),
                             10, anchor_x="center")
        else:
            arcade.draw_line(x - 10, y, x + 10, y, color, 6)
            arcade.draw_line(x, y - 10, x, y + 10, color, 6)


class ArcadeHud:
    """Score, health bar and ammo readout"""

    def __init__(self, width: float, height: float):
        self.width = width
        self.height = height
        self.current: Optional[HudState] = None
        self.final_score: Optional[int] = None

    def update(self, hud: HudState):
        self.current = hud

    def game_over(self, score: int):
        self.final_score = score

    def reset(self):
        self.current = None
        self.final_score = None

    def render(self, phase: GamePhase):
        if phase is GamePhase.IDLE:
            self._banner("NEON TANKS", "Press ENTER or click to start")
            return

        hud = self.current
        if hud is not None:
            bar_w, bar_h = 200, 12
            x0, y0 = 12, self.height - 26
            arcade.draw_lrbt_rectangle_filled(x0, x0 + bar_w, y0, y0 + bar_h, HEALTH_BG)
            fill = bar_w * max(0.0, min(100.0, hud.health_percent)) / 100.0
            if fill > 0:
                arcade.draw_lrbt_rectangle_filled(x0, x0 + fill, y0, y0 + bar_h, HEALTH_FG)

            ammo = "unlimited" if hud.ammo is None else str(hud.ammo)
            txt = f"SCORE: {hud.score}   AMMO: {hud.bullet_label} ({ammo})"
            arcade.draw_text(txt, 12, self.height - 48, HUD_C, 14)

        if phase is GamePhase.GAME_OVER:
            self._banner("GAME OVER", f"Final score: {self.final_score}  -  ENTER or click to restart")

    def _banner(self, title: str, subtitle: str):
        cx, cy = self.width / 2, self.height / 2
        arcade.draw_text(title, cx, cy + 20, HEALTH_FG, 40, anchor_x="center")
        arcade.draw_text(subtitle, cx, cy - 30, HUD_C, 16, anchor_x="center")


class TankWindow(arcade.Window):
    """
    Arcade window hosting the game.

    Interactive windows poll keyboard and mouse and tick the game from
    ``on_update``. Non-interactive windows only display a game that some
    other host (the gym env) is ticking.
    """

    def __init__(self, game: TankGame, interactive: bool = True, visible: bool = True,
                 title: str = "Neon Tanks"):
        width, height = int(game.state.width), int(game.state.height)
        super().__init__(width, height, title, visible=visible)
        self.background_color = BG

        self.game = game
        self.interactive = interactive
        self.renderer = ArcadeRenderer(height)
        self.hud = ArcadeHud(width, height)
        if interactive:
            game.renderer = self.renderer
            game.hud = self.hud

        self._keys = {"up": False, "down": False, "left": False, "right": False}
        self._mouse = (width / 2, height / 2)
        self._fire_pressed = False

    def show_game(self, game: TankGame):
        """Point a non-interactive window at a (possibly new) game"""
        self.game = game
        self.renderer.draw(game.state)
        if game.player is not None:
            self.hud.update(game.hud_state())
        if game.phase is GamePhase.GAME_OVER:
            self.hud.game_over(game.score)

    def grab_frame(self) -> np.ndarray:
        image = arcade.get_image(0, 0, self.width, self.height)
        return np.asarray(image.convert("RGB"))

    # ----------------------------
    # Input source
    # ----------------------------

    def poll(self) -> InputSnapshot:
        fire = self._fire_pressed
        self._fire_pressed = False
        return InputSnapshot(
            up=self._keys["up"],
            down=self._keys["down"],
            left=self._keys["left"],
            right=self._keys["right"],
            aim_x=self._mouse[0],
            aim_y=self._mouse[1],
            fire=fire,
        )

    def _start_or_restart(self):
        if self.game.phase is GamePhase.ACTIVE:
            return
        self.hud.reset()
        self.game.restart()
        self._fire_pressed = False

    def on_key_press(self, symbol, modifiers):
        if symbol in (arcade.key.ENTER, arcade.key.RETURN) and self.interactive:
            self._start_or_restart()
        self._set_key(symbol, True)

    def on_key_release(self, symbol, modifiers):
        self._set_key(symbol, False)

    def _set_key(self, symbol, pressed: bool):
        mapping = {
            arcade.key.W: "up",
            arcade.key.S: "down",
            arcade.key.A: "left",
            arcade.key.D: "right",
        }
        if symbol in mapping:
            self._keys[mapping[symbol]] = pressed

    def on_mouse_motion(self, x, y, dx, dy):
        self._mouse = (x, self.height - y)

    def on_mouse_press(self, x, y, button, modifiers):
        if not self.interactive:
            return
        if self.game.phase is GamePhase.ACTIVE:
            self._fire_pressed = True
        else:
            self._start_or_restart()

    # ----------------------------
    # Frame callbacks
    # ----------------------------

    def on_update(self, delta_time: float):
        if self.interactive:
            now = time.monotonic() * 1000
            self.game.tick(self.poll(), now, delta_time * 1000)

    def on_draw(self):
        self.clear()
        self.renderer.render()
        self.hud.render(self.game.phase)


def main():
    parser = argparse.ArgumentParser(description="Play Neon Tanks")
    parser.add_argument("--width", type=int, default=GAME_CONFIG["width"])
    parser.add_argument("--height", type=int, default=GAME_CONFIG["height"])
    parser.add_argument("--seed", type=int, default=None, help="Seed for spawn positions")
    parser.add_argument("--verbose", action="store_true", help="Log spawn events")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    game = TankGame(width=args.width, height=args.height, seed=args.seed, spawn_config=SPAWN_CONFIG)
    window = TankWindow(game)
    window.set_update_rate(1 / GAME_CONFIG["fps"])
    print("WASD to move, mouse to aim, click to fire. Press ENTER to start.")
    arcade.run()


if __name__ == "__main__":
    main()
