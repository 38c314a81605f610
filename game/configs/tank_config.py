"""
Configuration for the tank game and its gym adapter
"""

# Playfield and clock
GAME_CONFIG = {
    "width": 800,
    "height": 600,
    "fps": 60,
}

# Spawner timers (ms) and pickup parameters
SPAWN_CONFIG = {
    "enemy_interval": 2000.0,
    "bullet_package_interval": 8000.0,
    "first_aid_interval": 10000.0,
    "pickup_margin": 100.0,
    "ammo_range": (20, 50),
    "heal_amount": 30.0,
    "pickup_lifespan": 15000.0,
}

# Gym adapter parameters
ENV_CONFIG = {
    "width": 800,
    "height": 600,
    "dt": 1000 / 60,  # ms per step
    "max_steps": 3600,  # 60 seconds at 60 FPS
    "k_enemies": 5,
    "m_pickups": 3,
    "n_projectiles": 5,
}

# ==============================================================================
# REWARD SHAPING
# ==============================================================================

REWARD_CONFIG = {
    "R_SCORE": 0.01,     # Per score point (100 per kill)
    "R_PICKUP": 0.5,     # Collecting any pickup
    "R_DAMAGE": 0.05,    # Penalty per health point lost
    "R_SHOT": 0.01,      # Penalty per shot fired
    "R_TIME": 0.001,     # Small time penalty
    "R_DEATH": 5.0,      # Death penalty
}
