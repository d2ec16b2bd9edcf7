# constants.py

"""
Application Constants

This module defines static configuration values for the application's framework
and the fixed numbers of the particle model. Tunable per-run values (particle
counts, seeding bounds, speed) live in config.json instead.

Data Contract:
- All values are immutable constants.
- Units are specified in comments where applicable.
"""

# Screen dimensions
WIDTH = 1280  # Pixels
HEIGHT = 720  # Pixels

# Framerate
FPS = 60  # Frames per second

# Largest time step the driver hands to Simulation.update.
# The integrator is not unconditionally stable for large deltas.
MAX_DELTA = 0.05  # Seconds

# Colors (RGB)
BLACK = (0, 0, 0)

# Window Title
TITLE = "N-Body Particle Simulation"

# World units to screen pixels in the debug renderer.
WORLD_TO_SCREEN_SCALE = 8.0

# --- Simulation defaults ---
DEFAULT_SPEED = 100.0  # Attraction strength multiplier
DEFAULT_IS_RUNNING = True

# Grid initializer
GRID_INITIAL_SPEED = 5.0  # Units per second
GRID_RADIUS = 1.0

# rand_distribute initializer, half-open range [min, max)
RAND_RADIUS_MIN = 0.5
RAND_RADIUS_MAX = 1.5

# --- Render contract ---
# Attribute locations 0-4 are reserved for per-vertex mesh data.
INSTANCE_POSITION_LOCATION = 5
INSTANCE_COLOR_LOCATION = 6
INSTANCE_RADIUS_LOCATION = 7

# How often the driver logs simulation statistics.
STATS_LOG_INTERVAL = 1.0  # Seconds
