# main.py

import pygame
import constants
import json
import logging
import logger_setup
import numpy as np
from simulation import Simulation
from timer import IntervalTimer

# Get the application's dedicated logger
logger = logging.getLogger("nbody_sim")


def world_to_screen(points: np.ndarray, focus: np.ndarray) -> np.ndarray:
    """Maps world coordinates to pixels, keeping `focus` at the window center (y up)."""
    screen = (points - focus) * constants.WORLD_TO_SCREEN_SCALE
    screen[..., 1] = -screen[..., 1]
    return screen + np.array([constants.WIDTH / 2, constants.HEIGHT / 2])


def draw_instances(screen: pygame.Surface, instances: np.ndarray, focus: np.ndarray):
    """
    Debug renderer: one filled circle per instance record.
    Non-finite records are skipped instead of crashing pygame.
    """
    finite = np.all(np.isfinite(instances['position']), axis=1)
    visible = instances[finite]
    if visible.shape[0] == 0:
        return

    centers = world_to_screen(visible['position'].astype(np.float64), focus)
    colors = (np.clip(visible['color'], 0.0, 1.0) * 255).astype(int)
    radii = np.maximum(visible['radius'] * constants.WORLD_TO_SCREEN_SCALE, 1).astype(int)

    for center, color, radius in zip(centers, colors, radii):
        pygame.draw.circle(screen, tuple(int(c) for c in color), (int(center[0]), int(center[1])), int(radius))


def log_statistics(simulation: Simulation, tick: int):
    momentum = simulation.get_total_momentum()
    logger.debug(
        f"Tick={tick}, "
        f"Particles={simulation.particle_count}, "
        f"Kinetic={simulation.get_total_kinetic_energy():.2f}, "
        f"Momentum=({momentum[0]:+.3f}, {momentum[1]:+.3f}), "
        f"Collisions={simulation.last_collision_count}, "
        f"Degenerate={simulation.degenerate_count}"
    )


def run_simulation_loop(simulation, sim_config, rng, screen, clock):
    """
    Per frame: events, update(dt), instances(), draw. SPACE pauses,
    R rebuilds the simulation from config, ESC quits.
    """
    running = True
    tick = 0
    stats_timer = IntervalTimer(constants.STATS_LOG_INTERVAL)

    while running:
        dt = clock.tick(constants.FPS) / 1000.0

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_SPACE:
                    simulation.toggle_running()
                elif event.key == pygame.K_r:
                    logger.info("Resetting simulation...")
                    simulation = Simulation.from_config(sim_config, rng)

        # --- Physics Update ---
        simulation.update(min(dt, constants.MAX_DELTA))

        if stats_timer.tick_reset():
            log_statistics(simulation, tick)

        # --- Drawing ---
        screen.fill(constants.BLACK)
        draw_instances(screen, simulation.instances(), simulation.center())
        pygame.display.flip()
        tick += 1

    return simulation


def main():
    """
    Main function to initialize and run the particle simulation.
    """
    # --- Setup ---
    logger_setup.setup_logging()

    with open('config.json', 'r') as f:
        config = json.load(f)
    sim_config = config['simulation']

    logger.info("Application starting...")
    logger.info(f"Loaded configuration: {config}")

    # Initialize the master random number generator (RNG)
    rng = np.random.default_rng(config['master_seed'])
    logger.info(f"Master RNG initialized with seed: {config['master_seed']}")

    # --- Initialization ---
    pygame.init()
    screen = pygame.display.set_mode((constants.WIDTH, constants.HEIGHT))
    pygame.display.set_caption(constants.TITLE)
    clock = pygame.time.Clock()

    simulation = Simulation.from_config(sim_config, rng)

    run_simulation_loop(simulation, sim_config, rng, screen, clock)

    logger.info("Application shutting down.")
    pygame.quit()

if __name__ == "__main__":
    main()
