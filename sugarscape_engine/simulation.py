# sugarscape_engine/simulation.py

import time
from dataclasses import replace

import numpy as np

from . import config as cfg
from . import engine
from .histogram import preview_histogram, wealth_histogram
from .world import World, initialize, summarize


class Simulation:
    """Owns the random source and the current World, and drives it tick by tick."""

    def __init__(self, config=None, seed=None, histogram_interval=cfg.HISTOGRAM_INTERVAL):
        self.config = (config or cfg.default_config()).validate()
        self.rng = np.random.default_rng(seed)
        self.histogram_interval = histogram_interval
        self.world: World = initialize(self.config, self.rng)
        self.latest_histogram = self.histogram()

    def reset(self):
        """Rebuilds the world from the current config with the same Generator."""
        self.world = initialize(self.config, self.rng)
        self.latest_histogram = self.histogram()
        return self.world

    def apply_changes(self, config):
        """Switches to `config` and always starts a new world."""
        self.config = config.validate()
        return self.reset()

    def configure(self, config):
        """
        Switches to `config`, rebuilding only when the world shape changes.

        Growback, respawn, distribution and histogram settings take effect on
        the next tick without touching the landscape or population.
        """
        config.validate()
        if self.config.changes_shape(config):
            return self.apply_changes(config)
        self.config = config
        self.world = replace(self.world, config=config)
        return self.world

    def step(self):
        """One tick. A ShapeMismatchError leaves the current world in place."""
        self.world = engine.step(self.world, self.rng)
        if self.histogram_interval and self.world.tick % self.histogram_interval == 0:
            self.latest_histogram = self.histogram()
        return self.world

    def histogram(self):
        return wealth_histogram(self.world.agents, self.config.auto_bins, self.config.bin_count)

    def previews(self):
        """Preview histograms for the three agent attribute distributions."""
        return {
            "vision": preview_histogram(self.config.vision_spec, self.rng),
            "metabolism": preview_histogram(self.config.metabolism_spec, self.rng),
            "initial_sugar": preview_histogram(self.config.initial_sugar_spec, self.rng),
        }

    def stats(self):
        return summarize(self.world)

    def run(self, max_ticks, paced=False, ticker_interval=cfg.TICKER_INTERVAL):
        """
        Steps up to `max_ticks` times, stopping early on extinction.

        With `paced` the loop sleeps so it never exceeds ticks_per_second.
        """
        print(f"--- Running up to {max_ticks} ticks on a {self.world.width}x{self.world.height} torus "
              f"with {self.world.population} agents ---")
        for _ in range(max_ticks):
            started = time.monotonic()
            self.step()

            if ticker_interval and self.world.tick % ticker_interval == 0:
                s = self.stats()
                print(f"> Tick: {s.tick} | Population: {s.population} | "
                      f"Land sugar: {s.land_sugar} | Held sugar: {s.held_sugar}")

            if self.world.population == 0:
                print(f"EXTINCTION at tick {self.world.tick}")
                break

            if paced:
                remaining = 1.0 / self.config.ticks_per_second - (time.monotonic() - started)
                if remaining > 0:
                    time.sleep(remaining)

        self.latest_histogram = self.histogram()
        return self.world
