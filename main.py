# Headless runner for the Sugarscape engine (e.g., python main.py --ticks 500)

import argparse

import sugarscape_engine.config as cfg
from sugarscape_engine.simulation import Simulation

BAR_WIDTH = 40


def print_histogram(bins):
    """Prints a wealth histogram as text bars scaled to the fullest bin."""
    peak = max((b.count for b in bins), default=0) or 1
    label_width = max(len(b.label) for b in bins)
    for b in bins:
        bar = "#" * round(BAR_WIDTH * b.count / peak)
        print(f"  {b.label:>{label_width}} | {bar} {b.count}")


def build_config(args):
    config = cfg.default_config()
    changes = {
        "width": args.width,
        "height": args.height,
        "agent_count": args.agents,
        "growback_rate": args.growback,
        "respawn": args.respawn,
        "conflict_policy": args.conflict_policy,
    }
    if args.bins is not None:
        changes["auto_bins"] = False
        changes["bin_count"] = args.bins
    return config.with_changes(**{k: v for k, v in changes.items() if v is not None})


def main(args):
    config = build_config(args)
    print("--- Configuration ---")
    for name, value in config.as_dict().items():
        print(f"  {name}: {value}")

    sim = Simulation(config, seed=args.seed)
    world = sim.run(args.ticks, paced=args.paced)

    s = sim.stats()
    print(f"\n--- Tick {s.tick} complete ---")
    print(f"Population: {s.population} | Land sugar: {s.land_sugar} | "
          f"Held sugar: {s.held_sugar} | Mean wealth: {s.mean_wealth:.2f}")
    print("Wealth distribution:")
    print_histogram(sim.latest_histogram)
    return world


def cli(argv=None):
    parser = argparse.ArgumentParser(description="Run a headless Sugarscape simulation.")
    parser.add_argument("--ticks", type=int, default=500, help="Maximum number of ticks to run.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for a reproducible run.")
    parser.add_argument("--width", type=int, default=None)
    parser.add_argument("--height", type=int, default=None)
    parser.add_argument("--agents", type=int, default=None, help="Initial and respawn target population.")
    parser.add_argument("--growback", type=int, default=None, help="Sugar regrown per cell per tick.")
    parser.add_argument("--respawn", action=argparse.BooleanOptionalAction, default=None)
    parser.add_argument("--bins", type=int, default=None, help="Fixed histogram bin count (disables auto bins).")
    parser.add_argument("--conflict-policy", choices=sorted(cfg.CONFLICT_POLICIES), default=None)
    parser.add_argument("--paced", action="store_true", help="Throttle to the configured ticks per second.")
    args = parser.parse_args(argv)

    try:
        main(args)
    except cfg.ConfigError as e:
        parser.error(str(e))


if __name__ == "__main__":
    cli()
