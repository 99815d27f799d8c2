"""
Demo: an agent crossing a random grid while obstructions keep appearing.

Shows the hybrid controller starting on A* and switching to D* Lite once
new obstructions show up, with an ASCII view of the grid each step.

Run from project root:
    python demo_pathfinding.py
    python demo_pathfinding.py --size 25 --probability 0.2 --drop-every 3 --delay 0.1
"""
import argparse
import logging
import time

import numpy as np

from src.navigation import (
    GridAgent,
    GridMap,
    GridMapConfig,
    HybridController,
    HybridControllerConfig,
)


def print_step(grid: GridMap, agent: GridAgent, controller: HybridController, step: int) -> None:
    """Print ASCII visualization with the remaining path."""
    print("\n" * 2)
    print("=" * 60)
    state = agent.get_state()
    print(
        f"Step {step:3d} | Mode: {controller.mode.name:11s} | "
        f"Position: {agent.position} | Remaining: {state.waypoints_remaining}"
    )
    print("=" * 60)
    print(grid.to_ascii(agent.path, start=agent.position, goal=agent.goal))


def main():
    parser = argparse.ArgumentParser(description="Hybrid A* / D* Lite grid navigation demo")
    parser.add_argument("--size", type=int, default=20,
                        help="Grid width and height")
    parser.add_argument("--probability", type=float, default=0.2,
                        help="Initial obstruction probability per cell")
    parser.add_argument("--seed", type=int, default=42,
                        help="Random seed")
    parser.add_argument("--activation-delay", type=float, default=0.0,
                        help="Seconds before the controller may switch to D* Lite")
    parser.add_argument("--drop-every", type=int, default=4,
                        help="Drop a new obstruction on the path every N steps (0 = never)")
    parser.add_argument("--max-steps", type=int, default=200,
                        help="Maximum number of agent steps")
    parser.add_argument("--delay", type=float, default=0.0,
                        help="Delay between steps in seconds")
    parser.add_argument("--verbose", action="store_true",
                        help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    start = (0, 0)
    goal = (args.size - 1, args.size - 1)

    grid = GridMap(args.size, args.size, GridMapConfig(
        obstruction_probability=args.probability,
        seed=args.seed,
    ))
    grid.add_protected_position(start)
    grid.add_protected_position(goal)
    grid.generate_random_obstructions()

    controller = HybridController(
        grid, HybridControllerConfig(activation_delay=args.activation_delay)
    )
    agent = GridAgent(grid, controller, start=start, goal=goal)
    rng = np.random.default_rng(args.seed)

    for step in range(1, args.max_steps + 1):
        if args.drop_every and step % args.drop_every == 0 and len(agent.path) > 2:
            # Obstruct a random cell of the remaining path (never the goal)
            candidates = agent.path[1:-1]
            if candidates:
                cell = candidates[int(rng.integers(0, len(candidates)))]
                grid.toggle_obstruction(cell, True)

        agent.tick()
        print_step(grid, agent, controller, step)

        stats = controller.active_planner.last_stats
        print(
            f"{controller.active_planner.name}: {stats.expansions} expansions, "
            f"{stats.elapsed_seconds * 1000:.2f} ms"
        )

        state = agent.get_state()
        if state.is_complete:
            print(f"\nReached goal in {step} steps")
            break
        if state.is_stuck:
            print("\nNo path to goal - agent is stuck")
            break

        if args.delay > 0:
            time.sleep(args.delay)
    else:
        print(f"\nGave up after {args.max_steps} steps")


if __name__ == "__main__":
    main()
