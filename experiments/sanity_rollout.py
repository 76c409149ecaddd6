# /experiments/sanity_rollout.py
"""
Sanity rollouts for SphereEnv:
- Runs RANDOM and/or TINY-HEURISTIC policies over fixed seeds
- Appends one row per episode to an episodes CSV
- Prints completion / fall counts per policy at the end

Usage examples (from repo root, with the package installed):
  python -m experiments.sanity_rollout --policies both
  python -m experiments.sanity_rollout --policies heuristic --seeds 111,222,333 --level 3
  python -m experiments.sanity_rollout --policies random --steps 300 --csv /tmp/sanity.csv
"""

from __future__ import annotations
import argparse
import csv
from collections import Counter
from pathlib import Path
from typing import Callable, Dict

import numpy as np

from flipsphere.config import FPS
from flipsphere.env import SphereEnv
from flipsphere.env.sphere_env import NOOP, LEFT, RIGHT, JUMP, FLIP

Policy = Callable[[np.ndarray], int]

CSV_FIELDS = ["policy", "seed", "level", "frame_skip", "decisions", "return",
              "score", "coins_left", "phase", "truncated"]


# ------------------------ Policies ------------------------

def random_policy(seed: int) -> Policy:
    rng = np.random.default_rng(10_000 + seed)
    return lambda _obs: int(rng.integers(0, 5))


def heuristic_policy(_seed: int) -> Policy:
    """
    Head for the nearest coin (the portal once it is active), jump when the
    target is against gravity, flip when there is a ceiling but no floor.
    """
    def act(obs: np.ndarray) -> int:
        grav, on_ground, coins_left = obs[4], obs[5], obs[6]
        dx, dy = (obs[7], obs[8]) if coins_left > 0.0 else (obs[9], obs[10])
        floor_gap, ceiling_gap = obs[12], obs[13]

        if floor_gap >= 0.999 > ceiling_gap:
            return FLIP
        if on_ground and dy * grav < -0.05:
            return JUMP
        if abs(dx) > 0.01:
            return RIGHT if dx > 0 else LEFT
        return NOOP
    return act


POLICIES: Dict[str, Callable[[int], Policy]] = {
    "random": random_policy,
    "heuristic": heuristic_policy,
}


# ------------------------ Rollout ------------------------

def run_episode(policy_name: str, seed: int, level: int, frame_skip: int, max_decisions: int) -> dict:
    env = SphereEnv(frame_skip=frame_skip, start_level=level)
    policy = POLICIES[policy_name](seed)
    total = 0.0
    decisions = 0
    trunc = False
    try:
        obs, info = env.reset(seed=seed)
        while decisions < max_decisions:
            obs, r, term, trunc, info = env.step(policy(obs))
            total += r
            decisions += 1
            if term or trunc:
                break
    finally:
        env.close()

    return {
        "policy": policy_name, "seed": seed, "level": level, "frame_skip": frame_skip,
        "decisions": decisions, "return": f"{total:.2f}", "score": info["score"],
        "coins_left": info["coins_left"], "phase": info["phase"], "truncated": int(trunc),
    }


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--policies", default="both", choices=["random", "heuristic", "both"])
    ap.add_argument("--seeds", default="", help="Comma-separated seeds; default 101..120")
    ap.add_argument("--level", type=int, default=0, help="Level index every episode starts on")
    ap.add_argument("--frame-skip", type=int, default=4, help="Sim ticks per decision")
    ap.add_argument("--steps", type=int, default=10_000,
                    help="Cap on decisions per episode (env may truncate earlier)")
    ap.add_argument("--csv", default="experiments/runs/episodes.csv")
    args = ap.parse_args()

    seeds = [int(s) for s in args.seeds.split(",") if s.strip()] or list(range(101, 121))
    names = list(POLICIES) if args.policies == "both" else [args.policies]

    csv_path = Path(args.csv)
    csv_path.parent.mkdir(parents=True, exist_ok=True)
    new_file = not csv_path.exists()

    print(f"{names} x {len(seeds)} seeds, level={args.level}, "
          f"{FPS / args.frame_skip:.1f} decisions/s -> {csv_path}")

    outcomes: Dict[str, Counter] = {n: Counter() for n in names}
    with csv_path.open("a", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
        if new_file:
            writer.writeheader()
        for name in names:
            for seed in seeds:
                row = run_episode(name, seed, args.level, args.frame_skip, args.steps)
                writer.writerow(row)
                outcomes[name][row["phase"]] += 1
                print(f"[{name}] seed={seed} decisions={row['decisions']} return={row['return']} "
                      f"score={row['score']} phase={row['phase']}")

    for name, counts in outcomes.items():
        print(f"{name}: " + ", ".join(f"{phase}={n}" for phase, n in sorted(counts.items())))


if __name__ == "__main__":
    main()
