from __future__ import annotations

import argparse
import logging
from pathlib import Path

from pacman_belief.config.types import ReplayConfig
from pacman_belief.io.paths import belief_figure_path, resolve_within_base
from pacman_belief.simulation.replay import EpisodeScript, replay_state, run_replay
from pacman_belief.viz.render import format_belief, format_truth_map, render_state
from pacman_belief.viz.theme import get_theme

logger = logging.getLogger(__name__)


def _build_replay_parser(sub: argparse._SubParsersAction) -> None:
    p = sub.add_parser("replay", help="Replay an episode script into a Parquet trace")
    p.set_defaults(func=_handle_replay)
    p.add_argument("--script", type=Path, required=True)
    p.add_argument("--output-dir", type=Path, required=True)
    p.add_argument("--episode-id", type=str, default="episode")
    p.add_argument("--ghost-steps", type=int, default=ReplayConfig().ghost_proximity_steps)
    p.add_argument("--uniform-start", action="store_true")
    p.add_argument("--base-dir", type=Path, default=Path("."))


def _build_render_parser(sub: argparse._SubParsersAction) -> None:
    p = sub.add_parser("render", help="Render the final beliefs of an episode script")
    p.set_defaults(func=_handle_render)
    p.add_argument("--script", type=Path, required=True)
    p.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Image path (default: out/figures/<script name>.png)",
    )
    p.add_argument("--uniform-start", action="store_true")
    p.add_argument("--text", action="store_true", help="Also print beliefs as text")
    p.add_argument("--base-dir", type=Path, default=Path("."))


def _handle_replay(args: argparse.Namespace) -> None:
    base_dir = Path(args.base_dir).resolve()
    script = EpisodeScript.load(resolve_within_base(args.script, base_dir))
    output_dir = resolve_within_base(args.output_dir, base_dir)
    result = run_replay(
        script,
        out_dir=output_dir,
        episode_id=args.episode_id,
        replay_config=ReplayConfig(
            ghost_proximity_steps=args.ghost_steps, uniform_start=args.uniform_start
        ),
    )
    print(f"{result.ticks} ticks written to {result.trace_path}")


def _handle_render(args: argparse.Namespace) -> None:
    base_dir = Path(args.base_dir).resolve()
    script = EpisodeScript.load(resolve_within_base(args.script, base_dir))
    output_arg = args.output or belief_figure_path(Path("out"), args.script.stem)
    output = resolve_within_base(output_arg, base_dir)
    state = replay_state(script, ReplayConfig(uniform_start=args.uniform_start))
    render_state(state, output, theme=args.theme_obj)
    if args.text:
        print(format_truth_map(state))
        print("pacman:")
        print(format_belief(state.pacman_belief, state.topology))
        for i, belief in enumerate(state.ghost_beliefs):
            print(f"ghost {i}:")
            print(format_belief(belief, state.topology))


def main() -> None:
    """CLI entrypoint with subcommands."""
    parser = argparse.ArgumentParser(description="Belief-filter replay and rendering tools")
    parser.add_argument(
        "--theme",
        type=str,
        default="default",
        help="Theme preset name (default, paper)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    sub = parser.add_subparsers(dest="command", required=True)
    _build_replay_parser(sub)
    _build_render_parser(sub)
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    args.theme_obj = get_theme(args.theme)
    logger.debug("Running %s", args.command)

    args.func(args)


if __name__ == "__main__":
    main()
