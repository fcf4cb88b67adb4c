"""Doorway CLI entry point.

Provides subcommands for generating a layout in the terminal and for running
the map generation HTTP API. Accepts configuration via flags and environment
variables, with optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import json
import os
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

_color_init()
# Disable colors if output is not a real terminal (e.g., during pytest capture)
_COLOR_ENABLED = sys.stdout.isatty()

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_BUDGET = 2


def _load_version() -> str:
    try:
        with open(os.path.join(os.path.dirname(os.path.abspath(__file__)), "VERSION"), "r", encoding="utf-8") as f:
            return f.read().strip()
    except OSError:
        from doorway import __version__ as pkg_version

        return pkg_version


__version__ = _load_version()


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Doorway map generator

    Assemble a grid layout of rooms joined door-to-door with randomized
    backtracking search, or serve the generator over HTTP. CLI flags take
    precedence over MAPGEN_* environment variables.
    """

    epilog = dedent(
        """
        Environment variables:
          MAPGEN_MAX_ROOMS          Rooms in a finished layout, origin included (default: 25)
          MAPGEN_ITERATION_BUDGET   Search steps before a run is aborted (default: 20000)
          MAPGEN_MAX_BOUND_SPAN     Max bounding-box span per axis (default: 7)
          MAPGEN_MIN_PATH_LENGTH    Min door hops from origin to exit (default: 6)
          MAPGEN_ATTEMPTS           Attempts with derived seeds before giving up (default: 3)
          HOST / PORT               Bind address for the server (default: 0.0.0.0:5000)

        Examples:
          # Generate with a fixed seed and print the map
          python run.py generate --seed 1234

          # Smaller layout, several attempts, JSON output
          python run.py generate --max-rooms 12 --min-path 4 --attempts 5 --json

          # Run the HTTP API on a custom port
          python run.py server --port 8080
        """
    )

    parser = argparse.ArgumentParser(
        prog="Doorway",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )

    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Path to a .env file to load before processing flags",
    )

    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=["debug", "info", "warn", "error"],
        default=None,
        help="Structured log threshold (default: env DOORWAY_LOG_LEVEL or info)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Doorway Map Generator {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    gen_parser = subparsers.add_parser(
        "generate",
        help="Generate one layout and print it",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the backtracking generator once (or --attempts times) and print the result",
    )
    gen_parser.add_argument("--seed", default=None, help="Integer or text seed (default: random)")
    gen_parser.add_argument("--max-rooms", dest="max_rooms", type=int, default=None, help="Rooms in the layout, origin included")
    gen_parser.add_argument("--min-path", dest="min_path_length", type=int, default=None, help="Min door hops from origin to exit")
    gen_parser.add_argument("--max-span", dest="max_bound_span", type=int, default=None, help="Max bounding-box span per axis")
    gen_parser.add_argument("--budget", dest="iteration_budget", type=int, default=None, help="Iteration budget per attempt")
    gen_parser.add_argument("--attempts", type=int, default=None, help="Attempts with derived seeds")
    gen_parser.add_argument("--catalog", default=None, help="Path to a JSON piece catalog")
    gen_parser.add_argument(
        "--loose-bounds",
        action="store_true",
        help="Keep widened bounding boxes after backtracking (prunes more aggressively)",
    )
    gen_parser.add_argument("--json", dest="as_json", action="store_true", help="Print JSON instead of a text map")
    gen_parser.set_defaults(command="generate")

    server_parser = subparsers.add_parser(
        "server",
        help="Run the HTTP API",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Serve /api/mapgen/* with the Flask development server",
    )
    server_parser.add_argument("--host", default=None, help="Host interface to bind (default: env HOST or 0.0.0.0)")
    server_parser.add_argument("--port", type=int, default=None, help="Port to listen on (default: env PORT or 5000)")
    server_parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")
    server_parser.set_defaults(command="server")

    # If no subcommand provided, default to generate
    if len(argv) == 0:
        argv = ["generate"]

    return parser.parse_args(argv)


def _label(text: str) -> str:
    return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else text


def _value(val) -> str:
    return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if _COLOR_ENABLED else str(val)


def run_generate(args: argparse.Namespace) -> int:
    from doorway.mapgen import (
        CatalogError,
        ConfigError,
        GeneratorConfig,
        IterationBudgetExceeded,
        LayoutMaterializer,
        MapGenerator,
        coerce_seed,
        default_catalog,
        load_catalog,
        render_ascii,
    )

    try:
        catalog = load_catalog(args.catalog) if args.catalog else default_catalog()
    except (OSError, CatalogError) as e:
        print(f"[ERROR] Could not load catalog: {e}")
        return EXIT_FAILED
    try:
        cfg = GeneratorConfig.from_env().replace(
            max_rooms=args.max_rooms,
            min_path_length=args.min_path_length,
            max_bound_span=args.max_bound_span,
            iteration_budget=args.iteration_budget,
            attempts=args.attempts,
            seed=coerce_seed(args.seed),
        )
        if args.loose_bounds:
            cfg = cfg.replace(restore_bounds_on_backtrack=False)
        generator = MapGenerator(catalog, cfg)
    except ConfigError as e:
        print(f"[ERROR] Invalid configuration: {e}")
        return EXIT_FAILED

    materializer = LayoutMaterializer()
    try:
        result = generator.generate_with_retries(materializer)
    except IterationBudgetExceeded as e:
        print(f"[ERROR] Iteration limit exceeded after {e.iterations} steps (budget {e.budget}, seed {cfg.seed})")
        return EXIT_BUDGET
    if not result.success:
        print(f"[ERROR] Generation failed (seed {cfg.seed}, attempts {result.attempts})")
        return EXIT_FAILED

    if args.as_json:
        body = result.to_dict()
        body.update(materializer.to_dict())
        print(json.dumps(body, indent=2))
        return EXIT_OK

    print(render_ascii(result, catalog))
    print()
    print(f"  {_label('Seed:'):10} {_value(result.seed)}")
    print(f"  {_label('Rooms:'):10} {_value(result.room_count)}")
    print(f"  {_label('Path:'):10} {_value(result.path_length)}")
    print(f"  {_label('Steps:'):10} {_value(result.iterations)}")
    print(f"  {_label('Attempts:'):10} {_value(result.attempts)}")
    return EXIT_OK


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()

    mode = (getattr(args, "command", None) or "generate").lower()
    from doorway.logging_utils import log, set_level

    if getattr(args, "log_level", None):
        set_level(args.log_level)

    if mode == "server":
        host = getattr(args, "host", None) or os.getenv("HOST", "0.0.0.0")
        port = int(getattr(args, "port", None) or os.getenv("PORT", "5000"))
        debug = bool(getattr(args, "debug", False) or os.getenv("FLASK_DEBUG") == "1")
        log.info(event="startup", mode=mode, host=host, port=port, debug=debug)
        from doorway.server import start_server

        start_server(host=host, port=port, debug=debug)
        return EXIT_OK

    return run_generate(args)


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
