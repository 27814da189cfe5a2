import sys
import json
import argparse
from rich.console import Console
from .engine import ConfigHelperEngine
from .errors import ConfigHelperError
from .ui.app import run_tui
from .utils.config import ConfigManager
from .utils.host import ConsoleHost


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    parser = argparse.ArgumentParser(description="confighelper: rebuild and restart after config changes")
    parser.add_argument("--config", help="Path to config.json (default: ~/.confighelper/config.json)")
    parser.add_argument("--once", action="store_true", help="Recompile once, print the diagnostics and exit")
    parser.add_argument("--json", action="store_true", help="With --once, print diagnostics as quickfix JSON")
    parser.add_argument("--restart", action="store_true", help="Recompile and restart the configured command")
    parser.add_argument("--force", action="store_true", help="With --restart, remove the build cache first")
    parser.add_argument("--ping", action="store_true", help="Check that the helper runs")
    return parser


def _recompile_once(engine: ConfigHelperEngine, as_json: bool) -> int:
    records = engine.recompile()
    if as_json:
        print(json.dumps([r.to_quickfix() for r in records], indent=2))
    return 1 if engine.state.has_errors else 0


def run():
    parser = _build_parser()
    args = parser.parse_args()

    if args.force and not args.restart:
        parser.error("--force only applies to --restart")

    config = ConfigManager(args.config)

    if args.ping:
        print(ConfigHelperEngine(config).ping())
        sys.exit(0)

    if args.once or args.restart:
        console = Console(stderr=True)
        # JSON output replaces the table
        host = ConsoleHost(Console(stderr=True, quiet=args.json))
        engine = ConfigHelperEngine(config, host=host)
        try:
            if args.restart:
                engine.restart(force_clear_cache=args.force)
                sys.exit(0)
            sys.exit(_recompile_once(engine, args.json))
        except ConfigHelperError as e:
            console.print(f"[bold red]Error:[/] {e}")
            sys.exit(1)

    try:
        run_tui(config)
    except KeyboardInterrupt:
        pass
    except Exception as e:
        print(f"Fatal Error: {e}")
        sys.exit(1)

if __name__ == "__main__":
    run()
