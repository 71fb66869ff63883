# somacli/cli/main.py

import argparse
import logging
import sys
from typing import List, Optional

import requests
from rich.console import Console

from somacli import __version__
from somacli.core import config, notify
from somacli.core.catalog import StationCatalog
from somacli.core.errors import SomaError
from somacli.core.player import StreamPlayer
from somacli.core.playlist import FORMATS, QUALITIES
from somacli.core.probe import StreamProbe
from somacli.cli.shell import InteractiveShell, Options

log = logging.getLogger(__name__)


# ------------------------------------------------------------
# Arguments
# ------------------------------------------------------------

def build_parser(cfg: dict) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="somacli",
        description="Interactive SomaFM client to list stations and play music.",
    )
    parser.add_argument(
        "-t", "--show-track", action="store_true", default=cfg["show_track"],
        help="Show current playing track",
    )
    parser.add_argument(
        "-I", "--show-info", action="store_true", default=cfg["show_info"],
        help="Show full stream information",
    )
    parser.add_argument("-s", "--stream", metavar="NAME", help="Stream name to auto play")
    parser.add_argument(
        "-f", "--format", choices=FORMATS, default=cfg["format"],
        help="Select format (default: %(default)s)",
    )
    parser.add_argument(
        "-Q", "--quality", choices=QUALITIES, default=cfg["quality"],
        help="Select quality (default: %(default)s)",
    )
    parser.add_argument(
        "-n", "--notify", action="store_true", default=cfg["notify"],
        help="Send desktop notifications through notify-send",
    )
    parser.add_argument(
        "--refresh", action="store_true",
        help="Ignore the cached station list",
    )
    parser.add_argument(
        "--log-level", default=cfg["log_level"],
        help="Logging level (default: %(default)s)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _setup_logging(level: str) -> None:
    numeric_level = getattr(logging, str(level).upper(), None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING
    logging.basicConfig(
        level=numeric_level,
        format="%(levelname)s %(name)s: %(message)s",
    )


# ------------------------------------------------------------
# Wiring
# ------------------------------------------------------------

def build_shell(args: argparse.Namespace, cfg: dict, console: Console) -> InteractiveShell:
    session = requests.Session()

    def echo(msg: str) -> None:
        console.print(msg, markup=False, highlight=False)

    catalog = StationCatalog(
        cfg["channels_url"],
        ttl=cfg["cache_ttl"],
        timeout=cfg["http_timeout"],
        session=session,
    )
    player = StreamPlayer(
        session=session,
        probe=StreamProbe(cfg["ffprobe_bin"]),
        binary=cfg["ffplay_bin"],
        echo=echo,
        notifier=notify.notify if args.notify else None,
        poll_interval=cfg["poll_interval"],
        stop_timeout=cfg["stop_timeout"],
        timeout=cfg["http_timeout"],
    )
    options = Options(
        format=args.format,
        quality=args.quality,
        show_track=args.show_track,
        show_info=args.show_info,
    )
    return InteractiveShell(catalog, player, options, console=console, refresh=args.refresh)


# ------------------------------------------------------------
# Entry
# ------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    cfg = config.load()
    args = build_parser(cfg).parse_args(argv)
    _setup_logging(args.log_level)

    console = Console()
    shell = build_shell(args, cfg, console)

    try:
        if args.stream:
            shell.autoplay(args.stream)
        else:
            shell.run()
    except KeyboardInterrupt:
        console.print()
    except SomaError as e:
        log.debug("Fatal error", exc_info=True)
        print(f"An error occurred: {e}")
        return 1
    except Exception as e:
        log.debug("Unexpected error", exc_info=True)
        print(f"An error occurred: {e}")
        return 1
    finally:
        shell.player.stop()

    return 0


if __name__ == "__main__":
    sys.exit(main())
