from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, List

from rich.console import Console
from rich.table import Table
from rich.text import Text

from somacli.core.catalog import StationCatalog
from somacli.core.match import best_match
from somacli.core.models import Station
from somacli.core.player import StreamPlayer
from somacli.core.playlist import best_playlist

MENU = """
Commands:
1. list - List available stations
2. play [ID] - Play the station by ID
3. quit - Exit the client
"""

_PLAY = re.compile(r"^(2|play) (\d+)$")


@dataclass(frozen=True)
class Options:
    format: str = "aac"
    quality: str = "highest"
    show_track: bool = False
    show_info: bool = False


class InteractiveShell:
    def __init__(
        self,
        catalog: StationCatalog,
        player: StreamPlayer,
        options: Options,
        *,
        console: Console | None = None,
        read_line: Callable[[str], str] | None = None,
        refresh: bool = False,
    ):
        self.catalog = catalog
        self.player = player
        self.options = options
        self.console = console or Console()
        self._read_line = read_line or self.console.input
        # --refresh only bypasses the cache for the first fetch
        self._refresh = refresh

    def echo(self, msg: str = "") -> None:
        self.console.print(msg, markup=False, highlight=False)

    def stations(self) -> List[Station]:
        refresh, self._refresh = self._refresh, False
        return self.catalog.get_stations(refresh=refresh)

    # ------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------

    def list_stations(self) -> None:
        table = Table("ID", "Title", "Description")
        for i, st in enumerate(self.stations(), 1):
            table.add_row(str(i), Text(st.title), Text(st.description))
        self.console.print(table)

    def _play(self, station: Station) -> bool:
        url = best_playlist(station.playlists, self.options.format, self.options.quality)
        if url is None:
            self.echo(f"No playable stream for {station.title}.")
            return False

        self.player.play(
            url,
            station.title,
            show_track=self.options.show_track,
            show_info=self.options.show_info,
        )
        return True

    def play_station(self, station_id: int) -> None:
        stations = self.stations()
        if not 1 <= station_id <= len(stations):
            self.echo("Invalid station ID.")
            return
        self._play(stations[station_id - 1])

    def autoplay(self, name: str) -> None:
        station = best_match(self.stations(), name)
        if station is None:
            self.echo(f"No stream found matching '{name}'.")
            return

        self.echo(f"Auto-playing stream: {station.title}")
        if self._play(station):
            self.player.wait()

    # ------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------

    def handle(self, command: str) -> bool:
        """Run one command line. Returns False when the loop should end."""
        command = command.strip()

        if command in ("1", "list"):
            self.list_stations()
            return True

        m = _PLAY.match(command)
        if m:
            self.play_station(int(m.group(2)))
            return True

        if command in ("3", "quit"):
            self.quit()
            return False

        self.echo("Invalid command. Please try again.")
        return True

    def quit(self) -> None:
        self.echo("Exiting the client. Goodbye!")
        self.player.stop()

    def run(self) -> None:
        self.echo("Welcome to the interactive SomaFM client!")

        while True:
            self.echo(MENU)
            try:
                line = self._read_line("Enter command: ")
            except EOFError:
                self.echo()
                self.quit()
                return

            if not self.handle(line):
                return
