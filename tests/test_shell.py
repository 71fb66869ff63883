from somacli.cli.shell import InteractiveShell, Options
from somacli.core.models import Station


class FakeCatalog:
    def __init__(self, stations):
        self.stations = stations
        self.refreshes = []

    def get_stations(self, refresh=False):
        self.refreshes.append(refresh)
        return self.stations


class FakePlayer:
    def __init__(self):
        self.plays = []
        self.stops = 0
        self.waits = 0

    def play(self, url, name, show_track=False, show_info=False):
        self.plays.append((url, name, show_track, show_info))

    def stop(self):
        self.stops += 1

    def wait(self):
        self.waits += 1


def _shell(stations, console, options=None, lines=(), **kwargs):
    feed = list(lines)

    def read_line(prompt):
        if not feed:
            raise EOFError
        return feed.pop(0)

    player = FakePlayer()
    shell = InteractiveShell(
        FakeCatalog(stations),
        player,
        options or Options(),
        console=console,
        read_line=read_line,
        **kwargs,
    )
    return shell, player


def _output(console):
    return console.file.getvalue()


def test_list_renders_table(stations, console):
    shell, _ = _shell(stations, console)

    assert shell.handle("list") is True

    out = _output(console)
    for header in ("ID", "Title", "Description"):
        assert header in out
    assert "Groove Salad" in out
    assert "Indie Pop Rocks!" in out
    assert "Served best chilled, safe with most medications." in out


def test_list_shortcut(stations, console):
    shell, _ = _shell(stations, console)
    shell.handle("1")
    assert "Drone Zone" in _output(console)


def test_play_by_id_uses_best_playlist(stations, console):
    options = Options(format="aac", quality="highest", show_track=True)
    shell, player = _shell(stations, console, options)

    assert shell.handle("play 1") is True
    assert shell.handle("2 2") is True

    assert player.plays == [
        ("http://gs/aac-highest.pls", "Groove Salad", True, False),
        ("A", "Drone Zone", True, False),
    ]


def test_play_invalid_id_leaves_playback_alone(stations, console):
    shell, player = _shell(stations, console)
    shell.handle("play 1")

    shell.handle("play 5")
    shell.handle("play 0")

    assert _output(console).count("Invalid station ID.") == 2
    assert len(player.plays) == 1
    assert player.stops == 0


def test_station_without_playlists(console):
    shell, player = _shell([Station("Silence")], console)

    shell.handle("play 1")

    assert "No playable stream for Silence." in _output(console)
    assert player.plays == []


def test_unknown_commands(stations, console):
    shell, player = _shell(stations, console)

    for cmd in ("", "play", "play x", "2 1 2", "stop"):
        assert shell.handle(cmd) is True

    assert _output(console).count("Invalid command. Please try again.") == 5
    assert player.plays == []


def test_quit_stops_playback(stations, console):
    shell, player = _shell(stations, console)

    assert shell.handle("quit") is False
    assert shell.handle("3") is False

    assert player.stops == 2
    assert "Exiting the client. Goodbye!" in _output(console)


def test_run_loop(stations, console):
    shell, player = _shell(stations, console, lines=["list", "play 2", "bogus", "quit"])

    shell.run()

    out = _output(console)
    assert out.startswith("Welcome to the interactive SomaFM client!")
    assert "1. list - List available stations" in out
    assert "Invalid command. Please try again." in out
    assert player.plays[0][1] == "Drone Zone"
    assert player.stops == 1


def test_run_ends_on_eof(stations, console):
    shell, player = _shell(stations, console, lines=["list"])

    shell.run()

    assert "Exiting the client. Goodbye!" in _output(console)
    assert player.stops == 1


def test_autoplay_matches_title_and_blocks(stations, console):
    shell, player = _shell(stations, console, Options(format="mp3"))

    shell.autoplay("drone ZONE")

    assert "Auto-playing stream: Drone Zone" in _output(console)
    assert player.plays == [("B", "Drone Zone", False, False)]
    assert player.waits == 1


def test_autoplay_no_match(console):
    shell, player = _shell([Station("abc")], console)

    shell.autoplay("xyz")

    assert "No stream found matching 'xyz'." in _output(console)
    assert player.plays == []


def test_autoplay_empty_catalog(console):
    shell, player = _shell([], console)
    shell.autoplay("Drone Zone")
    assert "No stream found matching 'Drone Zone'." in _output(console)


def test_refresh_only_applies_to_first_fetch(stations, console):
    shell, _ = _shell(stations, console, refresh=True)

    shell.handle("list")
    shell.handle("list")

    assert shell.catalog.refreshes == [True, False]
