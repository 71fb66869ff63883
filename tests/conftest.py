import io

import pytest
from rich.console import Console

from fakes import FakePopen
from somacli.core.models import Playlist, Station


@pytest.fixture
def drone_zone():
    return Station(
        title="Drone Zone",
        description="Served best chilled, safe with most medications.",
        playlists=(
            Playlist("aac", "highest", "A"),
            Playlist("mp3", "low", "B"),
        ),
    )


@pytest.fixture
def stations(drone_zone):
    return [
        Station("Groove Salad", "A nicely chilled plate of ambient beats.", (
            Playlist("mp3", "high", "http://gs/mp3-high.pls"),
            Playlist("aac", "highest", "http://gs/aac-highest.pls"),
        )),
        drone_zone,
        Station("Indie Pop Rocks!", "New and classic favorite indie pop tracks.", (
            Playlist("mp3", "highest", "http://ipr/mp3.pls"),
        )),
    ]


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=200, color_system=None)


@pytest.fixture
def popen():
    return FakePopen()
