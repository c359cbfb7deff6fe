"""
Tests for the BGA page scanners.
"""

from bga_geek.models import Task
from bga_geek.scan.bga import scan_gamelist, scan_gamepanel, scan_page


GAMELIST = """
<html><body><div class="games">
  <a class="bga-game-item" href="/gamepanel?game=azul">
    <img src="azul.png"><div class="gamename">Azul</div>
  </a>
  <a class="bga-game-item" href="/gamepanel?game=sevenWonders">
    <img src="7w.png">
  </a>
  <a class="bga-game-item" href="/gamepanel?game=azul"><div class="gamename">Azul</div></a>
  <a class="bga-game-item" href="/gamepanel?game=carcassonne&amp;ref=home">
    <div class="text-center">Carcassonne</div>
  </a>
  <a class="bga-game-item">Broken card</a>
</div></body></html>
"""

PANEL = """
<html><head>
<title>Spiele Carcassonne im Browser • Board Game Arena</title>
<link rel="canonical" href="https://boardgamearena.com/gamepanel?game=carcassonne">
</head><body>
<div class="panel-header"><div class="flex justify-start items-center"></div></div>
</body></html>
"""


class TestScanGamelist:
    def test_cards(self):
        tasks = scan_gamelist(GAMELIST)
        assert tasks == [
            Task(external_id="azul", raw_name="Azul", target="azul", mode="list"),
            Task(external_id="sevenWonders", raw_name="seven Wonders", target="sevenWonders", mode="list"),
            Task(external_id="carcassonne", raw_name="Carcassonne", target="carcassonne", mode="list"),
        ]

    def test_empty_page(self):
        assert scan_gamelist("<html></html>") == []


class TestScanGamepanel:
    def test_id_from_url(self):
        task = scan_gamepanel(PANEL, "https://boardgamearena.com/gamepanel?game=carcassonne")
        assert task == Task(
            external_id="carcassonne",
            raw_name="Spiele Carcassonne im Browser",
            target="carcassonne",
            mode="panel",
        )

    def test_id_from_canonical_link(self):
        assert scan_gamepanel(PANEL).external_id == "carcassonne"

    def test_no_id(self):
        assert scan_gamepanel("<html><title>x</title></html>", "https://boardgamearena.com/") is None


class TestScanPage:
    def test_dispatch(self):
        assert [t.mode for t in scan_page(PANEL)] == ["panel"]
        assert [t.external_id for t in scan_page(GAMELIST, "https://boardgamearena.com/gamelist")] == [
            "azul",
            "sevenWonders",
            "carcassonne",
        ]
