# bga_geek/scan/bga.py
from __future__ import annotations

from typing import List, Optional

from bs4 import BeautifulSoup

from bga_geek.models import Task
from bga_geek.utils import game_id_from_url, name_from_game_id


def _soup(html) -> BeautifulSoup:
    if isinstance(html, BeautifulSoup):
        return html
    return BeautifulSoup(html or "", "html.parser")


def scan_gamelist(html) -> List[Task]:
    """
    Tasks for every game card on a BGA /gamelist page.

    Cards are <a class="bga-game-item" href="...?game=<id>">; the visible
    name lives in .gamename (or .text-center on older layouts). Targets are
    the game ids.
    """
    soup = _soup(html)
    tasks: List[Task] = []
    seen: set[str] = set()

    for card in soup.select(".bga-game-item"):
        href = (card.get("href") or "").strip()
        if "game=" not in href:
            continue

        gid = href.split("game=", 1)[1].split("&", 1)[0].strip()
        if not gid or gid in seen:
            continue
        seen.add(gid)

        name_el = card.select_one(".gamename, .text-center")
        name = name_el.get_text(" ", strip=True) if name_el else ""
        if not name:
            name = name_from_game_id(gid)

        tasks.append(Task(external_id=gid, raw_name=name, target=gid, mode="list"))

    return tasks


def scan_gamepanel(html, url: str = "") -> Optional[Task]:
    """
    Task for a BGA /gamepanel?game=<id> page, or None.

    The name comes from the document title ("Azul • Board Game Arena").
    """
    soup = _soup(html)

    gid = game_id_from_url(url)
    if not gid:
        canonical = soup.find("link", rel="canonical")
        if canonical and canonical.get("href"):
            gid = game_id_from_url(str(canonical["href"]))
    if not gid:
        return None

    title = soup.title.get_text(strip=True) if soup.title else ""
    name = title.split(" • ")[0].strip() or name_from_game_id(gid)

    return Task(external_id=gid, raw_name=name, target=gid, mode="panel")


def scan_page(html, url: str = "") -> List[Task]:
    soup = _soup(html)

    if "gamepanel" in url or soup.select_one(".panel-header") is not None:
        task = scan_gamepanel(soup, url)
        return [task] if task else []

    return scan_gamelist(soup)
