"""Search, list and download series from the AnimeUnity site."""

from __future__ import annotations

import json
import os
import re
from concurrent.futures import ThreadPoolExecutor

import requests
from bs4 import BeautifulSoup

from .bloom_filter import BloomFilter, get_filter
from .http_client import ApiClient, ApiClientError
from .models import Episode, Serie

BASE_URL = "https://www.animeunity.so"
CHUNK_SIZE = 120
_MAX_EPISODE_NUMBER = 0xFFFF
_DOWNLOAD_URL = re.compile(r"""window.downloadUrl\s*=\s*['"]([^"]+)['"]""")


class DownloadError(Exception):
    """Raised when an episode cannot be located or saved."""


def _is_empty(payload: bytes | None) -> bool:
    return not payload or payload.strip() == b"null"


def parse_search(payload: bytes) -> list[Serie]:
    """Turn a live-search response into series; an empty response gives none."""
    if _is_empty(payload):
        return []
    data = json.loads(payload)
    records = data.get("records") if isinstance(data, dict) else None
    return [
        Serie(
            id=str(record.get("id") or 0),
            name=record.get("title_eng") or "",
            image_url=record.get("imageurl") or "",
            episodes=int(record.get("episodes_count") or 0),
            slug=record.get("slug") or "",
        )
        for record in records or []
    ]


def _episode_number(raw: object) -> int | None:
    if not isinstance(raw, str):
        raise ValueError(f"episode number {raw!r} is not a string")
    if not raw or not raw.isascii() or not raw.isdigit():
        return None
    number = int(raw)
    return number if number <= _MAX_EPISODE_NUMBER else None


def parse_episodes(payload: bytes) -> list[Episode]:
    """Turn one episode-range response into episodes, skipping odd numbers like "12.5"."""
    data = json.loads(payload)
    raw_episodes = data.get("episodes") if isinstance(data, dict) else None
    episodes = []
    for raw in raw_episodes or []:
        number = _episode_number(raw.get("number", ""))
        if number is None:
            continue
        episodes.append(
            Episode(
                id=int(raw.get("id") or 0),
                number=number,
                episode_code=str(raw.get("scws_id") or 0),
            )
        )
    return episodes


def find_embed_url(html: bytes | str) -> str | None:
    """Return the embed URL of the page's video player, if any."""
    soup = BeautifulSoup(html, "html.parser")
    found = [player["embed_url"] for player in soup.find_all("video-player") if player.has_attr("embed_url")]
    return found[-1] if found else None


def find_download_url(html: bytes | str) -> str | None:
    """Return the download URL assigned in the embed page's scripts, if any."""
    soup = BeautifulSoup(html, "html.parser")
    found = None
    for script in soup.find_all("script"):
        text = "".join(str(child) for child in script.contents)
        match = _DOWNLOAD_URL.search(text)
        if match:
            found = match.group(1)
    return found


class AnimeUnity:
    """A provider that talks to the AnimeUnity API."""

    def __init__(self, client: ApiClient | None = None, bloom: BloomFilter | None = None) -> None:
        self.client = client if client is not None else ApiClient(BASE_URL)
        self.bloom = bloom if bloom is not None else get_filter()
        self.anime: Serie | None = None

    def search(self, query: str) -> list[Serie]:
        """Return the series whose title matches ``query``."""
        payload = self.client.request("POST", "/livesearch", json.dumps({"title": query}, separators=(",", ":")))
        if _is_empty(payload):
            print("Response is empty")
            return []
        return parse_search(payload)

    def _fetch_range(self, anime_id: int, start: int) -> bytes | None:
        endpoint = f"/info_api/{anime_id}/1?start_range={start}&end_range={start + CHUNK_SIZE - 1}"
        try:
            return self.client.request("GET", endpoint)
        except ApiClientError:
            return None

    def get_episodes(self, serie: Serie) -> list[Episode]:
        """Fetch every episode of ``serie`` and select it for later downloads."""
        anime_id = int(serie.id)
        if anime_id < 0:
            raise ValueError(f"invalid series id {serie.id!r}")
        self.anime = serie

        starts = list(range(1, serie.episodes + 1, CHUNK_SIZE))
        if not starts:
            return []
        with ThreadPoolExecutor(max_workers=len(starts)) as executor:
            payloads = list(executor.map(lambda start: self._fetch_range(anime_id, start), starts))

        episodes = [
            episode
            for payload in payloads
            if payload is not None
            for episode in parse_episodes(payload)
        ]
        episodes.sort(key=lambda episode: episode.number)
        return episodes

    def download_episode(self, episode: Episode, root_dir: str) -> str:
        """Download ``episode`` of the selected series and return the saved file's path."""
        if self.anime is None:
            raise DownloadError("no series selected")
        anime = self.anime
        base_path = f"{root_dir}/{anime.slug}"
        full_path = f"{base_path}/{episode.number}.mp4"

        if self.bloom.contains(full_path) and os.path.exists(full_path):
            return full_path

        try:
            page = self.client.request("GET", f"/anime/{anime.id}-{anime.slug}/{episode.id}")
        except ApiClientError as exc:
            raise DownloadError(str(exc)) from exc
        if _is_empty(page):
            raise DownloadError("response is empty")

        embed_url = find_embed_url(page)
        if not embed_url:
            raise DownloadError("embed url not found")

        try:
            embed_html = requests.get(embed_url).content
        except requests.RequestException as exc:
            raise DownloadError(str(exc)) from exc
        if _is_empty(embed_html):
            raise DownloadError("embed response is empty")

        download_url = find_download_url(embed_html)
        if not download_url:
            raise DownloadError("download url not found")

        try:
            with requests.get(download_url, stream=True) as response:
                if response.status_code != 200:
                    raise DownloadError(f"bad response status: {response.status_code} {response.reason}")
                os.makedirs(base_path, exist_ok=True)
                with open(full_path, "wb") as out:
                    for chunk in response.iter_content(chunk_size=1 << 16):
                        out.write(chunk)
        except requests.RequestException as exc:
            raise DownloadError(str(exc)) from exc

        return full_path