"""Plain data records shared by the providers, the user history and the CLI."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Episode:
    """A single episode of a series as exposed by a provider."""

    id: int
    number: int
    episode_code: str = ""


@dataclass(frozen=True)
class Serie:
    """A series found by a provider search."""

    id: str
    name: str = ""
    image_url: str = ""
    episodes: int = 0
    slug: str = ""