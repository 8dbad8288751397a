"""Command line entry point: pick a series and an episode, then download them."""

from __future__ import annotations

import argparse
import os
import sys

from dotenv import load_dotenv

from .animeunity import AnimeUnity
from .bloom_filter import get_filter
from .models import Episode, Serie
from .task_pool import TaskPool, get_pool
from .user import User, get_user

PROVIDER = "animeunity"
_MAX_COUNT = 0xFFFF


def parse_selection(text: str, count: int) -> int:
    """Turn a 1-based menu choice into a 0-based index into ``count`` items."""
    text = text.strip()
    if not text:
        raise ValueError("Invalid selection")
    if not all(char.isdigit() for char in text):
        raise ValueError("Only digit are allowed")
    choice = int(text)
    if choice < 1 or choice > count or choice > _MAX_COUNT:
        raise ValueError("Invalid selection")
    return choice - 1


def parse_count(text: str | None) -> int | None:
    """Parse DOWNLOAD_NEXT_EPISODES; ``None`` when unset, capped at 65535."""
    if not text:
        return None
    if not all(char.isdigit() for char in text):
        raise ValueError("Only digit are allowed in DOWNLOAD_NEXT_EPISODES")
    return min(int(text), _MAX_COUNT)


def _read_line() -> str:
    return sys.stdin.readline()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="seriesdl", description="Download series episodes.")
    parser.add_argument("-title", "--title", default="", help="Anime title")
    parser.add_argument("-user", "--user", default="", help="User .env file for configuration loading")
    return parser


def _download_main(provider: AnimeUnity, user: User, serie: Serie, episode: Episode) -> None:
    print(f"Downloading main episode {episode.number}")
    try:
        path = provider.download_episode(episode, user.root_dir)
    except Exception as exc:
        print(f"Error downloading episode {episode.number}: {exc}")
        return
    print(f"Episode downloaded: {episode.number}")
    user.add_history(PROVIDER, serie.id, episode)
    print(f"Episode ready to play: {path}")


def _download_extra(provider: AnimeUnity, root_dir: str, episode: Episode) -> None:
    print(f"Downloading episode {episode.number}")
    try:
        provider.download_episode(episode, root_dir)
    except Exception as exc:
        print(f"Error downloading episode {episode.number}: {exc}")
        return
    print(f"Episode downloaded: {episode.number}")


def _resume_point(user: User, serie: Serie) -> Episode | None:
    resume = None
    for entry in user.history():
        if entry.anime_id != serie.id:
            continue
        print(f"Current episode: {entry.episode_number}")
        print("Do you want to whatch the next episode? (y/n)")
        if _read_line().strip().lower() == "y":
            resume = Episode(id=entry.episode_id, number=entry.episode_number)
    return resume


def _queue_next(pool: TaskPool, provider: AnimeUnity, root_dir: str, episodes: list[Episode], start: int) -> int:
    try:
        count = parse_count(os.environ.get("DOWNLOAD_NEXT_EPISODES"))
    except ValueError as exc:
        print(exc)
        return 0
    if count is None:
        return 0
    print(f"Downloading {count} next episodes")
    for episode in episodes[start:start + count]:
        pool.add_task(lambda episode=episode: _download_extra(provider, root_dir, episode))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run the interactive downloader."""
    args = _build_parser().parse_args(argv)

    env_file = f"{args.user}.env"
    print(f"Loading env file: {env_file}")
    if not os.path.exists(env_file):
        print(f"Env file not found: {env_file}")
        return 1
    load_dotenv(env_file)

    root_dir = os.environ.get("USER_ROOT_DIR", "")
    if not root_dir:
        print("USER_ROOT_DIR is not set")
        return 1

    bloom = get_filter()
    user = get_user(args.user, root_dir)
    print(bloom.bits)

    if not args.title:
        print("Please provide an anime title")
        return 1

    provider = AnimeUnity(bloom=bloom)
    series = provider.search(args.title)
    if not series:
        print("No results found")
        return 1

    for number, serie in enumerate(series, start=1):
        print(f"{number} - {serie.slug}")
    print("Select anime")
    try:
        selected_serie = series[parse_selection(_read_line(), len(series))]
    except ValueError as exc:
        print(exc)
        return 1

    resume = _resume_point(user, selected_serie)
    episodes = provider.get_episodes(selected_serie)

    if resume is not None:
        if len(episodes) <= resume.number:
            print("Anime is over, well done!")
            return 0
        print(f"Continue watching episode {resume.number + 1}")
        selected_episode = episodes[resume.number]
    else:
        for number, episode in enumerate(episodes, start=1):
            print(f"{number} - {episode.number}")
        try:
            selected_episode = episodes[parse_selection(_read_line(), len(episodes))]
        except ValueError as exc:
            print(exc)
            return 1

    pool = get_pool()
    pool.add_task(lambda: _download_main(provider, user, selected_serie, selected_episode))
    # Episode numbers start at 1 at index 0, so the selected number is the index of the next one.
    status = _queue_next(pool, provider, user.root_dir, episodes, selected_episode.number)
    pool.wait()
    return status


if __name__ == "__main__":
    sys.exit(main())