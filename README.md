# seriesdl

A small command-line tool that searches the AnimeUnity catalogue, downloads
the episode you pick, remembers where you stopped, and can fetch the next few
episodes in the background.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Configuration

Settings are read from an env file named `<user>.env` in the current
directory, where `<user>` is the value of the `--user` option (with no
`--user`, the file is `.env`). For a user called `alice`, create `alice.env`:

```
USER_ROOT_DIR=/home/alice/anime
DOWNLOAD_NEXT_EPISODES=2
MAX_CONCURRENT_DOWNLOADS=5
```

- `USER_ROOT_DIR` (required): where episodes and `history.json` are stored.
  Episodes are saved as `<USER_ROOT_DIR>/<slug>/<number>.mp4`.
- `DOWNLOAD_NEXT_EPISODES` (optional): how many episodes after the chosen one
  to download as well. Digits only, capped at 65535; any other value is
  reported and no extra episodes are fetched.
- `MAX_CONCURRENT_DOWNLOADS` (optional, default 5): how many downloads run at
  the same time. A value with non-digit characters is reported and the default
  is used; a value above 65535 or of 0 is an error.

If the env file is missing, or `USER_ROOT_DIR` is not set, the tool prints a
message and exits with status 1.

## Usage

```
seriesdl --user alice --title "one piece"
```

The options may also be written with a single dash (`-user`, `-title`).
`python -m seriesdl.cli` runs the same command.

1. The matching series are listed by number and slug. Type a number to choose
   one.
2. If your history already has this series, its current episode is shown and
   you are asked whether to continue with the next one (`y`/`n`). If the
   series has no further episode, the tool says so and stops.
3. Otherwise the episode list is shown; type the position of the episode you
   want.
4. The episode is downloaded. Once it is done it is recorded in your history
   and the path of the saved file is printed. Any further episodes requested
   through `DOWNLOAD_NEXT_EPISODES` are downloaded alongside it.

Selections must be digits and within the listed range; anything else prints
"Invalid selection" or "Only digit are allowed" and exits with status 1.

Episodes whose files were already under `USER_ROOT_DIR` when the tool started
are not downloaded again.

## History

Watched progress is kept in `<USER_ROOT_DIR>/history.json`: a JSON list with
one entry per series, holding `provider`, `anime_id`, `episode_id` and
`episode_number` of the last downloaded episode.

## Using it as a library

- `seriesdl.animeunity.AnimeUnity` – `search(query)`, `get_episodes(serie)`
  and `download_episode(episode, root_dir)`; failures to download raise
  `DownloadError`. The helpers `parse_search`, `parse_episodes`,
  `find_embed_url` and `find_download_url` work on raw responses and pages.
- `seriesdl.http_client.ApiClient` – sends requests to a site with the CSRF
  token taken from its `XSRF-TOKEN` cookie; raises `ApiClientError`.
- `seriesdl.user.User` – `history()` and `add_history(provider, anime_id,
  episode)`; `index_files(root_dir, bloom)` records existing files.
- `seriesdl.bloom_filter.BloomFilter` – a 32-bit Bloom filter keyed by
  `xxhash64`.
- `seriesdl.task_pool.TaskPool` – a fixed-size thread pool with `add_task`,
  `wait` and `close`.
- `seriesdl.models` – the `Episode` and `Serie` records.

## Limitations

- Only the AnimeUnity site is supported.
- Downloaded episodes are not opened in a video player; the tool only prints
  where the file was saved.
- There is no server or background mode: each run handles one series
  interactively and exits when its downloads finish.