from __future__ import annotations

import logging
from collections.abc import Collection, Iterable, Iterator
from pathlib import Path

from img_tool.errors import DiscoveryError

LOGGER = logging.getLogger(__name__)


def iter_candidate_paths(input_path: Path, *, exclude: Iterable[Path] = ()) -> Iterator[Path]:
    """
    Resolve `input_path` into a lazy sequence of candidate image paths.

    A regular file yields itself. A directory yields every regular file below it:
    the files of each directory sorted by name, then its subdirectories in name
    order. Directories in `exclude` are skipped.

    Raises DiscoveryError immediately when the input is missing, is neither a
    file nor a directory, or is a directory that cannot be listed.
    """
    if input_path.is_file():
        return iter((input_path,))
    if input_path.is_dir():
        excluded = frozenset(p.resolve() for p in exclude)
        try:
            listing = _list_dir(input_path)
        except OSError as e:
            raise DiscoveryError(input_path, f"cannot list input directory ({e.strerror or e})") from e
        return _walk(input_path, listing, excluded=excluded, visited=set())
    if not input_path.exists():
        raise DiscoveryError(input_path, "input path does not exist")
    raise DiscoveryError(input_path, "input path is neither a file nor a directory")


def _list_dir(directory: Path) -> tuple[tuple[int, int], list[Path]]:
    st = directory.stat()
    return (st.st_dev, st.st_ino), sorted(directory.iterdir(), key=lambda p: p.name)


def _walk(
    directory: Path,
    listing: tuple[tuple[int, int], list[Path]],
    *,
    excluded: frozenset[Path],
    visited: set[tuple[int, int]],
) -> Iterator[Path]:
    key, entries = listing

    # Symlinked directories may point back up the tree.
    if key in visited:
        LOGGER.debug("Already visited %s, skipping", directory)
        return
    visited.add(key)

    subdirs: list[Path] = []
    for entry in entries:
        if entry.is_file():
            yield entry
        elif entry.is_dir():
            if entry.resolve() in excluded:
                LOGGER.debug("Excluding %s from discovery", entry)
                continue
            subdirs.append(entry)

    for sub in subdirs:
        try:
            sub_listing = _list_dir(sub)
        except OSError as e:
            LOGGER.warning("Skipping unreadable directory %s: %s", sub, e)
            continue
        yield from _walk(sub, sub_listing, excluded=excluded, visited=visited)


def map_output_path(*, output_dir: Path, input_root: Path | None, image_path: Path, suffix: str) -> Path:
    """
    Place `image_path` under `output_dir` with its suffix replaced.

    With an `input_root` the relative directory structure below it is mirrored;
    without one the file lands directly in `output_dir`.
    """
    if input_root is None:
        rel = Path(image_path.name)
    else:
        rel = image_path.relative_to(input_root)
    return (output_dir / rel).with_suffix(suffix)


def path_key(path: Path) -> str:
    return str(path).casefold()


def disambiguate(path: Path, taken: Collection[str]) -> Path:
    """
    Return `path`, or the first `<stem>_<n><suffix>` sibling whose key is not in `taken`.

    Keys are compared case-insensitively (see `path_key`).
    """
    candidate = path
    n = 0
    while path_key(candidate) in taken:
        n += 1
        candidate = path.with_name(f"{path.stem}_{n}{path.suffix}")
    if n:
        LOGGER.info("Output path %s already used in this run, writing %s", path, candidate.name)
    return candidate
