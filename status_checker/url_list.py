"""Helpers for loading URL lists from text files and command-line arguments."""

from pathlib import Path
from typing import Iterable, List, Sequence, Union


def parse_url_lines(lines: Iterable[str]) -> List[str]:
    """Return stripped URLs from ``lines``, skipping blanks and ``#`` comments.

    Order is preserved and duplicates are kept; each occurrence is checked.
    """
    urls: List[str] = []
    for line in lines:
        normalized = line.strip()
        if not normalized or normalized.startswith("#"):
            continue
        urls.append(normalized)
    return urls


def load_url_file(path: Union[str, Path]) -> List[str]:
    """
    Return the URLs listed in ``path``, one per line.

    Lines beginning with `#` and blank lines are ignored.
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"URL list not found: {file_path}")
    return parse_url_lines(file_path.read_text(encoding="utf-8").splitlines())


def collect_urls(files: Sequence[Union[str, Path]] = (), urls: Sequence[str] = ()) -> List[str]:
    """Combine URLs from ``files`` (in order) followed by explicit ``urls``."""
    collected: List[str] = []
    for path in files:
        collected.extend(load_url_file(path))
    collected.extend(parse_url_lines(urls))
    return collected


__all__ = ["collect_urls", "load_url_file", "parse_url_lines"]
