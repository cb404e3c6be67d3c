"""Persist check results as a JSON status document."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

from status_checker.results import ResultCollector

LOGGER = logging.getLogger(__name__)


def write_status_file(
    document: List[Dict[str, Any]],
    path: Union[str, Path],
    *,
    indent: int = 2,
) -> Path:
    """Write ``document`` to ``path`` as a JSON array and return the path.

    The file is written to a sibling temporary path first and then moved into
    place, so readers never observe a half-written document.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = target.with_name(target.name + ".tmp")
    tmp_path.write_text(json.dumps(document, indent=indent, ensure_ascii=False) + "\n", encoding="utf-8")
    tmp_path.replace(target)
    LOGGER.info("Wrote %d result(s) to %s", len(document), target)
    return target


def save_results(collector: ResultCollector, path: Union[str, Path]) -> Path:
    return write_status_file(collector.to_persistable_form(), path)


__all__ = ["save_results", "write_status_file"]
