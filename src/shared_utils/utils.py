import logging
import re
from typing import Iterable, List, Optional, Tuple

from typing_extensions import Protocol

logger = logging.getLogger(__name__)

_CHR_PREFIX = re.compile(r"^chr", re.IGNORECASE)
_DIGIT_RUNS = re.compile(r"([0-9]+)")


class ProgressMonitor(Protocol):
    def fire_progress_change(self, increment: int) -> None: ...


def notify_progress(monitor: Optional[ProgressMonitor], increment: int) -> None:
    """Report `increment` (on a 0-100 scale) to `monitor` if one is attached.

    A failing monitor never fails the import; its error is logged.
    """
    if monitor is None or increment <= 0:
        return
    try:
        monitor.fire_progress_change(increment)
    except Exception as e:
        logger.warning(f"Progress monitor failed: {e}")


def _natural_parts(name: str) -> Tuple[Tuple[int, int, str], ...]:
    parts = []
    # split() with a capturing group puts the digit runs at odd indexes
    for index, token in enumerate(_DIGIT_RUNS.split(name)):
        if not token:
            continue
        if index % 2:
            parts.append((0, int(token), token))
        else:
            parts.append((1, 0, token))
    return tuple(parts)


def chromosome_sort_key(name: str):
    """Sort key putting numbered chromosomes first, in numeric order.

    chr1, chr2, chr10, chrM, chrUn_gl000220, chrX, chrY
    """
    stripped = _CHR_PREFIX.sub("", name).lower()
    if stripped and _DIGIT_RUNS.fullmatch(stripped):
        return (0, int(stripped), (), name)
    return (1, 0, _natural_parts(stripped), name)


def sort_chromosome_names(names: Iterable[str]) -> List[str]:
    return sorted(names, key=chromosome_sort_key)
