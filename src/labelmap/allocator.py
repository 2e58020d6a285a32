"""
Choose a free label for objects pushed without an explicit label.

Appending after the largest label is O(1); the search only degrades to a
linear scan when both ends of the label range are blocked by the dtype
limits or the background value.
"""

import logging

import numpy as np

from .errors import FullError

logger = logging.getLogger(__name__)


def next_label(labels, background=0, dtype=np.uint32):
    """
    Parameters
    ----------
    labels : sequence of int
        Labels in use, in ascending order. Must not contain `background`.
    background : int
        Reserved background value, never returned.
    dtype : numpy integer dtype
        Label type; its limits bound the search.

    Returns
    -------
    label : int
        An unused, non-background label.

    Raises
    ------
    FullError
        If no gap exists between the first and last labels and both ends are blocked.
    """
    if not len(labels):
        return 1 if background == 0 else 0

    info = np.iinfo(dtype)
    lo, hi = int(info.min), int(info.max)
    first, last = labels[0], labels[-1]

    if last != hi and last + 1 != background:
        return last + 1
    if last != hi and last + 1 != hi and last + 2 != background:
        return last + 2
    if first != lo and first - 1 != background:
        return first - 1

    logger.warning('label range [%d, %d] blocked at both ends, scanning %d labels for a gap',
                   first, last, len(labels))
    candidate = first
    for label in labels:
        if candidate == background:
            candidate += 1
        if candidate != label:
            return candidate
        candidate += 1
    raise FullError("Can't push the label object: the label map is full.")
