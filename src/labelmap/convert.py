import logging

import numpy as np
import fastremap
from numba import njit

from .label_map import LabelMap
from .label_object import as_index

logger = logging.getLogger(__name__)


@njit(cache=True)
def _encode_runs(rows, background, has_background):
    """
    Run-length encode each row of a 2D label array, skipping background
    unless has_background is False.
    Returns (row, start, length) triplets and the label of each run.
    """
    n_rows, width = rows.shape
    runs = np.empty((rows.size, 3), np.int64)
    values = np.empty(rows.size, rows.dtype)
    r = 0
    for i in range(n_rows):
        j = 0
        while j < width:
            v = rows[i, j]
            if has_background and v == background:
                j += 1
                continue
            k = j + 1
            while k < width and rows[i, k] == v:
                k += 1
            runs[r, 0] = i
            runs[r, 1] = j
            runs[r, 2] = k - j
            values[r] = v
            r += 1
            j = k
    return runs[:r], values[:r]


def label_map_from_image(labels, background=0, dtype=None):
    """
    Build a LabelMap from a dense label image.

    Parameters
    ----------
    labels : ndarray
        Integer label image, any number of dimensions >= 1. Read-only arrays are fine.
    background : int
        Value treated as unlabeled. Default 0.
    dtype : numpy integer dtype, optional
        Label type of the map. Defaults to the dtype of `labels`.

    Returns
    -------
    label_map : LabelMap
        One label object per non-background value, with lines along the last axis.
    """
    labels = np.asarray(labels)
    if not np.issubdtype(labels.dtype, np.integer):
        raise TypeError('label image must have an integer dtype, got {}'.format(labels.dtype))
    if labels.ndim == 0:
        raise ValueError('label image must have at least one dimension')
    label_map = LabelMap(background=background, dtype=labels.dtype if dtype is None else dtype)
    if labels.size == 0:
        return label_map

    rows = np.ascontiguousarray(labels).reshape(-1, labels.shape[-1])
    if not rows.flags.writeable:
        rows = rows.copy()
    # a background that does not fit the image dtype cannot match any pixel
    info = np.iinfo(rows.dtype)
    has_background = bool(info.min <= label_map.background <= info.max)
    background = rows.dtype.type(label_map.background if has_background else 0)
    runs, values = _encode_runs(rows, background, has_background)

    if not values.size:
        return label_map

    objects = {value: label_map.label_object_type(value) for value in fastremap.unique(values).tolist()}
    if labels.ndim > 1:
        prefixes = np.stack(np.unravel_index(runs[:, 0], labels.shape[:-1]), axis=1).tolist()
    else:
        prefixes = [[]] * len(runs)
    # runs come out in C order, so each object's lines are already sorted and disjoint
    for prefix, (_, start, length), value in zip(prefixes, runs.tolist(), values.tolist()):
        objects[value].add_line(tuple(prefix) + (start,), length)

    for value in sorted(objects):
        label_map.add_label_object(objects[value])
    logger.debug('encoded %d runs into %d label objects', len(runs), len(objects))
    return label_map


def label_map_to_image(label_map, shape, dtype=None):
    """
    Paint a LabelMap into a dense array of the given shape, filled with the
    map's background value where no label object is present.

    Raises IndexError, before painting anything, if a line falls outside `shape`.
    """
    shape = as_index(shape)
    painted = []
    for obj in label_map:
        for line in obj.lines:
            idx = line.index
            if (len(idx) != len(shape) or min(idx) < 0 or line.end > shape[-1]
                    or any(i >= s for i, s in zip(idx[:-1], shape[:-1]))):
                raise IndexError('line at {} of length {} (label {}) is outside shape {}'.format(
                    idx, line.length, obj.label, shape))
            painted.append((idx[:-1] + (slice(idx[-1], line.end),), obj.label))

    out = np.full(shape, label_map.background, dtype=label_map.dtype if dtype is None else dtype)
    for where, label in painted:
        out[where] = label
    return out
