import operator

import numpy as np


def as_index(idx):
    """
    Normalize a position to a tuple of python ints (numpy axis order).
    Accepts tuples, lists, numpy arrays and numpy integer scalars.
    """
    if isinstance(idx, np.ndarray):
        idx = idx.tolist()
    try:
        return tuple(operator.index(i) for i in idx)
    except TypeError:
        # a bare integer is a 1-D position
        return (operator.index(idx),)


class Line:
    """
    A run of `length` consecutive positions along the last axis, starting at `index`.
    """
    __slots__ = ("index", "length")

    def __init__(self, index, length):
        self.index = as_index(index)
        self.length = operator.index(length)

    @property
    def end(self):
        # exclusive
        return self.index[-1] + self.length

    def has_index(self, idx):
        return idx[:-1] == self.index[:-1] and self.index[-1] <= idx[-1] < self.end

    def is_next_to(self, idx):
        return idx[:-1] == self.index[:-1] and idx[-1] == self.end

    def __eq__(self, other):
        if not isinstance(other, Line):
            return NotImplemented
        return self.index == other.index and self.length == other.length

    def __repr__(self):
        return 'Line(index={}, length={})'.format(self.index, self.length)


class LabelObject:
    """
    Set of positions sharing one label, stored as run-length lines.

    Lines are kept in insertion order until optimize() sorts and merges them,
    so size() can over count when overlapping lines were added with add_line().
    """

    def __init__(self, label=0):
        self.label = label
        self._lines = []

    @property
    def lines(self):
        return list(self._lines)

    @property
    def ndim(self):
        if not self._lines:
            return None
        return len(self._lines[0].index)

    def _check_index(self, idx):
        idx = as_index(idx)
        if len(idx) == 0:
            raise ValueError('index must have at least one dimension')
        ndim = self.ndim
        if ndim is not None and len(idx) != ndim:
            raise ValueError('index {} does not match the {}-D lines of label {}'.format(idx, ndim, self.label))
        return idx

    def has_index(self, idx):
        idx = self._check_index(idx)
        return any(line.has_index(idx) for line in self._lines)

    def add_index(self, idx):
        idx = self._check_index(idx)
        if any(line.has_index(idx) for line in self._lines):
            return
        if self._lines and self._lines[-1].is_next_to(idx):
            self._lines[-1].length += 1
        else:
            self._lines.append(Line(idx, 1))

    def add_line(self, idx, length):
        idx = self._check_index(idx)
        length = operator.index(length)
        if length < 1:
            raise ValueError('line length must be positive, got {}'.format(length))
        self._lines.append(Line(idx, length))

    def remove_index(self, idx):
        """
        Remove idx from every line that holds it, splitting lines as needed.
        Returns True if the position was present.
        """
        idx = self._check_index(idx)
        removed = False
        lines = []
        for line in self._lines:
            if not line.has_index(idx):
                lines.append(line)
                continue
            removed = True
            prefix = line.index[:-1]
            start, x, end = line.index[-1], idx[-1], line.end
            if x > start:
                lines.append(Line(prefix + (start,), x - start))
            if x + 1 < end:
                lines.append(Line(prefix + (x + 1,), end - x - 1))
        self._lines = lines
        return removed

    def empty(self):
        return not self._lines

    def clear(self):
        self._lines = []

    def size(self):
        return sum(line.length for line in self._lines)

    def number_of_lines(self):
        return len(self._lines)

    def indices(self):
        for line in self._lines:
            prefix = line.index[:-1]
            for x in range(line.index[-1], line.end):
                yield prefix + (x,)

    def optimize(self):
        """Sort lines in C order and merge the ones that touch or overlap."""
        merged = []
        for line in sorted(self._lines, key=lambda l: l.index):
            last = merged[-1] if merged else None
            if last is not None and last.index[:-1] == line.index[:-1] and line.index[-1] <= last.end:
                last.length = max(last.end, line.end) - last.index[-1]
            else:
                merged.append(Line(line.index, line.length))
        self._lines = merged

    def bounding_box(self):
        """
        Returns
        -------
        (lo, hi) : tuple of ndarray
            Inclusive per-axis min and max positions, or None if the object is empty.
        """
        if not self._lines:
            return None
        starts = np.array([line.index for line in self._lines], dtype=np.int64)
        stops = starts.copy()
        stops[:, -1] += np.array([line.length for line in self._lines], dtype=np.int64) - 1
        return starts.min(axis=0), stops.max(axis=0)

    def copy(self):
        other = type(self)(self.label)
        other._lines = [Line(line.index, line.length) for line in self._lines]
        return other

    def __repr__(self):
        return '{}(label={}, lines={}, size={})'.format(type(self).__name__, self.label,
                                                      len(self._lines), self.size())
