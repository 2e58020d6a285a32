import bisect

from .errors import OutOfRangeError


class LabelStore:
    """
    Mapping of label -> label object, enumerated in ascending label order.

    `on_change` is called with no arguments after every structural change.
    Keeping the background label out of the store is up to the owner.
    """

    def __init__(self, on_change=None):
        self._objects = {}
        self._labels = []  # sorted keys of _objects
        self._on_change = on_change

    def _changed(self):
        if self._on_change is not None:
            self._on_change()

    def find(self, label):
        return self._objects.get(label)

    def insert(self, label, obj):
        """Insert obj under label, replacing any object already there."""
        if label not in self._objects:
            bisect.insort(self._labels, label)
        self._objects[label] = obj
        self._changed()

    def erase(self, label):
        if label not in self._objects:
            return False
        del self._objects[label]
        del self._labels[bisect.bisect_left(self._labels, label)]
        self._changed()
        return True

    def clear(self):
        if not self._objects:
            return False
        self._objects.clear()
        self._labels.clear()
        self._changed()
        return True

    def assign(self, other):
        """Replace the contents with the entries of another store. Objects are shared, not copied."""
        self._objects = dict(other._objects)
        self._labels = list(other._labels)
        self._changed()

    def first(self):
        return self._labels[0] if self._labels else None

    def last(self):
        return self._labels[-1] if self._labels else None

    def nth(self, position):
        if position < 0 or position >= len(self._labels):
            raise OutOfRangeError(
                "Can't access the label object at position {}. The label map has only {} label objects."
                .format(position, len(self._labels)))
        return self._objects[self._labels[position]]

    def labels(self):
        return list(self._labels)

    def objects(self):
        return [self._objects[label] for label in self._labels]

    def items(self):
        return [(label, self._objects[label]) for label in self._labels]

    def __len__(self):
        return len(self._labels)

    def __contains__(self, label):
        return label in self._objects

    def __iter__(self):
        return iter(self.labels())
