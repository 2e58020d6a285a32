"""
Sparse label map: a segmented domain stored as one LabelObject per label.

Every position not held by a label object implicitly has the background
label. A position belongs to at most one label object after any of the
pixel-level operations returns.
"""

import logging
import operator

import numpy as np

from .allocator import next_label
from .errors import (BackgroundLabelError, LabelRangeError, NotFoundError,
                     NullHandleError, TypeMismatchError)
from .label_object import LabelObject, as_index
from .store import LabelStore

logger = logging.getLogger(__name__)

DEFAULT_BACKGROUND = 0
DEFAULT_DTYPE = np.uint32


class LabelMap:
    """
    Parameters
    ----------
    background : int
        Label of every position not held by a label object. Default 0.
    dtype : numpy integer dtype
        Label type. Labels must fit in it. Default uint32.
    on_modified : callable, optional
        Called with the map after every change.
    label_object_type : type
        Factory for label objects created by the pixel operations.
    """

    def __init__(self, background=DEFAULT_BACKGROUND, dtype=DEFAULT_DTYPE,
                 on_modified=None, label_object_type=LabelObject):
        dtype = np.dtype(dtype)
        if not np.issubdtype(dtype, np.integer):
            raise TypeError('label dtype must be an integer type, got {}'.format(dtype))
        self._dtype = dtype
        self._background = self._check_range(background)
        self._store = LabelStore(on_change=self.modified)
        # dimensionality of the positions, fixed by the first object with lines
        self._ndim = None
        self.on_modified = on_modified
        self.label_object_type = label_object_type
        self.modified_time = 0

    # -------- configuration --------------------------------------------

    @property
    def dtype(self):
        return self._dtype

    @property
    def ndim(self):
        return self._ndim

    @property
    def background(self):
        return self._background

    @background.setter
    def background(self, value):
        value = self._check_range(value)
        if value in self._store:
            raise BackgroundLabelError('Label {} is in use and cannot become the background label.'.format(value))
        if value != self._background:
            self._background = value
            self.modified()

    def modified(self):
        self.modified_time += 1
        if self.on_modified is not None:
            self.on_modified(self)

    def _check_range(self, label):
        label = operator.index(label)
        info = np.iinfo(self._dtype)
        if not info.min <= label <= info.max:
            raise LabelRangeError('Label {} does not fit in {}.'.format(label, self._dtype))
        return label

    def _check_label(self, label):
        # single guard for every label-targeted operation
        label = self._check_range(label)
        if label == self._background:
            raise BackgroundLabelError('Label {} is the background label.'.format(label))
        return label

    @staticmethod
    def _check_object(obj):
        if obj is None:
            raise NullHandleError("Input label object can't be None.")

    def _check_ndim(self, ndim):
        if ndim is not None and self._ndim is not None and ndim != self._ndim:
            raise ValueError('{}-D positions do not fit the {}-D label map.'.format(ndim, self._ndim))

    def _check_index(self, idx):
        idx = as_index(idx)
        if self._ndim is None:
            # objects registered empty may have gained lines since
            for obj in self._store.objects():
                self._ndim = getattr(obj, 'ndim', None)
                if self._ndim is not None:
                    break
        self._check_ndim(len(idx))
        return idx

    # -------- lifecycle ------------------------------------------------

    def initialize(self):
        self.clear_labels()

    def allocate(self):
        self.initialize()

    def graft(self, other):
        """
        Take the label objects and background value of another map of the same type.
        Objects are shared with `other`, not copied. Grafting None does nothing.
        """
        if other is None:
            return
        if type(other) is not type(self):
            raise TypeMismatchError('Cannot graft {} onto {}.'.format(type(other).__name__, type(self).__name__))
        self._dtype = other._dtype
        self._background = other._background
        self._ndim = other._ndim
        self._store.assign(other._store)
        logger.debug('grafted %d label objects, background %d', len(self._store), self._background)

    def copy(self):
        """Independent map with the same configuration and copies of every label object."""
        other = type(self)(self._background, self._dtype, label_object_type=self.label_object_type)
        other._ndim = self._ndim
        for obj in self._store.objects():
            other._store.insert(obj.label, obj.copy())
        return other

    # -------- label objects --------------------------------------------

    def get_label_object(self, label):
        label = self._check_label(label)
        obj = self._store.find(label)
        if obj is None:
            raise NotFoundError('No label object with label {}.'.format(label))
        return obj

    def has_label(self, label):
        label = operator.index(label)
        if label == self._background:
            return True
        return label in self._store

    def get_nth_label_object(self, pos):
        return self._store.nth(operator.index(pos))

    def number_of_label_objects(self):
        return len(self._store)

    def labels(self):
        return self._store.labels()

    def label_objects(self):
        return self._store.objects()

    def add_label_object(self, obj):
        """Register obj under obj.label, replacing any object already there."""
        self._check_object(obj)
        label = self._check_label(obj.label)
        ndim = getattr(obj, 'ndim', None)
        self._check_ndim(ndim)
        obj.label = label
        self._store.insert(label, obj)
        if self._ndim is None:
            self._ndim = ndim

    def push_label_object(self, obj, label=None):
        """
        Register obj under `label`, or under a free label when none is given.

        Returns
        -------
        label : int
            The label obj was registered with.
        """
        self._check_object(obj)
        if label is None:
            label = next_label(self._store.labels(), self._background, self._dtype)
            logger.debug('allocated label %d', label)
        else:
            label = self._check_label(label)
        obj.label = label
        self.add_label_object(obj)
        return label

    def remove_label_object(self, obj):
        self._check_object(obj)
        self.remove_label(obj.label)

    def remove_label(self, label):
        label = self._check_label(label)
        if not self._store.erase(label):
            # removal always counts as a change, even for a missing label
            self.modified()

    def clear_labels(self):
        self._store.clear()
        self._ndim = None

    def optimize(self):
        for obj in self._store.objects():
            obj.optimize()
        self.modified()

    # -------- pixels ---------------------------------------------------

    def get_pixel(self, idx):
        """
        Label at idx, or the background value.
        Linear in the number of label objects.
        """
        idx = self._check_index(idx)
        for obj in self._store.objects():
            if obj.has_index(idx):
                return obj.label
        return self._background

    def get_label_object_at(self, idx):
        idx = self._check_index(idx)
        for obj in self._store.objects():
            if obj.has_index(idx):
                return obj
        raise NotFoundError('No label object at index {}.'.format(idx))

    def set_pixel(self, idx, label):
        """
        Give idx the label `label`, removing it from every other label object.
        Objects left empty are removed. Setting the background label only removes.
        """
        idx = self._check_index(idx)
        label = self._check_range(label)
        emit_modified = label == self._background
        new_label = True
        # iterate a snapshot: removals can delete entries
        for key, obj in self._store.items():
            if key != label:
                self._remove_pixel(obj, idx, emit_modified)
            else:
                new_label = False
                self._add_pixel(obj, idx, label)
        if new_label:
            self._add_pixel(None, idx, label)

    def add_pixel(self, idx, label):
        label = self._check_range(label)
        if label == self._background:
            return
        self._add_pixel(self._store.find(label), self._check_index(idx), label)

    def _add_pixel(self, obj, idx, label):
        if label == self._background:
            return
        if obj is not None:
            obj.add_index(idx)
            self.modified()
        else:
            obj = self.label_object_type(label)
            obj.add_index(idx)
            logger.debug('new label object %d', label)
            # add_label_object signals the change
            self.add_label_object(obj)

    def remove_pixel(self, idx, label, emit_modified=True):
        label = self._check_range(label)
        if label == self._background:
            return
        self._remove_pixel(self._store.find(label), self._check_index(idx), emit_modified)

    def _remove_pixel(self, obj, idx, emit_modified):
        if obj is None:
            return
        if obj.remove_index(idx):
            if obj.empty():
                logger.debug('label object %d is empty, removing it', obj.label)
                self.remove_label_object(obj)
            if emit_modified:
                self.modified()

    def set_line(self, idx, length, label):
        """
        Add a run of `length` positions along the last axis to `label`.
        Other label objects are left untouched.
        """
        label = self._check_range(label)
        if label == self._background:
            return
        idx = self._check_index(idx)
        obj = self._store.find(label)
        if obj is not None:
            obj.add_line(idx, length)
            self.modified()
        else:
            obj = self.label_object_type(label)
            obj.add_line(idx, length)
            self.add_label_object(obj)

    # -------- container protocol ---------------------------------------

    def __len__(self):
        return len(self._store)

    def __contains__(self, label):
        return self.has_label(label)

    def __iter__(self):
        return iter(self._store.objects())

    def __repr__(self):
        return '{}(background={}, dtype={}, labels={})'.format(
            type(self).__name__, self._background, self._dtype, self._store.labels())
