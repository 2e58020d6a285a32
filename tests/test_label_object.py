import numpy as np
import pytest

from labelmap import LabelObject, Line
from labelmap.label_object import as_index


def test_as_index_accepts_arrays_and_scalars():
    assert as_index(np.array([1, 2])) == (1, 2)
    assert as_index([np.int64(3), 4]) == (3, 4)
    assert as_index(7) == (7,)
    with pytest.raises(TypeError):
        as_index((1.5, 2))


def test_add_index_extends_last_line():
    obj = LabelObject(1)
    for x in range(3):
        obj.add_index((0, x))
    assert obj.number_of_lines() == 1
    assert obj.size() == 3
    assert obj.has_index((0, 2))
    assert not obj.has_index((0, 3))
    assert not obj.has_index((1, 0))


def test_add_index_is_idempotent():
    obj = LabelObject(1)
    obj.add_index((2, 2))
    obj.add_index((2, 2))
    assert obj.size() == 1


def test_add_index_not_adjacent_starts_new_line():
    obj = LabelObject(1)
    obj.add_index((0, 0))
    obj.add_index((0, 2))
    obj.add_index((1, 1))
    assert obj.number_of_lines() == 3


@pytest.mark.parametrize("x, expected", [
    (0, [Line((0, 1), 4)]),
    (4, [Line((0, 0), 4)]),
    (2, [Line((0, 0), 2), Line((0, 3), 2)]),
])
def test_remove_index_splits_lines(x, expected):
    obj = LabelObject(1)
    obj.add_line((0, 0), 5)
    assert obj.remove_index((0, x))
    assert obj.lines == expected
    assert not obj.has_index((0, x))


def test_remove_index_missing_and_last():
    obj = LabelObject(1)
    obj.add_index((3,))
    assert not obj.remove_index((4,))
    assert not obj.empty()
    assert obj.remove_index((3,))
    assert obj.empty()


def test_remove_index_from_overlapping_lines():
    obj = LabelObject(1)
    obj.add_line((0, 0), 3)
    obj.add_line((0, 1), 3)
    assert obj.remove_index((0, 1))
    assert not obj.has_index((0, 1))


def test_optimize_merges_touching_and_overlapping_lines():
    obj = LabelObject(1)
    obj.add_line((1, 3), 2)
    obj.add_line((0, 0), 2)
    obj.add_line((0, 2), 3)
    obj.add_line((1, 4), 4)
    obj.optimize()
    assert obj.lines == [Line((0, 0), 5), Line((1, 3), 5)]
    assert obj.size() == 10


def test_add_line_rejects_bad_length():
    obj = LabelObject(1)
    with pytest.raises(ValueError):
        obj.add_line((0, 0), 0)
    assert obj.empty()


def test_dimension_mismatch():
    obj = LabelObject(1)
    obj.add_index((0, 0))
    with pytest.raises(ValueError):
        obj.add_index((0, 0, 0))
    with pytest.raises(ValueError):
        LabelObject(1).add_index(())


def test_indices_and_bounding_box():
    obj = LabelObject(2)
    obj.add_line((1, 2), 3)
    obj.add_index((4, 0))
    assert list(obj.indices()) == [(1, 2), (1, 3), (1, 4), (4, 0)]
    lo, hi = obj.bounding_box()
    np.testing.assert_array_equal(lo, [1, 0])
    np.testing.assert_array_equal(hi, [4, 4])
    assert LabelObject(3).bounding_box() is None


def test_copy_is_independent():
    obj = LabelObject(5)
    obj.add_line((0, 0), 4)
    other = obj.copy()
    other.remove_index((0, 1))
    other.label = 6
    assert obj.size() == 4
    assert obj.label == 5
    assert other.size() == 3
