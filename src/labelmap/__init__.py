from .label_map import LabelMap, DEFAULT_BACKGROUND, DEFAULT_DTYPE
from .label_object import LabelObject, Line
from .store import LabelStore
from .allocator import next_label
from .convert import label_map_from_image, label_map_to_image
from .errors import (LabelMapError, BackgroundLabelError, NotFoundError, NullHandleError,
                     FullError, OutOfRangeError, TypeMismatchError, LabelRangeError)
