from .bounding_box import BoundingBox
from .feature import Feature
from .feature_collection import FeatureCollection
from .filter import Filter
