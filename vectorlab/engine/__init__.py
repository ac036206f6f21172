from .base import GeometryEngine, get_engine, register_engine
from .shapely_engine import ShapelyEngine

register_engine("shapely", ShapelyEngine)
