"""
Axis-aligned bounding boxes tagged with a spatial reference system.

Copyright (C) 2024 vectorlab contributors

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by
the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU General Public License for more details.

You should have received a copy of the GNU General Public License
along with this program.  If not, see <http://www.gnu.org/licenses/>.
"""

from __future__ import annotations

import math

from pyproj import CRS
from shapely.geometry import box, Polygon
from shapely.geometry.base import BaseGeometry
from typing import Any, Tuple

from vectorlab.utils.exceptions import InvalidInputError
from vectorlab.utils.reprojection import crs_equal, to_crs, transform_bounds


class BoundingBox:
    """
    Minimal axis-aligned rectangle in a spatial reference system

    :attrib minx:
        lower x (easting or longitude) coordinate
    :attrib miny:
        lower y (northing or latitude) coordinate
    :attrib maxx:
        upper x coordinate
    :attrib maxy:
        upper y coordinate
    :attrib crs:
        spatial coordinate reference system of the box
    """

    def __init__(self, minx: float, miny: float, maxx: float, maxy: float, crs: Any):
        values = (minx, miny, maxx, maxy)
        if not all(math.isfinite(float(x)) for x in values):
            raise ValueError(f"Bounding box coordinates must be finite: {values}")
        if minx > maxx:
            raise ValueError(f"minx ({minx}) must not be larger than maxx ({maxx})")
        if miny > maxy:
            raise ValueError(f"miny ({miny}) must not be larger than maxy ({maxy})")

        self._bounds = tuple(float(x) for x in values)
        self._crs = to_crs(crs)

    def __repr__(self) -> str:
        return (
            f"BoundingBox(minx={self.minx}, miny={self.miny}, maxx={self.maxx}, "
            f"maxy={self.maxy}, crs={self.crs.to_string()})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BoundingBox):
            return NotImplemented
        return self.bounds == other.bounds and crs_equal(self.crs, other.crs)

    def __iter__(self):
        return iter(self._bounds)

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """(minx, miny, maxx, maxy) tuple"""
        return self._bounds

    @property
    def crs(self) -> CRS:
        """spatial reference system of the box"""
        return self._crs

    @property
    def minx(self) -> float:
        return self._bounds[0]

    @property
    def miny(self) -> float:
        return self._bounds[1]

    @property
    def maxx(self) -> float:
        return self._bounds[2]

    @property
    def maxy(self) -> float:
        return self._bounds[3]

    @classmethod
    def from_geometry(cls, geometry: BaseGeometry, crs: Any) -> BoundingBox:
        """
        Bounding box of a `shapely` geometry

        :param geometry:
            non-empty geometry
        :param crs:
            spatial reference system of the geometry
        :returns:
            `BoundingBox` enclosing the geometry
        """
        if geometry is None or geometry.is_empty:
            raise InvalidInputError("Cannot derive a bounding box from an empty geometry")
        return cls(*geometry.bounds, crs=crs)

    @classmethod
    def from_collection(cls, collection) -> BoundingBox:
        """
        Bounding box of all features in a `FeatureCollection`

        :param collection:
            non-empty `FeatureCollection`
        :returns:
            `BoundingBox` enclosing all features
        """
        return collection.total_bounds

    def to_polygon(self) -> Polygon:
        """
        The bounding box as rectangular `shapely` Polygon

        :returns:
            closed rectangular polygon
        """
        return box(*self._bounds)

    def to_crs(self, crs: Any) -> BoundingBox:
        """
        Transforms the box into another spatial reference system. The result
        is the bounding box of the transformed (densified) box, i.e., it fully
        encloses the original area.

        :param crs:
            target reference system
        :returns:
            new `BoundingBox` in the target reference system
        """
        crs = to_crs(crs)
        if crs_equal(crs, self.crs):
            return BoundingBox(*self._bounds, crs=crs)
        return BoundingBox(*transform_bounds(self._bounds, self.crs, crs), crs=crs)

    def intersects(self, other: BoundingBox) -> bool:
        """
        Checks if two boxes in the same reference system share at least one point

        :param other:
            other bounding box
        :returns:
            True if the boxes overlap or touch
        """
        if not crs_equal(self.crs, other.crs):
            raise InvalidInputError(
                f"Bounding boxes differ in CRS: {self.crs.to_string()} "
                f"vs. {other.crs.to_string()}"
            )
        return not (
            self.maxx < other.minx
            or other.maxx < self.minx
            or self.maxy < other.miny
            or other.maxy < self.miny
        )
