"""
Geometry engine backed by ``shapely`` (GEOS) for predicates and unions and
``geopandas``/``pyproj`` for reprojections.

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

import numpy as np
import shapely

from shapely.geometry import GeometryCollection
from shapely.geometry.base import BaseGeometry
from typing import Any, Sequence

from vectorlab.engine.base import GeometryEngine


class ShapelyEngine(GeometryEngine):
    """Vectorized shapely 2 predicates"""

    name = "shapely"

    def intersects(self, a: BaseGeometry, b: BaseGeometry) -> bool:
        return bool(shapely.intersects(a, b))

    def intersects_any(
        self, geometries: Sequence[BaseGeometry], target: BaseGeometry
    ) -> np.ndarray:
        geometries = np.asarray(geometries, dtype=object)
        if geometries.size == 0:
            return np.zeros(0, dtype=bool)
        # a prepared target speeds up repeated predicates
        shapely.prepare(target)
        return shapely.intersects(geometries, target).astype(bool)

    def union(self, geometries: Sequence[BaseGeometry]) -> BaseGeometry:
        geometries = np.asarray(geometries, dtype=object)
        if geometries.size == 0:
            return GeometryCollection()
        union = shapely.union_all(geometries)
        shapely.prepare(union)
        return union

    def is_valid(self, geometries: Sequence[BaseGeometry]) -> np.ndarray:
        geometries = np.asarray(geometries, dtype=object)
        return shapely.is_valid(geometries).astype(bool)

    def validity_reason(self, geometry: BaseGeometry) -> str:
        return shapely.is_valid_reason(geometry)

    def reproject(self, collection, crs: Any):
        return collection.to_crs(crs)
