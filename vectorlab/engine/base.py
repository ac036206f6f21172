"""
Interface of the geometry engines carrying out spatial predicates, unions and
reprojections, and the registry engines are looked up from.

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

from abc import ABC, abstractmethod
from shapely.geometry.base import BaseGeometry
from typing import Any, Dict, Optional, Sequence

from vectorlab.config import get_settings

Settings = get_settings()

_engines: Dict[str, type] = {}


class GeometryEngine(ABC):
    """
    Abstract geometry engine. Implementations bind to a computational geometry
    library and must not hold state between calls.
    """

    name: str = ""

    @abstractmethod
    def intersects(self, a: BaseGeometry, b: BaseGeometry) -> bool:
        """True if the geometries share at least one point"""
        ...

    @abstractmethod
    def intersects_any(
        self, geometries: Sequence[BaseGeometry], target: BaseGeometry
    ) -> np.ndarray:
        """element-wise `intersects` of many geometries against one target"""
        ...

    @abstractmethod
    def union(self, geometries: Sequence[BaseGeometry]) -> BaseGeometry:
        """geometric union of all geometries (empty geometry if none)"""
        ...

    @abstractmethod
    def is_valid(self, geometries: Sequence[BaseGeometry]) -> np.ndarray:
        """element-wise validity of geometries"""
        ...

    @abstractmethod
    def validity_reason(self, geometry: BaseGeometry) -> str:
        """human readable reason why a geometry is (in)valid"""
        ...

    @abstractmethod
    def reproject(self, collection, crs: Any):
        """reprojects a whole `FeatureCollection` into another CRS"""
        ...


def register_engine(name: str, engine: type) -> None:
    """
    Makes a geometry engine available under a name

    :param name:
        name used to look up the engine (e.g., in the settings)
    :param engine:
        `GeometryEngine` subclass
    """
    if not issubclass(engine, GeometryEngine):
        raise TypeError(f"{engine} is not a GeometryEngine")
    _engines[name] = engine


def get_engine(name: Optional[str] = None) -> GeometryEngine:
    """
    Returns an instance of a registered geometry engine

    :param name:
        engine name. Defaults to the `GEOMETRY_ENGINE` setting.
    :returns:
        `GeometryEngine` instance
    """
    if name is None:
        name = Settings.GEOMETRY_ENGINE
    if name not in _engines:
        raise ValueError(
            f"Unknown geometry engine {name}. Available: {list(_engines.keys())}"
        )
    return _engines[name]()
