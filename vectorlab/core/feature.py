"""
Module defining single geographic features.

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

import geopandas as gpd
import pandas as pd

from copy import deepcopy
from pyproj import CRS
from shapely import wkt
from shapely.errors import GEOSException
from shapely.geometry import (
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
)
from typing import Any, Dict, Optional

from vectorlab.utils.reprojection import to_crs

allowed_geom_types = [
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
]


class Feature:
    """
    Generic class for a geographic feature

    :attrib name:
        name of the feature (used for identification)
    :attrib geometry:
        `shapely` geometry of the feature in a spatial reference system
    :attrib crs:
        spatial coordinate reference system of the feature
    :attrib attributes:
        optional attributes of the feature
    """

    def __init__(
        self,
        name: str | int,
        geometry: LineString | MultiLineString | MultiPoint | MultiPolygon | Point | Polygon,
        crs: Any,
        attributes: Optional[Dict[str, Any] | pd.Series] = None,
    ):
        """
        Class constructor

        :param name:
            name of the feature (used for identification)
        :param geometry:
            `shapely` geometry of the feature in a spatial reference system
        :param crs:
            spatial coordinate reference system of the feature. Anything
            `pyproj` understands (EPSG code, "EPSG:<code>", WKT) can be passed.
        :param attributes:
            optional attributes of the feature
        """
        if attributes is None:
            attributes = {}
        # check inputs
        if name is None or name == "":
            raise ValueError("Empty feature names are not allowed")
        if type(geometry) not in allowed_geom_types:
            raise ValueError(f"geometry must of type {allowed_geom_types}")
        if not isinstance(attributes, pd.Series) and not isinstance(attributes, dict):
            raise ValueError("Attributes must pd.Series or dictionary")

        self._name = name
        self._geometry = geometry
        self._crs = to_crs(crs)
        if isinstance(attributes, pd.Series):
            attributes = attributes.to_dict()
        self._attributes = deepcopy(attributes)

    def __repr__(self) -> str:
        return (
            f"Name\t\t{self.name}\nGeometry\t"
            + f"{self.geometry}\nCRS\t\t{self.crs.to_string()}"
            + f"\nAttributes\t{self.attributes}"
        )

    @property
    def attributes(self) -> Dict[str, Any]:
        """feature attributes (copy)"""
        return deepcopy(self._attributes)

    @property
    def crs(self) -> CRS:
        """the feature coordinate reference system"""
        return self._crs

    @property
    def epsg(self) -> int | None:
        """the feature coordinate reference system as EPSG code (if any)"""
        return self._crs.to_epsg()

    @property
    def geometry(self) -> LineString | MultiLineString | MultiPoint | MultiPolygon | Point | Polygon:
        """the feature geometry"""
        return self._geometry

    @property
    def name(self) -> str | int:
        """the feature name"""
        return self._name

    @property
    def wkt(self) -> str:
        """the feature geometry as Well-Known Text"""
        return self._geometry.wkt

    @classmethod
    def from_geoseries(cls, gds: gpd.GeoSeries):
        """
        Feature object from `GeoSeries`

        :param gds:
            `GeoSeries` to cast to Feature
        :returns:
            Feature instance created from input `GeoSeries`
        """
        return cls(
            name=gds.name,
            geometry=gds.geometry.values[0],
            crs=gds.crs,
            attributes=gds.attrs,
        )

    @classmethod
    def from_dict(cls, dictionary: Dict[str, Any]):
        """
        Feature object from Python dictionary

        :param dictionary:
            Python dictionary object to cast to Feature
        :returns:
            Feature instance created from input dictionary
        """
        try:
            return cls(
                name=dictionary["name"],
                geometry=wkt.loads(dictionary["geometry"]),
                crs=dictionary["crs"],
                attributes=dictionary.get("attributes", {}),
            )
        except KeyError:
            raise ValueError(
                "Dictionary does not have fields required to instantiate a new Feature"
            )
        except GEOSException as e:
            raise ValueError(f"Invalid Geometry: {e}")

    def to_crs(self, crs: Any) -> Feature:
        """
        Projects the feature into a different spatial reference system.
        Returns a copy of the Feature with transformed coordinates.

        :param crs:
            the reference system the feature is projected to
        :returns:
            new Feature instance in the target spatial reference system
        """
        gds_projected = self.to_geoseries().to_crs(crs=to_crs(crs))
        return Feature(
            name=self.name,
            geometry=gds_projected.values[0],
            crs=gds_projected.crs,
            attributes=self._attributes,
        )

    def to_epsg(self, epsg: int) -> Feature:
        """
        Projects the feature into a different spatial reference system
        identified by an EPSG code.

        :param epsg:
            EPSG code of the reference system the feature is project to
        :returns:
            new Feature instance in the target spatial reference system
        """
        return self.to_crs(epsg)

    def to_geoseries(self) -> gpd.GeoSeries:
        """
        Casts the feature to a GeoSeries object

        :returns:
            Feature object casted as `GeoSeries`
        """
        gds = gpd.GeoSeries([self.geometry], crs=self.crs)
        # add attributes from Feature
        gds.attrs = self.attributes
        gds.name = self.name
        return gds

    def to_dict(self) -> Dict[str, Any]:
        """
        Casts feature to a pure Python dictionary

        :returns:
            Feature object as pure Python dictionary
        """
        feature_dict = {}
        feature_dict["name"] = self.name
        feature_dict["crs"] = self.crs.to_string()
        feature_dict["geometry"] = self.wkt
        feature_dict["attributes"] = self.attributes
        return feature_dict
