"""
Utils for working with ``shapely.geometry`` and ``geopandas.GeoDataFrame`` like objects.

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
import shapely
import warnings

from pathlib import Path
from typing import List, Optional, Union

from vectorlab.utils.exceptions import DataNotFoundError, InvalidInputError

# geometry types a feature may carry
ALLOWED_GEOMETRY_TYPES = [
    "Point",
    "MultiPoint",
    "LineString",
    "MultiLineString",
    "Polygon",
    "MultiPolygon",
]


def read_geometries(
    in_dataset: Union[Path, str, gpd.GeoDataFrame, gpd.GeoSeries], **kwargs
) -> gpd.GeoDataFrame:
    """
    Returns a geodataframe containing vector features

    :param in_dataset:
        path-like object ``GeoSeries`` or ``GeoDataFrame``
    :param kwargs:
        optional keyword arguments passed to ``geopandas.read_file``
    :returns:
        ``GeoDataFrame`` representation of vector features
    """
    if isinstance(in_dataset, gpd.GeoDataFrame):
        return in_dataset.copy()
    elif isinstance(in_dataset, gpd.GeoSeries):
        return gpd.GeoDataFrame(geometry=in_dataset.copy())
    elif isinstance(in_dataset, (Path, str)):
        if not Path(in_dataset).exists():
            raise DataNotFoundError(f"Could not find vector file {in_dataset}")
        return gpd.read_file(in_dataset, **kwargs)
    else:
        raise NotImplementedError(
            f"Could not read geometries of input type {type(in_dataset)}"
        )


def remove_empty_geometries(gdf: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """
    Drops records without geometry (None-type) or with an empty geometry.
    Emits a warning with the number of records removed.

    :param gdf:
        ``GeoDataFrame`` to clean
    :returns:
        ``GeoDataFrame`` without None-type or empty geometries
    """
    missing = gdf.geometry.isna() | gdf.geometry.is_empty
    num_empty_geoms = int(missing.sum())
    if num_empty_geoms > 0:
        warnings.warn(
            f"Ignoring {num_empty_geoms} records where "
            f"geometries are empty or of type None"
        )
        gdf = gdf[~missing].copy()
    return gdf


def check_geometry_types(
    gdf: gpd.GeoDataFrame,
    allowed_geometry_types: Optional[List[str]] = None,
) -> gpd.GeoDataFrame:
    """
    Checks if a ``GeoDataFrame`` contains allowed ``shapely.geometry``
    types, only. Raises an error if geometry types other than those allowed are
    found. None-type geometries are not checked.

    :param gdf:
        ``GeoDataFrame`` to check
    :param allowed_geometry_types:
        list of allowed geometry types. Defaults to `ALLOWED_GEOMETRY_TYPES`.
    :returns:
        the unchanged input ``GeoDataFrame``
    """
    if allowed_geometry_types is None:
        allowed_geometry_types = ALLOWED_GEOMETRY_TYPES
    gdf_geoms_types = list(gdf.geom_type.dropna().unique())
    not_allowed_types = [
        x for x in gdf_geoms_types if x not in allowed_geometry_types
    ]
    if len(not_allowed_types) > 0:
        raise InvalidInputError(
            f"Encountered geometry types not allowed: ({not_allowed_types})"
        )
    return gdf


def drop_z(geometry: gpd.GeoSeries) -> gpd.GeoSeries:
    """
    Takes a GeoSeries of geometries with a third dimension (has_z) and returns
    their 2D counterparts. Series without z coordinates are returned as they are.

    :param geometry:
        ``GeoSeries`` from ``GeoDataFrame``
    :returns:
        updated ``GeoSeries`` without third dimension (z)
    """
    if not geometry.has_z.any():
        return geometry
    return gpd.GeoSeries(
        shapely.force_2d(geometry.values), index=geometry.index, crs=geometry.crs
    )
