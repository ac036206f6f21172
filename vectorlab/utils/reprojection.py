"""
Functions for reprojecting vector data and bounding boxes from one spatial
coordinate reference system into another one.

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

from collections import namedtuple
from pyproj import CRS, Transformer
from pyproj.exceptions import CRSError, ProjError
from shapely.geometry.base import BaseGeometry
from typing import Any, NamedTuple, Tuple

from vectorlab.utils.exceptions import ReprojectionError

UTMZone = namedtuple("UTMZone", "zone hemisphere")


def to_crs(crs: Any) -> CRS:
    """
    Casts any user input accepted by ``pyproj`` (EPSG code, authority string,
    WKT, ``CRS`` object) to a ``pyproj.CRS``

    :param crs:
        user input to cast
    :returns:
        ``pyproj.CRS`` instance
    """
    try:
        return CRS.from_user_input(crs)
    except CRSError as e:
        raise ValueError(f"Invalid coordinate reference system {crs}: {e}")


def crs_equal(crs_a: Any, crs_b: Any) -> bool:
    """
    Checks if two coordinate reference systems are equivalent (axis order
    is ignored).

    :param crs_a:
        first coordinate reference system
    :param crs_b:
        second coordinate reference system
    :returns:
        True if both describe the same system
    """
    if crs_a is None or crs_b is None:
        return crs_a is None and crs_b is None
    return to_crs(crs_a).equals(to_crs(crs_b), ignore_axis_order=True)


def _infer_utm_zone(shape: BaseGeometry) -> NamedTuple:
    """
    Infer the UTM zone from a geometry provided in geographic coordinates.
    The geometry must implement the centroid attribute.

    :param shape:
        geometry in geographic coordinates (WGS84) for which to check
        the corresponding UTM zone
    :returns:
        `NamedTuple` with two-digit UTM `zone` number and `hemisphere`
        (north or south)
    """
    centroid = shape.centroid
    lon = centroid.x
    lat = centroid.y

    if lat > 84 or lat < -80:
        raise ReprojectionError("UTM Zones only valid within [-80, 84] latitude")

    zone = min(int((lon + 180) / 6 + 1), 60)
    hemisphere = "north" if lat >= 0 else "south"
    return UTMZone(zone, hemisphere)


def _epsg_from_utm_zone(utmzone: UTMZone) -> int:
    """
    EPSG code from UTM zone number and hemisphere

    :param utmzone:
        `NamedTuple` with two-digit UTM `zone` and `hemisphere`
    :returns:
        integer EPSG code
    """
    if utmzone.hemisphere == "north":
        base = 32600
    elif utmzone.hemisphere == "south":
        base = 32700
    else:
        raise ValueError("Not a valid hemisphere (allowed: north or south)")
    return base + utmzone.zone


def infer_utm_zone(shape: BaseGeometry) -> int:
    """
    Returns the EPSG code of the UTM zone a geometry with geographic coordinates
    lies in (i.e., its centroid)

    :param shape:
        geometry in geographic coordinates (WGS84) for which to check
        the corresponding UTM zone
    """
    utmzone = _infer_utm_zone(shape)
    return _epsg_from_utm_zone(utmzone)


def transform_bounds(
    bounds: Tuple[float, float, float, float],
    src_crs: Any,
    dst_crs: Any,
    densify_pts: int = 21,
) -> Tuple[float, float, float, float]:
    """
    Transforms a bounding box into another spatial reference system. The edges
    of the box are densified so that curved edges in the target system are
    fully enclosed.

    :param bounds:
        (minx, miny, maxx, maxy) in `src_crs`
    :param src_crs:
        source coordinate reference system
    :param dst_crs:
        target coordinate reference system
    :param densify_pts:
        number of points to add to each edge of the box
    :returns:
        (minx, miny, maxx, maxy) in `dst_crs`
    """
    try:
        transformer = Transformer.from_crs(
            to_crs(src_crs), to_crs(dst_crs), always_xy=True
        )
        return transformer.transform_bounds(*bounds, densify_pts=densify_pts)
    except ProjError as e:
        raise ReprojectionError(f"Could not transform bounds {bounds}: {e}")
