'''
Tests for the reprojection utils

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
'''

import pytest

from pyproj import CRS
from shapely.geometry import Point, box

from vectorlab.utils.exceptions import ReprojectionError
from vectorlab.utils.reprojection import crs_equal, infer_utm_zone, to_crs, transform_bounds

def test_to_crs():
    assert to_crs(4326) == CRS.from_epsg(4326)
    assert to_crs('EPSG:2056').to_epsg() == 2056
    crs = CRS.from_epsg(32632)
    assert to_crs(crs) == crs
    assert to_crs(crs.to_wkt()).to_epsg() == 32632
    with pytest.raises(ValueError):
        to_crs('not a CRS')

def test_crs_equal():
    assert crs_equal(4326, 'EPSG:4326')
    assert crs_equal(CRS.from_epsg(4326), 'OGC:CRS84'), 'axis order must be ignored'
    assert not crs_equal(4326, 32147)
    assert crs_equal(None, None)
    assert not crs_equal(None, 4326)

@pytest.mark.parametrize(
    'lon, lat, epsg', [(8.5, 47.5, 32632), (-58.4, -34.6, 32721), (180., 10., 32660)]
)
def test_infer_utm_zone(lon, lat, epsg):
    assert infer_utm_zone(Point(lon, lat)) == epsg

def test_infer_utm_zone_polar():
    with pytest.raises(ReprojectionError):
        infer_utm_zone(box(0, 85, 1, 86))

def test_transform_bounds():
    bounds = transform_bounds((8., 47., 9., 48.), 4326, 32632)
    minx, miny, maxx, maxy = bounds
    assert minx < maxx and miny < maxy
    # the central meridian of zone 32 (9 deg E) maps to 500 km easting
    assert maxx == pytest.approx(500_000)
    assert transform_bounds((8., 47., 9., 48.), 4326, 4326) == pytest.approx((8., 47., 9., 48.))
