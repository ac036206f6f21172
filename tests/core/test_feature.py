'''
Tests for the Feature class

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

import pandas as pd
import pytest

from shapely.geometry import GeometryCollection, LineString, Point, Polygon
from vectorlab.core.feature import Feature

def test_feature():

    # working constructor calls
    geom = Point([11, 49])
    epsg = 4326
    name = 'Test Point'
    feature = Feature(name, geom, epsg)

    assert feature.geometry == geom, 'geometry differs'
    assert feature.epsg == epsg, 'EPSG code differs'
    assert feature.name == name, 'name differs'
    assert feature.attributes == {}, 'attributes must be empty'
    assert feature.wkt == 'POINT (11 49)', 'wrong WKT'

    attributes = {'key': 'value'}
    feature = Feature(name, geom, epsg, attributes)
    assert feature.attributes == attributes, 'attributes differ'

    attributes = pd.Series({'key1': 'value1', 'key2': 'value2'})
    feature = Feature(name, geom, 'EPSG:4326', attributes)
    assert feature.attributes == attributes.to_dict(), 'attributes differ'
    assert feature.epsg == 4326, 'CRS string not parsed'

    gds = feature.to_geoseries()
    assert gds.name == feature.name, 'name differs'
    assert gds.crs.to_epsg() == feature.epsg, 'EPSG differs'
    assert gds.attrs == feature.attributes, 'attributes differ'

    # from_geoseries class method
    gds.attrs = {}
    feature = Feature.from_geoseries(gds)
    assert gds.name == feature.name, 'name differs'
    assert gds.crs.to_epsg() == feature.epsg, 'EPSG differs'
    assert gds.attrs == feature.attributes, 'attributes differ'

    # project into another spatial reference system
    feature_utm = feature.to_epsg(epsg=32632)
    assert feature_utm.epsg == 32632, 'projection had no effect'
    assert feature_utm.name == feature.name, 'name got lost'
    assert feature_utm.attributes == feature.attributes, 'attributes got lost'
    assert feature.epsg == 4326, 'original feature must not change'

def test_feature_immutable_attributes():
    """attributes cannot be changed through the returned dictionary"""
    attributes = {'CATEGORY': 'major'}
    feature = Feature(1, LineString([(0, 0), (1, 1)]), 4326, attributes)
    feature.attributes['CATEGORY'] = 'minor'
    attributes['CATEGORY'] = 'minor'
    assert feature.attributes['CATEGORY'] == 'major', 'feature was mutated'

def test_feature_dict():
    """cast to and from dictionaries with WKT geometries"""
    poly = Polygon([(0, 0), (0, 1), (1, 1), (1, 0)])
    feature = Feature('parcel', poly, 2056, {'crop': 'wheat'})
    feature_dict = feature.to_dict()
    assert feature_dict['geometry'].startswith('POLYGON'), 'geometry not WKT'
    assert feature_dict['crs'] == 'EPSG:2056', 'wrong CRS string'

    feature_2 = Feature.from_dict(feature_dict)
    assert feature_2.geometry.equals(poly), 'geometry differs'
    assert feature_2.epsg == 2056, 'CRS differs'
    assert feature_2.attributes == {'crop': 'wheat'}, 'attributes differ'

    with pytest.raises(ValueError):
        Feature.from_dict({'name': 'x', 'geometry': 'POINT (1 1)'})
    with pytest.raises(ValueError):
        Feature.from_dict({'name': 'x', 'geometry': 'NOT WKT', 'crs': 4326})

def test_feature_wrong_inputs():
    geom = Point([11, 49])
    with pytest.raises(ValueError):
        Feature('', geom, 4326)
    with pytest.raises(ValueError):
        Feature(None, geom, 4326)
    with pytest.raises(ValueError):
        Feature('collection', GeometryCollection([geom]), 4326)
    with pytest.raises(ValueError):
        Feature('point', geom, 'not a CRS')
    with pytest.raises(ValueError):
        Feature('point', geom, 4326, attributes=['a', 'b'])
