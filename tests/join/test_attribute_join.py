'''
Tests for lookup table joins

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

import geopandas as gpd
import pandas as pd
import pytest

from shapely.geometry import Point

from vectorlab.core import FeatureCollection
from vectorlab.join import attribute_join, read_lookup_table
from vectorlab.utils.exceptions import (
    AttributeNotFoundError,
    DataNotFoundError,
    InvalidInputError,
)

def test_read_lookup_table(tmppath, get_lookup_table):
    fpath = get_lookup_table()
    table = read_lookup_table(fpath)
    assert table.columns.tolist() == ['RIVER_ID', 'CATEGORY']
    assert table.shape == (3, 2)

    table = read_lookup_table(fpath, categorical=['CATEGORY'])
    assert isinstance(table.CATEGORY.dtype, pd.CategoricalDtype)
    assert sorted(table.CATEGORY.cat.categories) == ['major', 'minor']

    with pytest.raises(AttributeNotFoundError):
        read_lookup_table(fpath, categorical=['WIDTH'])
    with pytest.raises(DataNotFoundError):
        read_lookup_table(tmppath.joinpath('missing.csv'))

def test_attribute_join(get_rivers, get_lookup_table):
    rivers = get_rivers().set_names('NAME')
    table = read_lookup_table(get_lookup_table(), categorical=['CATEGORY'])
    joined = attribute_join(rivers, table, left_on='RIVER_ID')

    # the result is a collection with the names, order and CRS of the features
    assert isinstance(joined, FeatureCollection)
    assert joined.names == ['Aare', 'Inn', 'Danube']
    assert joined.epsg == 4326
    assert joined.columns == rivers.columns + ['CATEGORY']
    gdf = joined.to_geodataframe()
    assert gdf.CATEGORY.astype(str).tolist() == ['major', 'minor', 'major']
    assert isinstance(gdf.CATEGORY.dtype, pd.CategoricalDtype), 'categories got lost'
    assert joined.to_wkt().tolist() == rivers.to_wkt().tolist()

def test_attribute_join_keys(get_rivers):
    rivers = get_rivers()
    table = pd.DataFrame({'id': [3, 1], 'WIDTH': [120., 80.]})

    # left join: unmatched features get missing values
    joined = attribute_join(rivers, table, left_on='RIVER_ID', right_on='id')
    assert 'id' not in joined.columns, 'right key must be dropped'
    widths = joined.to_geodataframe().WIDTH
    assert widths.iloc[0] == 80. and widths.iloc[2] == 120.
    assert pd.isna(widths.iloc[1])

    # inner join: unmatched features are dropped
    joined = attribute_join(rivers, table, left_on='RIVER_ID', right_on='id', how='inner')
    assert joined.names == [0, 2], 'order must follow the features'

    # clashing attribute names get a suffix
    table = pd.DataFrame({'RIVER_ID': [1, 2, 3], 'NAME': ['a', 'b', 'c']})
    joined = attribute_join(rivers, table, left_on='RIVER_ID')
    gdf = joined.to_geodataframe()
    assert gdf.NAME.tolist() == ['Aare', 'Inn', 'Danube']
    assert gdf.NAME_lookup.tolist() == ['a', 'b', 'c']

def test_attribute_join_wrong_inputs(get_rivers):
    rivers = get_rivers()
    table = pd.DataFrame({'RIVER_ID': [1, 1], 'CATEGORY': ['major', 'minor']})
    with pytest.raises(InvalidInputError):
        attribute_join(rivers, table, left_on='RIVER_ID')
    table = pd.DataFrame({'RIVER_ID': [1, 2], 'CATEGORY': ['major', 'minor']})
    with pytest.raises(AttributeNotFoundError):
        attribute_join(rivers, table, left_on='WIDTH')
    with pytest.raises(AttributeNotFoundError):
        attribute_join(rivers, table, left_on='RIVER_ID', right_on='id')
    with pytest.raises(ValueError):
        attribute_join(rivers, table, left_on='RIVER_ID', how='outer')
    geo_table = gpd.GeoDataFrame(table, geometry=[Point(0, 0), Point(1, 1)], crs=4326)
    with pytest.raises(InvalidInputError):
        attribute_join(rivers, geo_table, left_on='RIVER_ID')
