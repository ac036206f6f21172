'''
Global pytest fixtures
'''

import matplotlib
import os
import pandas as pd
import pytest
import zipfile

matplotlib.use('Agg')

import geopandas as gpd

from pathlib import Path
from shapely.geometry import LineString, Polygon, box

from vectorlab.core.feature_collection import FeatureCollection


@pytest.fixture
def tmppath(tmpdir):
    '''
    Fixture to make sure that test function receive proper
    Posix or Windows path instead of 'localpath'
    '''
    return Path(tmpdir)

@pytest.fixture()
def get_project_root_path() -> Path:
    """
    returns the project root path
    """
    return Path(os.path.dirname(os.path.abspath(__file__))).parent

@pytest.fixture()
def get_squares():
    """
    Returns a FeatureCollection of square polygons. Each square is given
    by its lower left corner and its edge length.
    """
    def _get_squares(corners=((0, 0, 2),), crs='EPSG:32632', names=None):
        geoms = [box(x, y, x + size, y + size) for x, y, size in corners]
        if names is None:
            names = [f'square_{idx}' for idx in range(len(geoms))]
        gdf = gpd.GeoDataFrame(
            {'area_id': list(range(len(geoms)))},
            geometry=geoms,
            index=names,
            crs=crs
        )
        return FeatureCollection(gdf)
    return _get_squares

@pytest.fixture()
def get_counties():
    """
    Returns a FeatureCollection with four county-like polygons in WGS84
    arranged in a 2x2 grid around 8.5 deg E, 47.5 deg N
    """
    def _get_counties():
        geoms, names, codes = [], [], []
        for row in range(2):
            for col in range(2):
                minx = 8.0 + col * 0.5
                miny = 47.0 + row * 0.5
                geoms.append(box(minx, miny, minx + 0.5, miny + 0.5))
                names.append(f'county_{row}{col}')
                codes.append(10 * row + col)
        gdf = gpd.GeoDataFrame(
            {'NAME': names, 'CODE': codes, 'AREA_KM2': [100.0, 200.0, 300.0, 400.0]},
            geometry=geoms,
            crs='EPSG:4326'
        )
        return FeatureCollection(gdf)
    return _get_counties

@pytest.fixture()
def get_rivers():
    """
    Returns a FeatureCollection with three river-like lines in WGS84. The
    first crosses the county grid, the second lies outside of it and the
    third touches its north-eastern corner with one vertex.
    """
    def _get_rivers():
        geoms = [
            LineString([(7.8, 47.2), (8.3, 47.6), (8.9, 47.7)]),
            LineString([(10.0, 46.0), (10.5, 46.2)]),
            LineString([(9.0, 48.0), (9.4, 48.3)]),
        ]
        gdf = gpd.GeoDataFrame(
            {
                'RIVER_ID': [1, 2, 3],
                'NAME': ['Aare', 'Inn', 'Danube'],
                'ORDER': [5, 4, 7],
                'LENGTH': [60.1, 45.0, 30.5],
            },
            geometry=geoms,
            crs='EPSG:4326'
        )
        return FeatureCollection(gdf)
    return _get_rivers

@pytest.fixture()
def get_bowtie():
    """Returns a self-intersecting (invalid) polygon"""
    def _get_bowtie():
        return Polygon([(0, 0), (2, 2), (2, 0), (0, 2), (0, 0)])
    return _get_bowtie

@pytest.fixture()
def get_shapefile_archive(tmppath, get_rivers):
    """
    Writes the rivers as ESRI shapefile and packs all its files
    into a zip archive
    """
    def _get_shapefile_archive():
        shp_dir = tmppath.joinpath('shp')
        shp_dir.mkdir(exist_ok=True)
        fpath_shp = shp_dir.joinpath('rivers.shp')
        get_rivers().to_geodataframe().to_file(fpath_shp)
        fpath_zip = tmppath.joinpath('rivers.zip')
        with zipfile.ZipFile(fpath_zip, 'w') as zf:
            for fpath in sorted(shp_dir.iterdir()):
                zf.write(fpath, arcname=f'rivers/{fpath.name}')
        return fpath_zip
    return _get_shapefile_archive

@pytest.fixture()
def get_lookup_table(tmppath):
    """Writes a river-to-category lookup table as CSV file"""
    def _get_lookup_table():
        df = pd.DataFrame({
            'RIVER_ID': [1, 2, 3],
            'CATEGORY': ['major', 'minor', 'major'],
        })
        fpath = tmppath.joinpath('river_categories.csv')
        df.to_csv(fpath, index=False)
        return fpath
    return _get_lookup_table
