#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
EXAMPLE SCRIPT: RIVERS CROSSING SWISS CANTONS
FUNCTIONS USED:
    vectorlab.downloader.download_archive()
    vectorlab.downloader.unzip_archive()
    vectorlab.core.FeatureCollection
    vectorlab.join.attribute_join()
    vectorlab.join.spatial_predicate_join()
    vectorlab.plotting.plot_predicate_join()

Downloads river centerlines and first-level administrative units from
Natural Earth, crops them to Switzerland, classifies the rivers using a lookup
table and labels every river with whether it crosses (or touches) a canton.

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
#%%
import matplotlib.pyplot as plt
import pandas as pd

from vectorlab.config import get_settings
from vectorlab.core import BoundingBox, FeatureCollection, Filter
from vectorlab.downloader import download_archive, find_vector_files, unzip_archive
from vectorlab.join import attribute_join, read_lookup_table, spatial_predicate_join
from vectorlab.pipeline import Pipeline
from vectorlab.plotting import plot_layers, plot_predicate_join

Settings = get_settings()
logger = Settings.logger

RIVERS_URL = 'https://naciscdn.org/naturalearth/10m/physical/ne_10m_rivers_lake_centerlines.zip'
ADMIN_URL = 'https://naciscdn.org/naturalearth/10m/cultural/ne_10m_admin_1_states_provinces.zip'

# output directory for the maps and the lookup table
out_dir = Settings.DATA_DIR.joinpath('walkthrough')
out_dir.mkdir(parents=True, exist_ok=True)

#%% DOWNLOAD AND UNZIP THE SHAPEFILES

# archives are stored in Settings.DATA_DIR and not downloaded again
rivers_zip = download_archive(RIVERS_URL)
admin_zip = download_archive(ADMIN_URL)

unzip_archive(rivers_zip)
unzip_archive(admin_zip)
rivers_shp = find_vector_files(rivers_zip.parent.joinpath(rivers_zip.stem))[0]
admin_shp = find_vector_files(admin_zip.parent.joinpath(admin_zip.stem))[0]

#%% READ THE FEATURES

# every intermediate result is kept in the pipeline under its own name
pipeline = Pipeline(name='swiss-rivers')

pipeline.start('rivers_raw', FeatureCollection.from_file(rivers_shp))
pipeline.apply('rivers', FeatureCollection.select, ['name', 'scalerank', 'featurecla'])
pipeline.apply('rivers_renamed', FeatureCollection.rename, {'name': 'river', 'scalerank': 'rank'})

pipeline.start('admin_raw', FeatureCollection.from_file(admin_shp))
pipeline.apply('admin_ch', FeatureCollection.filter, Filter('iso_a2', '==', 'CH'))
pipeline.apply('cantons', FeatureCollection.select, ['name', 'adm1_code'])

#%% REPROJECT AND CROP

# Swiss coordinate system (LV95). Both layers must share one CRS for the join
pipeline.apply('cantons_lv95', FeatureCollection.to_crs, 2056, source='cantons')
pipeline.apply('rivers_lv95', FeatureCollection.to_crs, 2056, source='rivers_renamed')

# the bounding box is given in geographic coordinates and transformed on the fly
bbox_ch = BoundingBox(5.9, 45.8, 10.5, 47.9, crs=4326)
pipeline.apply('rivers_ch', FeatureCollection.crop, bbox_ch, source='rivers_lv95')

#%% JOIN A LOOKUP TABLE AND CONVERT TO CATEGORY

# Natural Earth ranks rivers from 0 (most important) to 12
lookup = pd.DataFrame({
    'rank': list(range(13)),
    'size_class': ['major'] * 5 + ['medium'] * 4 + ['minor'] * 4
})
fpath_lookup = out_dir.joinpath('river_size_classes.csv')
lookup.to_csv(fpath_lookup, index=False)
table = read_lookup_table(fpath_lookup)

pipeline.apply('rivers_classified', attribute_join, table, left_on='rank')
pipeline.apply(
    'rivers_categories',
    FeatureCollection.as_category,
    'size_class',
    categories=['major', 'medium', 'minor'],
    ordered=True
)

#%% LABEL RIVERS CROSSING A CANTON

# geometries must be valid for the spatial predicate
pipeline.apply('cantons_valid', FeatureCollection.make_valid, source='cantons_lv95')
labeled = pipeline.apply(
    'rivers_labeled',
    spatial_predicate_join,
    pipeline['cantons_valid'],
    source='rivers_categories'
)
gdf = labeled.to_geodataframe()
logger.info(
    f'{gdf[Settings.INTERSECTS_ATTRIBUTE].sum()} of {len(labeled)} '
    f'river segments cross a canton'
)
print(pipeline)

#%% PLOTS

fig = plot_layers(
    [
        (pipeline['cantons_valid'], {'color': 'whitesmoke', 'edgecolor': 'grey'}),
        (pipeline['rivers_categories'], {'column': 'size_class', 'colormap': 'Blues_r'})
    ],
    title='Rivers by size class'
)
fig.savefig(out_dir.joinpath('rivers_size_classes.png'), bbox_inches='tight')

fig = plot_predicate_join(labeled, pipeline['cantons_valid'], title='Rivers crossing cantons')
fig.savefig(out_dir.joinpath('rivers_crossing_cantons.png'), bbox_inches='tight')
plt.close('all')

labeled.to_file(out_dir.joinpath('rivers_labeled.gpkg'))
