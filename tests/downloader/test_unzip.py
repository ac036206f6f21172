'''
Tests for unpacking archives

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

from vectorlab.core import FeatureCollection
from vectorlab.downloader import find_vector_files, unzip_archive
from vectorlab.utils.exceptions import DataExtractionError, DataNotFoundError

def test_unzip_archive(get_shapefile_archive):
    fpath_zip = get_shapefile_archive()
    files = unzip_archive(fpath_zip)

    extract_dir = fpath_zip.parent.joinpath('rivers')
    assert all(x.exists() for x in files), 'files not extracted'
    assert all(extract_dir in x.parents for x in files), 'wrong target directory'
    assert {x.suffix for x in files} >= {'.shp', '.shx', '.dbf'}
    assert fpath_zip.exists(), 'archive must be kept by default'

    shapefiles = find_vector_files(extract_dir)
    assert [x.name for x in shapefiles] == ['rivers.shp']
    rivers = FeatureCollection.from_file(shapefiles[0])
    assert len(rivers) == 3
    assert rivers.epsg == 4326

def test_unzip_archive_remove(tmppath, get_shapefile_archive):
    fpath_zip = get_shapefile_archive()
    extract_dir = tmppath.joinpath('unpacked')
    files = unzip_archive(fpath_zip, extract_dir=extract_dir, remove_zip=True)
    assert not fpath_zip.exists(), 'archive not removed'
    assert files == sorted(files)
    assert find_vector_files(extract_dir, suffixes=['.SHP', '.dbf'])[0].suffix == '.dbf'

def test_unzip_archive_errors(tmppath):
    with pytest.raises(DataNotFoundError):
        unzip_archive(tmppath.joinpath('missing.zip'))
    not_a_zip = tmppath.joinpath('broken.zip')
    not_a_zip.write_bytes(b'this is not a zip file')
    with pytest.raises(DataExtractionError):
        unzip_archive(not_a_zip)
    empty_dir = tmppath.joinpath('empty')
    empty_dir.mkdir()
    with pytest.raises(DataNotFoundError):
        find_vector_files(empty_dir)
