"""
Helper functions for unpacking downloaded archives and locating the vector
files they contain.

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

import zipfile

from pathlib import Path
from typing import List, Optional, Sequence

from vectorlab.config import get_settings
from vectorlab.utils.exceptions import DataExtractionError, DataNotFoundError

Settings = get_settings()
logger = Settings.logger


def unzip_archive(
    archive: Path | str,
    extract_dir: Optional[Path | str] = None,
    remove_zip: Optional[bool] = False,
) -> List[Path]:
    """
    Unpacks a zip archive. Files already present in `extract_dir` are
    overwritten.

    :param archive:
        file-path of the zip archive
    :param extract_dir:
        directory where to unpack the archive to. Defaults to a directory
        named like the archive (without suffix) next to it.
    :param remove_zip:
        If set to True the archive is deleted after unpacking. False by default.
    :returns:
        sorted list of the unpacked files
    """
    archive = Path(archive)
    if not archive.exists():
        raise DataNotFoundError(f"Could not find archive {archive}")
    if extract_dir is None:
        extract_dir = archive.parent.joinpath(archive.stem)
    extract_dir = Path(extract_dir)
    extract_dir.mkdir(parents=True, exist_ok=True)

    try:
        with zipfile.ZipFile(archive, "r") as zf:
            members = [x for x in zf.namelist() if not x.endswith("/")]
            zf.extractall(extract_dir)
    except zipfile.BadZipFile as e:
        logger.error(f"Could not unzip {archive}: {e}")
        raise DataExtractionError(f"Could not unzip {archive}: {e}")

    logger.info(f"Unzipped {archive} ({len(members)} files) to {extract_dir}")
    if remove_zip:
        archive.unlink()
    return sorted(extract_dir.joinpath(x) for x in members)


def find_vector_files(
    directory: Path | str, suffixes: Optional[Sequence[str]] = (".shp",)
) -> List[Path]:
    """
    Searches a directory (recursively) for vector files

    :param directory:
        directory to search
    :param suffixes:
        file extensions to look for (case-insensitive). ESRI shapefiles by
        default.
    :returns:
        sorted list of vector files found
    """
    directory = Path(directory)
    suffixes = [x.lower() for x in suffixes]
    vector_files = sorted(
        x for x in directory.rglob("*") if x.is_file() and x.suffix.lower() in suffixes
    )
    if len(vector_files) == 0:
        raise DataNotFoundError(
            f"Could not find any files with suffixes {suffixes} in {directory}"
        )
    return vector_files
