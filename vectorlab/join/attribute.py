"""
Joins of tabular lookup data (e.g., an identifier to category mapping read
from a CSV file) onto feature collections by matching keys.

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

from pathlib import Path
from typing import List, Optional, Tuple

from vectorlab.config import get_settings
from vectorlab.core.feature_collection import FeatureCollection
from vectorlab.utils.exceptions import (
    AttributeNotFoundError,
    DataNotFoundError,
    InvalidInputError,
)

Settings = get_settings()
logger = Settings.logger

_index_column = "__vectorlab_name__"


def read_lookup_table(
    fpath: Path | str,
    categorical: Optional[List[str]] = None,
    **kwargs,
) -> pd.DataFrame:
    """
    Reads a lookup table from a CSV file

    :param fpath:
        file-path to the CSV file
    :param categorical:
        optional list of columns to convert into categorical (factor) columns
    :param kwargs:
        optional keyword arguments passed to ``pandas.read_csv``
    :returns:
        lookup table as ``DataFrame``
    """
    fpath = Path(fpath)
    if not fpath.exists():
        raise DataNotFoundError(f"Could not find lookup table {fpath}")
    df = pd.read_csv(fpath, **kwargs)
    logger.info(f"Read lookup table with {df.shape[0]} records from {fpath}")

    if categorical is not None:
        missing = [x for x in categorical if x not in df.columns]
        if len(missing) > 0:
            raise AttributeNotFoundError(f"{missing} not found in {fpath}")
        for column in categorical:
            df[column] = df[column].astype("category")
    return df


def attribute_join(
    collection: FeatureCollection,
    table: pd.DataFrame,
    left_on: str,
    right_on: Optional[str] = None,
    how: Optional[str] = "left",
    suffixes: Optional[Tuple[str, str]] = ("", "_lookup"),
) -> FeatureCollection:
    """
    Merges the columns of a lookup table onto the features of a collection
    by matching keys. The result is always a `FeatureCollection` with the
    CRS, feature names and feature order of `collection`.

    :param collection:
        features to enrich
    :param table:
        lookup table (must not carry geometries)
    :param left_on:
        attribute of `collection` holding the keys
    :param right_on:
        column of `table` holding the keys. Defaults to `left_on`.
    :param how:
        "left" (default) keeps all features, features without a match get
        missing values. "inner" keeps the features with a match, only.
    :param suffixes:
        suffixes appended to clashing column names (features, table)
    :returns:
        new `FeatureCollection` with the lookup attributes added
    """
    if right_on is None:
        right_on = left_on
    if how not in ("left", "inner"):
        raise ValueError(f'how must be one of "left" or "inner", got "{how}"')
    if isinstance(table, gpd.GeoDataFrame) or isinstance(table, gpd.GeoSeries):
        raise InvalidInputError(
            "Lookup table carries geometries. Use a spatial join instead"
        )
    if left_on not in collection.columns:
        raise AttributeNotFoundError(f"{left_on} not found in feature attributes")
    if right_on not in table.columns:
        raise AttributeNotFoundError(f"{right_on} not found in lookup table")
    if table[right_on].duplicated().any():
        duplicates = table.loc[table[right_on].duplicated(), right_on].unique().tolist()
        raise InvalidInputError(f"Lookup table has duplicated keys: {duplicates}")

    gdf = collection.to_geodataframe()
    geometry_name = collection.geometry_name
    lookup = table.copy()
    if geometry_name in lookup.columns:
        raise InvalidInputError(
            f"Lookup table must not contain the geometry column {geometry_name}"
        )

    # keep feature names and order through the merge (pandas resets the index)
    gdf[_index_column] = gdf.index
    try:
        merged = gdf.merge(
            lookup,
            how=how,
            left_on=left_on,
            right_on=right_on,
            suffixes=suffixes,
            validate="many_to_one",
        )
    except ValueError as e:
        raise InvalidInputError(f"Could not join lookup table: {e}")
    merged = merged.set_index(_index_column)
    merged = merged.loc[gdf.index[gdf.index.isin(merged.index)]]
    merged.index.name = gdf.index.name
    # pandas keeps the right-hand key if the key names differ
    if right_on != left_on and right_on in merged.columns and right_on not in gdf.columns:
        merged = merged.drop(columns=[right_on])

    merged = gpd.GeoDataFrame(merged, geometry=geometry_name)
    if merged.crs is None:
        merged = merged.set_crs(collection.crs)
    n_matched = merged.shape[0] if how == "inner" else int(
        gdf[left_on].isin(lookup[right_on]).sum()
    )
    logger.info(
        f"Matched {n_matched} of {len(collection)} features to the lookup table"
    )
    return FeatureCollection(merged)
