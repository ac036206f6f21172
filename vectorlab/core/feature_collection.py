"""
A collection of features sharing one spatial reference system.

The `FeatureCollection` wraps a ``geopandas.GeoDataFrame``. The wrapped frame
is copied when a collection is created and when it is handed out again, so a
collection cannot be changed once it exists. All operations (selecting,
filtering, reprojecting, cropping, joining) return new collections.

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
import shapely

from pathlib import Path
from pyproj import CRS
from pyproj.exceptions import ProjError
from shapely.geometry import box
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence

from vectorlab.config import get_settings
from vectorlab.core.bounding_box import BoundingBox
from vectorlab.core.feature import Feature
from vectorlab.core.filter import Filter
from vectorlab.core.utils.geometry import (
    check_geometry_types,
    drop_z,
    read_geometries,
    remove_empty_geometries,
)
from vectorlab.utils.decorators import check_attribute_names
from vectorlab.utils.exceptions import (
    FeatureNotFoundError,
    InvalidInputError,
    ReprojectionError,
)
from vectorlab.utils.reprojection import crs_equal, infer_utm_zone, to_crs

Settings = get_settings()
logger = Settings.logger


def _repair_geometry(geom):
    """makes a single geometry valid keeping its dimensionality"""
    if geom is None or geom.is_valid:
        return geom
    fixed = shapely.make_valid(geom)
    if fixed.geom_type == "GeometryCollection":
        # keep the parts with the highest dimension (e.g. drop collapsed edges)
        parts = list(fixed.geoms)
        max_dim = max(shapely.get_dimensions(parts))
        parts = [x for x in parts if shapely.get_dimensions(x) == max_dim]
        fixed = shapely.union_all(parts)
    return fixed


class FeatureCollection:
    """
    Ordered sequence of features with a common coordinate reference system.
    Feature names (identifiers) are stored in the index of the underlying
    ``GeoDataFrame`` and must be unique.

    :attrib crs:
        coordinate reference system shared by all features
    """

    def __init__(self, gdf: gpd.GeoDataFrame, crs: Optional[Any] = None):
        """
        Class constructor

        :param gdf:
            ``GeoDataFrame`` with the features. The frame is copied.
        :param crs:
            optional coordinate reference system. Assigned if `gdf` has no CRS
            set, otherwise it must match the CRS of `gdf`.
        """
        if not isinstance(gdf, gpd.GeoDataFrame):
            raise TypeError(f"Expected a GeoDataFrame, got {type(gdf)}")
        try:
            gdf.geometry
        except AttributeError:
            raise InvalidInputError("GeoDataFrame has no active geometry column")

        gdf = gdf.copy()
        if gdf.crs is None:
            if crs is None:
                raise InvalidInputError(
                    "Features have no coordinate reference system. Pass `crs`"
                )
            gdf = gdf.set_crs(to_crs(crs))
        elif crs is not None and not crs_equal(gdf.crs, crs):
            raise InvalidInputError(
                f"CRS {to_crs(crs).to_string()} differs from the CRS of the "
                f"features ({gdf.crs.to_string()}). Use to_crs() to reproject"
            )
        if not gdf.index.is_unique:
            raise InvalidInputError("Feature names (index) must be unique")
        if gdf.geometry.isna().any():
            raise InvalidInputError(
                f"{int(gdf.geometry.isna().sum())} features have no geometry"
            )
        if gdf.geometry.is_empty.any():
            raise InvalidInputError(
                f"{int(gdf.geometry.is_empty.sum())} features have an empty geometry"
            )
        check_geometry_types(gdf)
        self._gdf = gdf

    def __repr__(self) -> str:
        return (
            f"FeatureCollection with {len(self)} features "
            f"(CRS: {self.crs.to_string()})\n{self._gdf.__repr__()}"
        )

    def __len__(self) -> int:
        return self._gdf.shape[0]

    def __iter__(self) -> Iterator[Feature]:
        for name in self._gdf.index:
            yield self[name]

    def __contains__(self, name: Any) -> bool:
        return name in self._gdf.index

    def __getitem__(self, name: Any) -> Feature:
        if name not in self._gdf.index:
            raise FeatureNotFoundError(f"{name} not found in collection")
        record = self._gdf.loc[name]
        return Feature(
            name=name,
            geometry=record[self.geometry_name],
            crs=self.crs,
            attributes=record.drop(labels=[self.geometry_name]).to_dict(),
        )

    @property
    def columns(self) -> List[str]:
        """attribute names (geometry column excluded)"""
        return [x for x in self._gdf.columns if x != self.geometry_name]

    @property
    def crs(self) -> CRS:
        """coordinate reference system of the collection"""
        return self._gdf.crs

    @property
    def empty(self) -> bool:
        """True if the collection has no features"""
        return len(self) == 0

    @property
    def epsg(self) -> int | None:
        """EPSG code of the coordinate reference system (if any)"""
        return self.crs.to_epsg()

    @property
    def geom_types(self) -> List[str]:
        """unique geometry types found in the collection"""
        return list(self._gdf.geom_type.unique())

    @property
    def geometry(self) -> gpd.GeoSeries:
        """feature geometries (copy)"""
        return self._gdf.geometry.copy()

    @property
    def geometry_name(self) -> str:
        """name of the geometry column"""
        return self._gdf.geometry.name

    @property
    def names(self) -> List[Any]:
        """feature names (identifiers) in order"""
        return self._gdf.index.tolist()

    @property
    def total_bounds(self) -> BoundingBox:
        """bounding box of all features"""
        if self.empty:
            raise InvalidInputError("An empty collection has no bounds")
        return BoundingBox(*self._gdf.total_bounds, crs=self.crs)

    @classmethod
    def from_features(
        cls, features: Iterable[Feature], crs: Optional[Any] = None
    ) -> FeatureCollection:
        """
        Collection from single `Feature` objects. All features must share one
        coordinate reference system.

        :param features:
            features to combine. Their order is preserved.
        :param crs:
            coordinate reference system. Required if `features` is empty.
        :returns:
            new `FeatureCollection`
        """
        features = list(features)
        if len(features) == 0:
            if crs is None:
                raise InvalidInputError("An empty collection requires a CRS")
            return cls(gpd.GeoDataFrame(geometry=gpd.GeoSeries([], crs=to_crs(crs))))

        collection_crs = features[0].crs
        for feature in features[1:]:
            if not crs_equal(feature.crs, collection_crs):
                raise InvalidInputError(
                    f"Feature {feature.name} is in {feature.crs.to_string()} "
                    f"but expected {collection_crs.to_string()}"
                )

        gdf = gpd.GeoDataFrame(
            geometry=[x.geometry for x in features],
            index=pd.Index([x.name for x in features]),
            crs=collection_crs,
        )
        records = [x.attributes for x in features]
        keys = []
        for record in records:
            keys.extend([k for k in record.keys() if k not in keys])
        for key in keys:
            gdf[key] = [record.get(key) for record in records]
        return cls(gdf, crs=crs)

    @classmethod
    def from_file(
        cls,
        fpath: Path | str,
        layer: Optional[str] = None,
        name_column: Optional[str] = None,
        drop_empty: Optional[bool] = True,
        force_2d: Optional[bool] = True,
        crs: Optional[Any] = None,
    ) -> FeatureCollection:
        """
        Reads features from a vector file (ESRI shapefile, GeoPackage, GeoJSON,
        zipped shapefile, ...) using ``geopandas.read_file``

        :param fpath:
            file-path to the vector file
        :param layer:
            optional layer name for multi-layer sources (e.g., GeoPackage)
        :param name_column:
            optional attribute holding unique feature names. The row number
            is used otherwise.
        :param drop_empty:
            when True (default) removes features without geometry (None-type)
            or with an empty geometry.
        :param force_2d:
            when True (default) drops z coordinates.
        :param crs:
            coordinate reference system to assign if the file has none
        :returns:
            new `FeatureCollection`
        """
        kwargs = {}
        if layer is not None:
            kwargs["layer"] = layer
        gdf = read_geometries(Path(fpath), **kwargs)
        logger.info(f"Read {gdf.shape[0]} features from {fpath}")
        if drop_empty:
            gdf = remove_empty_geometries(gdf)
        if force_2d:
            gdf = gdf.set_geometry(drop_z(gdf.geometry))
        collection = cls(gdf, crs=crs)
        if name_column is not None:
            collection = collection.set_names(name_column)
        return collection

    @check_attribute_names
    def set_names(self, column: str) -> FeatureCollection:
        """
        Uses the values of an attribute as feature names

        :param column:
            attribute with unique values
        :returns:
            new `FeatureCollection`
        """
        gdf = self._gdf.set_index(column, drop=False)
        gdf.index.name = None
        return FeatureCollection(gdf)

    @check_attribute_names
    def select(self, columns: str | Sequence[str]) -> FeatureCollection:
        """
        Keeps the passed attributes (and the geometry), only

        :param columns:
            attribute name(s) to keep
        :returns:
            new `FeatureCollection`
        """
        if isinstance(columns, str):
            columns = [columns]
        return FeatureCollection(self._gdf[list(columns) + [self.geometry_name]])

    @check_attribute_names
    def drop(self, columns: str | Sequence[str]) -> FeatureCollection:
        """
        Removes attributes from the collection

        :param columns:
            attribute name(s) to drop
        :returns:
            new `FeatureCollection`
        """
        if isinstance(columns, str):
            columns = [columns]
        return FeatureCollection(self._gdf.drop(columns=list(columns)))

    @check_attribute_names
    def rename(self, mapping: Dict[str, str]) -> FeatureCollection:
        """
        Renames attributes

        :param mapping:
            old attribute names as keys and new names as values
        :returns:
            new `FeatureCollection`
        """
        new_names = list(mapping.values())
        if self.geometry_name in new_names:
            raise InvalidInputError(
                f"Cannot rename an attribute to the geometry column {self.geometry_name}"
            )
        remaining = [x for x in self.columns if x not in mapping]
        clashes = [x for x in new_names if x in remaining]
        if len(clashes) > 0 or len(set(new_names)) != len(new_names):
            raise InvalidInputError(f"Renaming results in duplicated attributes: {new_names}")
        return FeatureCollection(self._gdf.rename(columns=mapping))

    def filter(self, filters: Filter | Sequence[Filter]) -> FeatureCollection:
        """
        Keeps the features fulfilling all filter criteria

        :param filters:
            one or more `Filter` objects
        :returns:
            new `FeatureCollection`
        """
        if isinstance(filters, Filter):
            filters = [filters]
        mask = pd.Series(True, index=self._gdf.index)
        for _filter in filters:
            mask &= _filter.evaluate(self._gdf)
        return FeatureCollection(self._gdf[mask])

    def with_attribute(self, name: str, values: Any) -> FeatureCollection:
        """
        Adds an attribute or replaces an existing one

        :param name:
            attribute name
        :param values:
            one value per feature (in feature order) or a scalar
        :returns:
            new `FeatureCollection`
        """
        if name == self.geometry_name:
            raise InvalidInputError(f"Cannot overwrite the geometry column {name}")
        gdf = self._gdf.copy()
        if pd.api.types.is_list_like(values):
            if not hasattr(values, "__len__"):
                values = list(values)
            if len(values) != len(self):
                raise InvalidInputError(
                    f"Got {len(values)} values for {len(self)} features"
                )
            if isinstance(values, pd.Series):
                values = values.set_axis(gdf.index)
        gdf[name] = values
        return FeatureCollection(gdf)

    @check_attribute_names
    def as_category(
        self,
        column: str,
        categories: Optional[Sequence[Any]] = None,
        ordered: Optional[bool] = False,
    ) -> FeatureCollection:
        """
        Converts an attribute into a categorical (factor) attribute

        :param column:
            attribute to convert
        :param categories:
            optional list of categories (in order). Values not in this list
            become missing. Inferred from the data otherwise.
        :param ordered:
            if the categories have a meaningful order
        :returns:
            new `FeatureCollection`
        """
        gdf = self._gdf.copy()
        gdf[column] = pd.Categorical(gdf[column], categories=categories, ordered=ordered)
        return FeatureCollection(gdf)

    def to_crs(self, crs: Any) -> FeatureCollection:
        """
        Projects all features into a different spatial reference system

        :param crs:
            target coordinate reference system
        :returns:
            new `FeatureCollection` in the target reference system
        """
        target_crs = to_crs(crs)
        try:
            gdf = self._gdf.to_crs(target_crs)
        except ProjError as e:
            logger.error(f"Reprojection to {target_crs.to_string()} failed: {e}")
            raise ReprojectionError(e)
        return FeatureCollection(gdf)

    def to_utm(self) -> FeatureCollection:
        """
        Projects all features into the UTM zone the centre of the
        collection lies in

        :returns:
            new `FeatureCollection` in UTM coordinates
        """
        bbox_wgs84 = self.total_bounds.to_crs(4326)
        return self.to_crs(infer_utm_zone(box(*bbox_wgs84.bounds)))

    def crop(self, bbox: BoundingBox) -> FeatureCollection:
        """
        Crops the features to a bounding box. Features outside the box are
        removed, features crossing its edges are cut.

        :param bbox:
            bounding box. Transformed into the collection CRS if required.
        :returns:
            new `FeatureCollection`
        """
        if not crs_equal(bbox.crs, self.crs):
            bbox = bbox.to_crs(self.crs)
        clipped = gpd.clip(self._gdf, bbox.bounds, keep_geom_type=True)
        clipped = clipped[~clipped.geometry.is_empty]
        order = self._gdf.index[self._gdf.index.isin(clipped.index)]
        return FeatureCollection(clipped.loc[order])

    def is_valid(self) -> pd.Series:
        """boolean Series with the validity of every feature geometry"""
        return self._gdf.geometry.is_valid

    def validate(self) -> FeatureCollection:
        """
        Checks all geometries for validity (e.g., no self-intersecting rings)

        :returns:
            the collection itself if all geometries are valid
        """
        valid = self.is_valid()
        if not valid.all():
            name = valid.index[~valid.values][0]
            reason = shapely.is_valid_reason(self._gdf.geometry.loc[name])
            raise InvalidInputError(f"Feature {name} has an invalid geometry: {reason}")
        return self

    def make_valid(self) -> FeatureCollection:
        """
        Repairs invalid geometries

        :returns:
            new `FeatureCollection` with valid geometries
        """
        gdf = self._gdf.copy()
        n_invalid = int((~gdf.geometry.is_valid).sum())
        if n_invalid > 0:
            logger.warning(f"Repairing {n_invalid} invalid geometries")
            gdf = gdf.set_geometry(gdf.geometry.apply(_repair_geometry))
        return FeatureCollection(gdf)

    def to_wkt(self) -> pd.Series:
        """feature geometries as Well-Known Text"""
        return self._gdf.geometry.to_wkt()

    def to_geodataframe(self) -> gpd.GeoDataFrame:
        """the collection as ``GeoDataFrame`` (copy)"""
        return self._gdf.copy()

    def to_file(self, fpath: Path | str, driver: Optional[str] = None) -> None:
        """
        Writes the collection to a vector file

        :param fpath:
            file-path of the output file
        :param driver:
            optional OGR driver name. Inferred from the file extension otherwise.
        """
        kwargs = {}
        if driver is not None:
            kwargs["driver"] = driver
        self._gdf.to_file(fpath, **kwargs)
        logger.info(f"Wrote {len(self)} features to {fpath}")

    def plot(self, **kwargs):
        """
        Plots the features using ``matplotlib``. See
        `vectorlab.plotting.plot_collection` for the keyword arguments.
        """
        from vectorlab.plotting import plot_collection

        return plot_collection(self, **kwargs)
