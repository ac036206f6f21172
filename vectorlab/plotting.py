"""
Map plots of feature collections using ``matplotlib``.

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

import matplotlib.pyplot as plt

from matplotlib.axes import Axes
from matplotlib.colors import ListedColormap
from matplotlib.figure import Figure
from typing import Any, Dict, List, Optional, Tuple

from vectorlab.config import get_settings
from vectorlab.core.feature_collection import FeatureCollection
from vectorlab.utils.exceptions import AttributeNotFoundError, InvalidInputError
from vectorlab.utils.reprojection import crs_equal

Settings = get_settings()

# colors of features not intersecting / intersecting the targets
PREDICATE_COLORS = ListedColormap(["#bdbdbd", "#d7301f"])


def _get_axes(ax: Optional[Axes]) -> Tuple[Figure, Axes]:
    """opens a new figure or gets the figure of an existing axis object"""
    if ax is None:
        fig, ax = plt.subplots(nrows=1, ncols=1, figsize=(8, 8))
    else:
        fig = ax.get_figure()
    return fig, ax


def _label_axes(ax: Axes, collection: FeatureCollection, fontsize: int) -> None:
    """axes labels reflecting the spatial reference system"""
    crs = collection.crs
    if crs.is_geographic:
        xlabel, ylabel, unit = "Longitude", "Latitude", "deg"
    else:
        xlabel, ylabel, unit = "X", "Y", "m"
    epsg = collection.epsg
    crs_str = f"EPSG:{epsg}" if epsg is not None else crs.name
    ax.set_xlabel(f"{xlabel} [{unit}] ({crs_str})", fontsize=fontsize)
    ax.set_ylabel(f"{ylabel} [{unit}] ({crs_str})", fontsize=fontsize)


def plot_collection(
    collection: FeatureCollection,
    column: Optional[str] = None,
    categorical: Optional[bool] = None,
    colormap: Optional[str] = "viridis",
    color: Optional[str] = None,
    title: Optional[str] = None,
    fontsize: Optional[int] = 12,
    legend: Optional[bool] = True,
    ax: Optional[Axes] = None,
    **kwargs,
) -> Figure:
    """
    Plots the features of a collection

    :param collection:
        features to plot
    :param column:
        optional attribute used to color the features
    :param categorical:
        if the attribute takes discrete values. If not passed, all but
        numeric attributes are treated as discrete.
    :param colormap:
        String identifying one of matplotlib's colormaps. Used if `column`
        is passed.
    :param color:
        single color for all features. Used if no `column` is passed.
    :param title:
        optional plot title
    :param fontsize:
        fontsize to use for axes labels and plot title. 12 pts by default.
    :param legend:
        if a legend (or colorbar) is added when plotting an attribute
    :param ax:
        optional `matplotlib.axes` object to plot onto
    :param kwargs:
        further keyword arguments passed to ``GeoDataFrame.plot``
    :returns:
        matplotlib figure object with the features plotted as map
    """
    fig, ax = _get_axes(ax)
    gdf = collection.to_geodataframe()

    if column is not None:
        if column not in collection.columns:
            raise AttributeNotFoundError(f"{column} not found in attributes")
        if categorical is None:
            categorical = gdf[column].dtype.kind not in "iuf"
        # geopandas cannot derive categories from boolean attributes
        if gdf[column].dtype == bool:
            gdf[column] = gdf[column].astype(str)
        gdf.plot(
            column=column,
            categorical=categorical,
            cmap=colormap,
            legend=legend and not collection.empty,
            ax=ax,
            **kwargs,
        )
    else:
        gdf.plot(color=color, ax=ax, **kwargs)

    if title is not None:
        ax.set_title(title, fontsize=fontsize)
    _label_axes(ax, collection, fontsize)
    return fig


def plot_layers(
    layers: List[Tuple[FeatureCollection, Dict[str, Any]]],
    title: Optional[str] = None,
    fontsize: Optional[int] = 12,
    ax: Optional[Axes] = None,
) -> Figure:
    """
    Plots several collections on top of each other (e.g., rivers over
    administrative boundaries). The first layer is drawn first.

    :param layers:
        list of (collection, keyword arguments for `plot_collection`) tuples
    :param title:
        optional plot title
    :param fontsize:
        fontsize to use for axes labels and plot title. 12 pts by default.
    :param ax:
        optional `matplotlib.axes` object to plot onto
    :returns:
        matplotlib figure object with all layers plotted
    """
    if len(layers) == 0:
        raise InvalidInputError("At least one layer is required")
    reference_crs = layers[0][0].crs
    for collection, _ in layers[1:]:
        if not crs_equal(collection.crs, reference_crs):
            raise InvalidInputError(
                f"Layers differ in CRS: {collection.crs.to_string()} vs. "
                f"{reference_crs.to_string()}. Reproject them first"
            )

    fig, ax = _get_axes(ax)
    for collection, layer_kwargs in layers:
        plot_collection(collection, ax=ax, fontsize=fontsize, **layer_kwargs)
    if title is not None:
        ax.set_title(title, fontsize=fontsize)
    return fig


def plot_predicate_join(
    candidates: FeatureCollection,
    targets: Optional[FeatureCollection] = None,
    attribute: Optional[str] = None,
    title: Optional[str] = None,
    fontsize: Optional[int] = 12,
    ax: Optional[Axes] = None,
) -> Figure:
    """
    Plots the result of a spatial predicate join. Candidates are colored by
    their boolean label, targets (optional) are drawn as outlines below.

    :param candidates:
        labeled candidates returned by `spatial_predicate_join`
    :param targets:
        optional target features
    :param attribute:
        boolean attribute to color by. Defaults to the
        `INTERSECTS_ATTRIBUTE` setting.
    :param title:
        optional plot title
    :param fontsize:
        fontsize to use for axes labels and plot title. 12 pts by default.
    :param ax:
        optional `matplotlib.axes` object to plot onto
    :returns:
        matplotlib figure object
    """
    if attribute is None:
        attribute = Settings.INTERSECTS_ATTRIBUTE
    if attribute not in candidates.columns:
        raise AttributeNotFoundError(
            f"{attribute} not found. Run spatial_predicate_join first"
        )
    layers = []
    if targets is not None:
        layers.append((targets, {"color": "none", "edgecolor": "black"}))
    layers.append(
        (
            candidates,
            {
                "column": attribute,
                "categorical": True,
                "colormap": PREDICATE_COLORS,
                "categories": ["False", "True"],
            },
        )
    )
    return plot_layers(layers, title=title, fontsize=fontsize, ax=ax)
