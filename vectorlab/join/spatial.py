"""
Spatial predicate join: labels every candidate feature with whether it shares
at least one point with the union of a set of target features.

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

import numpy as np
import warnings

from joblib import Parallel, delayed
from typing import Optional

from vectorlab.config import get_settings
from vectorlab.core.feature_collection import FeatureCollection
from vectorlab.engine import GeometryEngine, get_engine
from vectorlab.utils.decorators import check_same_crs
from vectorlab.utils.exceptions import EmptyResultWarning, InvalidInputError

Settings = get_settings()
logger = Settings.logger


def _check_valid(
    collection: FeatureCollection, engine: GeometryEngine, role: str
) -> None:
    """
    Raises an `InvalidInputError` for the first invalid geometry found

    :param collection:
        collection to check
    :param engine:
        geometry engine used for the validity test
    :param role:
        role of the collection in the join (used in the error message)
    """
    geometries = collection.geometry
    valid = engine.is_valid(geometries.values)
    if not valid.all():
        idx = int(np.flatnonzero(~valid)[0])
        name = geometries.index[idx]
        reason = engine.validity_reason(geometries.values[idx])
        raise InvalidInputError(
            f"{role.capitalize()} feature {name} has an invalid geometry: {reason}"
        )


@check_same_crs
def spatial_predicate_join(
    candidates: FeatureCollection,
    targets: FeatureCollection,
    attribute: Optional[str] = None,
    engine: Optional[GeometryEngine] = None,
    n_jobs: Optional[int] = None,
) -> FeatureCollection:
    """
    Labels each candidate with whether its geometry intersects the union of all
    target geometries. Touching boundaries (shared vertex or edge) count as
    intersecting.

    :param candidates:
        features to label
    :param targets:
        reference features. Must be in the same CRS as `candidates`.
    :param attribute:
        name of the boolean attribute to write. Defaults to the
        `INTERSECTS_ATTRIBUTE` setting ("intersectsTarget"). An existing
        attribute of the same name is replaced.
    :param engine:
        geometry engine. Defaults to the engine named by the
        `GEOMETRY_ENGINE` setting.
    :param n_jobs:
        number of threads evaluating chunks of candidates. Defaults to the
        `N_JOBS` setting. Negative values follow the joblib convention
        (-1 = all CPUs), 0 is not allowed. The result does not depend on it.
    :returns:
        new `FeatureCollection` with the candidates in their original order
        and the boolean attribute added
    """
    if attribute is None:
        attribute = Settings.INTERSECTS_ATTRIBUTE
    if engine is None:
        engine = get_engine()
    if n_jobs is None:
        n_jobs = Settings.N_JOBS
    if n_jobs == 0:
        raise ValueError(
            "n_jobs must be a positive number of threads or negative (all CPUs), got 0"
        )

    _check_valid(candidates, engine, role="candidate")
    _check_valid(targets, engine, role="target")

    if candidates.empty:
        return candidates.with_attribute(attribute, np.zeros(0, dtype=bool))

    if targets.empty:
        warnings.warn(
            "Target collection is empty - all candidates are labeled False",
            EmptyResultWarning,
        )
        return candidates.with_attribute(attribute, np.zeros(len(candidates), dtype=bool))

    target_union = engine.union(targets.geometry.values)
    geometries = candidates.geometry.values

    if n_jobs == 1 or len(candidates) == 1:
        labels = engine.intersects_any(geometries, target_union)
    else:
        n_chunks = min(len(candidates), n_jobs if n_jobs > 0 else len(candidates))
        chunks = np.array_split(np.arange(len(candidates)), n_chunks)
        result = Parallel(n_jobs=n_jobs, prefer="threads")(
            delayed(engine.intersects_any)(geometries[chunk], target_union)
            for chunk in chunks
        )
        labels = np.concatenate(result)

    logger.info(
        f"{int(labels.sum())} of {len(candidates)} candidates intersect "
        f"{len(targets)} target features"
    )
    return candidates.with_attribute(attribute, labels.astype(bool))
