"""
A pipeline keeps every intermediate `FeatureCollection` of a processing chain
under its own name instead of re-assigning one variable over and over again.
This makes the lineage of each result traceable and every step testable on
its own.

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

from collections.abc import Mapping
from typing import Callable, Iterator, List, NamedTuple, Optional

from vectorlab.config import get_settings
from vectorlab.core.feature_collection import FeatureCollection

Settings = get_settings()
logger = Settings.logger


class Step(NamedTuple):
    name: str
    source: Optional[str]
    operation: str
    n_features: int
    crs: str


class Pipeline(Mapping):
    """
    Ordered, append-only mapping of step names to the `FeatureCollection`
    each step produced.

    :attrib name:
        name of the pipeline (used in log messages)
    """

    def __init__(self, name: Optional[str] = "pipeline"):
        self._name = name
        self._collections: dict[str, FeatureCollection] = {}
        self._lineage: List[Step] = []

    def __getitem__(self, key: str) -> FeatureCollection:
        if key not in self._collections:
            raise KeyError(f"No step named {key} in {self.name}")
        return self._collections[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._collections)

    def __len__(self) -> int:
        return len(self._collections)

    def __repr__(self) -> str:
        steps = "\n".join(
            f"{x.name:<24}<- {str(x.source):<24}{x.operation} "
            f"({x.n_features} features, {x.crs})"
            for x in self._lineage
        )
        return f"Pipeline {self.name}\n{steps}"

    @property
    def name(self) -> str:
        """name of the pipeline"""
        return self._name

    @property
    def lineage(self) -> List[Step]:
        """steps in the order they were carried out"""
        return list(self._lineage)

    @property
    def latest(self) -> FeatureCollection:
        """collection produced by the last step"""
        if len(self._lineage) == 0:
            raise KeyError(f"{self.name} has no steps yet")
        return self._collections[self._lineage[-1].name]

    def _add(
        self,
        name: str,
        collection: FeatureCollection,
        source: Optional[str],
        operation: str,
    ) -> FeatureCollection:
        if name in self._collections:
            raise ValueError(f"Step {name} exists already in {self.name}")
        if not isinstance(collection, FeatureCollection):
            raise TypeError(
                f"Step {name} returned {type(collection)} instead of a FeatureCollection"
            )
        self._collections[name] = collection
        step = Step(
            name=name,
            source=source,
            operation=operation,
            n_features=len(collection),
            crs=collection.crs.to_string(),
        )
        self._lineage.append(step)
        logger.info(
            f"{self.name}: {name} <- {source} {operation} "
            f"({step.n_features} features, {step.crs})"
        )
        return collection

    def start(self, name: str, collection: FeatureCollection) -> FeatureCollection:
        """
        Adds a collection that does not derive from another step (e.g., read
        from a file)

        :param name:
            unique step name
        :param collection:
            the collection
        :returns:
            the collection
        """
        return self._add(name, collection, source=None, operation="start")

    def apply(
        self,
        name: str,
        func: Callable[..., FeatureCollection],
        *args,
        source: Optional[str] = None,
        **kwargs,
    ) -> FeatureCollection:
        """
        Derives a new collection from an existing step

        :param name:
            unique step name
        :param func:
            callable taking a `FeatureCollection` as first argument and
            returning a new `FeatureCollection`, e.g., `FeatureCollection.crop`
            or `spatial_predicate_join`
        :param args:
            further positional arguments passed to `func`
        :param source:
            name of the step whose collection is passed to `func`. Defaults
            to the latest step.
        :param kwargs:
            keyword arguments passed to `func`
        :returns:
            the new collection
        """
        if source is None:
            if len(self._lineage) == 0:
                raise KeyError(f"{self.name} has no steps yet. Call start() first")
            source = self._lineage[-1].name
        collection = func(self[source], *args, **kwargs)
        operation = getattr(func, "__qualname__", getattr(func, "__name__", repr(func)))
        return self._add(name, collection, source=source, operation=operation)
