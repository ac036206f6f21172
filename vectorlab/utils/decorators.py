"""
Function and method decorators used to validate passed arguments.

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

from functools import wraps

from vectorlab.utils.exceptions import AttributeNotFoundError, InvalidInputError
from vectorlab.utils.reprojection import crs_equal


def check_same_crs(f):
    """
    checks that the first two collections passed (positional or as `candidates`
    and `targets` keyword arguments) share one spatial reference system
    """

    @wraps(f)
    def wrapper(*args, **kwargs):
        candidates = kwargs.get("candidates", args[0] if len(args) > 0 else None)
        targets = kwargs.get("targets", args[1] if len(args) > 1 else None)
        if candidates is None or targets is None:
            raise InvalidInputError("Candidates and targets must be specified")
        if not crs_equal(candidates.crs, targets.crs):
            raise InvalidInputError(
                f"CRS mismatch: candidates in {candidates.crs.to_string()}, "
                f"targets in {targets.crs.to_string()}. Reproject one of them first"
            )
        return f(*args, **kwargs)

    return wrapper


def check_attribute_names(f):
    """checks if passed attribute name(s) are available in a collection"""

    @wraps(f)
    def wrapper(self, *args, **kwargs):
        columns = None
        if len(args) > 0:
            # attribute name(s) are always provided as first argument
            columns = args[0]
        if columns is None:
            columns = kwargs.get("columns", kwargs.get("column", kwargs.get("mapping")))
        if columns is None:
            return f(self, *args, **kwargs)

        if isinstance(columns, str):
            columns = [columns]
        elif isinstance(columns, dict):
            columns = list(columns.keys())

        missing = [x for x in columns if x not in self.columns]
        if len(missing) > 0:
            raise AttributeNotFoundError(f"{missing} not found in attributes")

        return f(self, *args, **kwargs)

    return wrapper
