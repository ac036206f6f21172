"""
Attribute filters for selecting features from a collection.

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

import operator as op
import pandas as pd

from typing import Any

from vectorlab.utils.exceptions import AttributeNotFoundError

operators = {
    "<": op.lt,
    "<=": op.le,
    "==": op.eq,
    "!=": op.ne,
    ">": op.gt,
    ">=": op.ge,
}


class Filter:
    """
    The generic filter class. A filter selects features by one of their
    attributes.

    Each filter follows the following structure:

    <entity> <operator> <value>

    For instance, `stream_order >= 3`, where

        * `stream_order` is the attribute to filter
        * `>=` is the operator
        * `3` is the value

    :attrib entity:
        feature attribute to use for filtering
    :attrib operator:
        comparison operator to use, e.g., ">" for "greater than"
    :attrib value:
        value on the right-hand side of the filter expression
    """

    def __init__(self, entity: str, operator: str, value: Any):
        """
        Constructor method

        :param entity:
            feature attribute to use for filtering
        :param operator:
            comparison operator to use, e.g., ">" for "greater than" (value)
        :param value:
            value on the right-hand side of the filter expression
        """
        # check inputs
        if not isinstance(entity, str):
            raise TypeError("Entity argument must be a string")
        if entity == "":
            raise ValueError("Entity argument must not be an empty string")
        if not isinstance(operator, str):
            raise TypeError("Operator argument must be a string")
        if operator not in operators:
            raise ValueError("Operator must be one of: " + ",".join(operators))
        if value is None:
            raise ValueError("Value cannot be None")

        self._entity = entity
        self._operator = operator
        self._value = value

    def __repr__(self) -> str:
        return self.expression

    @property
    def entity(self) -> str:
        """attribute used to filter"""
        return self._entity

    @property
    def operator(self) -> str:
        """filter operator"""
        return self._operator

    @property
    def value(self) -> Any:
        """right-side value of the filter"""
        return self._value

    @property
    def expression(self) -> str:
        """returns the filter expression as string"""
        return f"{self.entity} {self.operator} {self.value!r}"

    def evaluate(self, frame: pd.DataFrame) -> pd.Series:
        """
        Evaluates the filter on the rows of a (Geo)DataFrame

        :param frame:
            table whose columns contain the filter entity
        :returns:
            boolean Series (True where the filter condition is met)
        """
        if self.entity not in frame.columns:
            raise AttributeNotFoundError(f"{self.entity} not found in attributes")
        values = frame[self.entity]
        mask = operators[self.operator](values, self.value)
        # comparisons with missing values never hold
        return mask.fillna(False).astype(bool) & values.notna()
