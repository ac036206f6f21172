'''
Tests for the attribute Filter class

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

import numpy as np
import pandas as pd
import pytest

from vectorlab.core.filter import Filter
from vectorlab.utils.exceptions import AttributeNotFoundError

def test_filter():
    # filter by stream order
    order_filter = Filter(entity='ORDER', operator='>=', value=5)
    assert order_filter.expression == 'ORDER >= 5'
    assert order_filter.entity == 'ORDER'
    assert order_filter.operator == '>='
    assert order_filter.value == 5

    # wrong data types
    with pytest.raises(ValueError):
        Filter(entity='ORDER', operator='ge', value=5)
    with pytest.raises(TypeError):
        Filter(entity=4, operator='<', value=30)
    with pytest.raises(TypeError):
        Filter(entity='ORDER', operator=None, value=30)
    with pytest.raises(ValueError):
        Filter(entity='', operator='<', value=30)

    # passing None
    with pytest.raises(ValueError):
        Filter(entity='ORDER', operator='<', value=None)

def test_filter_evaluate():
    df = pd.DataFrame({
        'ORDER': [5, 4, 7, np.nan],
        'NAME': ['Aare', 'Inn', 'Danube', 'Reuss']
    })
    mask = Filter('ORDER', '>=', 5).evaluate(df)
    assert mask.tolist() == [True, False, True, False]

    # missing values never fulfill a condition
    mask = Filter('ORDER', '!=', 4).evaluate(df)
    assert mask.tolist() == [True, False, True, False]

    mask = Filter('NAME', '==', 'Inn').evaluate(df)
    assert mask.tolist() == [False, True, False, False]
    assert repr(Filter('NAME', '==', 'Inn')) == "NAME == 'Inn'"

    with pytest.raises(AttributeNotFoundError):
        Filter('WIDTH', '>', 1).evaluate(df)
