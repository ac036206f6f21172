'''
Tests for the map plots

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

import matplotlib.pyplot as plt
import pytest

from matplotlib.figure import Figure

from vectorlab.join import spatial_predicate_join
from vectorlab.plotting import plot_collection, plot_layers, plot_predicate_join
from vectorlab.utils.exceptions import AttributeNotFoundError, InvalidInputError

def test_plot_collection(get_counties):
    counties = get_counties()
    fig = plot_collection(counties, title='Counties')
    assert isinstance(fig, Figure)
    ax = fig.axes[0]
    assert ax.get_title() == 'Counties'
    assert ax.get_xlabel() == 'Longitude [deg] (EPSG:4326)'

    fig = counties.plot(column='AREA_KM2', colormap='Greens')
    assert isinstance(fig, Figure)
    fig = counties.plot(column='NAME')
    assert isinstance(fig, Figure)

    fig = counties.to_utm().plot(color='grey')
    assert fig.axes[0].get_ylabel() == 'Y [m] (EPSG:32632)'

    with pytest.raises(AttributeNotFoundError):
        counties.plot(column='POPULATION')
    plt.close('all')

def test_plot_layers(get_counties, get_rivers):
    counties = get_counties()
    rivers = get_rivers()
    fig, ax = plt.subplots()
    fig_layers = plot_layers(
        [(counties, {'color': 'lightgrey'}), (rivers, {'color': 'blue'})],
        title='Rivers',
        ax=ax
    )
    assert fig_layers is fig, 'existing axes must be used'

    with pytest.raises(InvalidInputError):
        plot_layers([])
    with pytest.raises(InvalidInputError):
        plot_layers([(counties, {}), (rivers.to_utm(), {})])
    plt.close('all')

def test_plot_predicate_join(get_counties, get_rivers):
    counties = get_counties()
    rivers = get_rivers()
    with pytest.raises(AttributeNotFoundError):
        plot_predicate_join(rivers, counties)
    joined = spatial_predicate_join(rivers, counties)
    fig = plot_predicate_join(joined, counties, title='Rivers crossing counties')
    assert isinstance(fig, Figure)
    fig = plot_predicate_join(joined)
    assert isinstance(fig, Figure)
    plt.close('all')
