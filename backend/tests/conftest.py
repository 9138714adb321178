import math

import pytest

# Reference point for geographic fixtures (Sydney CBD).
LON0 = 151.2093
LAT0 = -33.8688


def metres_to_lonlat(points, lon0=LON0, lat0=LAT0):
    """Approximate local metres -> (lon, lat); close enough for fixtures."""
    m_per_deg_lat = 110_574.0
    m_per_deg_lon = 111_320.0 * math.cos(math.radians(lat0))
    return [(lon0 + x / m_per_deg_lon, lat0 + y / m_per_deg_lat) for x, y in points]


@pytest.fixture
def square_ring():
    return [(0, 0), (10, 0), (10, 10), (0, 10), (0, 0)]


@pytest.fixture
def geo_lot():
    """A 20 m wide, 40 m deep lot; edge0 (the front) runs along the bottom."""
    return metres_to_lonlat([(0, 0), (20, 0), (20, 40), (0, 40), (0, 0)])


@pytest.fixture
def to_lonlat():
    return metres_to_lonlat
