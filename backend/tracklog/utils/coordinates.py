"""
Spherical-earth geometry helpers.

Distances use the haversine formula on a sphere of equatorial radius and are
reported in nautical miles; bearings are initial great-circle courses in
degrees true.
"""

import numpy as np

EARTH_RADIUS_KM = 6378.137     # Equatorial radius, spherical approximation
KM_PER_NM = 1.8520000016


def haversine_distance_nm(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate great-circle distance between two points.

    Args:
        lat1, lon1: First point coordinates in degrees
        lat2, lon2: Second point coordinates in degrees

    Returns:
        Distance in nautical miles
    """
    lat1_rad = np.radians(lat1)
    lat2_rad = np.radians(lat2)
    dlat = np.radians(lat2 - lat1)
    dlon = np.radians(lon2 - lon1)

    a = np.sin(dlat/2)**2 + np.cos(lat1_rad) * np.cos(lat2_rad) * np.sin(dlon/2)**2
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1-a))

    return float(EARTH_RADIUS_KM * c / KM_PER_NM)


def initial_bearing(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate the forward azimuth from the first point towards the second.

    Args:
        lat1, lon1: Start point coordinates in degrees
        lat2, lon2: Destination point coordinates in degrees

    Returns:
        Bearing in degrees (0=North, 90=East), always in [0, 360)
    """
    lat1_rad = np.radians(lat1)
    lat2_rad = np.radians(lat2)
    dlon = np.radians(lon2 - lon1)

    y = np.sin(dlon) * np.cos(lat2_rad)
    x = np.cos(lat1_rad) * np.sin(lat2_rad) - np.sin(lat1_rad) * np.cos(lat2_rad) * np.cos(dlon)

    bearing = float(np.degrees(np.arctan2(y, x)) % 360.0)
    # Tiny negative angles round up to exactly 360.0
    if bearing >= 360.0:
        bearing = 0.0
    return bearing


def ground_speed_kt(distance_nm: float, elapsed_ms: float) -> float:
    """Ground speed in knots for a leg flown in elapsed_ms milliseconds."""
    return distance_nm / (elapsed_ms / 1000 / 3600)
