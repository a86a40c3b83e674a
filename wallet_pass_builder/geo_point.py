"""
Normalization of geographic points given in the usual shapes.
"""

import math
from typing import Dict, Optional


def _coordinate(value, name: str, limit: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{name} must be a number, received {value!r}")
    if not math.isfinite(value) or abs(value) > limit:
        raise TypeError(f"{name} must be within ±{limit}, received {value!r}")
    return float(value)


def get_geo_point(point) -> Dict[str, float]:
    """
    Returns ``{longitude, latitude, altitude?}`` for a point given as:

    - a ``[longitude, latitude, altitude?]`` sequence (GeoJSON order)
    - a dict with ``lat`` and ``lng``/``lon`` and optional ``alt``
    - a dict with ``latitude``, ``longitude`` and optional ``altitude``

    Raises:
        TypeError: unknown shape or out of range coordinates
    """
    altitude: Optional[float] = None
    if isinstance(point, (list, tuple)):
        if len(point) not in (2, 3):
            raise TypeError(f"Point sequence must be [longitude, latitude, altitude?], received {point!r}")
        longitude, latitude = point[0], point[1]
        if len(point) == 3:
            altitude = point[2]
    elif isinstance(point, dict):
        if "latitude" in point and "longitude" in point:
            latitude, longitude = point["latitude"], point["longitude"]
            altitude = point.get("altitude")
        elif "lat" in point and ("lng" in point or "lon" in point):
            latitude = point["lat"]
            longitude = point["lng"] if "lng" in point else point["lon"]
            altitude = point.get("alt")
        else:
            raise TypeError(f"Unknown geo point format: {point!r}")
    else:
        raise TypeError(f"Unknown geo point format: {point!r}")

    result = {
        "longitude": _coordinate(longitude, "longitude", 180),
        "latitude": _coordinate(latitude, "latitude", 90),
    }
    if altitude is not None:
        if isinstance(altitude, bool) or not isinstance(altitude, (int, float)) or not math.isfinite(altitude):
            raise TypeError(f"altitude must be a number, received {altitude!r}")
        result["altitude"] = float(altitude)
    return result
