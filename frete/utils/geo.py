# frete/utils/geo.py
import math
from typing import NamedTuple, Optional, Sequence, Tuple

EARTH_RADIUS_KM = 6371


class CoverageBounds(NamedTuple):
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float


# Área de cobertura de Autlán, Jalisco
AUTLAN_BOUNDS = CoverageBounds(min_lat=19.75, max_lat=19.80, min_lng=-104.40, max_lng=-104.30)

# Centro de Autlán para inicializar mapas
AUTLAN_CENTER = (19.7708, -104.3636)


class InvalidCoordinateError(ValueError):
    pass


def haversine_distance(lat1, lon1, lat2, lon2):
    """Calcula a distância entre duas coordenadas usando a fórmula de Haversine (km)"""
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)

    a = (math.sin(dlat / 2) ** 2
         + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(dlon / 2) ** 2)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def is_in_coverage_area(lat, lng, bounds: CoverageBounds = AUTLAN_BOUNDS) -> bool:
    """
    Valida se as coordenadas estão dentro do retângulo de cobertura (bordas inclusivas).
    O retângulo é uma aproximação grosseira do município: pontos nos cantos
    podem ser classificados de forma errada.
    """
    return (
        bounds.min_lat <= lat <= bounds.max_lat
        and bounds.min_lng <= lng <= bounds.max_lng
    )


def point_in_polygon(lat, lng, polygon: Sequence[Tuple[float, float]]) -> bool:
    """
    Ray casting sobre uma lista de vértices (lat, lng). O polígono é fechado
    implicitamente entre o último e o primeiro vértice.
    """
    if len(polygon) < 3:
        return False

    inside = False
    j = len(polygon) - 1
    for i in range(len(polygon)):
        lat_i, lng_i = polygon[i]
        lat_j, lng_j = polygon[j]
        if (lng_i > lng) != (lng_j > lng):
            cross_lat = lat_i + (lng - lng_i) * (lat_j - lat_i) / (lng_j - lng_i)
            if lat < cross_lat:
                inside = not inside
        j = i
    return inside


def is_in_coverage_zone(lat, lng,
                        polygon: Optional[Sequence[Tuple[float, float]]] = None,
                        bounds: CoverageBounds = AUTLAN_BOUNDS) -> bool:
    """Retângulo como pré-filtro rápido; se houver polígono, o ponto também precisa estar nele."""
    if not is_in_coverage_area(lat, lng, bounds):
        return False
    if polygon is None:
        return True
    return point_in_polygon(lat, lng, polygon)


def validate_coordinate(lat, lng) -> Tuple[float, float]:
    """
    Converte e valida um par lat/lng vindo de fora (payload, endereço salvo).

    Raises:
        InvalidCoordinateError: valor não numérico, não finito ou fora do intervalo.
    """
    try:
        lat = float(lat)
        lng = float(lng)
    except (TypeError, ValueError):
        raise InvalidCoordinateError(f"Coordenadas inválidas: ({lat!r}, {lng!r})")

    if not (math.isfinite(lat) and math.isfinite(lng)):
        raise InvalidCoordinateError(f"Coordenadas não finitas: ({lat}, {lng})")
    if abs(lat) > 90:
        raise InvalidCoordinateError(f"Latitude fora do intervalo: {lat}")
    if abs(lng) > 180:
        raise InvalidCoordinateError(f"Longitude fora do intervalo: {lng}")
    return lat, lng
