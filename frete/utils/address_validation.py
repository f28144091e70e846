# frete/utils/address_validation.py
import re

from .geo import haversine_distance

# Dois endereços a menos de 100 m são considerados o mesmo
DUPLICATE_RADIUS_KM = 0.1
MAX_SUGGESTIONS = 3


def normalize_street(street):
    street = (street or "").lower()
    street = re.sub(r"\s+", " ", street)
    street = re.sub(r"[^\w\s]", "", street)
    return street.strip()


def check_duplicate_address(new_address, existing_addresses):
    """
    Retorna o endereço já salvo que duplica `new_address`, ou None.
    Primeiro compara coordenadas (raio de 100 m), depois o nome da rua normalizado.
    """
    for addr in existing_addresses:
        distance = haversine_distance(
            addr["latitude"], addr["longitude"],
            new_address["latitude"], new_address["longitude"],
        )
        if distance < DUPLICATE_RADIUS_KM:
            return addr

    new_street = normalize_street(new_address.get("street"))
    for addr in existing_addresses:
        if normalize_street(addr.get("street")) == new_street:
            return addr
    return None


def suggest_similar_addresses(search_text, existing_addresses):
    if not search_text or len(search_text) < 3:
        return []

    search = search_text.lower()
    matches = [
        addr for addr in existing_addresses
        if search in (addr.get("street") or "").lower()
        or search in (addr.get("label") or "").lower()
    ]
    return matches[:MAX_SUGGESTIONS]
