# frete/utils/helpers.py

import math
import logging
from flask import jsonify

logger = logging.getLogger(__name__)


# --- Auth helper ---
def _extract_bearer_token(auth_header: str):
    """Extrai o token de um cabeçalho Authorization.
    Aceita:
      - 'Bearer <token>'
      - '<token>' (sem 'Bearer', comum quando front erra)
    """
    if not auth_header:
        return None
    parts = auth_header.strip().split()
    if len(parts) == 0:
        return None
    if parts[0].lower() == "bearer" and len(parts) >= 2:
        return parts[1]
    return parts[0]


# --- Payload utils ---
def parse_number(value, field):
    """Converte um campo do payload para float finito. Raises ValueError."""
    if isinstance(value, bool):
        raise ValueError(f"Campo '{field}' precisa ser numérico")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Campo '{field}' precisa ser numérico")
    if not math.isfinite(number):
        raise ValueError(f"Campo '{field}' precisa ser finito")
    return number


def error_response(message, status_code):
    return jsonify({"success": False, "error": message}), status_code
