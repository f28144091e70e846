# frete/utils/decorators.py

import hmac
from functools import wraps
from flask import current_app, request, jsonify
from .helpers import _extract_bearer_token


def admin_required(f):
    """
    Decorator que exige o token de administrador (ADMIN_API_TOKEN) no
    cabeçalho Authorization. Sem token configurado, a rota fica bloqueada.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        # Permite requisições OPTIONS (para o CORS funcionar)
        if request.method == 'OPTIONS':
            return jsonify(), 200

        token = _extract_bearer_token(request.headers.get('Authorization'))
        if not token:
            return jsonify({"success": False, "error": "Authorization ausente ou inválido"}), 401

        expected = current_app.config.get("ADMIN_API_TOKEN")
        if not expected or not hmac.compare_digest(token, expected):
            return jsonify({"success": False, "error": "Acesso negado. Apenas administradores."}), 403

        return f(*args, **kwargs)

    return decorated_function
