from flask import Blueprint, current_app, request, jsonify
import logging
from ..utils.decorators import admin_required
from ..utils.helpers import error_response, parse_number

logger = logging.getLogger(__name__)

delivery_config_bp = Blueprint('delivery_config', __name__)

# Campo do JSON -> chave nas configurações do sistema
CONFIG_FIELDS = {
    "baseFee": "delivery_base_fee",
    "perKm": "delivery_per_km",
    "minFee": "delivery_min_fee",
    "maxFee": "delivery_max_fee",
    "speedKmPerMin": "delivery_speed_km_per_min",
    "defaultPrepTime": "delivery_default_prep_time",
}


def _estimator():
    return current_app.config["DELIVERY_ESTIMATOR"]


@delivery_config_bp.route('/config', methods=['GET'])
def get_delivery_config():
    """Tarifa vigente (valores decimais, não centavos)"""
    try:
        tariff = _estimator().get_config()
        return jsonify({"success": True, "config": tariff.to_api()}), 200
    except Exception as e:
        logger.error(f"Erro inesperado ao buscar tarifa: {e}", exc_info=True)
        return error_response("Erro interno ao buscar tarifa", 500)


@delivery_config_bp.route('/config', methods=['PUT'])
@admin_required
def update_delivery_config():
    """Atualiza parcialmente a tarifa e limpa o cache"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return error_response("Corpo JSON obrigatório", 400)

    try:
        updates = {}
        for field, key in CONFIG_FIELDS.items():
            if data.get(field) is not None:
                updates[key] = parse_number(data[field], field)
    except ValueError as e:
        logger.warning(f"Atualização de tarifa rejeitada: {e}")
        return error_response(str(e), 400)

    if not updates:
        return error_response("Nenhum campo de tarifa informado", 400)

    estimator = _estimator()
    current = estimator.get_config().to_api()
    merged = dict(current)
    for field, key in CONFIG_FIELDS.items():
        if key in updates:
            merged[field] = updates[key]

    if merged["minFee"] > merged["maxFee"]:
        return error_response("minFee não pode ser maior que maxFee", 400)
    if merged["speedKmPerMin"] <= 0:
        return error_response("speedKmPerMin precisa ser positivo", 400)

    settings = current_app.config["DELIVERY_SETTINGS"]
    settings.update(updates)
    estimator.invalidate()

    new_config = estimator.get_config()
    logger.info(f"Tarifa de entrega atualizada: {new_config.to_api()}")
    return jsonify({"success": True, "config": new_config.to_api()}), 200
