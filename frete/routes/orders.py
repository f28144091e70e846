# frete/routes/orders.py
from flask import Blueprint, current_app, request, jsonify
import logging
from ..utils.geo import InvalidCoordinateError, haversine_distance, is_in_coverage_area, validate_coordinate
from ..utils.helpers import error_response

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
)
logger = logging.getLogger(__name__)

orders_bp = Blueprint('orders', __name__)

COORDINATE_FIELDS = ("businessLat", "businessLng", "deliveryLat", "deliveryLng")


@orders_bp.route('/calculate-delivery', methods=['POST'])
def calculate_delivery():
    """
    Calcula distância, taxa e tempo de entrega entre o negócio e o endereço.
    A taxa sai em centavos (o cliente divide por 100).
    """
    try:
        data = request.get_json(silent=True) or {}
        logger.info(f"Dados recebidos: {data}")

        if not isinstance(data, dict):
            return error_response("Corpo da requisição deve ser um objeto JSON", 400)

        if any(data.get(field) is None for field in COORDINATE_FIELDS):
            logger.warning("Coordenadas não fornecidas")
            return error_response("Missing coordinates", 400)

        business_lat, business_lng = validate_coordinate(data["businessLat"], data["businessLng"])
        delivery_lat, delivery_lng = validate_coordinate(data["deliveryLat"], data["deliveryLng"])

        estimator = current_app.config["DELIVERY_ESTIMATOR"]
        distance_km = haversine_distance(business_lat, business_lng, delivery_lat, delivery_lng)
        delivery_fee = estimator.calculate_delivery_fee(distance_km)
        estimated_time = estimator.estimate_delivery_time(distance_km)

        result = {
            "success": True,
            "distance": round(distance_km, 2),
            "deliveryFee": int(round(delivery_fee * 100)),
            "estimatedTime": estimated_time,
            "inCoverage": is_in_coverage_area(delivery_lat, delivery_lng),
        }
        logger.info(f"Resultado final: {result}")
        return jsonify(result), 200

    except InvalidCoordinateError as e:
        logger.warning(f"Erro de validação: {e}")
        return error_response(str(e), 400)

    except Exception as e:
        logger.error(f"Erro inesperado ao calcular entrega: {e}", exc_info=True)
        return error_response("Erro interno ao calcular a entrega", 500)
