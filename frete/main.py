import logging
from datetime import datetime
from flask import Flask, jsonify, request
from flask_cors import CORS

from frete import config
from frete.logic.delivery_fee import DeliveryFeeEstimator
from frete.providers.tariff_provider import SettingsTariffProvider
from frete.routes.delivery_config import delivery_config_bp
from frete.routes.orders import orders_bp

# --- Configuração de Logging ---
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def create_app(overrides=None):
    app = Flask(__name__)
    app.url_map.strict_slashes = False

    app.config["ADMIN_API_TOKEN"] = config.ADMIN_API_TOKEN
    # Configurações do sistema (chaves delivery_*); começam vazias = tarifa padrão
    app.config["DELIVERY_SETTINGS"] = {}
    app.config["TARIFF_CACHE_TTL_SECONDS"] = config.TARIFF_CACHE_TTL_SECONDS
    if overrides:
        app.config.update(overrides)

    app.config.setdefault(
        "DELIVERY_ESTIMATOR",
        DeliveryFeeEstimator(
            SettingsTariffProvider(app.config["DELIVERY_SETTINGS"]),
            ttl_seconds=app.config["TARIFF_CACHE_TTL_SECONDS"],
        ),
    )

    CORS(
        app,
        resources={r"/api/*": {"origins": "*"}},
        allow_headers=["Content-Type", "Authorization"],
        methods=["GET", "POST", "PUT", "OPTIONS"]
    )

    # --- REGISTRO DE BLUEPRINTS ---
    app.register_blueprint(delivery_config_bp, url_prefix='/api/delivery')
    app.register_blueprint(orders_bp, url_prefix='/api/orders')

    # --- Rotas de Status ---
    @app.route('/health')
    def health_check():
        return jsonify({
            "status": "ok",
            "message": "Server is running",
            "timestamp": datetime.now().isoformat(),
            "service": "Frete API"
        }), 200

    # --- Handlers de Erro ---
    @app.errorhandler(404)
    def not_found(error):
        return jsonify({"success": False, "error": "Endpoint não encontrado", "path": request.path}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({"success": False, "error": "Método não permitido", "method": request.method}), 405

    @app.errorhandler(500)
    def internal_error(error):
        logger.error(f"Erro interno: {error}", exc_info=True)
        return jsonify({"success": False, "error": "Erro interno do servidor"}), 500

    return app


if __name__ == '__main__':
    app = create_app()
    logger.info(f"Iniciando servidor na porta {config.PORT} (debug: {config.FLASK_DEBUG})")
    app.run(host='0.0.0.0', port=config.PORT, debug=config.FLASK_DEBUG, use_reloader=config.FLASK_DEBUG)
