# frete/config.py

"""
Ficheiro central de configurações do serviço de frete.
Todas as "regras de negócio" que podem mudar com o tempo ficam aqui.
Os valores podem ser sobrescritos por variáveis de ambiente (.env).
"""

import os
from dotenv import load_dotenv

load_dotenv()


def _env_float(name, default):
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return default
    return float(value)


# =================================================
# API remota
# =================================================
API_BASE_URL = os.environ.get("API_BASE_URL", "http://localhost:5000")
API_TOKEN = os.environ.get("API_TOKEN")
API_TIMEOUT_SECONDS = _env_float("API_TIMEOUT_SECONDS", 10.0)

# Token exigido no PUT /api/delivery/config
ADMIN_API_TOKEN = os.environ.get("ADMIN_API_TOKEN")

# api | static
TARIFF_PROVIDER = os.environ.get("TARIFF_PROVIDER", "api").lower()


# =================================================
# Tarifa de entrega (padrão quando a API não responde)
# =================================================
# Taxa base cobrada em todas as entregas.
DELIVERY_BASE_FEE = _env_float("DELIVERY_BASE_FEE", 15.0)

# Custo adicional por cada quilómetro.
DELIVERY_PER_KM = _env_float("DELIVERY_PER_KM", 8.0)

# Limites da taxa final.
DELIVERY_MIN_FEE = _env_float("DELIVERY_MIN_FEE", 15.0)
DELIVERY_MAX_FEE = _env_float("DELIVERY_MAX_FEE", 40.0)

# 0.5 km/min ~ 30 km/h de média urbana.
DELIVERY_SPEED_KM_PER_MIN = _env_float("DELIVERY_SPEED_KM_PER_MIN", 0.5)
DELIVERY_DEFAULT_PREP_TIME = _env_float("DELIVERY_DEFAULT_PREP_TIME", 20.0)

# Tempo de vida do cache da tarifa, em segundos.
TARIFF_CACHE_TTL_SECONDS = _env_float("TARIFF_CACHE_TTL_SECONDS", 60.0)


# =================================================
# Carrinho
# =================================================
# Percentagem de comissão da plataforma sobre o valor dos produtos.
# 0.15 representa 15%. Não incide sobre a taxa de entrega.
PLATFORM_COMMISSION_RATE = _env_float("PLATFORM_COMMISSION_RATE", 0.15)

# Taxa usada quando faltam coordenadas ou o cálculo remoto falha.
FALLBACK_DELIVERY_FEE = _env_float("FALLBACK_DELIVERY_FEE", 25.0)

# Janela de arrependimento após criar o pedido.
REGRET_PERIOD_SECONDS = _env_float("REGRET_PERIOD_SECONDS", 60.0)


# =================================================
# Servidor
# =================================================
PORT = int(os.environ.get("PORT", 5000))
FLASK_DEBUG = os.environ.get("FLASK_DEBUG", "False").lower() == "true"
