# frete/logic/delivery_fee.py
"""
Cálculo da taxa e do tempo estimado de entrega.

A tarifa é linear (taxa base + valor por km) e limitada a [min_fee, max_fee].
Os parâmetros vêm de um TariffProvider (normalmente a API remota) e ficam em
cache durante `ttl_seconds`. Se a busca falhar usamos a tarifa padrão, sem
propagar o erro para quem pediu o cálculo; o padrão fica em cache pelo mesmo
TTL, então a API é consultada no máximo uma vez por janela.
"""
import math
import time
import logging
import threading
from typing import NamedTuple, Optional

from .. import config

logger = logging.getLogger(__name__)


class TariffFetchError(Exception):
    """Falha ao obter a configuração de tarifa."""


class TariffConfig(NamedTuple):
    base_fee: float
    per_km: float
    min_fee: float
    max_fee: float
    speed_km_per_min: float = 0.5
    default_prep_time: float = 20

    @classmethod
    def from_api(cls, data: dict) -> "TariffConfig":
        """Converte o JSON camelCase da API. Raises ValueError se faltar campo ou não for número."""
        if not isinstance(data, dict):
            raise ValueError("Configuração de tarifa precisa ser um objeto")
        try:
            values = {
                "base_fee": float(data["baseFee"]),
                "per_km": float(data["perKm"]),
                "min_fee": float(data["minFee"]),
                "max_fee": float(data["maxFee"]),
            }
            if data.get("speedKmPerMin") is not None:
                values["speed_km_per_min"] = float(data["speedKmPerMin"])
            if data.get("defaultPrepTime") is not None:
                values["default_prep_time"] = float(data["defaultPrepTime"])
        except KeyError as e:
            raise ValueError(f"Campo obrigatório ausente na tarifa: {e.args[0]}")
        except (TypeError, ValueError):
            raise ValueError(f"Valor não numérico na tarifa: {data}")
        return cls(**values)

    def to_api(self) -> dict:
        return {
            "baseFee": self.base_fee,
            "perKm": self.per_km,
            "minFee": self.min_fee,
            "maxFee": self.max_fee,
            "speedKmPerMin": self.speed_km_per_min,
            "defaultPrepTime": self.default_prep_time,
        }


DEFAULT_TARIFF = TariffConfig(
    base_fee=config.DELIVERY_BASE_FEE,
    per_km=config.DELIVERY_PER_KM,
    min_fee=config.DELIVERY_MIN_FEE,
    max_fee=config.DELIVERY_MAX_FEE,
    speed_km_per_min=config.DELIVERY_SPEED_KM_PER_MIN,
    default_prep_time=config.DELIVERY_DEFAULT_PREP_TIME,
)


def compute_fee(distance_km, tariff: TariffConfig) -> float:
    """taxa = base + distância * por_km, limitada a [min_fee, max_fee]"""
    fee = tariff.base_fee + distance_km * tariff.per_km
    return max(tariff.min_fee, min(fee, tariff.max_fee))


def estimate_delivery_time(distance_km, prep_time_min=20, speed_km_per_min=0.5) -> int:
    """
    Tempo estimado em minutos (arredondado para cima).
    Distância negativa não é validada aqui e reduz o total abaixo do preparo.
    """
    travel_time = distance_km / speed_km_per_min
    return math.ceil(prep_time_min + travel_time)


class DeliveryFeeEstimator:
    """
    Estimador com cache da tarifa.

    `clock` deve ser monotónico; nos testes basta passar uma função controlada.
    O lock garante uma única busca ao provider mesmo com chamadas concorrentes.
    """

    def __init__(self, provider, ttl_seconds=None, clock=time.monotonic,
                 default: TariffConfig = DEFAULT_TARIFF):
        self.provider = provider
        self.ttl_seconds = config.TARIFF_CACHE_TTL_SECONDS if ttl_seconds is None else ttl_seconds
        self.clock = clock
        self.default = default
        self._cached: Optional[TariffConfig] = None
        self._last_fetch = 0.0
        self._lock = threading.Lock()

    def _is_fresh(self, now) -> bool:
        return self._cached is not None and (now - self._last_fetch) < self.ttl_seconds

    def get_config(self) -> TariffConfig:
        if self._is_fresh(self.clock()):
            return self._cached

        with self._lock:
            now = self.clock()
            if self._is_fresh(now):
                return self._cached
            try:
                tariff = self.provider.fetch()
                logger.info(f"Tarifa de entrega atualizada: {tariff}")
            except TariffFetchError as e:
                # o padrão também fica em cache: nova tentativa só após o TTL
                logger.warning(f"Falha ao buscar tarifa de entrega, usando padrão: {e}")
                tariff = self.default

            self._cached = tariff
            self._last_fetch = now
            return tariff

    def invalidate(self):
        with self._lock:
            self._cached = None
            self._last_fetch = 0.0

    def calculate_delivery_fee(self, distance_km) -> float:
        return compute_fee(distance_km, self.get_config())

    def estimate_delivery_time(self, distance_km, prep_time_min=None) -> int:
        tariff = self.get_config()
        prep = tariff.default_prep_time if prep_time_min is None else prep_time_min
        return estimate_delivery_time(distance_km, prep, tariff.speed_km_per_min)
