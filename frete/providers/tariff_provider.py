# frete/providers/tariff_provider.py
import logging
from abc import ABC, abstractmethod

from .. import config
from ..logic.delivery_fee import DEFAULT_TARIFF, TariffConfig, TariffFetchError
from .api_client import ApiError, DeliveryApiClient

logger = logging.getLogger(__name__)


class TariffProvider(ABC):
    @abstractmethod
    def fetch(self) -> TariffConfig:
        """Retorna a tarifa vigente ou levanta TariffFetchError."""
        raise NotImplementedError()


class ApiTariffProvider(TariffProvider):
    """Busca a tarifa em GET /api/delivery/config."""

    def __init__(self, client: DeliveryApiClient):
        self.client = client

    def fetch(self) -> TariffConfig:
        try:
            data = self.client.get_delivery_config()
            return TariffConfig.from_api(data)
        except ApiError as e:
            raise TariffFetchError(f"API indisponível: {e}") from e
        except ValueError as e:
            raise TariffFetchError(f"Tarifa malformada: {e}") from e


class StaticTariffProvider(TariffProvider):
    """Provider fixo: útil offline e nos testes."""

    def __init__(self, tariff: TariffConfig = DEFAULT_TARIFF):
        self.tariff = tariff

    def fetch(self) -> TariffConfig:
        return self.tariff


class SettingsTariffProvider(TariffProvider):
    """
    Lê a tarifa de um dicionário de configurações do sistema (chaves delivery_*),
    o mesmo que o PUT /api/delivery/config altera. Chaves ausentes ficam com o padrão.
    """

    KEYS = {
        "delivery_base_fee": "base_fee",
        "delivery_per_km": "per_km",
        "delivery_min_fee": "min_fee",
        "delivery_max_fee": "max_fee",
        "delivery_speed_km_per_min": "speed_km_per_min",
        "delivery_default_prep_time": "default_prep_time",
    }

    def __init__(self, settings: dict, default: TariffConfig = DEFAULT_TARIFF):
        self.settings = settings
        self.default = default

    def fetch(self) -> TariffConfig:
        values = {}
        for key, field in self.KEYS.items():
            if key not in self.settings:
                continue
            try:
                values[field] = float(self.settings[key])
            except (TypeError, ValueError) as e:
                raise TariffFetchError(f"Configuração {key} inválida: {self.settings[key]!r}") from e
        return self.default._replace(**values)


def get_tariff_provider(client=None) -> TariffProvider:
    if config.TARIFF_PROVIDER == "static":
        logger.info("Usando tarifa estática.")
        return StaticTariffProvider()
    logger.info("Usando tarifa da API remota.")
    return ApiTariffProvider(client or DeliveryApiClient())
