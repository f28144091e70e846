"""
Testes do cliente HTTP e do provider de tarifa remoto (requests.Session simulada).
"""

from unittest.mock import Mock

import pytest
import requests

from frete.logic.delivery_fee import DEFAULT_TARIFF, DeliveryFeeEstimator, TariffConfig, TariffFetchError
from frete.providers.api_client import ApiError, DeliveryApiClient
from frete.providers.tariff_provider import (
    ApiTariffProvider,
    SettingsTariffProvider,
    StaticTariffProvider,
)

CONFIG_PAYLOAD = {"success": True, "config": {"baseFee": 15, "perKm": 8, "minFee": 15, "maxFee": 40}}


def make_response(payload=None, status_code=200, text=""):
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.text = text
    response.reason = "Error"
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    return response


def make_client(response=None, token="tok"):
    session = Mock()
    if isinstance(response, Exception):
        session.request.side_effect = response
    else:
        session.request.return_value = response
    return DeliveryApiClient(base_url="http://api.test/", token=token, timeout=3, session=session), session


class TestDeliveryApiClient:
    def test_get_delivery_config(self) -> None:
        client, session = make_client(make_response(CONFIG_PAYLOAD))

        assert client.get_delivery_config() == CONFIG_PAYLOAD["config"]
        session.request.assert_called_once_with(
            "GET", "http://api.test/api/delivery/config",
            json=None,
            headers={"Authorization": "Bearer tok"},
            timeout=3,
        )

    def test_calculate_delivery_body(self) -> None:
        client, session = make_client(make_response({"success": True, "deliveryFee": 2300}))

        result = client.calculate_delivery(19.77, -104.36, 19.78, -104.35)

        assert result["deliveryFee"] == 2300
        args, kwargs = session.request.call_args
        assert args == ("POST", "http://api.test/api/orders/calculate-delivery")
        assert kwargs["json"] == {
            "businessLat": 19.77, "businessLng": -104.36,
            "deliveryLat": 19.78, "deliveryLng": -104.35,
        }
        assert kwargs["headers"]["Content-Type"] == "application/json"

    def test_no_token_no_authorization(self) -> None:
        client, session = make_client(make_response(CONFIG_PAYLOAD), token="")
        client.get_delivery_config()
        assert "Authorization" not in session.request.call_args.kwargs["headers"]

    def test_order_routes(self) -> None:
        client, session = make_client(make_response({"success": True}))
        client.confirm_order("ord-1")
        assert session.request.call_args.args[1] == "http://api.test/api/orders/ord-1/confirm"
        client.cancel_order_regret("ord-1")
        assert session.request.call_args.args[1] == "http://api.test/api/orders/ord-1/cancel-regret"

    def test_network_error(self) -> None:
        client, _ = make_client(requests.exceptions.ConnectionError("recusado"))
        with pytest.raises(ApiError, match="recusado"):
            client.get_delivery_config()

    def test_http_error_status(self) -> None:
        client, _ = make_client(make_response(status_code=503, text="indisponível"))
        with pytest.raises(ApiError) as exc:
            client.get_delivery_config()
        assert exc.value.status_code == 503
        assert "503: indisponível" in str(exc.value)

    def test_invalid_json(self) -> None:
        client, _ = make_client(make_response(ValueError("no json")))
        with pytest.raises(ApiError):
            client.get_delivery_config()

    def test_success_false(self) -> None:
        client, _ = make_client(make_response({"success": False, "error": "sem tarifa"}))
        with pytest.raises(ApiError, match="sem tarifa"):
            client.get_delivery_config()

    def test_missing_config_field(self) -> None:
        client, _ = make_client(make_response({"success": True}))
        with pytest.raises(ApiError):
            client.get_delivery_config()


class TestApiTariffProvider:
    def test_fetch(self) -> None:
        client, _ = make_client(make_response(CONFIG_PAYLOAD))
        assert ApiTariffProvider(client).fetch() == TariffConfig(15, 8, 15, 40)

    def test_api_error_becomes_fetch_error(self) -> None:
        client, _ = make_client(make_response(status_code=500, text="boom"))
        with pytest.raises(TariffFetchError):
            ApiTariffProvider(client).fetch()

    def test_malformed_config_becomes_fetch_error(self) -> None:
        client, _ = make_client(make_response({"success": True, "config": {"baseFee": 1}}))
        with pytest.raises(TariffFetchError):
            ApiTariffProvider(client).fetch()

    def test_estimator_fetches_config_once(self) -> None:
        client, session = make_client(make_response(CONFIG_PAYLOAD))
        estimator = DeliveryFeeEstimator(ApiTariffProvider(client), ttl_seconds=60, clock=lambda: 5.0)

        assert estimator.calculate_delivery_fee(0) == 15
        assert estimator.calculate_delivery_fee(1) == 23
        assert session.request.call_count == 1

    def test_estimator_falls_back_when_offline(self) -> None:
        client, _ = make_client(requests.exceptions.Timeout("timeout"))
        estimator = DeliveryFeeEstimator(ApiTariffProvider(client), clock=lambda: 5.0)
        assert estimator.get_config() == DEFAULT_TARIFF


class TestOtherProviders:
    def test_static(self) -> None:
        tariff = TariffConfig(1, 2, 3, 4)
        assert StaticTariffProvider(tariff).fetch() == tariff

    def test_settings_override_defaults(self) -> None:
        provider = SettingsTariffProvider({"delivery_base_fee": "20", "delivery_max_fee": 50})
        tariff = provider.fetch()
        assert tariff.base_fee == 20
        assert tariff.max_fee == 50
        assert tariff.per_km == DEFAULT_TARIFF.per_km

    def test_settings_invalid_value(self) -> None:
        with pytest.raises(TariffFetchError):
            SettingsTariffProvider({"delivery_per_km": "oito"}).fetch()

    def test_provider_selection(self, monkeypatch) -> None:
        from frete import config
        from frete.providers import tariff_provider

        monkeypatch.setattr(config, "TARIFF_PROVIDER", "static")
        assert isinstance(tariff_provider.get_tariff_provider(), StaticTariffProvider)

        client, _ = make_client(make_response(CONFIG_PAYLOAD))
        monkeypatch.setattr(config, "TARIFF_PROVIDER", "api")
        provider = tariff_provider.get_tariff_provider(client)
        assert isinstance(provider, ApiTariffProvider)
        assert provider.client is client
