# frete/providers/api_client.py
import logging
from typing import Optional

import requests

from .. import config

logger = logging.getLogger(__name__)


class ApiError(Exception):
    def __init__(self, message, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DeliveryApiClient:
    """
    Cliente HTTP da API de entregas.
    Qualquer falha (rede, status 4xx/5xx, JSON inválido, success=false) vira ApiError.
    """

    def __init__(self, base_url=None, token=None, timeout=None, session=None):
        self.base_url = (base_url or config.API_BASE_URL).rstrip("/")
        self.token = token if token is not None else config.API_TOKEN
        self.timeout = config.API_TIMEOUT_SECONDS if timeout is None else timeout
        self.session = session or requests.Session()

    def _headers(self, with_body):
        headers = {}
        if with_body:
            headers["Content-Type"] = "application/json"
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def request(self, method, route, data=None) -> dict:
        url = f"{self.base_url}{route}"
        try:
            response = self.session.request(
                method, url,
                json=data,
                headers=self._headers(data is not None),
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise ApiError(f"Erro na requisição {method} {route}: {e}")

        if not response.ok:
            text = response.text or response.reason
            raise ApiError(f"{response.status_code}: {text}", status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError:
            raise ApiError(f"Resposta não-JSON de {route}", status_code=response.status_code)

        if isinstance(payload, dict) and payload.get("success") is False:
            raise ApiError(payload.get("error") or f"{route} retornou success=false",
                           status_code=response.status_code)
        return payload

    def get_delivery_config(self) -> dict:
        """GET /api/delivery/config -> objeto `config` (valores decimais)"""
        payload = self.request("GET", "/api/delivery/config")
        if not isinstance(payload, dict) or "config" not in payload:
            raise ApiError("Resposta sem campo 'config'")
        return payload["config"]

    def calculate_delivery(self, business_lat, business_lng, delivery_lat, delivery_lng) -> dict:
        """POST /api/orders/calculate-delivery -> deliveryFee em centavos"""
        return self.request("POST", "/api/orders/calculate-delivery", {
            "businessLat": business_lat,
            "businessLng": business_lng,
            "deliveryLat": delivery_lat,
            "deliveryLng": delivery_lng,
        })

    def confirm_order(self, order_id) -> dict:
        return self.request("POST", f"/api/orders/{order_id}/confirm")

    def cancel_order_regret(self, order_id) -> dict:
        return self.request("POST", f"/api/orders/{order_id}/cancel-regret")
