# frete/logic/regret_timer.py
"""
Janela de arrependimento do pedido.

Depois de criar o pedido o cliente tem REGRET_PERIOD_SECONDS para cancelar sem
penalização. Ao expirar, o pedido é confirmado automaticamente no servidor.
Não há thread própria: quem hospeda chama tick() periodicamente (ex.: a cada 1s).
"""
import math
import time
import logging

from .. import config
from ..providers.api_client import ApiError

logger = logging.getLogger(__name__)

PENDING = "pending"
CONFIRMED = "confirmed"
CANCELLED = "cancelled"


class RegretPeriodError(Exception):
    pass


class RegretPeriod:
    def __init__(self, order_id, confirm, cancel, ends_at=None,
                 window_seconds=None, clock=time.time):
        if not order_id:
            raise RegretPeriodError("ID de pedido não válido")
        self.order_id = order_id
        self._confirm = confirm
        self._cancel = cancel
        self.clock = clock
        self.window_seconds = config.REGRET_PERIOD_SECONDS if window_seconds is None else window_seconds
        self.ends_at = self.clock() + self.window_seconds if ends_at is None else ends_at
        self.state = PENDING

    @classmethod
    def for_order(cls, client, order_id, **kwargs) -> "RegretPeriod":
        """Liga a janela às rotas /confirm e /cancel-regret da API."""
        return cls(order_id, confirm=client.confirm_order, cancel=client.cancel_order_regret, **kwargs)

    def seconds_remaining(self) -> int:
        return max(0, math.ceil(self.ends_at - self.clock()))

    def progress(self) -> float:
        """Fração restante da janela, de 1.0 (início) a 0.0 (expirada)."""
        if self.window_seconds <= 0:
            return 0.0
        return min(1.0, self.seconds_remaining() / self.window_seconds)

    def tick(self) -> str:
        if self.state == PENDING and self.seconds_remaining() <= 0:
            try:
                self.confirm()
            except ApiError:
                # já registrado em confirm(); tenta de novo no próximo tick
                pass
        return self.state

    def confirm(self):
        if self.state != PENDING:
            return self.state

        try:
            self._confirm(self.order_id)
        except ApiError as e:
            # continua pendente; o próximo tick tenta de novo
            logger.error(f"Erro ao confirmar pedido {self.order_id}: {e}")
            raise
        self.state = CONFIRMED
        logger.info(f"Pedido {self.order_id} confirmado")
        return self.state

    def cancel(self):
        if self.state == CONFIRMED:
            raise RegretPeriodError(f"Pedido {self.order_id} já foi confirmado")
        if self.state == CANCELLED:
            return self.state
        if self.seconds_remaining() <= 0:
            raise RegretPeriodError(f"Janela de arrependimento do pedido {self.order_id} expirou")

        self._cancel(self.order_id)
        self.state = CANCELLED
        logger.info(f"Pedido {self.order_id} cancelado sem penalização")
        return self.state
