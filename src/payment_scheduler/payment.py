"""The payment intent and its one-shot transmission."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime

from payment_scheduler.errors import AlreadyTransmittedError
from payment_scheduler.model import NormalizedPaymentData, PaymentSnapshot

logger = logging.getLogger(__name__)


class _TransmissionState:
    """Mutable part of a payment: a flag and the lock guarding it."""

    __slots__ = ("lock", "transmitted")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.transmitted = False


@dataclass(frozen=True, slots=True)
class Payment:
    """A scheduled payment.

    Everything is fixed at construction except the transmission flag, which
    moves from pending to transmitted exactly once.
    """

    payment_id: str  # Invoice id or employee tax identifier
    payment_method: str  # Opaque, supplied by the caller
    data: NormalizedPaymentData
    scheduled_date: datetime
    _state: _TransmissionState = field(
        default_factory=_TransmissionState, init=False, repr=False, compare=False
    )

    @property
    def transmitted(self) -> bool:
        return self._state.transmitted

    def transmit(self) -> PaymentSnapshot:
        """Mark the payment as sent and return what the transport needs.

        Raises :class:`AlreadyTransmittedError` if the payment was already sent.
        """

        with self._state.lock:
            if self._state.transmitted:
                logger.warning(
                    "Rejected second transmission of payment %s", self.payment_id
                )
                raise AlreadyTransmittedError(self.payment_id)
            self._state.transmitted = True

        logger.info(
            "Payment %s transmitted via %s", self.payment_id, self.payment_method
        )
        return PaymentSnapshot(
            payment_method=self.payment_method,
            data=self.data,
            scheduled_date=self.scheduled_date,
        )

    def __str__(self) -> str:
        status = "sent" if self.transmitted else "pending"
        return (
            f"payment(id={self.payment_id}, method={self.payment_method}, "
            f"recipient={self.data.recipient}, date={self.scheduled_date.isoformat()}, "
            f"status={status})"
        )


__all__ = ["Payment"]
