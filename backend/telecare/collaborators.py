"""Stand-ins for the external payment and conferencing systems."""
from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import date
from decimal import Decimal


@dataclass(frozen=True)
class MeetingRequest:
    """What the conferencing backend needs to open a video room."""

    doctor_id: str
    patient_id: str
    date: date
    time: str


class ConferencingGateway:
    """Placeholder conferencing backend issuing opaque join links."""

    def __init__(self, base_url: str) -> None:
        self.base_url = base_url.rstrip("/")
        self.issued: list[dict] = []

    def issue_link(self, request: MeetingRequest) -> str:
        """Mint a link in-memory. A real implementation would call the video provider."""
        token = "-".join(secrets.token_hex(2) for _ in range(3))
        link = f"{self.base_url}/{token}"
        self.issued.append({"request": request, "link": link})
        return link


class PaymentGateway:
    """Simple payment gateway stub; approves everything not explicitly declined."""

    def __init__(self) -> None:
        self.captures: list[dict] = []
        self.declined: set[str] = set()

    def capture(self, appointment_id: str, amount: Decimal) -> bool:
        approved = appointment_id not in self.declined
        self.captures.append(
            {"appointment_id": appointment_id, "amount": amount, "approved": approved}
        )
        return approved
