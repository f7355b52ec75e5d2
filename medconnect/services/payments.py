"""
Card payment collaborator.

Creates checkout sessions on the payment provider (Stripe REST API) over a
shared ``httpx.AsyncClient``.
"""
import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import Dict

import httpx
from pydantic import BaseModel, Field

from ..core.exceptions import UpstreamError
from ..models.doctor import Doctor
from ..models.patient import Patient

logger = logging.getLogger(__name__)

class CheckoutSession(BaseModel):
    id: str
    url: str
    metadata: Dict[str, str] = Field(default_factory=dict)

class PaymentGateway(ABC):
    """Interface for anything that can open a checkout session."""
    
    @abstractmethod
    async def create_checkout_session(
        self,
        doctor: Doctor,
        patient: Patient,
        day: date,
        time: str,
        base_url: str,
    ) -> CheckoutSession:
        ...

class StripeCheckoutGateway(PaymentGateway):
    def __init__(self, client: httpx.AsyncClient, api_url: str, secret_key: str, currency: str):
        self.client = client
        self.api_url = api_url.rstrip("/")
        self.secret_key = secret_key
        self.currency = currency
    
    async def create_checkout_session(self, doctor, patient, day, time, base_url):
        if not self.secret_key:
            raise UpstreamError("Card payments are not configured")
        
        base_url = base_url.rstrip("/")
        form = {
            "mode": "payment",
            "payment_method_types[0]": "card",
            "success_url": f"{base_url}/api/v1/appointments?payment=success",
            "cancel_url": f"{base_url}/api/v1/doctors/{doctor.id}",
            "client_reference_id": str(doctor.id),
            "line_items[0][quantity]": "1",
            "line_items[0][price_data][currency]": self.currency,
            "line_items[0][price_data][unit_amount]": str(doctor.fees * 100),
            "line_items[0][price_data][product_data][name]": f"Appointment with {doctor.name}",
            "line_items[0][price_data][product_data][description]": f"{day.isoformat()} at {time}",
            "metadata[doctor_id]": str(doctor.id),
            "metadata[patient_id]": str(patient.id),
            "metadata[date]": day.isoformat(),
            "metadata[time]": time,
        }
        
        try:
            response = await self.client.post(
                f"{self.api_url}/checkout/sessions",
                data=form,
                headers={"Authorization": f"Bearer {self.secret_key}"},
            )
        except httpx.HTTPError as exc:
            logger.error(f"Checkout session request failed: {str(exc)}")
            raise UpstreamError()
        
        if response.status_code != 200:
            logger.error(
                f"Checkout session rejected - Status: {response.status_code} - "
                f"Body: {response.text[:200]}"
            )
            raise UpstreamError()
        
        try:
            body = response.json()
            return CheckoutSession(
                id=body["id"],
                url=body["url"],
                metadata=body.get("metadata") or {},
            )
        except (KeyError, TypeError, ValueError) as exc:
            logger.error(f"Malformed checkout session response: {str(exc)}")
            raise UpstreamError()
