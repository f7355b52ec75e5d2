import asyncio
from datetime import date
from urllib.parse import parse_qs

import httpx
import pytest

from medconnect.core.exceptions import UpstreamError
from medconnect.models.doctor import Doctor
from medconnect.models.patient import Patient
from medconnect.services.payments import PaymentGateway, StripeCheckoutGateway

DOCTOR = Doctor(id=3, name="Dr. Ahmed Hassan", fees=300)
PATIENT = Patient(id=7, name="Sara")

def open_session(handler, secret_key="sk_test_123"):
    async def create():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            gateway = StripeCheckoutGateway(
                client=client,
                api_url="https://payments.example.com/v1/",
                secret_key=secret_key,
                currency="egp",
            )
            return await gateway.create_checkout_session(
                doctor=DOCTOR,
                patient=PATIENT,
                day=date(2030, 1, 7),
                time="10:00",
                base_url="http://testserver/",
            )

    return asyncio.run(create())

class TestStripeCheckoutGateway:

    def test_creates_session(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["form"] = parse_qs(request.content.decode())
            return httpx.Response(200, json={
                "id": "cs_test_1",
                "url": "https://checkout.example.com/cs_test_1",
                "metadata": {"doctor_id": "3", "patient_id": "7", "date": "2030-01-07", "time": "10:00"},
            })

        session = open_session(handler)

        assert session.id == "cs_test_1"
        assert session.url == "https://checkout.example.com/cs_test_1"
        assert session.metadata["patient_id"] == "7"

        assert seen["url"] == "https://payments.example.com/v1/checkout/sessions"
        assert seen["auth"] == "Bearer sk_test_123"
        form = seen["form"]
        assert form["line_items[0][price_data][unit_amount]"] == ["30000"]
        assert form["line_items[0][price_data][currency]"] == ["egp"]
        assert form["metadata[doctor_id]"] == ["3"]
        assert form["metadata[date]"] == ["2030-01-07"]
        assert form["success_url"] == ["http://testserver/api/v1/appointments?payment=success"]

    def test_rejected_request(self):
        with pytest.raises(UpstreamError):
            open_session(lambda request: httpx.Response(402, json={"error": {"message": "declined"}}))

    def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(UpstreamError):
            open_session(handler)

    def test_malformed_response(self):
        with pytest.raises(UpstreamError):
            open_session(lambda request: httpx.Response(200, json={"id": "cs_test_1"}))

    def test_not_configured(self):
        with pytest.raises(UpstreamError):
            open_session(lambda request: httpx.Response(200, json={}), secret_key=None)

    def test_non_json_response(self):
        with pytest.raises(UpstreamError):
            open_session(lambda request: httpx.Response(200, text="<html>bad gateway</html>"))

    def test_non_object_metadata(self):
        def handler(request):
            return httpx.Response(200, json={"id": "cs_test_1", "url": "https://checkout.example.com/cs_test_1", "metadata": ["3", "7"]})

        with pytest.raises(UpstreamError):
            open_session(handler)

class TestPaymentGatewayInterface:

    def test_cannot_instantiate_interface(self):
        with pytest.raises(TypeError):
            PaymentGateway()

    def test_subclass_must_implement_checkout(self):
        class IncompleteGateway(PaymentGateway):
            pass

        with pytest.raises(TypeError):
            IncompleteGateway()
