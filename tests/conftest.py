import pytest

from ecoscore_api.app import app as flask_app
from ecoscore_api.calculator import ShipmentInput


@pytest.fixture
def client():
    flask_app.config.update(TESTING=True)
    with flask_app.test_client() as client:
        yield client


@pytest.fixture
def make_shipment():
    def _make(**overrides):
        fields = {
            "supplier_country": "Germany",
            "transport_mode": "truck",
            "distance_km": 2500,
            "material_type": "plastic",
            "quantity_kg": 1000,
        }
        fields.update(overrides)
        return ShipmentInput(**fields)
    return _make


@pytest.fixture
def payload():
    return {
        "supplierName": "Green Materials Co.",
        "country": "Germany",
        "transportMode": "truck",
        "distance": 2500,
        "materialType": "plastic",
        "quantity": 1000,
    }
