# ecoscore_api/app.py
import logging
import math
import os

from dotenv import load_dotenv
from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from .calculator import ShipmentInput, compute
from .factors import factor_tables

load_dotenv()

# ---------- Runtime controls ----------
def resolve_log_level(name):
    """Map a level name to a logging level, falling back to INFO for unknown names."""
    level = logging.getLevelName((name or '').upper())
    return level if isinstance(level, int) else logging.INFO

LOG_LEVEL = resolve_log_level(os.getenv('LOG_LEVEL', 'INFO'))
CORS_ORIGINS = [o.strip() for o in os.getenv('CORS_ORIGINS', '*').split(',') if o.strip()] or ['*']
CORS_ALLOW_HEADERS = ['authorization', 'x-client-info', 'apikey', 'content-type']

FAILURE_DETAILS = 'Failed to calculate EcoScore. Please check your input data.'

logging.basicConfig(level=LOG_LEVEL)

app = Flask(__name__)
CORS(app, origins=CORS_ORIGINS, allow_headers=CORS_ALLOW_HEADERS, send_wildcard='*' in CORS_ORIGINS)

# ---------- Request parsing ----------

class ShipmentValidationError(ValueError):
    """Raised when a request body cannot be turned into a ShipmentInput."""


def _required_text(data, field):
    value = data.get(field)
    if not isinstance(value, str) or value == '':
        raise ShipmentValidationError(f"'{field}' must be a non-empty string")
    return value

def _required_number(data, field):
    """Accept JSON numbers or numeric strings; reject booleans, NaN and infinities."""
    value = data.get(field)
    if value is None or isinstance(value, bool):
        raise ShipmentValidationError(f"'{field}' must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        raise ShipmentValidationError(f"'{field}' must be a number")
    if not math.isfinite(number):
        raise ShipmentValidationError(f"'{field}' must be a finite number")
    return number

def parse_shipment_from_request(data):
    """
    Validate a request body and build a ShipmentInput.
    Required: country, transportMode, materialType (non-empty strings),
    distance, quantity (finite numbers). supplierName is optional.
    """
    if not isinstance(data, dict):
        raise ShipmentValidationError("Request body must be a JSON object")

    supplier_name = data.get('supplierName')
    if supplier_name is not None and not isinstance(supplier_name, str):
        raise ShipmentValidationError("'supplierName' must be a string")

    return ShipmentInput(
        supplier_country=_required_text(data, 'country'),
        transport_mode=_required_text(data, 'transportMode'),
        distance_km=_required_number(data, 'distance'),
        material_type=_required_text(data, 'materialType'),
        quantity_kg=_required_number(data, 'quantity'),
        supplier_name=supplier_name,
    )

def wants_explanation(args):
    return args.get('explain', '').lower() in ('1', 'true', 'yes')

# ---------- Error handlers ----------

@app.errorhandler(ShipmentValidationError)
def handle_validation_error(error):
    app.logger.warning("Rejected EcoScore request: %s", error)
    return jsonify({"error": str(error), "details": FAILURE_DETAILS}), 400

@app.errorhandler(HTTPException)
def handle_http_error(error):
    return jsonify({"error": error.name, "details": error.description}), error.code

@app.errorhandler(Exception)
def handle_unexpected_error(error):
    app.logger.exception("Error in calculate-ecoscore: %s", error)
    return jsonify({"error": str(error) or "Unknown error occurred", "details": FAILURE_DETAILS}), 500

# ---------- Routes ----------

@app.get('/health')
def health():
    return {"status": "ok"}, 200

@app.get('/api/factors')
def get_factors():
    """Return the emission factor tables and supplier risk lists used for scoring."""
    return jsonify(factor_tables())

@app.post('/api/calculate-ecoscore')
@app.post('/calculate-ecoscore')
def calculate_ecoscore():
    """
    Score a single shipment.
    Request JSON:
    {
      "supplierName": "Green Materials Co.",   // optional, not used in scoring
      "country": "Germany",
      "transportMode": "truck",                // truck|ship|train|air, others use truck factor
      "distance": 2500,
      "materialType": "plastic",               // plastic|metal|wood|textile|glass|paper, others use 2.0
      "quantity": 1000
    }
    Optional query: ?explain=1 adds the applied factors and their sources.
    """
    data = request.get_json(force=True, silent=True)
    if data is None:
        raise ShipmentValidationError("Request body must be valid JSON")

    shipment = parse_shipment_from_request(data)
    report = compute(shipment)
    if not math.isfinite(report.carbon_emissions_kg):
        raise ShipmentValidationError("'distance' and 'quantity' are too large to score")
    return jsonify(report.as_response(explain=wants_explanation(request.args)))

# ---------- Entrypoint for local run (production uses Gunicorn, see Procfile) ----------
if __name__ == '__main__':
    port = int(os.environ.get('PORT', 5000))
    app.run(host='0.0.0.0', port=port)
