# ecoscore_api/calculator.py
"""
EcoScore calculator: one shipment in, one score report out.

Pure and deterministic. The only side effect is an INFO log line for the
received shipment and the computed report.
"""
import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

from .factors import (
    get_material_factor,
    get_transport_factor,
    risk_bucket,
    supplier_risk_for_country,
)

logger = logging.getLogger(__name__)

# ---------- Scoring constants ----------

MAX_SCORE = 100
MIN_SCORE = 0

EMISSION_PENALTY_RATE = 0.5
EMISSION_PENALTY_CAP = 40
DISTANCE_PENALTY_DIVISOR = 200
DISTANCE_PENALTY_CAP = 20
SUPPLIER_RISK_PENALTY = {'high': 20, 'medium': 10, 'low': 0}
AIR_TRANSPORT_PENALTY = 15

# emissions (kg) and distance (km) risk thresholds: (medium above, high above)
EMISSION_RISK_THRESHOLDS = (20, 50)
DISTANCE_RISK_THRESHOLDS = (2000, 5000)

LONG_HAUL_KM = 5000
OFFSET_SCORE_BELOW = 50

# ---------- Records ----------

@dataclass(frozen=True)
class ShipmentInput:
    supplier_country: str
    transport_mode: str
    distance_km: float
    material_type: str
    quantity_kg: float
    supplier_name: Optional[str] = None


@dataclass(frozen=True)
class ScoreReport:
    eco_score: int
    carbon_emissions_kg: float
    overall_risk_level: str
    transportation_emissions_kg: float
    material_emissions_kg: float
    supplier_risk: str
    distance_risk: str
    emission_risk: str
    supplier_risk_score: int
    recommendations: Tuple[str, ...]
    transport_factor: float
    transport_factor_source: str
    material_factor: float
    material_factor_source: str

    def as_response(self, explain=False):
        """Serialise into the public JSON response shape."""
        body = {
            "ecoScore": self.eco_score,
            "carbonEmissions": self.carbon_emissions_kg,
            "riskLevel": self.overall_risk_level,
            "details": {
                "transportation": self.transportation_emissions_kg,
                "materials": self.material_emissions_kg,
                "supplierRisk": self.supplier_risk,
                "distanceRisk": self.distance_risk,
                "emissionRisk": self.emission_risk,
                "supplierScore": self.supplier_risk_score,
            },
            "recommendations": list(self.recommendations),
        }
        if explain:
            body["calculation"] = {
                "method": "distance_km * quantity_kg * transport_factor / 1000 + quantity_kg * material_factor / 1000",
                "transport_factor_kgco2e_per_ton_km": self.transport_factor,
                "transport_factor_source": self.transport_factor_source,
                "material_factor_kgco2e_per_kg": self.material_factor,
                "material_factor_source": self.material_factor_source,
            }
        return body

# ---------- Recommendations ----------

# Evaluated in order; every matching rule contributes its message.
RECOMMENDATION_RULES = (
    (lambda s, score, risk: s.transport_mode.lower() == 'air',
     'Consider switching to sea or rail transport to reduce emissions by up to 90%'),
    (lambda s, score, risk: s.distance_km > LONG_HAUL_KM,
     'Look for local suppliers to significantly reduce transportation emissions'),
    (lambda s, score, risk: risk == 'high',
     'Conduct supplier sustainability audit and consider diversifying supply sources'),
    (lambda s, score, risk: score < OFFSET_SCORE_BELOW,
     'Implement carbon offset programs for your supply chain'),
    (lambda s, score, risk: s.material_type.lower() == 'plastic',
     'Explore recycled or bio-based alternative materials'),
)
NO_ISSUES_MESSAGE = 'Great job! Continue monitoring and optimizing your supply chain'

def generate_recommendations(shipment, eco_score, supplier_risk):
    recommendations = [
        message for predicate, message in RECOMMENDATION_RULES
        if predicate(shipment, eco_score, supplier_risk)
    ]
    return tuple(recommendations) or (NO_ISSUES_MESSAGE,)

# ---------- Helpers ----------

def round_half_away(value, digits=1):
    """Round on the scaled value, ties away from zero (0.25 -> 0.3, -0.25 -> -0.3)."""
    scale = 10 ** digits
    scaled = value * scale
    if not math.isfinite(scaled):
        return value
    return math.copysign(math.floor(abs(scaled) + 0.5), scaled) / scale

def overall_risk_for_score(eco_score):
    if eco_score < 40:
        return 'high'
    if eco_score < 70:
        return 'medium'
    return 'low'

def assemble_score(total_emissions, distance_km, supplier_risk, transport_mode):
    """Deduct each capped penalty from 100, clamp, then round half up."""
    score = MAX_SCORE
    score -= min(total_emissions * EMISSION_PENALTY_RATE, EMISSION_PENALTY_CAP)
    score -= min(distance_km / DISTANCE_PENALTY_DIVISOR, DISTANCE_PENALTY_CAP)
    score -= SUPPLIER_RISK_PENALTY[supplier_risk]
    if transport_mode.lower() == 'air':
        score -= AIR_TRANSPORT_PENALTY
    if math.isnan(score):
        # min() would turn NaN into a perfect 100
        return MIN_SCORE
    score = max(MIN_SCORE, min(MAX_SCORE, score))
    return int(math.floor(score + 0.5))

# ---------- Entry point ----------

def compute(shipment: ShipmentInput) -> ScoreReport:
    """
    Estimate emissions, risk and EcoScore for a single shipment.

    Unknown transport modes, materials and countries fall back to the
    documented defaults instead of failing. Numbers are not validated here;
    negative values flow through the formulas and only the final score is
    clamped. Non-finite emissions are reported as-is; a NaN score becomes 0.
    """
    logger.info("Received supply chain data: %s", shipment)

    transport_factor, transport_source = get_transport_factor(shipment.transport_mode)
    transportation_emissions = shipment.distance_km * shipment.quantity_kg * transport_factor / 1000

    material_factor, material_source = get_material_factor(shipment.material_type)
    material_emissions = shipment.quantity_kg * material_factor / 1000

    total_emissions = transportation_emissions + material_emissions

    supplier_risk, supplier_score = supplier_risk_for_country(shipment.supplier_country)
    emission_risk = risk_bucket(total_emissions, *EMISSION_RISK_THRESHOLDS)
    distance_risk = risk_bucket(shipment.distance_km, *DISTANCE_RISK_THRESHOLDS)

    eco_score = assemble_score(total_emissions, shipment.distance_km, supplier_risk, shipment.transport_mode)

    report = ScoreReport(
        eco_score=eco_score,
        carbon_emissions_kg=round_half_away(total_emissions),
        overall_risk_level=overall_risk_for_score(eco_score),
        transportation_emissions_kg=round_half_away(transportation_emissions),
        material_emissions_kg=round_half_away(material_emissions),
        supplier_risk=supplier_risk,
        distance_risk=distance_risk,
        emission_risk=emission_risk,
        supplier_risk_score=supplier_score,
        recommendations=generate_recommendations(shipment, eco_score, supplier_risk),
        transport_factor=transport_factor,
        transport_factor_source=transport_source,
        material_factor=material_factor,
        material_factor_source=material_source,
    )

    logger.info("Calculated EcoScore report: %s", report)
    return report
