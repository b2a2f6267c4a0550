# ecoscore_api/factors.py
from types import MappingProxyType

# ---------- Emission factors (hardcoded, no external database) ----------

# kg CO2 per tonne-km, keyed by lower-cased transport mode
TRANSPORT_EMISSION_FACTORS = MappingProxyType({
    'truck': 0.062,
    'ship': 0.008,
    'train': 0.022,
    'air': 0.602,
})
DEFAULT_TRANSPORT_FACTOR = TRANSPORT_EMISSION_FACTORS['truck']

# kg CO2 per kg of material
MATERIAL_EMISSION_FACTORS = MappingProxyType({
    'plastic': 3.5,
    'metal': 2.8,
    'wood': 0.5,
    'textile': 2.1,
    'glass': 1.2,
    'paper': 1.8,
})
DEFAULT_MATERIAL_FACTOR = 2.0

# ---------- Supplier country risk ----------

HIGH_RISK_COUNTRIES = frozenset({'china', 'india', 'bangladesh', 'vietnam', 'indonesia'})
MEDIUM_RISK_COUNTRIES = frozenset({'mexico', 'brazil', 'thailand', 'turkey', 'poland'})

HIGH_RISK_SCORE = 40
MEDIUM_RISK_SCORE = 65
LOW_RISK_SCORE = 90

RISK_LEVELS = ('low', 'medium', 'high')

# ---------- Lookups ----------

def get_transport_factor(mode):
    """
    Return (factor, source) for a transport mode.
    Unknown modes use the truck factor and say so in the source.
    """
    key = (mode or '').lower()
    factor = TRANSPORT_EMISSION_FACTORS.get(key, DEFAULT_TRANSPORT_FACTOR)
    if key in TRANSPORT_EMISSION_FACTORS:
        return factor, f"table:{key}"
    return factor, f"default:{DEFAULT_TRANSPORT_FACTOR} (unknown mode, truck factor)"

def get_material_factor(material):
    """Return (factor, source) for a material type, defaulting to 2.0."""
    key = (material or '').lower()
    factor = MATERIAL_EMISSION_FACTORS.get(key, DEFAULT_MATERIAL_FACTOR)
    if key in MATERIAL_EMISSION_FACTORS:
        return factor, f"table:{key}"
    return factor, f"default:{DEFAULT_MATERIAL_FACTOR} (unknown material)"

def supplier_risk_for_country(country):
    """
    Return (risk, score) for a supplier country.
    Exact match after lower-casing only; the string is not trimmed.
    """
    key = (country or '').lower()
    if key in HIGH_RISK_COUNTRIES:
        return 'high', HIGH_RISK_SCORE
    if key in MEDIUM_RISK_COUNTRIES:
        return 'medium', MEDIUM_RISK_SCORE
    return 'low', LOW_RISK_SCORE

def risk_bucket(value, medium_above, high_above):
    """Bucket a value into low/medium/high using strict > thresholds."""
    if value > high_above:
        return 'high'
    if value > medium_above:
        return 'medium'
    return 'low'

def factor_tables():
    """Plain-dict snapshot of every table, safe to serialise."""
    return {
        "transport_kgco2e_per_ton_km": dict(TRANSPORT_EMISSION_FACTORS),
        "transport_default": DEFAULT_TRANSPORT_FACTOR,
        "material_kgco2e_per_kg": dict(MATERIAL_EMISSION_FACTORS),
        "material_default": DEFAULT_MATERIAL_FACTOR,
        "supplier_risk": {
            "high": {"countries": sorted(HIGH_RISK_COUNTRIES), "score": HIGH_RISK_SCORE},
            "medium": {"countries": sorted(MEDIUM_RISK_COUNTRIES), "score": MEDIUM_RISK_SCORE},
            "low": {"countries": [], "score": LOW_RISK_SCORE},
        },
    }
