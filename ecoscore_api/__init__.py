"""EcoScore estimation for single supply-chain shipments."""
