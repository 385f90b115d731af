"""Address lookup service: forward geocoding, place details and a photo proxy."""
