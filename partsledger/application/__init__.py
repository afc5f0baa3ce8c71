"""Application layer: DTOs and service wiring."""
