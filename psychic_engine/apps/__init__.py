"""Application entry layers."""
