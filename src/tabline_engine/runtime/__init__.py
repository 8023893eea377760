"""Runtime services: telemetry and the update scheduler."""
