"""Commons package - settings, telemetry and store providers."""
