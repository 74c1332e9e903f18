"""Telemetry service and the editor run loop."""
