"""MQTT publisher and subscriber for ambient temperature, pressure and humidity readings."""

__version__ = "0.1.0"