"""Configuration module for the ID Broker client."""
from .settings import BrokerSettings, load_settings

__all__ = ["BrokerSettings", "load_settings"]
