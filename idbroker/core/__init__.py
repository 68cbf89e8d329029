"""Core client logic.

Module Structure:
    - broker/       : ID Broker API client, trust verification, operation table
    - validators.py : Parsing helpers for configuration values

Usage Pattern:
    Import explicitly when needed:
        from idbroker.core.broker import IdBrokerClient, ServiceError
        from idbroker.core.validators import parse_bool, parse_csv

Public APIs:
    Client (idbroker.core.broker):
        - IdBrokerClient (one method per broker operation)
        - BrokerTrustVerifier, IPRangeSet
        - BrokerError and subclasses
"""
