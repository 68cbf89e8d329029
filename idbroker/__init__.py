"""ID Broker API client package.

To use the client:
    from idbroker.core.broker import IdBrokerClient

To build a client from environment settings:
    from idbroker.config import load_settings
    from idbroker.core.broker import IdBrokerClient

    client = IdBrokerClient.from_settings(load_settings())
"""
# Note: nothing is imported here so that loading settings does not require
# the HTTP stack and vice versa
