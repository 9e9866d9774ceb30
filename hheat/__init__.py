"""
hheat - Hive heating command-line client

A small Python library and CLI for checking and controlling a Hive heating
node through the Hive Beekeeper API.

Library Usage:
    from hheat import AuthSession, HiveAPI, TokenStore, find_heating_device, load_credentials

    api = HiveAPI()
    session = AuthSession(api, load_credentials(), TokenStore())
    device = find_heating_device(session.fetch_products())
    print(f"Current temp: {device.temperature}")

    # Set target temperature
    api.set_target_temperature(session.token, device, 20.5)

CLI Usage:
    hheat                 # Show status
    hheat off             # Turn heating off
    hheat manual          # Manual mode
    hheat schedule        # Schedule mode
    hheat 20.5            # Set target temperature
"""

__version__ = "0.1.0"

from .api import HiveAPI
from .auth import AuthSession
from .config import TokenStore, load_credentials
from .models import Credentials, HeatingDevice, find_heating_device

__all__ = [
    "AuthSession",
    "Credentials",
    "HeatingDevice",
    "HiveAPI",
    "TokenStore",
    "find_heating_device",
    "load_credentials",
    "__version__",
]
