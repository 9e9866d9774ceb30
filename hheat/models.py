"""Data models for the Hive API"""

from dataclasses import dataclass
from typing import Any, Dict, List

from .exceptions import DeviceError, DeviceNotFoundError

MODE_OFF = "OFF"
MODE_MANUAL = "MANUAL"
MODE_SCHEDULE = "SCHEDULE"
MODES = (MODE_OFF, MODE_MANUAL, MODE_SCHEDULE)

HEATING_TYPE = "heating"


@dataclass(frozen=True)
class Credentials:
    """Login credentials read from the config file"""
    username: str
    password: str

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password='***')"


@dataclass
class HeatingDevice:
    """The heating node of a Hive account"""
    device_id: str
    mode: str
    target: float
    temperature: float
    working: bool = False

    @classmethod
    def from_product(cls, product: Dict[str, Any]) -> "HeatingDevice":
        """
        Build a device from a product listing record.

        Args:
            product: A listing entry whose type is "heating"

        Returns:
            HeatingDevice populated from the record's state and props

        Raises:
            DeviceError: If a required field is missing or has the wrong type
        """
        state = product.get("state")
        props = product.get("props")
        if not isinstance(state, dict) or not isinstance(props, dict):
            raise DeviceError("Heating device record has no state or props")

        try:
            device_id = product["id"]
            mode = state["mode"]
            target = state["target"]
            temperature = props["temperature"]
            working = props["working"]
        except KeyError as e:
            raise DeviceError(f"Heating device record is missing {e.args[0]!r}") from e

        if not isinstance(device_id, str) or not isinstance(mode, str):
            raise DeviceError("Heating device id and mode must be strings")
        for name, value in (("target", target), ("temperature", temperature)):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise DeviceError(f"Heating device {name} is not a number: {value!r}")
        if not isinstance(working, bool):
            raise DeviceError(f"Heating device working flag is not a boolean: {working!r}")

        return cls(
            device_id=device_id,
            mode=mode,
            target=float(target),
            temperature=float(temperature),
            working=working,
        )

    @property
    def is_off(self) -> bool:
        return self.mode == MODE_OFF

    @property
    def heating(self) -> bool:
        """True when the boiler is firing; an OFF node never counts as heating."""
        return self.working and not self.is_off

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.device_id,
            "mode": self.mode,
            "target": self.target,
            "temperature": self.temperature,
            "working": self.working,
            "heating": self.heating,
        }


def find_heating_device(products: List[Any]) -> HeatingDevice:
    """
    Find the heating node in a product listing.

    Only the first heating record is used; an account is expected to have one.

    Args:
        products: The listing returned by the products endpoint

    Returns:
        HeatingDevice for the first record whose type is "heating"

    Raises:
        DeviceNotFoundError: If no record has type "heating"
    """
    for product in products:
        if isinstance(product, dict) and product.get("type") == HEATING_TYPE:
            return HeatingDevice.from_product(product)

    raise DeviceNotFoundError("No heating device found on this account")
