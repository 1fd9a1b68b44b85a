"""Mock smart-light actuator.

There is no device behind this adapter: the resulting state is computed from
the request alone and nothing is remembered between calls.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..core.exceptions import InvalidInputError
from ..core.logger import get_logger

logger = get_logger(__name__)

FULL_BRIGHTNESS = 100


class DeviceState(BaseModel):
    """State of the light after an action."""

    model_config = ConfigDict(frozen=True)

    power: Literal["on", "off"]
    brightness: int = Field(ge=0, le=100)


def control_light(action: str, brightness: Optional[int] = None) -> DeviceState:
    """Compute the light state for ``action``.

    Args:
        action: ``"on"`` or ``"off"``.
        brightness: Level 0-100 for ``"on"``; defaults to 100. Ignored for ``"off"``.

    Raises:
        InvalidInputError: For any other action or an out-of-range brightness.
    """
    logger.info("Light control: action=%s, brightness=%s", action, brightness if brightness is not None else "N/A")

    if action == "on":
        if brightness is not None and not 0 <= brightness <= FULL_BRIGHTNESS:
            raise InvalidInputError(f"Brightness must be between 0 and {FULL_BRIGHTNESS}, got {brightness}")
        return DeviceState(power="on", brightness=FULL_BRIGHTNESS if brightness is None else brightness)
    if action == "off":
        return DeviceState(power="off", brightness=0)

    logger.warning("Invalid light action: %s", action)
    raise InvalidInputError(f"Unsupported light action '{action}'")
