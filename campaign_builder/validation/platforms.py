"""
Platform character limits.
"""

import logging
from typing import Dict, Iterable, Optional, Union
from pydantic import BaseModel

from campaign_builder.config import validation_config
from campaign_builder.hierarchy.models import AdField
from campaign_builder.validation.models import CounterState, Platform

logger = logging.getLogger(__name__)

PlatformName = Union[Platform, str]


class PlatformLimits(BaseModel):
    """Character caps for the limited ad fields of a platform."""
    headline: Optional[int] = None
    description: Optional[int] = None
    display_url: Optional[int] = None

    def for_field(self, field: AdField) -> Optional[int]:
        return {
            AdField.HEADLINE: self.headline,
            AdField.DESCRIPTION: self.description,
            AdField.DISPLAY_URL: self.display_url,
        }.get(field)


LIMITED_FIELDS = (AdField.HEADLINE, AdField.DESCRIPTION, AdField.DISPLAY_URL)

PLATFORM_LIMITS: Dict[str, PlatformLimits] = {
    Platform.GOOGLE.value: PlatformLimits(headline=30, description=90, display_url=30),
    Platform.REDDIT.value: PlatformLimits(headline=100, description=500, display_url=25),
    Platform.FACEBOOK.value: PlatformLimits(headline=40, description=125, display_url=30),
}


def platform_key(platform: PlatformName) -> str:
    return platform.value if isinstance(platform, Platform) else str(platform)


def register_platform(platform: PlatformName, limits: PlatformLimits) -> None:
    """Add or replace the limits of a platform."""
    PLATFORM_LIMITS[platform_key(platform)] = limits
    logger.info(f"Registered character limits for platform {platform_key(platform)}")


def get_field_limit(platform: PlatformName, field: AdField) -> Optional[int]:
    """Explicit limit of ``field`` on ``platform``, or None."""
    limits = PLATFORM_LIMITS.get(platform_key(platform))
    if limits is None:
        return None
    return limits.for_field(field)


def most_restrictive_limit(
    field: AdField,
    platforms: Iterable[PlatformName],
    default: Optional[int] = None
) -> int:
    """
    Smallest limit for ``field`` across the selected platforms.

    With no platform selected the Google limits apply. Platforms without an
    explicit limit are ignored; if none has one, ``default`` is returned.

    Args:
        field: Limited ad field
        platforms: Selected platforms
        default: Fallback limit (settings value when omitted)

    Returns:
        int: Character limit
    """
    if default is None:
        default = validation_config.default_limit

    platforms = list(platforms or [])
    if not platforms:
        platforms = [Platform.GOOGLE]

    limits = [get_field_limit(platform, field) for platform in platforms]
    limits = [limit for limit in limits if limit is not None]
    return min(limits) if limits else default


def counter_state(
    length: int,
    limit: int,
    warning_ratio: Optional[float] = None,
    danger_ratio: Optional[float] = None
) -> CounterState:
    """
    Counter state for ``length`` characters against ``limit``.

    ``length == limit`` is not over the limit; ratio thresholds are inclusive.
    """
    if warning_ratio is None:
        warning_ratio = validation_config.warning_ratio
    if danger_ratio is None:
        danger_ratio = validation_config.danger_ratio

    if length > limit:
        return CounterState.OVER
    if limit <= 0:
        return CounterState.NORMAL
    ratio = length / limit
    if ratio >= danger_ratio:
        return CounterState.DANGER
    if ratio >= warning_ratio:
        return CounterState.WARNING
    return CounterState.NORMAL
