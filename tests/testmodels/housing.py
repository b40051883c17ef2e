"""Housing models: structures reached through NewType and ``type`` aliases."""

from dataclasses import dataclass
from typing import NewType

from testmodels.school import Address

HomeAddress = NewType("HomeAddress", Address)
"""Address a household lives at."""

type OfficeAddress = Address
"""Address of a workplace."""


@dataclass
class Household:
    """People sharing a [HomeAddress]."""

    home: HomeAddress
    """Where the household lives."""
    office: OfficeAddress
    """Workplace of the main earner."""
