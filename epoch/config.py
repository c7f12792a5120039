"""Configuration for a single conversion.

`Options` carries what the command line asked for and is passed explicitly
to `epoch.run.run`. Logging is tuned through the environment:

- EPOCH_LOG_LEVEL: level for the `epoch` loggers (default INFO)
- EPOCH_LOG_FORMAT: record format (default just the message)
"""

import os
from dataclasses import dataclass

from epoch.units import GUESS

LOG_LEVEL = (os.getenv("EPOCH_LOG_LEVEL", "INFO") or "INFO").upper()
LOG_FORMAT = os.getenv("EPOCH_LOG_FORMAT", "%(message)s")


@dataclass(frozen=True, kw_only=True)
class Options:
    """What to convert to and how.

    Attributes:
        unit: Timestamp unit ("s", "ms", "us", "ns") or "guess"
        format: Output format name, custom `{token}` format, or "" for default
        tz: Output timezone: "" or "Local", "UTC", or an IANA name
        quiet: Don't report guessed units
        calc: Steps to apply, e.g. "+30m -5h +3D"
    """

    unit: str = GUESS
    format: str = ""
    tz: str = ""
    quiet: bool = False
    calc: str = ""

    @property
    def unit_is_explicit(self) -> bool:
        return self.unit != GUESS
