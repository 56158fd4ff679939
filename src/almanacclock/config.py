"""Runtime settings read from environment variables.

Entry points call ``dotenv.load_dotenv()`` before `load_settings()`, so a
``.env`` file in the working directory is honoured.

Env vars:
- ALMANAC_EPHEMERIS_DIR: directory holding the JPL ephemeris (default: <repo>/resources)
- ALMANAC_EPHEMERIS: ephemeris file name (default: de421.bsp)
- ALMANAC_ECLIPSE_DATA: JSON file replacing the bundled eclipse table
- ALMANAC_LOG_LEVEL: DEBUG | INFO | WARNING | ERROR (default: INFO)
- ALMANAC_USER_AGENT: User-Agent sent to the Nominatim geocoder
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

_ROOT = Path(__file__).parent.parent.parent

_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR"}


@dataclass(frozen=True)
class Settings:
    ephemeris_dir: Path
    ephemeris_name: str
    eclipse_data: Path | None
    log_level: str
    user_agent: str


def load_settings() -> Settings:
    level = os.getenv("ALMANAC_LOG_LEVEL", "INFO").strip().upper()
    if level not in _LEVELS:
        level = "INFO"
    eclipse_data = os.getenv("ALMANAC_ECLIPSE_DATA")
    return Settings(
        ephemeris_dir=Path(os.getenv("ALMANAC_EPHEMERIS_DIR") or _ROOT / "resources"),
        ephemeris_name=os.getenv("ALMANAC_EPHEMERIS") or "de421.bsp",
        eclipse_data=Path(eclipse_data) if eclipse_data else None,
        log_level=level,
        user_agent=os.getenv("ALMANAC_USER_AGENT")
        or "AlmanacClock/1.0 (https://github.com/almanacclock/almanacclock)",
    )
