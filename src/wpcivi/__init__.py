"""wpcivi-deploy: Traefik, MariaDB, WordPress and CiviCRM on a single Docker host."""

from __future__ import annotations

import os
from datetime import datetime, timezone

DIST_NAME = "wpcivi-deploy"
BUILD_VERSION_ENV = "WPCIVI_BUILD_VERSION"


def _build_date_version(env=None) -> str:
	"""Return $WPCIVI_BUILD_VERSION when set, else the UTC build date (YYYYMMDD)."""
	source = os.environ if env is None else env
	return source.get(BUILD_VERSION_ENV) or datetime.now(timezone.utc).strftime("%Y%m%d")


__version__ = _build_date_version()
