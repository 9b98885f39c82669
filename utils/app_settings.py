"""Report settings read from an INI file.

Settings live in ``data/app.ini`` under a ``[report]`` section.  A missing
file, section or key falls back to the built-in default, e.g.::

    [report]
    organisation = LAXMI SECURITY SYSTEMS AND ELECTRICALS
    page_size = A4
    signature_width = 400
    signature_height = 200
"""

from __future__ import annotations

import configparser
import logging
from dataclasses import dataclass, fields
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_INI_PATH = Path("data") / "app.ini"
SECTION = "report"
PAGE_SIZES = {"a4", "letter"}


@dataclass(frozen=True, slots=True)
class ReportSettings:
    title: str = "Smart Networking Report"
    organisation: str = "LAXMI SECURITY SYSTEMS AND ELECTRICALS"
    page_size: str = "A4"
    document_filename: str = "networking-report.pdf"
    signature_width: int = 400
    signature_height: int = 200
    pen_color: str = "#000000"
    pen_min_width: float = 1.0
    pen_max_width: float = 3.0
    log_level: str = "INFO"


def _coerce(raw: str, default):
    if isinstance(default, bool):
        return raw.strip().lower() in {"1", "true", "yes", "on"}
    if isinstance(default, int):
        return int(raw)
    if isinstance(default, float):
        return float(raw)
    return raw.strip()


def load_settings(path: Path | str | None = None) -> ReportSettings:
    """Return :class:`ReportSettings` from ``path`` (``data/app.ini`` by default).

    Keys that cannot be parsed are logged and replaced by their default.
    """

    ini_path = Path(path) if path is not None else DEFAULT_INI_PATH
    defaults = ReportSettings()
    if not ini_path.exists():
        return defaults
    cp = configparser.ConfigParser()
    try:
        cp.read(ini_path, encoding="utf-8")
    except configparser.Error as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", ini_path, exc)
        return defaults
    if not cp.has_section(SECTION):
        return defaults

    values = {}
    for f in fields(ReportSettings):
        default = getattr(defaults, f.name)
        raw = cp.get(SECTION, f.name, fallback=None)
        if raw is None:
            continue
        try:
            values[f.name] = _coerce(raw, default)
        except ValueError:
            logger.warning("Invalid value %r for [%s] %s; using %r", raw, SECTION, f.name, default)
    if str(values.get("page_size", defaults.page_size)).lower() not in PAGE_SIZES:
        logger.warning("Unknown page size %r; using %s", values["page_size"], defaults.page_size)
        values.pop("page_size")
    return ReportSettings(**values)


__all__ = ["ReportSettings", "load_settings", "DEFAULT_INI_PATH"]
