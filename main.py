# ===== Part 1: Imports & Logging ============================================
import logging

from fastapi import FastAPI

from modules import networking_report
from utils.app_settings import load_settings

logger = logging.getLogger(__name__)


# ===== Part 2: Application factory ==========================================
def create_app() -> FastAPI:
    """Build the ASGI app that serves the networking report routes."""
    settings = load_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    app = FastAPI(title=settings.title)
    networking_report.register_api(app)
    logger.info("Registered networking report routes for %s", settings.organisation)
    return app


app = create_app()
