# backend/app/services/template_service.py
"""
Template rendering service for CoachConnect.

Provides centralized template rendering using Jinja2 with a shared set of
context variables (brand name, frontend URL, current year).
"""

from datetime import datetime, timezone
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from jinja2 import Environment, FileSystemLoader, TemplateNotFound
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.constants import BRAND_NAME
from ..core.exceptions import ServiceException
from .base import BaseService
from .template_registry import TemplateRegistry

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent.parent / "templates"


class TemplateService(BaseService):
    """
    Centralized template rendering service using Jinja2.

    The database session is unused; it is accepted so the service can be
    built the same way as every other service.
    """

    def __init__(self, db: Optional[Session] = None, template_dir: Path = TEMPLATE_DIR):
        super().__init__(db)
        self.env = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["date_long"] = _date_long

    def get_common_context(self) -> Dict[str, Any]:
        return {
            "brand_name": BRAND_NAME,
            "frontend_url": settings.frontend_url,
            "current_year": datetime.now(timezone.utc).year,
        }

    @BaseService.measure_operation("render_template")
    def render_template(self, template: TemplateRegistry, context: Optional[Dict[str, Any]] = None) -> str:
        """
        Render a registered template with the common context merged in.

        Raises:
            ServiceException: If the template is missing or fails to render
        """
        full_context = {**self.get_common_context(), **(context or {})}
        try:
            return self.env.get_template(template.value).render(**full_context)
        except TemplateNotFound as e:
            self.logger.error(f"Template not found: {template.value}")
            raise ServiceException(f"Email template not found: {template.value}") from e
        except Exception as e:
            self.logger.error(f"Error rendering template {template.value}: {str(e)}")
            raise ServiceException(f"Failed to render template: {str(e)}") from e


def _date_long(value: Any) -> str:
    """Format a date or datetime like 'March 5, 2026'."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return f"{value:%B} {value.day}, {value.year}"
