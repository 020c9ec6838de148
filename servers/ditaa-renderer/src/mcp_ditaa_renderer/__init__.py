"""Render ditaa diagrams to images, with content-addressed and mtime-based caching."""

from .diagrams import Diagram, DocumentDiagram, EmbeddedDiagram
from .errors import ConfigurationError, DitaaError, MissingDependencyError, RenderFailure
from .models.site_config import SiteConfig
from .renderer import RendererInvoker

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "Diagram",
    "DitaaError",
    "DocumentDiagram",
    "EmbeddedDiagram",
    "MissingDependencyError",
    "RenderFailure",
    "RendererInvoker",
    "SiteConfig",
]
