"""FastAPI dependency injection providers."""

from fastapi import Request

from stockmodeler.collectors.prices import PriceHistoryCollector
from stockmodeler.config import Settings
from stockmodeler.pipeline import build_collector


def get_settings(request: Request) -> Settings:
    """Get application settings from app state."""
    return request.app.state.settings


def get_collector(request: Request) -> PriceHistoryCollector:
    """Get the shared price history collector, creating it on first use."""
    collector = getattr(request.app.state, "collector", None)
    if collector is None:
        collector = build_collector(request.app.state.settings)
        request.app.state.collector = collector
    return collector
