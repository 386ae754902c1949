"""Dependency injection helpers for the site statistics layer."""

from .container import SiteStatsContainer, build_container

__all__ = ["SiteStatsContainer", "build_container"]
