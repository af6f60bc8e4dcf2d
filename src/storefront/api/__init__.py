"""Storefront HTTP API package."""

from storefront.api.application import create_app

__all__ = ["create_app"]
