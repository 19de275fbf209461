"""Pinning service integration."""

from pinclaim.service.pin_service import PinServiceClient

__all__ = ["PinServiceClient"]
