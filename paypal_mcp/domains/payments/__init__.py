"""
Payments domain providers
"""

from .client import PayPalClient
from .paypal import PayPalProvider

__all__ = ['PayPalClient', 'PayPalProvider']
