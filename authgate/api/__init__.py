"""Identity provider API client"""

from .identity_client import IdentityClient

__all__ = ["IdentityClient"]
