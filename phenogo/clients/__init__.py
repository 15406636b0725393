"""Remote gene database clients."""

from .base import HTTPClient
from .ncbi_client import NCBIClient

__all__ = ['HTTPClient', 'NCBIClient']
