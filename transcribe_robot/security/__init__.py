"""
Credential handling for remote calls made on behalf of subscription owners
"""

from .token_cache import CachedTokenProvider, StaticTokenProvider, TokenCache

__all__ = [
    "TokenCache",
    "CachedTokenProvider",
    "StaticTokenProvider",
]
