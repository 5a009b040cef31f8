"""Upload adapters - Profile image storage."""

from .local import LocalProfileImageStore

__all__ = ["LocalProfileImageStore"]
