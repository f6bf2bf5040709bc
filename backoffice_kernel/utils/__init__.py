"""Utility modules for the back-office kernel."""

from backoffice_kernel.utils.hashing import canonicalize_json, hash_payload

__all__ = [
    "canonicalize_json",
    "hash_payload",
]
