"""brewkit — install pre-built CLI binaries from formula manifests."""

__version__ = "0.1.0"
