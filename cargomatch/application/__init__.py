"""Application layer: use cases orchestrating the domain over the store."""

from .context import ServiceContext, build_context

__all__ = ["ServiceContext", "build_context"]
