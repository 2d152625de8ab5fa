"""Request descriptors and the builders that produce them."""

from ngakit.request.builder import FixedRequest, RequestBuilder
from ngakit.request.descriptor import CacheScope, RequestDescriptor, Volatility

__all__ = ["CacheScope", "FixedRequest", "RequestBuilder", "RequestDescriptor", "Volatility"]
