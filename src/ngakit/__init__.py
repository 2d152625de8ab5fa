"""ngakit -- typed async client and CLI for the NGA forum.

The client wraps the forum's ``lite=xml`` API: requests are described by
immutable builders, executed over one shared :mod:`httpx` connection pool,
optionally cached, and decoded from GB18030 XML into frozen records.

Typical use::

    import asyncio
    from ngakit import ForumId, MemoryCache, NGAClient

    async def main():
        async with NGAClient(cache=MemoryCache()) as client:
            result = await client.topics.list(ForumId.fid(-7)).send()
            for topic in result.topics:
                print(topic.subject.content)

    asyncio.run(main())

Modules:
    client: :class:`NGAClient` and the request executor.
    api: Endpoint facades and their builders.
    request: Request descriptors and the builder base.
    decoder: Charset, XML and projection stages.
    cache: Cache storage interface with memory and disk backends.
    models: Configuration models and input enums.
    records: Decoded forum records.
    exceptions: Exception hierarchy with exit-code mapping.
    app: Typer application and CLI entry point.
"""

from ngakit.cache import DiskCache, MemoryCache
from ngakit.client import NGAClient
from ngakit.exceptions import (
    ApiError,
    AuthRequiredError,
    BuilderError,
    DecodeError,
    DecodeStage,
    NetworkError,
    NgaError,
)
from ngakit.models import (
    CacheConfig,
    ClientConfig,
    Credential,
    Device,
    FavoriteOp,
    ForumId,
    NotificationType,
    RequestConfig,
    SearchTimeRange,
    SubforumFilterOp,
    TopicOrder,
    Vote,
)

__version__ = "0.1.0"

__all__ = [
    "ApiError",
    "AuthRequiredError",
    "BuilderError",
    "CacheConfig",
    "ClientConfig",
    "Credential",
    "DecodeError",
    "DecodeStage",
    "Device",
    "DiskCache",
    "FavoriteOp",
    "ForumId",
    "MemoryCache",
    "NGAClient",
    "NetworkError",
    "NgaError",
    "NotificationType",
    "RequestConfig",
    "SearchTimeRange",
    "SubforumFilterOp",
    "TopicOrder",
    "Vote",
]
