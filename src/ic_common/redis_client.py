"""Redis client factory — used only as the item read-through cache.

The client is created by the application lifespan and handed to the cache
adapter; nothing here holds module-level state.
"""

import redis.asyncio as aioredis
from redis.asyncio.cluster import ClusterNode, RedisCluster

from config.settings import Settings

RedisClient = aioredis.Redis | RedisCluster


def parse_cluster_nodes(raw: str) -> list[ClusterNode]:
    """Parse ``"host:port,host:port"`` into cluster startup nodes."""
    nodes: list[ClusterNode] = []
    for chunk in raw.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        host, sep, port = chunk.rpartition(":")
        if not sep or not host or not port.isdigit():
            raise ValueError(f"Invalid Redis cluster node: {chunk!r}")
        nodes.append(ClusterNode(host, int(port)))
    return nodes


def create_redis(settings: Settings) -> RedisClient:
    """Build a single-node or cluster client depending on REDIS_CLUSTER_NODES."""
    nodes = parse_cluster_nodes(settings.REDIS_CLUSTER_NODES)
    if nodes:
        return RedisCluster(
            startup_nodes=nodes,
            password=settings.REDIS_PASSWORD,
            ssl=settings.REDIS_TLS,
            socket_connect_timeout=settings.REDIS_CONNECT_TIMEOUT,
            decode_responses=True,
        )

    url = settings.REDIS_URL
    # TLS is selected by URL scheme for single-node clients
    if settings.REDIS_TLS and url.startswith("redis://"):
        url = "rediss://" + url[len("redis://"):]
    return aioredis.from_url(
        url,
        password=settings.REDIS_PASSWORD,
        socket_connect_timeout=settings.REDIS_CONNECT_TIMEOUT,
        decode_responses=True,
    )


async def close_redis(client: RedisClient) -> None:
    """Close the client and release its connection pool."""
    await client.aclose()
