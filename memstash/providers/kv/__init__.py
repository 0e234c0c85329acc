"""External key/value client providers."""

from memstash.providers.kv.redis_client import RedisKeyValueClient, parse_set_options

__all__ = ["RedisKeyValueClient", "parse_set_options"]
