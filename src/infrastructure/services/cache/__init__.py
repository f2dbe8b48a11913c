from .redis_cache_service import RedisCacheService

__all__ = ["RedisCacheService"]
