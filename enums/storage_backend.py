from enum import Enum


class StorageBackend(str, Enum):
    MEMORY = "memory"
    REDIS = "redis"
