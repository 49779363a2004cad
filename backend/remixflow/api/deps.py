from typing import Annotated

from fastapi import Depends
from redis import Redis

from remixflow.core.redis import get_redis


def get_store() -> Redis:
    return get_redis()


StoreDep = Annotated[Redis, Depends(get_store)]
