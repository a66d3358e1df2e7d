from fastapi import HTTPException
from agriquote.core.redis import get_redis
from agriquote.core.config import settings
from agriquote.core.metrics import rate_limit_exceeded

async def check_rate_limit(principal_id: str):
    redis = get_redis()
    key = f"rl:{principal_id}"
    current = await redis.get(key)
    if current is None:
        await redis.set(key, "1", ex=settings.RATE_LIMIT_WINDOW)
        return
    count = int(current)
    if count >= settings.RATE_LIMIT:
        rate_limit_exceeded.labels(principal=principal_id).inc()
        raise HTTPException(status_code=429, detail="Rate limit exceeded")
    await redis.incr(key)
