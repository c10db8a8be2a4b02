# qrmenu/utils/retry.py
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type
import requests
import redis

from qrmenu.domain.errors import ConflictError
from qrmenu.utils.settings import CONFLICT_RETRY_ATTEMPTS


def http_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.3, min=0.3, max=3),
        retry=retry_if_exception_type(requests.RequestException),
    )


def redis_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(redis.RedisError),
    )


def conflict_retry(attempts: int | None = None):
    # optimistic locking: powtorz cala operacje (z ponownym odczytem stanu)
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts or CONFLICT_RETRY_ATTEMPTS),
        wait=wait_exponential(multiplier=0.02, min=0.02, max=0.3),
        retry=retry_if_exception_type(ConflictError),
    )
