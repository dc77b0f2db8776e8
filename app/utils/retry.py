# app/utils/retry.py
from tenacity import (
    retry,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    stop_after_delay,
    wait_exponential,
    wait_random,
)
import requests
import redis


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


def lock_wait(max_wait: float):
    #ponawiaj dopoki acquire zwraca False, po max_wait oddaj ostatni wynik (False)
    return retry(
        stop=stop_after_delay(max_wait),
        wait=wait_random(min=0.05, max=0.2),
        retry=retry_if_result(lambda acquired: acquired is False),
        retry_error_callback=lambda state: state.outcome.result(),
    )
