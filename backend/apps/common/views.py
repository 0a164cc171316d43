import os
import time

import redis
from django.db import connections
from django.db.utils import OperationalError
from django.http import JsonResponse

from .logger import get_logger

logger = get_logger(__name__).bind(component='common', layer='health')


def _redis_ping(url: str, timeout: float = 0.3):
    try:
        client = redis.from_url(url, socket_connect_timeout=timeout, socket_timeout=timeout)
        pong = client.ping()
    except redis.RedisError as e:
        logger.warning('Redis health check failed', error=str(e))
        return {'status': 'fail', 'error': str(e)}
    if not pong:
        logger.warning('Redis health check returned unexpected response')
        return {'status': 'fail'}
    logger.debug('Redis health check succeeded')
    return {'status': 'ok'}


def _db_check(alias='default'):
    started = time.time()
    try:
        conn = connections[alias]
        with conn.cursor() as cursor:
            cursor.execute('SELECT 1')
    except OperationalError as e:
        logger.warning('Database health check encountered operational error', alias=alias, error=str(e))
        return {'status': 'fail', 'error': str(e)}
    latency = round((time.time() - started) * 1000, 2)
    logger.debug('Database health check succeeded', alias=alias, latency_ms=latency)
    return {'status': 'ok', 'latency_ms': latency}


def live_health(request):
    """Liveness probe: process is up and can service requests."""
    logger.debug('Liveness probe served')
    return JsonResponse({'status': 'alive'})


def ready_health(request):
    """Readiness probe: verifies the database and, when configured, Redis."""
    checks = {'database': _db_check()}

    redis_url = os.getenv('REDIS_URL')
    if redis_url:
        checks['redis'] = _redis_ping(redis_url)
    else:
        checks['redis'] = {'status': 'skipped', 'detail': 'REDIS_URL not set'}

    failing = [name for name, r in checks.items() if r.get('status') == 'fail']
    overall_status = 'ok' if not failing else 'degraded'
    http_status = 200 if not failing else 503
    logger.info('Readiness probe evaluated', status=overall_status, failing_components=failing)
    return JsonResponse({'status': overall_status, 'checks': checks}, status=http_status)
