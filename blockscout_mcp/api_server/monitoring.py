"""
Monitoring and health check utilities for the HTTP surface.

This module provides a `HealthChecker` class for health and liveness checks and
the Prometheus metrics tracking HTTP traffic.
"""

import platform
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import psutil
from prometheus_client import Counter, Gauge, Histogram, Info

from blockscout_mcp import __version__
from blockscout_mcp.cache.chain_cache import ChainCache
from blockscout_mcp.utils.logger import get_logger

logger = get_logger(__name__)

# Application info
app_info = Info('app', 'Application information')
app_info.info({
    'name': 'blockscout_mcp',
    'version': __version__,
    'python_version': platform.python_version()
})

# HTTP metrics
http_requests_total = Counter(
    'http_requests_total',
    'Total number of HTTP requests.',
    ['method', 'endpoint', 'status']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'Latency of HTTP requests in seconds.',
    ['method', 'endpoint']
)

http_requests_in_progress = Gauge(
    'http_requests_in_progress',
    'Number of HTTP requests currently in progress.',
    ['method', 'endpoint']
)

app_uptime_seconds = Gauge(
    'app_uptime_seconds',
    'Uptime of the application in seconds.'
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HealthChecker:
    """
    Performs health checks for the service.

    Reports process memory pressure and the state of the chain cache.
    """

    def __init__(self):
        self.start_time = _utcnow()
        self.chain_cache: Optional[ChainCache] = None  # set by the app
        logger.info("Health checker initialized")

    def set_chain_cache(self, chain_cache: ChainCache) -> None:
        """Sets the chain cache reported by health checks."""
        self.chain_cache = chain_cache

    def uptime(self) -> float:
        return (_utcnow() - self.start_time).total_seconds()

    def check_health(self) -> Dict[str, Any]:
        """
        Performs a comprehensive health check.

        Returns:
            Dict[str, Any]: Overall status, uptime and per-check details.
        """
        uptime = self.uptime()
        app_uptime_seconds.set(uptime)

        health_status = {
            'status': 'healthy',
            'timestamp': _utcnow().isoformat(),
            'uptime_seconds': uptime,
            'checks': {
                'memory': self._check_memory_health(),
            }
        }

        if self.chain_cache is not None:
            health_status['checks']['chain_cache'] = self._check_chain_cache()

        statuses = [check['status'] for check in health_status['checks'].values()]
        if 'unhealthy' in statuses:
            health_status['status'] = 'unhealthy'
        elif 'degraded' in statuses:
            health_status['status'] = 'degraded'

        return health_status

    def check_liveness(self) -> Dict[str, Any]:
        """
        Checks if the service is alive and responsive.

        Returns:
            Dict[str, Any]: A dictionary containing the liveness status.
        """
        return {
            'alive': True,
            'timestamp': _utcnow().isoformat(),
            'uptime_seconds': self.uptime()
        }

    def _check_memory_health(self) -> Dict[str, Any]:
        try:
            memory = psutil.virtual_memory()

            status = 'healthy'
            if memory.percent > 95:
                status = 'unhealthy'
            elif memory.percent > 85:
                status = 'degraded'

            return {
                'status': status,
                'percent': memory.percent,
                'message': f'Memory usage at {memory.percent:.1f}%'
            }
        except Exception as e:
            logger.error(f"Error checking memory health: {e}")
            return {
                'status': 'unknown',
                'message': f'Error checking memory health: {str(e)}'
            }

    def _check_chain_cache(self) -> Dict[str, Any]:
        chain_ids = self.chain_cache.chain_ids()
        return {
            'status': 'healthy',
            'cached_chains': len(chain_ids),
            'chain_ids': chain_ids,
        }


health_checker = HealthChecker()
