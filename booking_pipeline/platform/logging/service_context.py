"""
Service context extraction for distributed logging.

Each of the three services (booking, inventory, order) logs under its own
SERVICE_NAME so interleaved pipeline logs stay attributable.
"""

import os
from functools import lru_cache


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'unknown')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')
    hostname = os.getenv('HOSTNAME', '')

    # Containers expose a short hostname; fall back to PID for local runs
    instance = hostname[:12] if hostname else str(os.getpid())

    return f'{service_name}@{deploy_env}:{instance}'
