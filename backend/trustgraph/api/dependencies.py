"""Route Dependencies — hand the process-wide service container to route handlers.

Invariants:
    - The container is created by the lifespan in main.py; routes never build services
"""

from fastapi import Request

from trustgraph.services.container import TrustGraphContainer


def get_container(request: Request) -> TrustGraphContainer:
    return request.app.state.container
