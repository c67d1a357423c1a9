from .dispatcher import DispatchRequest, DispatchResponse, RequestDispatcher
from .impl.server import create_app, run
from .impl.service import MockDiscoveryServer

__all__ = [
    "DispatchRequest",
    "DispatchResponse",
    "MockDiscoveryServer",
    "RequestDispatcher",
    "create_app",
    "run",
]
