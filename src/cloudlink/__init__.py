"""cloudlink - connect a workspace to its remote cache."""

from .flows import CloudConnector, FlowResult, InvocationArgs
from .inspector import is_connected, is_remote_delegation_active

__version__ = "0.1.0"

__all__ = [
    "CloudConnector",
    "FlowResult",
    "InvocationArgs",
    "is_connected",
    "is_remote_delegation_active",
]
