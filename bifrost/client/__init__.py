"""Client side of the bridge: gateway, proxies and transports."""

from .gateway import CallGateway
from .marshal import ClientMarshaller
from .proxy import Proxy, RemoteMethod
from .session import open_bridge, server_command, server_environment
from .transport import LoopbackTransport, SubprocessTransport

__all__ = [
    "CallGateway",
    "ClientMarshaller",
    "LoopbackTransport",
    "Proxy",
    "RemoteMethod",
    "SubprocessTransport",
    "open_bridge",
    "server_command",
    "server_environment",
]
