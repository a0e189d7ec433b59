"""Server side of the bridge: object table, host runtime and dispatcher."""

from .dispatcher import Dispatcher
from .host import PythonHostRuntime
from .marshal import ServerMarshaller
from .object_table import ObjectTable
from .stdio import build_dispatcher, run_stdio_server, serve

__all__ = [
    "Dispatcher",
    "ObjectTable",
    "PythonHostRuntime",
    "ServerMarshaller",
    "build_dispatcher",
    "run_stdio_server",
    "serve",
]
