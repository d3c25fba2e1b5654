"""
Networking and concurrency.

    socket_server.py   Listening socket and accept loop
    connection.py      Per-client buffered reads and writes
    thread_pool.py     Worker threads that serve connections
"""

from .connection import Connection, ConnectionState
from .socket_server import SocketServer
from .thread_pool import ThreadPool, Task, Worker, WorkerState

__all__ = [
    "Connection",
    "ConnectionState",
    "SocketServer",
    "ThreadPool",
    "Task",
    "Worker",
    "WorkerState",
]
