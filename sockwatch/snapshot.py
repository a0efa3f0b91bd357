"""
Socket and process snapshots taken with psutil.

``SnapshotProvider.fetch_connections()`` enumerates the host's TCP/UDP sockets,
``SnapshotProvider.usage`` answers per-process CPU / memory questions from the
most recent process snapshot.
"""
import socket
from collections import namedtuple
from enum import Enum

import psutil

from .debuglog import debug_log


class FetchError(Exception):
    """Socket enumeration failed (permission denied, platform API failure, ...)."""


class TcpState(Enum):
    ESTABLISHED = "ESTABLISHED"
    SYN_SENT = "SYN_SENT"
    SYN_RECV = "SYN_RECV"
    FIN_WAIT1 = "FIN_WAIT1"
    FIN_WAIT2 = "FIN_WAIT2"
    TIME_WAIT = "TIME_WAIT"
    CLOSE = "CLOSE"
    CLOSE_WAIT = "CLOSE_WAIT"
    LAST_ACK = "LAST_ACK"
    LISTEN = "LISTEN"
    CLOSING = "CLOSING"
    DELETE_TCB = "DELETE_TCB"
    BOUND = "BOUND"
    IDLE = "IDLE"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_psutil(cls, status):
        try:
            return cls(str(status).upper())
        except ValueError:
            return cls.UNKNOWN


class ProcessStatus(Enum):
    RUNNING = "running"
    SLEEPING = "sleeping"
    DISK_SLEEP = "disk-sleep"
    STOPPED = "stopped"
    TRACING_STOP = "tracing-stop"
    ZOMBIE = "zombie"
    DEAD = "dead"
    WAKE_KILL = "wake-kill"
    WAKING = "waking"
    IDLE = "idle"
    LOCKED = "locked"
    WAITING = "waiting"
    PARKED = "parked"
    UNKNOWN = "unknown"

    @classmethod
    def from_psutil(cls, status):
        try:
            return cls(status)
        except ValueError:
            return cls.UNKNOWN


TcpConnection = namedtuple(
    "TcpConnection", ["local_ip", "local_port", "remote_ip", "remote_port", "state", "pids"]
)
UdpConnection = namedtuple("UdpConnection", ["local_ip", "local_port", "pids"])
ProcessUsage = namedtuple("ProcessUsage", ["pid", "name", "status", "cpu_percent", "memory_kb"])


def _unspecified_ip(family):
    return "::" if family == socket.AF_INET6 else "0.0.0.0"


def build_records(conns):
    """
    Turn psutil ``sconn`` tuples into connection records.

    psutil reports one entry per (process, socket); entries describing the same
    socket are merged into a single record whose pid tuple keeps first-seen order.
    """
    records = {}
    pids = {}
    for c in conns:
        lip, lport = c.laddr if c.laddr else (_unspecified_ip(c.family), 0)
        if c.type == socket.SOCK_STREAM:
            rip, rport = c.raddr if c.raddr else (_unspecified_ip(c.family), 0)
            state = TcpState.from_psutil(c.status)
            key = ("tcp", c.family, lip, lport, rip, rport, state)
            if key not in records:
                records[key] = (TcpConnection, (lip, lport, rip, rport, state))
        elif c.type == socket.SOCK_DGRAM:
            key = ("udp", c.family, lip, lport)
            if key not in records:
                records[key] = (UdpConnection, (lip, lport))
        else:
            continue
        owners = pids.setdefault(key, [])
        if c.pid is not None and c.pid not in owners:
            owners.append(c.pid)
    return [cls(*fields, tuple(pids[key])) for key, (cls, fields) in records.items()]


class UsageHandle:
    """
    Per-process CPU/memory lookups against the last collected snapshot.

    ``collect()`` only reads the system and returns a new snapshot; ``install()``
    makes it current. ``refresh()`` does both.
    """

    ATTRS = ["pid", "name", "status", "cpu_percent", "memory_info"]

    def __init__(self):
        self._snapshot = {}

    def collect(self):
        snapshot = {}
        # process_iter keeps Process instances between calls, so cpu_percent
        # is measured against the previous collect()
        for proc in psutil.process_iter(self.ATTRS):
            try:
                info = proc.info
                mem = info.get("memory_info")
                snapshot[info["pid"]] = ProcessUsage(
                    pid=info["pid"],
                    name=info.get("name") or "?",
                    status=ProcessStatus.from_psutil(info.get("status")),
                    cpu_percent=float(info.get("cpu_percent") or 0.0),
                    memory_kb=(mem.rss // 1024) if mem else 0,
                )
            except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                continue
        return snapshot

    def install(self, snapshot):
        self._snapshot = snapshot

    def refresh(self):
        self.install(self.collect())

    def lookup(self, pid):
        return self._snapshot.get(pid)


class SnapshotProvider:
    def __init__(self, kind="inet"):
        self.kind = kind
        self.usage = UsageHandle()

    def fetch_connections(self):
        try:
            conns = psutil.net_connections(kind=self.kind)
        except (psutil.Error, OSError) as e:
            debug_log(f"SNAPSHOT: net_connections({self.kind}) failed: {e!r}")
            raise FetchError(str(e) or e.__class__.__name__) from e
        return build_records(conns)
