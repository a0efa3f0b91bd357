from collections import namedtuple

from .debuglog import debug_log
from .snapshot import FetchError
from .stateful_list import StatefulList

# Application state is exactly one of these; a failed fetch never keeps the old list.
Loaded = namedtuple("Loaded", ["connections"])
Failed = namedtuple("Failed", ["error"])

# Result of one refresh collection: either records or the FetchError, plus process usage.
Snapshot = namedtuple("Snapshot", ["records", "error", "usage"])


class App:
    def __init__(self, provider):
        self.provider = provider
        self.usage = provider.usage
        # the first process scan is the slow one
        self.usage.refresh()
        try:
            records = provider.fetch_connections()
        except FetchError as e:
            debug_log(f"APP: Initial fetch failed: {e}")
            self.state = Failed(e)
        else:
            debug_log(f"APP: Loaded {len(records)} sockets")
            self.state = Loaded(StatefulList.with_items(records))

    @property
    def is_loaded(self):
        return isinstance(self.state, Loaded)

    def collect(self):
        """Fetch sockets and process usage without touching the state. Safe off the loop thread."""
        try:
            records, error = self.provider.fetch_connections(), None
        except FetchError as e:
            records, error = None, e
        return Snapshot(records, error, self.usage.collect())

    def apply(self, snapshot):
        self.usage.install(snapshot.usage)
        if snapshot.error is not None:
            if self.is_loaded:
                debug_log(f"APP: Refresh failed, dropping list: {snapshot.error}")
            else:
                debug_log(f"APP: Refresh failed again: {snapshot.error}")
            self.state = Failed(snapshot.error)
        elif self.is_loaded:
            self.state.connections.replace_items(snapshot.records)
        else:
            debug_log(f"APP: Recovered, loaded {len(snapshot.records)} sockets")
            self.state = Loaded(StatefulList.with_items(snapshot.records))

    def update(self):
        self.apply(self.collect())

    def select_next(self):
        if self.is_loaded:
            self.state.connections.next()

    def select_previous(self):
        if self.is_loaded:
            self.state.connections.previous()

    def selected_connection(self):
        if not self.is_loaded:
            return None
        return self.state.connections.selected_item()

    def lookup_usage(self, pid):
        return self.usage.lookup(pid)
