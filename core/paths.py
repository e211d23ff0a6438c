"""Path-to-target extraction strategies."""

from core.config import RoutingSettings
from core.exceptions import MissingTarget
from core.protocols import PathStrategy


class PrefixMarkerStrategy:
    """Target is everything after a routing marker, e.g. ``/proxx/<encoded-url>``."""

    def __init__(self, marker: str = "/proxx/") -> None:
        self.marker = marker

    def extract(self, path: str) -> str:
        """Return the raw segment after the first marker occurrence."""
        index = path.find(self.marker)
        if index == -1:
            raise MissingTarget(path)
        # Marker with nothing after it is an empty target, not a missing one
        return path[index + len(self.marker):]


class BarePathStrategy:
    """Target is the whole path after the leading slash, e.g. ``/<encoded-url>``."""

    def extract(self, path: str) -> str:
        if len(path) <= 1:
            raise MissingTarget(path)
        return path[1:]


def build_strategy(routing: RoutingSettings) -> PathStrategy:
    """Select the path strategy for the configured deployment mode."""
    if routing.mode == "bare":
        return BarePathStrategy()
    return PrefixMarkerStrategy(routing.marker)
