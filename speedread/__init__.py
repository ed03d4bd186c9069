"""Reading pacing engine: segmentation plus a drift-correcting scheduler."""

from speedread.clock import AsyncioClock, Clock
from speedread.pacing import (
    PacingScheduler,
    PlaybackState,
    ReadingMode,
    ReadingSnapshot,
    SessionConfig,
    format_time_remaining,
)
from speedread.segmentation import (
    BionicWord,
    build_chunks,
    compute_orp_index,
    split_words,
    to_bionic_word,
)

__version__ = "0.1.0"

__all__ = [
    "AsyncioClock",
    "BionicWord",
    "Clock",
    "PacingScheduler",
    "PlaybackState",
    "ReadingMode",
    "ReadingSnapshot",
    "SessionConfig",
    "build_chunks",
    "compute_orp_index",
    "format_time_remaining",
    "split_words",
    "to_bionic_word",
]
