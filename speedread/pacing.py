"""
Pacing scheduler: advances through a text at a words-per-minute rate.

The scheduler owns the playback state (idle / playing / paused / complete)
and a drift-correcting advance timer. Each re-arm is computed against an
absolute expected time that moves forward by exactly one item's dwell per
step, so a late timer fire shortens the next timeout instead of pushing the
whole schedule back.

A second, independent one-second timer counts elapsed reading time.

Everything runs on one cooperative event loop (see ``speedread.clock``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, FrozenSet, List, Optional, Tuple, Union

from speedread import settings
from speedread.clock import AsyncioClock, Clock, TimerHandle
from speedread.segmentation import (
    BionicWord,
    build_chunks,
    compute_orp_index,
    estimate_pause_multiplier,
    phrase_starters_for,
    split_words,
    to_bionic_words,
)

logger = logging.getLogger(__name__)

ELAPSED_INTERVAL_MS = 1000.0


class ReadingMode(str, Enum):
    WORD = "word"
    BIONIC = "bionic"
    CHUNK = "chunk"


class PlaybackState(str, Enum):
    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    COMPLETE = "complete"


@dataclass(frozen=True)
class SessionConfig:
    """Immutable inputs for one reading session.

    ``mode`` accepts either a ``ReadingMode`` or its string value.
    ``phrase_starters``, when given, replaces the per-language word sets
    selected by ``languages``.
    """

    text: str
    mode: ReadingMode = ReadingMode.WORD
    initial_speed_wpm: int = settings.DEFAULT_WPM
    chunk_size: int = settings.DEFAULT_CHUNK_SIZE
    use_smart_chunking: bool = settings.SMART_CHUNKING
    languages: Tuple[str, ...] = settings.LANGUAGES
    phrase_starters: Optional[FrozenSet[str]] = None
    min_wpm: int = settings.MIN_WPM
    max_wpm: int = settings.MAX_WPM
    wpm_step: int = settings.WPM_STEP
    punctuation_pauses: bool = False
    comma_pause: float = settings.COMMA_PAUSE
    sentence_pause: float = settings.SENTENCE_PAUSE

    def __post_init__(self) -> None:
        object.__setattr__(self, "mode", ReadingMode(self.mode))
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
        if self.min_wpm < 1 or self.min_wpm > self.max_wpm:
            raise ValueError(f"invalid speed bounds [{self.min_wpm}, {self.max_wpm}]")
        if self.wpm_step < 1:
            raise ValueError(f"wpm_step must be positive, got {self.wpm_step}")


@dataclass(frozen=True)
class ReadingSnapshot:
    mode: ReadingMode
    state: PlaybackState
    speed_wpm: int
    is_playing: bool
    is_paused: bool
    is_complete: bool
    position: int
    total_items: int
    progress: float
    elapsed_seconds: int
    remaining_seconds: float
    current_word: str
    current_bionic: Optional[BionicWord]
    focus_index: Optional[int]
    current_chunk: Optional[List[str]]
    previous_chunk: Optional[List[str]]
    next_chunk: Optional[List[str]]


def format_time_remaining(seconds: float) -> str:
    if seconds < 60:
        return f"~{int(seconds)} sec remaining"
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"~{minutes}:{secs:02d} remaining"


class PacingScheduler:
    """Stateful reading engine for a single session.

    Actions never raise on a bad state: pausing while idle, resuming while
    complete, stepping back at the start and similar calls are no-ops.
    Call ``dispose`` (or use the scheduler as a context manager) to cancel
    outstanding timers when the caller stops observing it.
    """

    def __init__(
        self,
        config: SessionConfig,
        clock: Optional[Clock] = None,
        on_complete: Optional[Callable[[], None]] = None,
        on_progress: Optional[Callable[[float], None]] = None,
        on_position: Optional[Callable[[int, Any], None]] = None,
    ) -> None:
        self.config = config
        self._clock = clock if clock is not None else AsyncioClock()
        self._on_complete = on_complete
        self._on_progress = on_progress
        self._on_position = on_position

        starters = config.phrase_starters
        if starters is None:
            starters = phrase_starters_for(config.languages)

        # Derived streams, computed once per session
        self._words = split_words(config.text)
        self._chunks = build_chunks(
            self._words,
            chunk_size=config.chunk_size,
            phrase_mode=config.use_smart_chunking,
            phrase_starters=starters,
        )
        self._bionic = to_bionic_words(self._words)

        self._mode = config.mode
        self._speed = self._clamp_speed(config.initial_speed_wpm)
        self._position = 0
        self._is_playing = False
        self._is_paused = True
        self._is_complete = False
        self._elapsed = 0

        self._advance_timer: Optional[TimerHandle] = None
        self._elapsed_timer: Optional[TimerHandle] = None
        self._expected_time = 0.0
        self._last_progress: Optional[Tuple[ReadingMode, int, float]] = None
        self._disposed = False

        logger.debug(
            "Session ready: %d words, %d chunks, mode=%s, %d wpm",
            len(self._words),
            len(self._chunks),
            self._mode.value,
            self._speed,
        )

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------
    @property
    def words(self) -> List[str]:
        return list(self._words)

    @property
    def chunks(self) -> List[List[str]]:
        return [list(c) for c in self._chunks]

    @property
    def bionic_words(self) -> List[BionicWord]:
        return list(self._bionic)

    @property
    def mode(self) -> ReadingMode:
        return self._mode

    @property
    def speed_wpm(self) -> int:
        return self._speed

    @property
    def position(self) -> int:
        return self._position

    @property
    def is_playing(self) -> bool:
        return self._is_playing

    @property
    def is_paused(self) -> bool:
        return self._is_paused

    @property
    def is_complete(self) -> bool:
        return self._is_complete

    @property
    def elapsed_seconds(self) -> int:
        return self._elapsed

    @property
    def total_items(self) -> int:
        if self._mode is ReadingMode.CHUNK:
            return len(self._chunks)
        return len(self._words)

    @property
    def progress(self) -> float:
        total = self.total_items
        if total == 0:
            return 0.0
        return (self._position + 1) / total * 100

    @property
    def state(self) -> PlaybackState:
        if self._is_complete:
            return PlaybackState.COMPLETE
        if not self._is_playing:
            return PlaybackState.IDLE
        if self._is_paused:
            return PlaybackState.PAUSED
        return PlaybackState.PLAYING

    @property
    def disposed(self) -> bool:
        return self._disposed

    def delay_ms(self) -> float:
        """Nominal dwell per step at the current speed and mode."""
        base = 60000.0 / self._speed
        if self._mode is ReadingMode.CHUNK:
            return base * self.config.chunk_size
        return base

    def item_delay_ms(self, index: int) -> float:
        delay = self.delay_ms()
        if self.config.punctuation_pauses and 0 <= index < self.total_items:
            delay *= estimate_pause_multiplier(
                self._item_text(index), self.config.comma_pause, self.config.sentence_pause
            )
        return delay

    def remaining_seconds(self) -> float:
        total = self.total_items
        if total == 0 or self._is_complete:
            return 0.0
        start = self._position + 1
        if not self.config.punctuation_pauses:
            return (total - start) * self.delay_ms() / 1000.0
        return sum(self.item_delay_ms(i) for i in range(start, total)) / 1000.0

    def snapshot(self) -> ReadingSnapshot:
        chunk_mode = self._mode is ReadingMode.CHUNK
        has_items = self.total_items > 0
        idx = self._position

        current_word = ""
        current_bionic = None
        focus_index = None
        current_chunk = previous_chunk = next_chunk = None

        if has_items and not chunk_mode:
            current_word = self._words[idx]
            current_bionic = self._bionic[idx]
            if self._mode is ReadingMode.WORD:
                focus_index = compute_orp_index(current_word)
        elif has_items:
            current_chunk = list(self._chunks[idx])
            if idx > 0:
                previous_chunk = list(self._chunks[idx - 1])
            if idx < len(self._chunks) - 1:
                next_chunk = list(self._chunks[idx + 1])

        return ReadingSnapshot(
            mode=self._mode,
            state=self.state,
            speed_wpm=self._speed,
            is_playing=self._is_playing,
            is_paused=self._is_paused,
            is_complete=self._is_complete,
            position=idx,
            total_items=self.total_items,
            progress=self.progress,
            elapsed_seconds=self._elapsed,
            remaining_seconds=self.remaining_seconds(),
            current_word=current_word,
            current_bionic=current_bionic,
            focus_index=focus_index,
            current_chunk=current_chunk,
            previous_chunk=previous_chunk,
            next_chunk=next_chunk,
        )

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    def start(self) -> None:
        if self._disposed or self.total_items == 0:
            return
        self._cancel_timers()
        self._is_complete = False
        self._is_paused = False
        self._is_playing = True
        self._elapsed = 0
        logger.debug("Playback started (%s, %d wpm)", self._mode.value, self._speed)
        self._move_to(0, announce=True)
        if self._running:
            self._arm()

    def pause(self) -> None:
        if self.state is not PlaybackState.PLAYING:
            return
        self._is_paused = True
        self._cancel_timers()
        logger.debug("Paused at %d/%d", self._position + 1, self.total_items)

    def resume(self) -> None:
        if self._disposed or self.state is not PlaybackState.PAUSED:
            return
        self._is_paused = False
        logger.debug("Resumed at %d/%d", self._position + 1, self.total_items)
        self._arm()

    def toggle_pause(self) -> None:
        if self.state is PlaybackState.PLAYING:
            self.pause()
        elif self.state is PlaybackState.PAUSED:
            self.resume()

    def reset(self) -> None:
        if self._disposed:
            return
        self._cancel_timers()
        self._is_complete = False
        self._is_paused = True
        self._is_playing = False
        self._elapsed = 0
        self._move_to(0)

    def set_speed(self, wpm: Union[int, float]) -> None:
        if self._disposed:
            return
        self._speed = self._clamp_speed(wpm)

    def speed_up(self) -> None:
        self.set_speed(self._speed + self.config.wpm_step)

    def slow_down(self) -> None:
        self.set_speed(self._speed - self.config.wpm_step)

    def set_mode(self, mode: Union[ReadingMode, str], speed_wpm: Optional[int] = None) -> None:
        """Switch display mode. Playback returns to the idle shape."""
        if self._disposed:
            return
        self._cancel_timers()
        self._mode = ReadingMode(mode)
        if speed_wpm is not None:
            self.set_speed(speed_wpm)
        self._is_complete = False
        self._is_paused = True
        self._is_playing = False
        self._elapsed = 0
        logger.debug("Mode set to %s (%d items)", self._mode.value, self.total_items)
        self._move_to(0)

    def set_position(self, index: int) -> None:
        total = self.total_items
        if self._disposed or total == 0:
            return
        self._is_complete = False
        self._move_to(max(0, min(int(index), total - 1)))
        self._reanchor()

    def step_back(self) -> None:
        if self._disposed or self._position <= 0:
            return
        if self._is_complete:
            self._is_complete = False
        self._move_to(self._position - 1)
        self._reanchor()

    def dispose(self) -> None:
        """Cancel both timers and ignore every later action."""
        self._cancel_timers()
        self._disposed = True

    def __enter__(self) -> "PacingScheduler":
        return self

    def __exit__(self, *exc_info) -> None:
        self.dispose()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    @property
    def _running(self) -> bool:
        return (
            self._is_playing
            and not self._is_paused
            and not self._is_complete
            and not self._disposed
        )

    def _clamp_speed(self, wpm: Union[int, float]) -> int:
        if wpm != wpm:  # NaN
            return self.config.min_wpm
        return int(round(min(self.config.max_wpm, max(self.config.min_wpm, wpm))))

    def _item_text(self, index: int) -> str:
        if self._mode is ReadingMode.CHUNK:
            return " ".join(self._chunks[index])
        return self._words[index]

    def _current_item(self) -> Any:
        if self._mode is ReadingMode.CHUNK:
            return list(self._chunks[self._position])
        if self._mode is ReadingMode.BIONIC:
            return self._bionic[self._position]
        return self._words[self._position]

    def _move_to(self, index: int, announce: bool = False) -> None:
        changed = index != self._position
        self._position = index
        self._publish_progress()
        if self._on_position is not None and self.total_items > 0 and (changed or announce):
            self._on_position(index, self._current_item())

    def _publish_progress(self) -> None:
        # Fires on any change of mode, position or value, even when the
        # percentage itself comes out the same
        value = self.progress
        key = (self._mode, self._position, value)
        if key == self._last_progress:
            return
        self._last_progress = key
        if self._on_progress is not None:
            self._on_progress(value)

    def _arm(self) -> None:
        self._schedule_first_advance()
        self._schedule_elapsed()

    def _reanchor(self) -> None:
        # Restart the pacing schedule from now; the elapsed counter keeps going
        if self._running:
            self._schedule_first_advance()

    def _schedule_first_advance(self) -> None:
        delay = self.item_delay_ms(self._position)
        self._expected_time = self._clock.now() + delay
        self._schedule_advance(delay)

    def _schedule_advance(self, timeout_ms: float) -> None:
        if self._advance_timer is not None:
            self._advance_timer.cancel()
        self._advance_timer = self._clock.call_later(timeout_ms, self._tick)

    def _schedule_elapsed(self) -> None:
        if self._elapsed_timer is not None:
            self._elapsed_timer.cancel()
        self._elapsed_timer = self._clock.call_later(ELAPSED_INTERVAL_MS, self._elapsed_tick)

    def _cancel_timers(self) -> None:
        if self._advance_timer is not None:
            self._advance_timer.cancel()
            self._advance_timer = None
        if self._elapsed_timer is not None:
            self._elapsed_timer.cancel()
            self._elapsed_timer = None

    def _tick(self) -> None:
        self._advance_timer = None
        if not self._running:
            return

        now = self._clock.now()
        if self._position >= self.total_items - 1:
            self._complete()
            return

        self._move_to(self._position + 1)
        # A callback may have paused, reset or re-armed the scheduler
        if not self._running or self._advance_timer is not None:
            return

        self._expected_time += self.item_delay_ms(self._position)
        self._schedule_advance(max(0.0, self._expected_time - now))

    def _elapsed_tick(self) -> None:
        self._elapsed_timer = None
        if not self._running:
            return
        self._elapsed += 1
        self._schedule_elapsed()

    def _complete(self) -> None:
        self._cancel_timers()
        self._is_complete = True
        self._is_playing = False
        logger.info(
            "Reading complete: %d items in %s mode, %ds elapsed",
            self.total_items,
            self._mode.value,
            self._elapsed,
        )
        if self._on_complete is not None:
            self._on_complete()
