"""Timed feeding sequence: eat, react, score, rest.

A feed runs through four stages, each step scheduled through an object with
Tk's ``after(ms, callback)`` signature::

    IDLE --feed()--> EATING --delay--> RESOLVED --delay--> SETTLING --> IDLE

The sequencer never blocks. While a feed is running the session's ``busy``
flag rejects further requests, and whatever happens the flag is cleared and
the view is returned to its idle picture at the end.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional, Protocol, Union

from app_logging import get_logger
from feed_config import FEED_STEP_DELAY_MS
from food_catalog import FoodRecord
from player_progress import (
    PlayerProgress,
    ProgressLoad,
    ProgressStatus,
    load_progress,
    save_progress,
)

logger = get_logger(__name__)

FAILURE_MESSAGE = "Feeding failed"

GOOD_RANGE = range(7, 11)
BAD_RANGE = range(4, 7)


class FeedStage(Enum):
    IDLE = "idle"
    EATING = "eating"
    RESOLVED = "resolved"
    SETTLING = "settling"


class FeedOutcome(Enum):
    GOOD = "good"
    BAD = "bad"
    VERY_BAD = "very_bad"


def classify_outcome(points: int) -> FeedOutcome:
    """Map a food's point value to the character's reaction.

    7-10 is good and 4-6 is bad. Every other value, including negatives and
    anything above 10, is very bad.
    """

    if points in GOOD_RANGE:
        return FeedOutcome.GOOD
    if points in BAD_RANGE:
        return FeedOutcome.BAD
    return FeedOutcome.VERY_BAD


class Scheduler(Protocol):
    def after(self, ms: int, func: Callable[[], None]) -> Any:
        ...


class FeedView(Protocol):
    def play_feed_sound(self, is_drink: bool) -> None:
        ...

    def show_food(self, name: str) -> None:
        ...

    def show_outcome(self, outcome: FeedOutcome) -> None:
        ...

    def show_idle(self) -> None:
        ...

    def show_score(self, total_points: int) -> None:
        ...

    def set_feed_enabled(self, enabled: bool) -> None:
        ...

    def notify_failure(self, message: str) -> None:
        ...


@dataclass
class FeedSession:
    """Per-window state: the player's progress and the in-progress flag."""

    progress_path: Path
    progress: PlayerProgress = field(default_factory=PlayerProgress)
    busy: bool = False
    load_status: ProgressStatus = ProgressStatus.MISSING

    @classmethod
    def open(cls, progress_path: Union[str, Path]) -> "FeedSession":
        path = Path(progress_path)
        loaded: ProgressLoad = load_progress(path)
        return cls(progress_path=path, progress=loaded.progress, load_status=loaded.status)

    @property
    def total_points(self) -> int:
        return self.progress.total_points

    def commit_points(self, points: int) -> int:
        total = self.progress.add_points(points)
        save_progress(self.progress_path, self.progress)
        return total


@dataclass(frozen=True)
class FeedResult:
    name: str
    outcome: Optional[FeedOutcome]
    total_points: int
    error: Optional[BaseException] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class _FeedRun:
    name: str
    record: FoodRecord
    on_complete: Optional[Callable[[FeedResult], None]]
    outcome: Optional[FeedOutcome] = None


class FeedSequencer:
    def __init__(
        self,
        session: FeedSession,
        view: FeedView,
        scheduler: Scheduler,
        *,
        step_delay_ms: int = FEED_STEP_DELAY_MS,
    ) -> None:
        self.session = session
        self.view = view
        self.scheduler = scheduler
        self.step_delay_ms = step_delay_ms
        self.stage = FeedStage.IDLE
        self._run: Optional[_FeedRun] = None

    @property
    def busy(self) -> bool:
        return self.session.busy

    def feed(
        self,
        name: str,
        record: FoodRecord,
        on_complete: Optional[Callable[[FeedResult], None]] = None,
    ) -> bool:
        """Start feeding ``name``. Returns ``False`` if a feed is already running."""

        if self.session.busy:
            logger.debug("Ignoring feed of %r while another feed is running", name)
            return False
        self.session.busy = True
        self._run = _FeedRun(name, record, on_complete)
        logger.info("Feeding %s (%d points)", name, record.points)
        self._step(self._start_eating)
        return True

    # ----------------- stages -----------------
    def _start_eating(self, run: _FeedRun) -> None:
        self.stage = FeedStage.EATING
        self.view.set_feed_enabled(False)
        self.view.play_feed_sound(run.record.is_drink)
        self.view.show_food(run.name)
        self._schedule(self._resolve)

    def _resolve(self, run: _FeedRun) -> None:
        self.stage = FeedStage.RESOLVED
        run.outcome = classify_outcome(run.record.points)
        self.view.show_outcome(run.outcome)
        self._schedule(self._settle)

    def _settle(self, run: _FeedRun) -> None:
        self.stage = FeedStage.SETTLING
        total = self.session.commit_points(run.record.points)
        self.view.show_score(total)

    # ----------------- plumbing -----------------
    def _schedule(self, stage: Callable[[_FeedRun], None]) -> None:
        self.scheduler.after(self.step_delay_ms, lambda: self._step(stage))

    def _step(self, stage: Callable[[_FeedRun], None]) -> None:
        run = self._run
        if run is None:
            return
        try:
            stage(run)
        except Exception as exc:
            self._fail(exc)
            return
        if self.stage is FeedStage.SETTLING:
            self._finish(None)

    def _fail(self, exc: Exception) -> None:
        logger.error("Feed sequence failed in stage %s", self.stage.value, exc_info=exc)
        try:
            self.view.notify_failure(FAILURE_MESSAGE)
        except Exception:
            logger.exception("Could not show the failure notice")
        self._finish(exc)

    def _finish(self, error: Optional[BaseException]) -> None:
        run, self._run = self._run, None
        self.stage = FeedStage.IDLE
        self.session.busy = False
        try:
            self.view.show_idle()
            self.view.set_feed_enabled(True)
        except Exception:
            logger.exception("Could not restore the idle display")

        if run is None or run.on_complete is None:
            return
        result = FeedResult(
            name=run.name,
            outcome=run.outcome,
            total_points=self.session.total_points,
            error=error,
        )
        try:
            run.on_complete(result)
        except Exception:
            logger.exception("Feed completion callback for %r failed", run.name)
