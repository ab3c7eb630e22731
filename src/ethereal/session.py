"""
Editor session for Ethereal.

One session per open editor. It owns the single in-flight enrichment call:

    idle -> requesting -> succeeded | failed

A second request while one is in flight is rejected. Closing the session
cancels the call; a response that arrives afterwards is dropped rather than
merged into anything.
"""

import logging
import threading
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from enum import Enum

from ethereal.analyzer import Analyzer
from ethereal.models import AnalysisResult, Thought
from ethereal.repository import JournalRepository

logger = logging.getLogger(__name__)


class EnrichmentState(str, Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class EmptyThoughtError(ValueError):
    """Raised when saving blank content."""


class EditorBusyError(RuntimeError):
    """Raised when an enrichment call is already in flight."""


class EditorClosedError(RuntimeError):
    """Raised when using a session after close()."""


def merge_analysis(
    thought: Thought,
    result: AnalysisResult | None,
    mood: str | None = None,
) -> Thought:
    """
    Fold an enrichment result into a thought.

    Mood precedence: explicit choice, then AI, then what the thought had.
    Summary and insight are replaced only when the result carries them; new
    tags are appended after existing ones. A None result keeps every field.
    """
    update: dict = {"mood": mood or (result.mood if result else None) or thought.mood}
    if result is not None:
        if result.summary:
            update["summary"] = result.summary
        if result.wisdom:
            update["ai_insight"] = result.wisdom
        if result.tags:
            update["tags"] = thought.tags + [t for t in result.tags if t not in thought.tags]
    return thought.model_copy(update=update)


class EditorSession:
    """Editing state for one new or existing thought."""

    def __init__(
        self,
        repository: JournalRepository,
        analyzer: Analyzer,
        thought: Thought | None = None,
    ):
        self.repository = repository
        self.analyzer = analyzer
        self.thought = thought
        self.state = EnrichmentState.IDLE
        self.mood: str | None = None
        self.insight: str | None = thought.ai_insight if thought else None
        self.last_result: AnalysisResult | None = None
        self.closed = False

        self._lock = threading.Lock()
        self._cancel = threading.Event()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="ethereal-analyze")
        self._pending: Future | None = None

    def __enter__(self) -> "EditorSession":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def is_busy(self) -> bool:
        return self.state is EnrichmentState.REQUESTING

    def choose_mood(self, mood: str | None) -> None:
        self.mood = mood or None

    def request_analysis(self, content: str) -> Future | None:
        """
        Start a manual analysis without blocking.

        On success the insight is replaced and the mood is filled in unless
        one was already chosen; both happen before the returned future
        resolves. Returns None for blank content.
        """
        if not content.strip():
            return None
        return self._submit(content, apply=True)

    def save(self, content: str, mood: str | None = None) -> Thought | None:
        """
        Enrich and persist the thought, blocking until the call settles.

        New thoughts are prepended; existing ones are replaced by id.
        Returns None if the session was closed while the call was in flight.
        """
        if not content.strip():
            raise EmptyThoughtError("Cannot save an empty thought.")
        if mood:
            self.choose_mood(mood)

        try:
            result = self._submit(content).result()
        except CancelledError:
            result = None
        if self.closed:
            return None

        if self.thought is None:
            base = Thought.create(content)
        else:
            base = self.thought.model_copy(update={"content": content})
        if self.insight:
            base = base.model_copy(update={"ai_insight": self.insight})
        saved = merge_analysis(base, result, mood=self.mood)

        if self.thought is None:
            self.repository.add_thought(saved)
        else:
            self.repository.update_thought(saved)
        self.thought = saved
        return saved

    def close(self) -> None:
        """Cancel any in-flight call and release the worker."""
        with self._lock:
            if self.closed:
                return
            self.closed = True
            self._cancel.set()
            if self._pending is not None:
                self._pending.cancel()
            self.state = EnrichmentState.IDLE
        self._executor.shutdown(wait=False)

    def _submit(self, content: str, apply: bool = False) -> Future:
        with self._lock:
            if self.closed:
                raise EditorClosedError("Editor session is closed.")
            if self.state is EnrichmentState.REQUESTING:
                raise EditorBusyError("An analysis is already in progress.")
            self.state = EnrichmentState.REQUESTING
            self._pending = self._executor.submit(self._run, content, apply)
            return self._pending

    def _run(self, content: str, apply: bool) -> AnalysisResult | None:
        """Worker body: call the analyzer, then settle the state machine."""
        try:
            result = self.analyzer.analyze(content, self._cancel)
        except Exception:
            logger.exception("Analysis raised; treating as failed")
            result = None

        with self._lock:
            self._pending = None
            if self.closed:
                logger.debug("Dropping analysis result for closed editor")
                return None
            self.state = EnrichmentState.SUCCEEDED if result else EnrichmentState.FAILED
            self.last_result = result
            if apply and result is not None:
                if result.wisdom:
                    self.insight = result.wisdom
                if not self.mood:
                    self.mood = result.mood
        return result
