"""External flagger — optional, pluggable extra detector.

A flagger inspects normalized text and proposes labeled spans.  It is a
safety net, never a requirement: whatever it does (raise, hang, return
garbage) the redaction still completes with the other detectors.

Two implementations ship here:

    PresidioFlagger   Presidio NER (names, orgs, locations, ...)
    CallableFlagger   wraps a plain ``text -> proposals`` function
"""

from __future__ import annotations
import asyncio
import logging
from threading import Thread
from typing import TYPE_CHECKING, Any, Callable, Iterable, Mapping, Protocol, Sequence, Union, runtime_checkable

from .types import KINDS, FlagProposal, Span

if TYPE_CHECKING:
    from presidio_analyzer import AnalyzerEngine

logger = logging.getLogger(__name__)

Proposal = Union[FlagProposal, Mapping[str, Any]]


@runtime_checkable
class Flagger(Protocol):
    """Anything that can asynchronously propose PII spans over text."""

    def name(self) -> str:
        ...

    async def flag(self, text: str) -> Sequence[Proposal]:
        """Return zero or more {start, end, label, score?} proposals."""
        ...


def _fields(p: Proposal) -> tuple[Any, Any, Any, Any]:
    if isinstance(p, FlagProposal):
        return p.start, p.end, p.label, p.score
    return p["start"], p["end"], p["label"], p.get("score")


def proposals_to_spans(text: str, proposals: Iterable[Proposal]) -> list[Span]:
    """Clamp proposals into the text and wrap the valid ones as spans.

    Raises on malformed proposals; ``run_flagger`` turns that into "no spans".
    """
    n = len(text)
    spans: list[Span] = []
    for p in proposals:
        raw_start, raw_end, label, score = _fields(p)
        if label not in KINDS:
            logger.debug("Dropping flagger proposal with unknown label %r", label)
            continue
        start = max(0, min(n, int(raw_start)))
        end = max(start, min(n, int(raw_end)))
        if end <= start:
            continue
        spans.append(Span(
            start=start,
            end=end,
            value=text[start:end],
            kind=label,
            source="flagger",
            score=float(score) if score is not None else None,
        ))
    return spans


async def run_flagger(
    flagger: Flagger | None,
    text: str,
    *,
    timeout: float = 10.0,
) -> list[Span]:
    """Call the flagger under a timeout.  Any failure yields no spans."""
    if flagger is None:
        return []
    try:
        proposals = await asyncio.wait_for(flagger.flag(text), timeout=timeout)
        spans = proposals_to_spans(text, proposals or [])
    except asyncio.TimeoutError:
        logger.warning("Flagger %s timed out after %.1fs; continuing without it",
                       _flagger_name(flagger), timeout)
        return []
    except Exception as exc:  # noqa: BLE001
        logger.warning("Flagger %s failed (%s); continuing without it",
                       _flagger_name(flagger), type(exc).__name__)
        return []
    logger.debug("Flagger %s proposed %d spans", _flagger_name(flagger), len(spans))
    return spans


def _flagger_name(flagger: Flagger) -> str:
    try:
        return str(flagger.name())
    except Exception:  # noqa: BLE001
        return type(flagger).__name__


async def run_blocking(func: Callable[..., Any], *args: Any) -> Any:
    """Await a blocking call made on a daemon thread.

    Unlike ``asyncio.to_thread`` the thread is never joined, neither by
    ``asyncio.run`` on shutdown nor at interpreter exit, so a call that
    outlives the flagger timeout cannot hold the process open.  A result
    that arrives after the caller gave up is discarded.
    """
    loop = asyncio.get_running_loop()
    future: asyncio.Future[Any] = loop.create_future()

    def _settle(result: Any, exc: BaseException | None) -> None:
        if future.done():
            return
        if exc is not None:
            future.set_exception(exc)
        else:
            future.set_result(result)

    def _worker() -> None:
        result: Any = None
        exc: BaseException | None = None
        try:
            result = func(*args)
        except Exception as e:  # noqa: BLE001
            exc = e
        try:
            loop.call_soon_threadsafe(_settle, result, exc)
        except RuntimeError:
            logger.debug("Event loop closed before %r returned; result dropped",
                         getattr(func, "__name__", func))

    Thread(target=_worker, name="doc-redactor-flagger", daemon=True).start()
    return await future


class CallableFlagger:
    """Adapt a synchronous ``text -> proposals`` callable into a Flagger."""

    def __init__(self, func: Callable[[str], Iterable[Proposal]], *, name: str | None = None) -> None:
        self._func = func
        self._name = name or getattr(func, "__name__", "callable")

    def name(self) -> str:
        return self._name

    async def flag(self, text: str) -> list[Proposal]:
        return await run_blocking(lambda: list(self._func(text)))


# ---------------------------------------------------------------------------
# Presidio
# ---------------------------------------------------------------------------

# Presidio entity type -> our kind; anything else is dropped
PRESIDIO_KIND_MAP: dict[str, str] = {
    "PERSON": "name",
    "ORGANIZATION": "org",
    "LOCATION": "loc",
    "EMAIL_ADDRESS": "email",
    "PHONE_NUMBER": "phone",
    "URL": "url",
    "US_SSN": "id",
}

DEFAULT_ENTITIES = ["PERSON", "ORGANIZATION", "LOCATION"]

# Lazy singleton — don't load spaCy until first use
_engine: AnalyzerEngine | None = None
_engine_lang: str = ""


def _get_engine(language: str = "en") -> AnalyzerEngine:
    """Lazy-init the Presidio analyzer engine."""
    global _engine, _engine_lang
    if _engine is None or _engine_lang != language:
        from presidio_analyzer import AnalyzerEngine
        from presidio_analyzer.nlp_engine import NlpEngineProvider

        provider = NlpEngineProvider(nlp_configuration={
            "nlp_engine_name": "spacy",
            "models": [{"lang_code": language, "model_name": f"{language}_core_web_sm"}],
        })
        nlp_engine = provider.create_engine()
        _engine = AnalyzerEngine(nlp_engine=nlp_engine, supported_languages=[language])
        _engine_lang = language
    return _engine


class PresidioFlagger:
    """Flagger backed by Presidio NER.

    The analyzer is blocking, so it runs in a worker thread.  Pass
    ``engine`` to reuse an existing AnalyzerEngine.
    """

    def __init__(
        self,
        *,
        language: str = "en",
        score_threshold: float = 0.35,
        entities: list[str] | None = None,
        engine: Any | None = None,
    ) -> None:
        self.language = language
        self.score_threshold = score_threshold
        self.entities = entities or DEFAULT_ENTITIES
        self._engine = engine

    def name(self) -> str:
        return "presidio"

    def _analyze(self, text: str) -> list[FlagProposal]:
        engine = self._engine or _get_engine(self.language)
        results = engine.analyze(
            text=text,
            language=self.language,
            entities=self.entities,
            score_threshold=self.score_threshold,
        )
        proposals: list[FlagProposal] = []
        for r in results:
            kind = PRESIDIO_KIND_MAP.get(r.entity_type)
            if kind is None:
                continue
            proposals.append(FlagProposal(start=r.start, end=r.end, label=kind, score=r.score))
        return sorted(proposals, key=lambda p: p.start)

    async def flag(self, text: str) -> list[FlagProposal]:
        return await run_blocking(self._analyze, text)
