"""
Transpiler Loader - Acquire the Babel compiler once per process.

The compiler is Babel standalone, downloaded as a script and evaluated inside
an embedded JavaScript interpreter. Fetching and evaluating it is slow, so the
resulting handle is cached and shared by every render cycle.

Concurrency:
- The first caller starts the fetch; concurrent callers, on any thread, await it
- A failed fetch leaves the cache empty, so the next call tries again
"""

import asyncio
import concurrent.futures
import logging
import threading
from typing import Awaitable, Callable, Optional, Protocol

import dukpy
import httpx

from livepreview.config import get_config
from livepreview.errors import LoadError


logger = logging.getLogger(__name__)


class CompilerHandle(Protocol):
    """Anything that can turn component source into executable source."""

    def transform(self, source: str, *, presets: list, filename: str) -> str:
        ...


CompilerFactory = Callable[[], Awaitable[CompilerHandle]]


class BabelCompiler:
    """Babel standalone evaluated in a long-lived Duktape interpreter."""

    def __init__(self, script: str):
        self._interpreter = dukpy.JSInterpreter()
        self._interpreter.evaljs(script)
        if not self._interpreter.evaljs("typeof Babel !== 'undefined' && typeof Babel.transform === 'function'"):
            raise LoadError("Compiler script did not define Babel.transform")

    def transform(self, source: str, *, presets: list, filename: str) -> str:
        return self._interpreter.evaljs(
            "Babel.transform(dukpy['source'], dukpy['options']).code",
            source=source,
            options={"presets": presets, "filename": filename},
        )


def babel_from_url(
    url: str,
    timeout: float = 60.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> CompilerFactory:
    """Build a factory that downloads Babel standalone from ``url``."""

    async def factory() -> CompilerHandle:
        async with httpx.AsyncClient(timeout=timeout, follow_redirects=True, transport=transport) as client:
            response = await client.get(url)
            response.raise_for_status()
        return BabelCompiler(response.text)

    return factory


class TranspilerLoader:
    """
    Single-flight, init-once holder of the compiler handle.

    ``ensure_ready`` returns the cached handle, or performs (or joins) the one
    in-flight load. The in-flight load is a thread-safe future, so callers on
    other threads' event loops join it instead of starting a second fetch.
    """

    def __init__(self, factory: Optional[CompilerFactory] = None, url: Optional[str] = None):
        if factory is None:
            config = get_config()
            url = url or config.transpiler_url
            factory = babel_from_url(url, timeout=config.request_timeout)
        self.url = url
        self._factory = factory
        self._handle: Optional[CompilerHandle] = None
        self._inflight: Optional[concurrent.futures.Future] = None
        self._lock = threading.Lock()

    @property
    def is_loaded(self) -> bool:
        return self._handle is not None

    async def ensure_ready(self) -> CompilerHandle:
        """
        Return the compiler handle, loading it on first use.

        Raises:
            LoadError: If the compiler resource could not be fetched or initialized
        """
        if self._handle is not None:
            return self._handle

        with self._lock:
            if self._handle is not None:
                return self._handle
            inflight = self._inflight
            owner = inflight is None
            if owner:
                inflight = self._inflight = concurrent.futures.Future()

        if owner:
            asyncio.ensure_future(self._load(inflight))
        # A cancelled caller must not cancel the load other callers share
        return await asyncio.shield(asyncio.wrap_future(inflight))

    async def _load(self, inflight: concurrent.futures.Future) -> None:
        try:
            handle = await self._acquire()
        except LoadError as e:
            self._finish(inflight, None, e)
        except asyncio.CancelledError:
            self._finish(inflight, None, LoadError("Transpiler load was cancelled"))
            raise
        else:
            self._finish(inflight, handle, None)

    async def _acquire(self) -> CompilerHandle:
        logger.info("Loading transpiler from %s", self.url or "custom factory")
        try:
            handle = await self._factory()
        except LoadError:
            logger.warning("Transpiler load failed", exc_info=True)
            raise
        except Exception as e:
            logger.warning("Transpiler load failed: %s", e)
            raise LoadError(f"Failed to load Babel: {e}") from e

        logger.info("Transpiler ready")
        return handle

    def _finish(
        self,
        inflight: concurrent.futures.Future,
        handle: Optional[CompilerHandle],
        error: Optional[LoadError],
    ) -> None:
        with self._lock:
            if handle is not None:
                self._handle = handle
            self._inflight = None
        if error is not None:
            inflight.set_exception(error)
        else:
            inflight.set_result(handle)


# Global loader instance
_loader: Optional[TranspilerLoader] = None
_loader_lock = threading.Lock()


def get_loader() -> TranspilerLoader:
    """Get or create the process-wide transpiler loader."""
    global _loader
    with _loader_lock:
        if _loader is None:
            _loader = TranspilerLoader()
    return _loader
