"""Shared fixtures for the live preview test suite."""

import asyncio
from pathlib import Path
from typing import List, Optional

import dukpy
import httpx
import pytest

from livepreview.llm.suggestion_client import SuggestionClient
from livepreview.prompt_store import MemoryStore
from livepreview.session import EditorSession
from livepreview.transpiler.babel import Transpiler
from livepreview.transpiler.loader import TranspilerLoader


HELLO_ES5 = 'module.exports = function Hello(props) { return React.createElement("p", null, "Hello ", props.name); };'


class BundledBabel:
    """Real Babel (the copy bundled with dukpy)."""

    def __init__(self):
        self.sources: List[str] = []

    def transform(self, source, *, presets, filename):
        self.sources.append(source)
        return dukpy.jsx_compile(source, filename=filename)


class PassthroughCompiler:
    """Returns plain ES5 unchanged; fails on a marker the way a compiler would."""

    def __init__(self, fail_marker: str = "<<broken>>"):
        self.fail_marker = fail_marker
        self.sources: List[str] = []

    def transform(self, source, *, presets, filename):
        self.sources.append(source)
        if self.fail_marker in source:
            raise Exception(f"SyntaxError: {filename}: Unexpected token (1:1)")
        return source


def loader_for(compiler, gate: Optional[asyncio.Event] = None) -> TranspilerLoader:
    """A loader whose factory yields ``compiler``, optionally waiting on ``gate``."""

    async def factory():
        if gate is not None:
            await gate.wait()
        return compiler

    return TranspilerLoader(factory=factory, url="test://compiler")


class FakeAssistant:
    """Mock transport for the assistant endpoint that records requests."""

    def __init__(self, chunks=None, status_code: int = 200, gate: Optional[asyncio.Event] = None):
        self.chunks = list(chunks or [])
        self.status_code = status_code
        self.gate = gate
        self.requests: List[httpx.Request] = []

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.gate is not None:
            await self.gate.wait()

        async def body():
            for chunk in self.chunks:
                yield chunk.encode("utf-8")

        return httpx.Response(self.status_code, content=body())

    def client(self) -> SuggestionClient:
        return SuggestionClient(
            base_url="http://assistant.test",
            timeout=5.0,
            transport=httpx.MockTransport(self.handler),
        )


@pytest.fixture
def passthrough():
    return PassthroughCompiler()


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def make_session(passthrough, memory_store):
    """Factory for sessions wired to fast fakes."""

    def _make(
        initial_code: str = HELLO_ES5,
        assistant: Optional[FakeAssistant] = None,
        compiler=None,
        gate: Optional[asyncio.Event] = None,
        **kwargs,
    ):
        assistant = assistant or FakeAssistant(chunks=[HELLO_ES5])
        return EditorSession(
            initial_code,
            kwargs.pop("preview_props", {"name": "World"}),
            kwargs.pop("no_inline_styles", False),
            transpiler=Transpiler(loader_for(compiler or passthrough, gate)),
            suggestion_client=assistant.client(),
            prompt_store=kwargs.pop("prompt_store", memory_store),
            debounce_seconds=kwargs.pop("debounce_seconds", 0.02),
        )

    return _make


@pytest.fixture(scope="session")
def babel_script() -> str:
    """The Babel standalone build that ships inside dukpy."""
    scripts = sorted((Path(dukpy.__file__).parent / "jsmodules").glob("babel-*.js"))
    assert scripts, "dukpy does not bundle a Babel build"
    return scripts[-1].read_text(encoding="utf-8")
