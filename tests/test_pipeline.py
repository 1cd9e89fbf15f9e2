"""Tests for the render graph, the render trigger and the retry policy."""

import asyncio

import pytest

from livepreview.graph import after_transpile_route
from livepreview.pipeline import MAX_RETRIES, PreviewPipeline
from livepreview.schemas import Session
from livepreview.state import SessionStore, create_initial_state
from livepreview.transpiler.babel import Transpiler
from livepreview.transpiler.loader import TranspilerLoader

from conftest import HELLO_ES5, BundledBabel, PassthroughCompiler, loader_for


def make_pipeline(source=HELLO_ES5, compiler=None, gate=None, **session_fields):
    compiler = compiler or PassthroughCompiler()
    store = SessionStore(Session(source_code=source, **session_fields))
    pipeline = PreviewPipeline(
        store,
        transpiler=Transpiler(loader_for(compiler, gate)),
        properties={"name": "World"},
    )
    return pipeline, store, compiler


class TestRouting:
    def test_error_routes_to_end(self):
        state = create_initial_state("x")
        state["error"] = "Error during transpilation: nope"
        assert after_transpile_route(state) == "end"

    def test_compiled_routes_to_execute(self):
        state = create_initial_state("x")
        state["compiled"] = "module.exports = 1;"
        assert after_transpile_route(state) == "execute_node"


class TestTrigger:
    def test_idle_with_source_triggers(self):
        pipeline, _, _ = make_pipeline()
        assert pipeline.should_render()

    @pytest.mark.parametrize("fields", [
        {"status": "ready"},
        {"status": "loading"},
        {"status": "error"},
        {"is_updating": True},
    ])
    def test_guarded_states_do_not_trigger(self, fields):
        pipeline, _, _ = make_pipeline(**fields)
        assert not pipeline.should_render()

    def test_blank_source_does_not_trigger(self):
        pipeline, _, _ = make_pipeline(source="   \n ")
        assert not pipeline.should_render()

    @pytest.mark.asyncio
    async def test_maybe_render_skips_while_updating(self):
        pipeline, store, compiler = make_pipeline(is_updating=True)
        assert await pipeline.maybe_render() is False
        assert compiler.sources == []
        assert store.snapshot.status == "idle"


class TestRenderCycle:
    @pytest.mark.asyncio
    async def test_success_passes_through_loading_to_ready(self):
        pipeline, store, _ = make_pipeline()
        statuses = []
        store.subscribe(lambda s: statuses.append(s.status))

        snapshot = await pipeline.render()

        assert statuses[0] == "loading"
        assert snapshot.status == "ready"
        assert snapshot.error is None
        assert snapshot.preview.html == "<p>Hello World</p>"

    @pytest.mark.asyncio
    async def test_compile_failure_ends_in_error_with_source_unchanged(self):
        source = "<<broken>> module.exports = A;"
        pipeline, store, _ = make_pipeline(source=source)

        snapshot = await pipeline.render()

        assert snapshot.status == "error"
        assert snapshot.error.startswith("Error during transpilation:")
        assert snapshot.source_code == source
        assert snapshot.preview is None

    @pytest.mark.asyncio
    async def test_missing_export_ends_in_error(self):
        pipeline, _, _ = make_pipeline(source='function A() { return React.createElement("i", null); }')
        snapshot = await pipeline.render()
        assert snapshot.status == "error"
        assert snapshot.error.startswith("Runtime error:")
        assert snapshot.preview is None

    @pytest.mark.asyncio
    async def test_load_failure_ends_in_error(self):
        async def factory():
            raise OSError("cdn down")

        store = SessionStore(Session(source_code=HELLO_ES5))
        pipeline = PreviewPipeline(store, transpiler=Transpiler(TranspilerLoader(factory=factory)))

        snapshot = await pipeline.render()
        assert snapshot.status == "error"
        assert "cdn down" in snapshot.error

    @pytest.mark.asyncio
    async def test_stale_result_is_discarded(self):
        gate = asyncio.Event()
        pipeline, store, _ = make_pipeline(gate=gate)

        task = asyncio.ensure_future(pipeline.render())
        await asyncio.sleep(0)
        store.update({"source_code": 'module.exports = function B() { return "newer"; };'})
        gate.set()
        await task

        assert store.snapshot.preview is None
        assert store.snapshot.source_code.endswith('return "newer"; };')

    @pytest.mark.asyncio
    async def test_jsx_scenario(self):
        pipeline, _, _ = make_pipeline(
            source="function A(){return <div>Hi</div>;} module.exports = A;",
            compiler=BundledBabel(),
        )
        snapshot = await pipeline.render()
        assert snapshot.status == "ready"
        assert snapshot.preview.html == "<div>Hi</div>"


class TestRetry:
    @pytest.mark.asyncio
    async def test_ceiling_resets_counter_without_rendering(self):
        pipeline, store, compiler = make_pipeline(source="<<broken>>")
        await pipeline.render()
        assert store.snapshot.status == "error"

        for attempt in range(1, MAX_RETRIES + 1):
            assert await pipeline.retry() is True
            assert store.snapshot.retry_count == attempt
        assert len(compiler.sources) == 1 + MAX_RETRIES

        assert await pipeline.retry() is False
        assert store.snapshot.retry_count == 0
        assert store.snapshot.status == "error"
        assert len(compiler.sources) == 1 + MAX_RETRIES

    @pytest.mark.asyncio
    async def test_retry_only_applies_in_error(self):
        pipeline, store, compiler = make_pipeline()
        await pipeline.render()
        assert await pipeline.retry() is False
        assert store.snapshot.retry_count == 0
        assert len(compiler.sources) == 1

    @pytest.mark.asyncio
    async def test_retry_can_recover(self):
        attempts = []

        class Flaky(PassthroughCompiler):
            def transform(self, source, *, presets, filename):
                attempts.append(1)
                if len(attempts) == 1:
                    raise Exception("transient")
                return source

        pipeline, store, _ = make_pipeline(compiler=Flaky())
        await pipeline.render()
        assert store.snapshot.status == "error"

        assert await pipeline.retry() is True
        assert store.snapshot.status == "ready"
        assert store.snapshot.retry_count == 1


class TestUnexpectedFaults:
    @pytest.mark.asyncio
    async def test_crash_inside_graph_ends_in_error(self):
        class Crashing:
            def execute(self, compiled_source, properties=None):
                raise ValueError("sandbox crashed")

        store = SessionStore(Session(source_code=HELLO_ES5))
        pipeline = PreviewPipeline(
            store,
            transpiler=Transpiler(loader_for(PassthroughCompiler())),
            executor=Crashing(),
        )

        snapshot = await pipeline.render()

        assert snapshot.status == "error"
        assert snapshot.error == "Render failed: sandbox crashed"
        assert snapshot.preview is None

    @pytest.mark.asyncio
    async def test_result_discarded_when_status_moved_on(self):
        gate = asyncio.Event()
        pipeline, store, _ = make_pipeline(gate=gate)

        task = asyncio.ensure_future(pipeline.render())
        await asyncio.sleep(0)
        store.update({"status": "error", "error": "recorded elsewhere"})
        gate.set()
        await task

        assert store.snapshot.status == "error"
        assert store.snapshot.error == "recorded elsewhere"
        assert store.snapshot.preview is None
