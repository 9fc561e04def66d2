"""End-to-end tests for the preview controller pipeline."""

from __future__ import annotations

import asyncio

from apipreview.models.annotation import AnnotationKind
from apipreview.models.build import BuildResult
from apipreview.models.errors import YamlErrorDetail
from apipreview.models.status import StatusCode
from apipreview.pipeline.controller import DOCUMENT_KEY
from apipreview.service.builder import YamlDocumentBuilder
from tests.conftest import SAMPLE_API_YAML, ScriptedBuilder, failure, success

OK = success(specs={"paths": {}}, errors=None, warnings=[])


class TestChangeGating:
    async def test_first_change_builds(self, make_controller, store) -> None:
        builder = ScriptedBuilder(OK)
        controller = make_controller(builder)
        store.save(DOCUMENT_KEY, "a: 1")
        await controller.drain()
        assert builder.calls == ["a: 1"]
        assert store.get("progress") == "success-process"

    async def test_live_render_off_defers_after_first_result(
        self, make_controller, store, preferences
    ) -> None:
        builder = ScriptedBuilder(OK)
        controller = make_controller(builder)
        store.save(DOCUMENT_KEY, "v1")
        await controller.drain()

        preferences.set("liveRender", False)
        for text in ("v2", "v3", "v4"):
            store.save(DOCUMENT_KEY, text)
            await controller.drain()

        assert builder.calls == ["v1"]
        assert controller.context.is_dirty is True
        assert controller.context.status is StatusCode.PROGRESS_UNSAVED
        assert store.get("progress") == "progress-unsaved"

    async def test_live_render_off_force_builds(self, make_controller, preferences) -> None:
        builder = ScriptedBuilder(OK)
        controller = make_controller(builder)
        preferences.set("liveRender", False)
        await controller.update("v1")
        await controller.update("v2", force=True)
        assert builder.calls == ["v1", "v2"]
        assert controller.context.status is StatusCode.SUCCESS_PROCESS

    async def test_live_render_off_rebuilds_after_failure(self, make_controller, preferences) -> None:
        builder = ScriptedBuilder(failure(errors=[]), OK)
        controller = make_controller(builder)
        preferences.set("liveRender", False)
        controller.update("v1")
        await controller.drain()
        controller.update("v2")
        await controller.drain()
        # A failure leaves no prior result, so the gate lets the next change through.
        assert builder.calls == ["v1", "v2"]

    async def test_load_latest_forces_and_clears_dirty(self, make_controller, store, preferences) -> None:
        builder = ScriptedBuilder(OK)
        controller = make_controller(builder)
        store.save(DOCUMENT_KEY, "v1")
        await controller.drain()
        preferences.set("liveRender", False)
        store.save(DOCUMENT_KEY, "v2")
        assert controller.context.is_dirty

        outcome = await controller.load_latest()
        assert outcome is not None
        assert builder.calls == ["v1", "v2"]
        assert controller.context.is_dirty is False
        assert controller.context.status is StatusCode.SUCCESS_PROCESS


class TestHealthGating:
    async def test_unhealthy_changes_nothing(self, make_controller, store, editor, health) -> None:
        builder = ScriptedBuilder(failure(errors=[{"message": "e1"}]))
        controller = make_controller(builder)
        store.save(DOCUMENT_KEY, "v1")
        await controller.drain()
        before_status = store.get("progress")
        before_annotations = editor.annotations

        health.healthy = False
        assert controller.update("v2", force=True) is None
        await controller.drain()

        assert builder.calls == ["v1"]
        assert store.get("progress") == before_status
        assert editor.annotations == before_annotations

    async def test_unhealthy_before_first_build(self, make_controller, store, editor, health) -> None:
        health.healthy = False
        controller = make_controller(ScriptedBuilder(OK))
        store.save(DOCUMENT_KEY, "v1")
        assert controller.context.status is None
        assert store.get("progress") is None
        assert editor.calls == []


class TestClassification:
    async def test_yaml_failure(self, make_controller, editor) -> None:
        controller = make_controller(ScriptedBuilder(failure(errors=[{"yamlError": {"message": "X"}}], warnings=[])))
        await controller.update("v")
        assert controller.context.status is StatusCode.ERROR_YAML
        assert editor.calls == [("yaml", YamlErrorDetail(message="X"))]
        assert controller.context.specs is None

    async def test_swagger_failure(self, make_controller, editor, store) -> None:
        controller = make_controller(
            ScriptedBuilder(failure(errors=[{"message": "e1"}, {"message": "e2"}], warnings=[]))
        )
        await controller.update("v")
        assert store.get("progress") == "error-swagger"
        assert [(c[1].message, c[2]) for c in editor.calls if c[0] == "swagger"] == [
            ("e1", "error"),
            ("e2", "error"),
        ]
        assert len(controller.context.errors) == 2

    async def test_general_failures(self, make_controller, editor, store) -> None:
        for payload in ({"errors": [], "warnings": []}, {"errors": "not-an-array"}):
            editor.calls.clear()
            controller = make_controller(ScriptedBuilder(failure(**payload)))
            await controller.update("v")
            assert store.get("progress") == "error-general"
            assert [c for c in editor.calls if c[0] != "clear"] == []

    async def test_unexpected_builder_fault_is_general(self, make_controller, store) -> None:
        controller = make_controller(ScriptedBuilder(RuntimeError("backend exploded")))
        outcome = await controller.update("v")
        assert outcome.result.errors is None
        assert store.get("progress") == "error-general"

    async def test_success_with_warning(self, make_controller, editor, tags) -> None:
        result = success(
            specs={"paths": {"/a": {"get": {"tags": ["t1"]}}}},
            errors=None,
            warnings=[{"message": "w1"}],
        )
        controller = make_controller(ScriptedBuilder(result))
        await controller.update("v")
        assert controller.context.status is StatusCode.SUCCESS_PROCESS
        assert controller.context.errors is None
        assert [c[0] for c in editor.calls] == ["clear", "swagger"]
        assert editor.calls[1][2] == "warning"
        assert editor.annotations[0].type is AnnotationKind.WARNING
        assert [t.name for t in tags.get_all_tags()] == ["t1"]

    async def test_failure_without_specs_keeps_tags(self, make_controller, tags) -> None:
        builder = ScriptedBuilder(success(specs={"tags": [{"name": "kept"}]}), failure(errors=[]))
        controller = make_controller(builder)
        await controller.update("v1")
        await controller.update("v2")
        assert [t.name for t in tags.get_all_tags()] == ["kept"]
        assert controller.context.specs is None


class TestOrdering:
    async def test_last_completion_wins(self, make_controller, store) -> None:
        builder = ScriptedBuilder(
            failure(errors=[{"message": "stale"}]),
            BuildResult(specs={"paths": {}}),
            gated=True,
        )
        controller = make_controller(builder)
        first = controller.update("old")
        second = controller.update("new")
        while len(builder.calls) < 2:
            await asyncio.sleep(0)

        builder.release(1)
        await second
        assert store.get("progress") == "success-process"

        builder.release(0)
        await first
        # The older request finished last, so its failure is what remains.
        assert store.get("progress") == "error-swagger"
        assert controller.context.builds_started == 2
        assert controller.context.builds_completed == 2


class TestFocusEdit:
    async def test_focus_moves_cursor(self, make_controller, store, editor) -> None:
        controller = make_controller(YamlDocumentBuilder())
        store.save(DOCUMENT_KEY, SAMPLE_API_YAML)
        await controller.drain()
        line = controller.focus_edit(["paths", "/orders", "get"])
        assert line is not None
        assert SAMPLE_API_YAML.splitlines()[line - 1].strip() == "get:"
        assert editor.cursor_line == line
        assert editor.focused

    async def test_focus_unknown_path(self, make_controller, editor) -> None:
        controller = make_controller(YamlDocumentBuilder())
        controller.update(SAMPLE_API_YAML)
        await controller.drain()
        assert controller.focus_edit(["paths", "/nope"]) is None
        assert editor.cursor_line is None

    async def test_focus_on_broken_text(self, make_controller) -> None:
        controller = make_controller(YamlDocumentBuilder())
        controller.update("a: [broken")
        await controller.drain()
        assert controller.focus_edit(["a"]) is None

    async def test_real_builder_pipeline(self, make_controller, store, editor) -> None:
        controller = make_controller(YamlDocumentBuilder())
        store.save(DOCUMENT_KEY, "a: [broken\n")
        await controller.drain()
        assert store.get("progress") == "error-yaml"
        store.save(DOCUMENT_KEY, SAMPLE_API_YAML)
        await controller.drain()
        assert store.get("progress") == "success-process"
        assert [a.type for a in editor.annotations] == [AnnotationKind.WARNING]


class TestDeeplyNestedDocument:
    DEEP = "a: " + "[" * 3000 + "]" * 3000 + "\n"

    async def test_build_reports_structural_error(self, make_controller, store, editor) -> None:
        controller = make_controller(YamlDocumentBuilder())
        store.save(DOCUMENT_KEY, self.DEEP)
        await controller.drain()
        assert store.get("progress") == "error-yaml"
        assert [c[0] for c in editor.calls] == ["yaml"]
        assert "nesting depth" in editor.annotations[0].text

    async def test_focus_edit_returns_none(self, make_controller, editor) -> None:
        controller = make_controller(YamlDocumentBuilder())
        controller.update(self.DEEP)
        await controller.drain()
        assert controller.focus_edit(["a"]) is None
        assert editor.cursor_line is None
