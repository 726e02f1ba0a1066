"""Tests for the host build pipeline."""

from __future__ import annotations

from dataclasses import fields

from csp_html.pipeline import (
    BuildContext,
    BuildPipeline,
    GeneratedDocument,
    HostApiVersion,
)


def _docs(*names):
    return [GeneratedDocument(name=name, html=f"<p>{name}</p>") for name in names]


class TestBuildContext:
    def test_build_id_generated(self):
        ctx = BuildContext()
        assert len(ctx.build_id) == 8

    def test_build_id_kept(self):
        assert BuildContext(build_id="abc").build_id == "abc"

    def test_fields(self):
        assert [f.name for f in fields(BuildContext)] == ["build_id", "errors", "policies"]

    def test_report_error(self):
        ctx = BuildContext()
        error = ValueError("bad")
        ctx.report_error(error)
        assert ctx.errors == [error]


class TestHostApiVersion:
    def test_hooks_version_uses_before_emit(self):
        assert BuildPipeline(HostApiVersion.HOOKS).html_hook == "before_emit"

    def test_legacy_version_uses_after_html_processing(self):
        assert BuildPipeline(HostApiVersion.LEGACY).html_hook == "after_html_processing"

    def test_plugin_registers_on_version_hook(self, make_plugin):
        for version, hook in [
            (HostApiVersion.HOOKS, "before_emit"),
            (HostApiVersion.LEGACY, "after_html_processing"),
        ]:
            pipeline = BuildPipeline(version)
            make_plugin().apply(pipeline)
            assert len(pipeline.hooks(hook)) == 1

    def test_legacy_build_injects_policy(self, make_plugin, run_build):
        doc = GeneratedDocument(name="a.html", html="<html><head></head></html>")
        docs, context = run_build(make_plugin(), doc, api_version=HostApiVersion.LEGACY)
        assert 'http-equiv="Content-Security-Policy"' in docs["a.html"].html
        assert context.policies["a.html"]


class TestBuildPipeline:
    def test_hooks_run_in_order(self):
        pipeline = BuildPipeline()
        pipeline.tap("before_emit", lambda doc, ctx: GeneratedDocument(doc.name, doc.html + "1"))
        pipeline.tap("before_emit", lambda doc, ctx: GeneratedDocument(doc.name, doc.html + "2"))

        emitted, _ = pipeline.run(_docs("a.html"))
        assert emitted[0].html == "<p>a.html</p>12"

    def test_none_result_keeps_document(self):
        pipeline = BuildPipeline()
        pipeline.tap("before_emit", lambda doc, ctx: None)
        emitted, _ = pipeline.run(_docs("a.html"))
        assert emitted[0].html == "<p>a.html</p>"

    def test_other_hooks_not_run(self):
        pipeline = BuildPipeline(HostApiVersion.HOOKS)
        pipeline.tap("after_html_processing", lambda doc, ctx: GeneratedDocument(doc.name, "changed"))
        emitted, _ = pipeline.run(_docs("a.html"))
        assert emitted[0].html == "<p>a.html</p>"

    def test_hook_error_recorded_and_siblings_processed(self):
        def hook(doc, ctx):
            if doc.name == "bad.html":
                raise RuntimeError("boom")
            return GeneratedDocument(doc.name, "ok")

        pipeline = BuildPipeline()
        pipeline.tap("before_emit", hook)
        emitted, ctx = pipeline.run(_docs("bad.html", "good.html"))

        assert [d.html for d in emitted] == ["<p>bad.html</p>", "ok"]
        assert len(ctx.errors) == 1
        assert str(ctx.errors[0]) == "boom"

    def test_context_passed_through(self):
        ctx = BuildContext(build_id="fixed")
        seen = []
        pipeline = BuildPipeline()
        pipeline.tap("before_emit", lambda doc, c: seen.append(c.build_id))
        _, returned = pipeline.run(_docs("a.html", "b.html"), ctx)
        assert returned is ctx
        assert seen == ["fixed", "fixed"]
