"""Host build pipeline: generated documents, build context and ordered hooks."""

from __future__ import annotations

import enum
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4

import structlog

logger = structlog.get_logger()


class HostApiVersion(enum.Enum):
    """Hook API the host exposes, supplied by the host at integration time."""

    LEGACY = "legacy"
    HOOKS = "hooks"


# Hook that receives a document's final HTML, per host API version
HTML_HOOKS: dict[HostApiVersion, str] = {
    HostApiVersion.LEGACY: "after_html_processing",
    HostApiVersion.HOOKS: "before_emit",
}


@dataclass
class GeneratedDocument:
    """A rendered document before final emission."""

    name: str
    html: str
    plugin_options: dict[str, Any] = field(default_factory=dict)
    xhtml: bool = False


@dataclass
class BuildContext:
    """Mutable context shared by every hook during one build."""

    build_id: str = ""
    errors: list[Exception] = field(default_factory=list)
    policies: dict[str, str | None] = field(default_factory=dict)

    def __post_init__(self):
        if not self.build_id:
            self.build_id = uuid4().hex[:8]

    def report_error(self, error: Exception) -> None:
        """Record a non-fatal build error."""
        self.errors.append(error)


Hook = Callable[[GeneratedDocument, BuildContext], GeneratedDocument | None]


class BuildPipeline:
    """Ordered hooks run over every generated document."""

    def __init__(self, api_version: HostApiVersion = HostApiVersion.HOOKS) -> None:
        self.api_version = api_version
        self._hooks: dict[str, list[Hook]] = {}

    @property
    def html_hook(self) -> str:
        return HTML_HOOKS[self.api_version]

    def tap(self, hook_name: str, fn: Hook) -> None:
        """Register a function on a named hook."""
        self._hooks.setdefault(hook_name, []).append(fn)
        logger.debug("pipeline_hook_registered", hook=hook_name, api_version=self.api_version.value)

    def hooks(self, hook_name: str) -> list[Hook]:
        return list(self._hooks.get(hook_name, []))

    def process(self, document: GeneratedDocument, context: BuildContext) -> GeneratedDocument:
        """Run a document through every hook on the HTML hook, in order.

        A failing hook is recorded as a build error for this document and
        the remaining hooks still run, so one broken hook doesn't stop the build.
        """
        for fn in self._hooks.get(self.html_hook, []):
            try:
                result = fn(document, context)
            except Exception as exc:
                logger.exception("pipeline_hook_error", document=document.name)
                context.report_error(exc)
                continue
            if result is not None:
                document = result
        return document

    def run(
        self,
        documents: Iterable[GeneratedDocument],
        context: BuildContext | None = None,
    ) -> tuple[list[GeneratedDocument], BuildContext]:
        """Process documents independently and sequentially."""
        context = context or BuildContext()
        emitted = [self.process(document, context) for document in documents]
        logger.info(
            "build_complete",
            build_id=context.build_id,
            documents=len(emitted),
            errors=len(context.errors),
        )
        return emitted, context
