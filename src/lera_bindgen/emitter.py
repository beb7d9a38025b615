"""Rendering of view models and merging into upstream generated files.

The rendered fragment is appended to the UniFFI output between two sentinel
comments. A fragment left by an earlier run is removed first, so running the
generator twice over the same file yields byte-identical output.
"""

import logging
from typing import Any

from jinja2 import (
    Environment,
    PackageLoader,
    StrictUndefined,
    TemplateError,
    select_autoescape,
)

from lera_bindgen.errors import TemplateRenderError
from lera_bindgen.ir import ParsedModel
from lera_bindgen.targets.protocols import TargetLanguage

logger = logging.getLogger(__name__)

BEGIN_SENTINEL = "// BEGIN lera generated view models"
END_SENTINEL = "// END lera generated view models"
_SEPARATOR = "\n\n"


def build_environment() -> Environment:
    """Build the Jinja2 environment loading the packaged templates."""
    return Environment(
        loader=PackageLoader("lera_bindgen", "templates"),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        autoescape=select_autoescape(
            enabled_extensions=(), default=False, default_for_string=False
        ),
    )


class CodeEmitter:
    """Renders models for a target and merges them into an upstream file."""

    def __init__(self, environment: Environment | None = None) -> None:
        """Initialise the emitter.

        Args:
            environment: Jinja2 environment (packaged templates when omitted)

        """
        self._environment = environment or build_environment()

    def render(self, target: TargetLanguage, models: list[ParsedModel]) -> str:
        """Render the view model fragment of a target.

        Args:
            target: Target language
            models: Models to render, in discovery order

        Returns:
            Rendered fragment, without sentinels

        Raises:
            TemplateRenderError: If the template is missing or fails

        """
        context = [self._model_context(target, model) for model in models]
        try:
            template = self._environment.get_template(target.template_name)
            return template.render(models=context)
        except TemplateError as e:
            raise TemplateRenderError(
                f"Template rendering failed for {target.name}: {e}"
            ) from e

    def merge(self, target: TargetLanguage, corpus: str, fragment: str) -> str:
        """Merge a rendered fragment into the upstream generated text.

        Any fragment from a previous run is replaced. A corpus written with
        CRLF line endings throughout gets CRLF in the added text as well.
        """
        crlf = _uses_crlf(corpus)
        if crlf:
            corpus = corpus.replace("\r\n", "\n")

        base = target.prepare_corpus(strip_generated_block(corpus))
        body = fragment.strip("\n")
        block = f"{BEGIN_SENTINEL}\n{body}\n{END_SENTINEL}\n"
        merged = f"{base}{_SEPARATOR}{block}"
        return merged.replace("\n", "\r\n") if crlf else merged

    def transform(
        self, target: TargetLanguage, corpus: str, models: list[ParsedModel]
    ) -> str:
        """Render models for a target and merge them into the corpus."""
        for model in models:
            logger.info(
                "%s: %s with %d methods",
                target.name,
                model.model_name,
                len(model.methods),
            )
        return self.merge(target, corpus, self.render(target, models))

    def _model_context(
        self, target: TargetLanguage, model: ParsedModel
    ) -> dict[str, Any]:
        methods = [target.binder.bind(method, model).text for method in model.methods]
        return {
            "model_name": model.model_name,
            "state_name": model.state_name,
            "listener_name": model.listener_name,
            "default_state_fn": model.default_state_fn,
            "samples_state_fn": model.samples_state_fn,
            "enable_samples": model.enable_samples,
            "has_navigator": model.has_navigator,
            "methods": methods,
        }


def strip_generated_block(corpus: str) -> str:
    """Remove a previously appended generated block and its separator.

    Text without a complete sentinel pair is returned unchanged.
    """
    begin = corpus.find(BEGIN_SENTINEL)
    if begin == -1:
        return corpus
    end = corpus.find(END_SENTINEL, begin)
    if end == -1:
        return corpus

    end += len(END_SENTINEL)
    if corpus.startswith("\n", end):
        end += 1

    head = corpus[:begin]
    head = head.removesuffix(_SEPARATOR)
    return head + corpus[end:]


def _uses_crlf(corpus: str) -> bool:
    crlf_count = corpus.count("\r\n")
    return crlf_count > 0 and crlf_count == corpus.count("\n")
