"""Render the markup and typesetting documents for a mineral report."""

from __future__ import annotations

import re
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any, Callable

from jinja2 import BaseLoader, Environment, StrictUndefined, TemplateError, UndefinedError

from mineralsys.catalog.models import Attribute, MineralRecord

from .analysis import field_label
from .errors import RenderError
from .models import AnalysisContext, Metrics, RenderedDocuments
from .templates import MARKUP_TEMPLATE, TYPESET_TEMPLATE

_LATEX_SPECIALS = {
    "\\": r"\textbackslash{}",
    "&": r"\&",
    "%": r"\%",
    "$": r"\$",
    "#": r"\#",
    "_": r"\_",
    "{": r"\{",
    "}": r"\}",
    "~": r"\textasciitilde{}",
    "^": r"\textasciicircum{}",
}
_LATEX_PATTERN = re.compile("|".join(re.escape(char) for char in _LATEX_SPECIALS))
_SAFE_IMAGE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*\.(?:png|jpe?g|pdf)$", re.IGNORECASE)
_UNDEFINED_NAME = re.compile(r"'([^']+)' (?:is undefined|has no attribute '([^']+)')")
_RTL_LANGUAGES = {"ar", "fa", "he", "ur"}


class Verbatim(str):
    """A value inserted into the typesetting document without escaping."""


def latex_escape(text: str) -> str:
    """Escape LaTeX control characters in a single pass."""

    return _LATEX_PATTERN.sub(lambda match: _LATEX_SPECIALS[match.group()], text)


def _latex_finalize(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Verbatim):
        return str(value)
    return latex_escape(str(value))


def _typeset_environment() -> Environment:
    return Environment(
        loader=BaseLoader(),
        block_start_string=r"\BLOCK{",
        block_end_string="}",
        variable_start_string=r"\VAR{",
        variable_end_string="}",
        comment_start_string=r"\#{",
        comment_end_string="}",
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
        finalize=_latex_finalize,
    )


def _markup_environment() -> Environment:
    return Environment(
        loader=BaseLoader(),
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )


class DocumentRenderer:
    """Fill the markup and typesetting templates from one analysis result.

    Both documents are produced before anything is returned, so a failure in
    either template yields a :class:`RenderError` and no document at all.
    """

    def __init__(
        self,
        *,
        markup_template: str | None = None,
        typeset_template: str | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._markup = _markup_environment().from_string(markup_template or MARKUP_TEMPLATE)
        self._typeset = _typeset_environment().from_string(typeset_template or TYPESET_TEMPLATE)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def render(
        self,
        record: MineralRecord,
        context: AnalysisContext,
        metrics: Metrics,
        summary: str,
        recommendations: Sequence[str],
    ) -> RenderedDocuments:
        _check_shapes(context, metrics, summary, recommendations)
        values = self._template_values(record, context.resolved(), metrics, summary, recommendations)
        markup = self._fill(self._markup, values, document="markup")
        typeset = self._fill(self._typeset, values, document="typeset")
        return RenderedDocuments(markup=markup, typeset=typeset)

    # ------------------------------------------------------------------
    def _fill(self, template: Any, values: dict[str, Any], *, document: str) -> str:
        try:
            return template.render(**values)
        except UndefinedError as exc:
            raise RenderError(_undefined_field(exc, default=document), str(exc)) from exc
        except (TemplateError, TypeError, ValueError) as exc:
            raise RenderError(document, str(exc)) from exc

    def _template_values(
        self,
        record: MineralRecord,
        context: AnalysisContext,
        metrics: Metrics,
        summary: str,
        recommendations: Sequence[str],
    ) -> dict[str, Any]:
        language = context.language
        return {
            "lang_code": language,
            "lang_dir": "rtl" if language in _RTL_LANGUAGES else "ltr",
            "generated_utc": self._clock().strftime("%Y-%m-%d %H:%M UTC"),
            "folder_name": record.folder_name,
            "mineral_name": record.name(language),
            "mineral_family": record.family,
            "description": record.description(language),
            "notes": record.notes,
            "image_file": _image_reference(record.image_file),
            "audience": context.audience,
            "purpose": context.purpose,
            "site_context": context.site_context,
            "properties": _property_rows(record, metrics),
            "completeness": f"{metrics.completeness * 100:.0f}",
            "element_breakdown": [
                {"name": share.name, "percent": f"{share.percent:.2f}"} for share in metrics.element_breakdown
            ],
            "summary": summary,
            "recommendations": list(recommendations),
        }


def _check_shapes(context: Any, metrics: Any, summary: Any, recommendations: Any) -> None:
    if not isinstance(context, AnalysisContext):
        raise RenderError("context", f"expected AnalysisContext, got {type(context).__name__}")
    if not isinstance(metrics, Metrics):
        raise RenderError("metrics", f"expected Metrics, got {type(metrics).__name__}")
    if not isinstance(summary, str):
        raise RenderError("summary", f"expected text, got {type(summary).__name__}")
    if isinstance(recommendations, (str, bytes)) or not isinstance(recommendations, Sequence):
        raise RenderError(
            "recommendations",
            f"expected a sequence of strings, got {type(recommendations).__name__}",
        )
    for index, item in enumerate(recommendations):
        if not isinstance(item, str):
            raise RenderError(f"recommendations[{index}]", f"expected text, got {type(item).__name__}")


def _property_rows(record: MineralRecord, metrics: Metrics) -> list[dict[str, str]]:
    bands = {
        Attribute.HARDNESS_MOHS.value: metrics.hardness_band,
        Attribute.DENSITY_G_CM3.value: metrics.density_band,
    }
    rows: list[dict[str, str]] = []
    for attribute in Attribute:
        display = record.text(attribute)
        if display is None:
            display = "not recorded"
        elif bands.get(attribute.value):
            display = f"{display} ({bands[attribute.value]})"
        rows.append({"label": field_label(attribute.value), "value": display})
    known = {attribute.value for attribute in Attribute}
    for name in sorted(record.attributes):
        if name not in known:
            rows.append({"label": field_label(name), "value": record.attributes[name].display()})
    return rows


def _image_reference(image_file: str | None) -> Verbatim | None:
    if image_file and _SAFE_IMAGE.match(image_file):
        return Verbatim(image_file)
    return None


def _undefined_field(exc: UndefinedError, *, default: str) -> str:
    match = _UNDEFINED_NAME.search(str(exc.message or ""))
    if match is None:
        return default
    return match.group(2) or match.group(1)


__all__ = ["DocumentRenderer", "Verbatim", "latex_escape"]
