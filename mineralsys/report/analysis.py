"""Deterministic metrics -> summary -> recommendations chain."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Sequence

from loguru import logger

from mineralsys.catalog.models import Attribute, MineralRecord

from .models import Analysis, AnalysisContext, ElementShare, Metrics

DEFAULT_MAX_RECOMMENDATIONS = 5
ELEMENTS_FIELD = "major_elements_pct"
EXPECTED_FIELDS: tuple[str, ...] = tuple(attribute.value for attribute in Attribute) + (ELEMENTS_FIELD,)

_FIELD_LABELS = {
    Attribute.FORMULA.value: "chemical formula",
    Attribute.HARDNESS_MOHS.value: "Mohs hardness",
    Attribute.DENSITY_G_CM3.value: "density",
    Attribute.CRYSTAL_SYSTEM.value: "crystal system",
    Attribute.COLOR.value: "color",
    Attribute.STREAK.value: "streak",
    Attribute.LUSTER.value: "luster",
    ELEMENTS_FIELD: "major element breakdown",
}


def field_label(name: str) -> str:
    return _FIELD_LABELS.get(name, name.replace("_", " "))


def hardness_band(hardness: float) -> str:
    if hardness < 3.0:
        return "soft"
    if hardness < 6.0:
        return "medium"
    if hardness < 7.5:
        return "hard"
    return "very hard"


def density_band(density: float) -> str:
    if density < 2.6:
        return "light"
    if density < 3.2:
        return "moderate"
    return "dense"


def derive_metrics(record: MineralRecord) -> Metrics:
    """Compute :class:`Metrics` from the record's technical fields only."""

    breakdown = sorted(
        (
            ElementShare(name=name, percent=float(percent))
            for name, percent in record.major_elements_pct.items()
            if name.strip() and math.isfinite(percent)
        ),
        key=lambda share: (-share.percent, share.name),
    )

    populated: list[str] = []
    missing: list[str] = []
    for name in EXPECTED_FIELDS:
        present = bool(breakdown) if name == ELEMENTS_FIELD else record.value(name) is not None
        (populated if present else missing).append(name)

    hardness = record.numeric(Attribute.HARDNESS_MOHS)
    density = record.numeric(Attribute.DENSITY_G_CM3)
    dominant = breakdown[0] if breakdown else None

    return Metrics(
        completeness=len(populated) / len(EXPECTED_FIELDS),
        populated=tuple(populated),
        missing=tuple(missing),
        has_formula=record.value(Attribute.FORMULA) is not None,
        has_hardness=record.value(Attribute.HARDNESS_MOHS) is not None,
        has_density=record.value(Attribute.DENSITY_G_CM3) is not None,
        has_elements=bool(breakdown),
        hardness_band=hardness_band(hardness) if hardness is not None else None,
        density_band=density_band(density) if density is not None else None,
        dominant_element=dominant.name if dominant else None,
        dominant_element_pct=dominant.percent if dominant else None,
        element_breakdown=tuple(breakdown),
    )


def compose_summary(record: MineralRecord, context: AnalysisContext, metrics: Metrics) -> str:
    """Write the narrative summary; audience and purpose always appear verbatim."""

    ctx = context.resolved()
    name = record.name(ctx.language)
    opening = f"For {ctx.audience}"
    if ctx.site_context:
        opening += f" and the {ctx.site_context} context"

    if metrics.is_empty:
        return (
            f"{opening}, {name} has no recorded technical measurements yet. "
            f"Treat this report as a placeholder for {ctx.purpose} until the technical record is completed."
        )

    if metrics.hardness_band and metrics.density_band:
        classification = f"{name} is classified as {metrics.hardness_band} with {metrics.density_band} density behavior."
    elif metrics.hardness_band:
        classification = f"{name} is classified as {metrics.hardness_band} on the Mohs scale."
    elif metrics.density_band:
        classification = f"{name} shows {metrics.density_band} density behavior."
    else:
        classification = f"{name} has no numeric hardness or density measurement on record."

    sentences = [f"{opening}, {classification}"]
    if metrics.dominant_element is not None and metrics.dominant_element_pct is not None:
        sentences.append(
            f"The chemistry is led by {metrics.dominant_element} ({metrics.dominant_element_pct:.1f} wt%)."
        )
    sentences.append(
        f"Technical completeness is {round(metrics.completeness * 100)}% "
        f"({len(metrics.populated)} of {len(EXPECTED_FIELDS)} fields), supporting {ctx.purpose} decisions."
    )
    return " ".join(sentences)


@dataclass(frozen=True, slots=True)
class RecommendationRule:
    """Maps a metrics pattern to a recommendation; ``template`` is a ``str.format`` string."""

    key: str
    condition: Callable[[Metrics, AnalysisContext], bool]
    template: str

    def render(self, fields: dict[str, str]) -> str:
        return self.template.format(**fields)


DEFAULT_RULES: tuple[RecommendationRule, ...] = (
    RecommendationRule(
        "missing-density",
        lambda m, c: not m.has_density,
        "Obtain a density measurement before volumetric estimates for {purpose}.",
    ),
    RecommendationRule(
        "missing-hardness",
        lambda m, c: not m.has_hardness,
        "Obtain a Mohs hardness measurement before sizing comminution or drilling consumables.",
    ),
    RecommendationRule(
        "missing-chemistry",
        lambda m, c: not m.has_elements,
        "Run bulk geochemistry to establish the major element breakdown of {name}.",
    ),
    RecommendationRule(
        "sample-dominant-element",
        lambda m, c: m.dominant_element is not None,
        "Prioritize samples of {name} where {dominant_element} enrichment is strongest.",
    ),
    RecommendationRule(
        "hard-tooling",
        lambda m, c: m.hardness_band in {"hard", "very hard"},
        "Use abrasion-resistant tooling and adjust comminution energy estimates upward.",
    ),
    RecommendationRule(
        "soft-breakage",
        lambda m, c: m.hardness_band in {"soft", "medium"},
        "Validate breakage and weathering rates early, as softer material can bias grade control.",
    ),
    RecommendationRule(
        "dense-separation",
        lambda m, c: m.density_band == "dense",
        "Run density separation testwork to confirm recovery uplift potential in early flowsheets.",
    ),
    RecommendationRule(
        "light-mineralogy",
        lambda m, c: m.density_band in {"light", "moderate"},
        "Combine XRD with geochemistry to avoid over-reliance on density-based separation.",
    ),
    RecommendationRule(
        "site-calibration",
        lambda m, c: bool(c.site_context),
        "Calibrate sampling density to {site_context} conditions before briefing the {audience}.",
    ),
    RecommendationRule(
        "complete-record",
        lambda m, c: bool(m.missing),
        "Complete the remaining technical fields ({missing}) so the {audience} can rely on this report.",
    ),
    RecommendationRule(
        "archive",
        lambda m, c: True,
        "Archive this report against '{purpose}' objectives for reproducible decision records.",
    ),
)


def propose_recommendations(
    record: MineralRecord,
    context: AnalysisContext,
    metrics: Metrics,
    *,
    rules: Sequence[RecommendationRule] = DEFAULT_RULES,
    limit: int = DEFAULT_MAX_RECOMMENDATIONS,
) -> tuple[str, ...]:
    """Evaluate ``rules`` in declaration order and keep the first ``limit`` matches."""

    ctx = context.resolved()
    fields = {
        "name": record.name(ctx.language),
        "audience": ctx.audience,
        "purpose": ctx.purpose,
        "site_context": ctx.site_context,
        "dominant_element": metrics.dominant_element or "",
        "missing": ", ".join(field_label(name) for name in metrics.missing),
    }
    recommendations: list[str] = []
    for rule in rules:
        if len(recommendations) >= limit:
            break
        if rule.condition(metrics, ctx):
            recommendations.append(rule.render(fields))
    return tuple(recommendations)


def analyze(
    record: MineralRecord,
    context: AnalysisContext,
    *,
    rules: Sequence[RecommendationRule] = DEFAULT_RULES,
    limit: int = DEFAULT_MAX_RECOMMENDATIONS,
) -> Analysis:
    """Run the full chain for one record; total over any well-formed record."""

    metrics = derive_metrics(record)
    summary = compose_summary(record, context, metrics)
    recommendations = propose_recommendations(record, context, metrics, rules=rules, limit=limit)
    logger.debug(
        "Analysis for {}: completeness={:.2f}, {} recommendations",
        record.slug,
        metrics.completeness,
        len(recommendations),
    )
    return Analysis(metrics=metrics, summary=summary, recommendations=recommendations)


__all__ = [
    "DEFAULT_MAX_RECOMMENDATIONS",
    "DEFAULT_RULES",
    "EXPECTED_FIELDS",
    "RecommendationRule",
    "analyze",
    "compose_summary",
    "density_band",
    "derive_metrics",
    "field_label",
    "hardness_band",
    "propose_recommendations",
]
