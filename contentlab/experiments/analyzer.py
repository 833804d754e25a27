"""Heuristic verdict for an A/B test from its recorded results.

The confidence figure is a rule of thumb built from the relative CTR gap and
the smaller sample size. It is not a two-proportion z-test and should be read
as "how sure are we, roughly" rather than a p-value.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from contentlab.analysis.text_metrics import round_half_up
from contentlab.models.experiment import ExperimentVerdict

if TYPE_CHECKING:
    from contentlab.models.experiment import Experiment, VariantResult

logger = structlog.get_logger()

MIN_SAMPLE_SIZE = 100
SIGNIFICANT_CONFIDENCE = 95
PROMISING_CONFIDENCE = 80
MAX_BASE_CONFIDENCE = 95
MAX_SAMPLE_BONUS = 20
SAMPLE_BONUS_SCALE = 1000
MIN_DECISION_IMPRESSIONS = 1000


def significance(winner: VariantResult, runner_up: VariantResult) -> float:
    """Confidence (0-100) that *winner* really beats *runner_up*.

    Zero until both sides have MIN_SAMPLE_SIZE impressions. The raw formula
    can exceed 100, so the result is clamped.
    """
    if winner.impressions < MIN_SAMPLE_SIZE or runner_up.impressions < MIN_SAMPLE_SIZE:
        return 0.0

    average_rate = (winner.ctr + runner_up.ctr) / 2
    if average_rate > 0:
        base = min(MAX_BASE_CONFIDENCE, abs(winner.ctr - runner_up.ctr) / average_rate * 100)
    else:
        base = 0.0
    smaller_sample = min(winner.impressions, runner_up.impressions)
    bonus = min(MAX_SAMPLE_BONUS, smaller_sample / SAMPLE_BONUS_SCALE * MAX_SAMPLE_BONUS)
    return float(min(100, max(0, round_half_up(base + bonus))))


def _insights(
    results: list[VariantResult], winner: VariantResult, runner_up: VariantResult
) -> list[str]:
    insights: list[str] = []

    if runner_up.engagement_score:
        gain = (winner.engagement_score - runner_up.engagement_score) / runner_up.engagement_score
        improvement = int(round_half_up(gain * 100))
        insights.append(f"Winner performed {improvement}% better than runner-up")
    elif winner.engagement_score:
        insights.append("Winner recorded engagement while the runner-up recorded none")
    else:
        insights.append("No variant has recorded engagement yet")

    if winner.ctr > runner_up.ctr:
        ctr_gap = round_half_up(winner.ctr - runner_up.ctr, 2)
        insights.append(f"Winner had {ctr_gap}% higher click-through rate")
    if winner.conversion_rate > runner_up.conversion_rate:
        conversion_gap = round_half_up(winner.conversion_rate - runner_up.conversion_rate, 2)
        insights.append(f"Winner had {conversion_gap}% higher conversion rate")

    total_impressions = sum(r.impressions for r in results)
    insights.append(f"Test reached {total_impressions} total impressions")
    return insights


def _recommendations(
    experiment: Experiment, winner: VariantResult, confidence: float
) -> list[str]:
    recommendations: list[str] = []

    if confidence >= SIGNIFICANT_CONFIDENCE:
        recommendations.append(
            "Implement the winning variant - results are statistically significant"
        )
    elif confidence >= PROMISING_CONFIDENCE:
        recommendations.append(
            "Consider implementing the winning variant, but monitor results closely"
        )
    else:
        recommendations.append("Continue testing - results are not yet statistically significant")

    if winner.impressions < MIN_DECISION_IMPRESSIONS:
        recommendations.append("Gather more data before making final decisions")
    if len(experiment.variants) == 2:
        recommendations.append(
            "Consider testing additional variants to find further improvements"
        )
    recommendations.append("Apply learnings from this test to future content creation")
    return recommendations


def analyze_experiment_results(experiment: Experiment) -> ExperimentVerdict:
    """Pick a winner candidate and judge how trustworthy it is.

    Advisory only: the experiment is not modified, and ``winner`` is set only
    when confidence reaches SIGNIFICANT_CONFIDENCE.
    """
    if len(experiment.results) < 2:
        return ExperimentVerdict(
            winner=None,
            confidence=0.0,
            insights=["Insufficient data for analysis"],
            recommendations=["Continue running the test to gather more data"],
        )

    ranked = sorted(experiment.results, key=lambda r: r.engagement_score, reverse=True)
    winner, runner_up = ranked[0], ranked[1]
    confidence = significance(winner, runner_up)

    verdict = ExperimentVerdict(
        winner=winner.variant_id if confidence >= SIGNIFICANT_CONFIDENCE else None,
        confidence=confidence,
        insights=_insights(experiment.results, winner, runner_up),
        recommendations=_recommendations(experiment, winner, confidence),
    )
    logger.debug(
        "Experiment analyzed",
        experiment_id=experiment.id,
        candidate=winner.variant_id,
        confidence=confidence,
    )
    return verdict
