"""
Shortlink Stats - numeric primitives shared by attribution and experiments.

Provides:
- Standard normal quantiles, critical values and tail probabilities
- Conversion-rate, pooled-proportion and standard-error helpers
- Arcsine transform and Cohen's h effect size

Usage:
    from shortlink.stats import z_critical, two_tailed_p_value, cohens_h

    z = z_critical(95.0)  # 1.959964
    p = two_tailed_p_value(2.72)
    h = cohens_h(0.05, 0.08)
"""

from shortlink.stats.normal import (
    inverse_normal,
    two_tailed_p_value,
    z_critical,
    z_power,
)
from shortlink.stats.proportions import (
    arcsine_transform,
    binomial_log_likelihood,
    cohens_h,
    conversion_rate,
    is_open_rate,
    pooled_proportion,
    pooled_standard_error,
    unpooled_standard_error,
)

__all__ = [
    # Normal distribution
    "inverse_normal",
    "z_critical",
    "z_power",
    "two_tailed_p_value",
    # Proportions
    "conversion_rate",
    "pooled_proportion",
    "pooled_standard_error",
    "unpooled_standard_error",
    "is_open_rate",
    "arcsine_transform",
    "cohens_h",
    "binomial_log_likelihood",
]
