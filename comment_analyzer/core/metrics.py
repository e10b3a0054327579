"""Prometheus metrics for the dispatcher.

All collectors are updated from the dispatcher worker only.
"""

from prometheus_client import Counter, Gauge

SUBMISSIONS = Counter(
    "comment_analyzer_submissions_total",
    "Submissions seen by the dispatcher",
    ["priority", "outcome"],
)

RELEASED = Counter(
    "comment_analyzer_released_total",
    "Responses released to the caller",
    ["priority", "status"],
)

TIER_DEPTH = Gauge(
    "comment_analyzer_tier_depth",
    "In-flight calls held per priority tier",
    ["priority"],
)

PACER_TICKS = Counter(
    "comment_analyzer_pacer_ticks_total",
    "Pacer ticks by outcome",
    ["result"],
)
