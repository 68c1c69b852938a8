"""Prometheus metrics for notification dispatch."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

notifications_processed_total = Counter(
    "notifications_processed_total",
    "Notifications processed, by channel and outcome (sent, retry, failed)",
    ["channel", "outcome"],
)

push_fallbacks_total = Counter(
    "notification_push_fallbacks_total",
    "Push deliveries redirected to the in-app channel",
    ["reason"],
)

dispatch_pass_duration_seconds = Histogram(
    "notification_dispatch_pass_duration_seconds",
    "Wall time of one dispatch pass, including empty and failed passes",
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0),
)

dispatch_batch_size = Histogram(
    "notification_dispatch_batch_size",
    "Notifications selected per dispatch pass",
    buckets=(0, 1, 5, 10, 20, 30, 40, 50),
)

notifications_cleaned_total = Counter(
    "notifications_cleaned_total",
    "Terminal notifications deleted by the retention cleaner",
)
