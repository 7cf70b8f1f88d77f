from prometheus_client import Counter, Histogram

# -----------------------
# Pipeline metrics
# -----------------------

PIPELINE_RUNS_TOTAL = Counter(
    "rangeread_pipeline_runs_total",
    "Total pipeline runs"
)

PIPELINE_FAILURES_TOTAL = Counter(
    "rangeread_pipeline_failures_total",
    "Failed pipeline runs by stage",
    ["stage"]
)

PIPELINE_LATENCY_MS = Histogram(
    "rangeread_pipeline_latency_ms",
    "Crop + OCR + extraction latency (ms)",
    buckets=(50, 100, 300, 500, 1000, 2000, 5000, 10000)
)

NUMBERS_EXTRACTED = Histogram(
    "rangeread_numbers_extracted",
    "Numeric tokens found per successful run",
    buckets=(0, 1, 2, 3, 5, 10)
)

# -----------------------
# Review metrics
# -----------------------

INSUFFICIENT_RESULTS_TOTAL = Counter(
    "rangeread_insufficient_results_total",
    "Runs that found fewer than two numbers"
)

REVIEW_OUTCOMES_TOTAL = Counter(
    "rangeread_review_outcomes_total",
    "Confirmed pairs by how they were confirmed",
    ["outcome"]
)

STALE_RESULTS_TOTAL = Counter(
    "rangeread_stale_results_total",
    "Pipeline results discarded because a newer image was submitted"
)
