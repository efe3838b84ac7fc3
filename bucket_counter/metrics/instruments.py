from bucket_counter.core.metrics import get_counter, get_histogram

SERVICE = "bucket_counter"

# Writes
EVENTS_RECORDED_TOTAL = get_counter(
    "events_recorded_total",
    "Events written to a bucket series set.",
    SERVICE,
)
EXPIRY_ERRORS_SUPPRESSED_TOTAL = get_counter(
    "expiry_errors_suppressed_total",
    "Expiry refresh failures logged and ignored (propagation disabled).",
    SERVICE,
)

# Store failures, by primitive
STORE_ERRORS_TOTAL = get_counter(
    "store_errors_total",
    "Store primitive failures surfaced to callers.",
    SERVICE,
    labelnames=("operation",),
)

# Reads
RANGE_QUERY_LATENCY_SECONDS = get_histogram(
    "range_query_latency_seconds",
    "Latency of range queries across all buckets spanned.",
    SERVICE,
)
RANGE_BUCKETS_SCANNED = get_histogram(
    "range_buckets_scanned",
    "Number of buckets queried per range call.",
    SERVICE,
    buckets=(1, 2, 5, 10, 30, 60, 120, 360, 1440),
)
