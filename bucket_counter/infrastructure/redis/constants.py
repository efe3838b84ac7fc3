# Per-bucket keys. Existing deployments read these, keep them byte-identical.
COUNTER_KEY = "{name}:counter:{bucket_start}"
SERIES_KEY = "{name}:ts:{bucket_start}"

# Sorted-set member naming one recorded event
SERIES_MEMBER = "{name}:{counter_value}"
