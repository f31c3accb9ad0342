from prometheus_client import Counter, Histogram, REGISTRY


# we check if they are already registered to avoid errors during hot reloads or test runs
def get_or_create_metric(name, documentation, metric_type, **kwargs):
    try:
        return metric_type(name, documentation, **kwargs)
    except ValueError:
        # If it already exists, retrieve it from the registry
        return REGISTRY._names_to_collectors[name]


REQUESTS_TOTAL = get_or_create_metric(
    "todo_requests_total",
    "Total requests",
    Counter,
    labelnames=["endpoint", "status"],
)

REQUEST_LATENCY_SECONDS = get_or_create_metric(
    "todo_request_latency_seconds",
    "Request latency",
    Histogram,
    labelnames=["endpoint"],
)

EXTRACTIONS_TOTAL = get_or_create_metric(
    "todo_extractions_total",
    "Extractions by entry point and producing engine",
    Counter,
    labelnames=["entry", "source"],
)

AI_FALLBACKS_TOTAL = get_or_create_metric(
    "todo_ai_fallbacks_total",
    "AI failures answered by the rule engine",
    Counter,
    labelnames=["reason"],
)

TASKS_CREATED_TOTAL = get_or_create_metric(
    "todo_tasks_created_total", "Total task records created from analyses", Counter
)
