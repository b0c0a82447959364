from __future__ import annotations

COMPLEX_CONTEXT = {
    "heading": "Benchmark Page",
    "description": "Three-level layout chain with includes",
    "nav": [
        {"href": "#intro", "label": "Intro"},
        {"href": "#body", "label": "Body"},
        {"href": "#footer", "label": "Footer"},
    ],
    "footer": "Rendered by wafview benchmarks",
    "article": {
        "title": "Template Engine Performance",
        "subtitle": "Validating claims with reproducible data",
        "sections": [
            {"title": "Overview", "body": "Benchmarking approach and goals."},
            {"title": "Methodology", "body": "Warmups, iterations, and metrics."},
            {"title": "Results", "body": "Layouts, sections and partials."},
        ],
        "tags": ["performance", "benchmark", "layouts"],
    },
}
