from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PipelineConfig:
    max_results: int = 10
    candidate_limit: int | None = None  # None keeps every deduplicated place
    insight_limit: int = 3
    blurb_limit: int = 3
    scrape_limit: int = 3
    compare_enrich_limit: int = 5
    estimate_count: int = 8


DEFAULT_PIPELINE_CONFIG = PipelineConfig()
