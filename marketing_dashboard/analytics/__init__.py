"""Aggregation, rollups and the per-source pipelines."""
from .aggregate import summarize, bucket_by_date, sort_daily, parse_bucket_date
from .pipeline import process_ads, extract_notes, run_pipeline
