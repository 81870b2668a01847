"""Artifact paths and Parquet schemas."""
