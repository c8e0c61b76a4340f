"""Utility functions for round-trip reporting."""

from .dataframe_output import (
    create_batch_dataframe,
    create_round_trip_dataframe,
    export_round_trips_csv,
)

__all__ = [
    "create_batch_dataframe",
    "create_round_trip_dataframe",
    "export_round_trips_csv",
]
