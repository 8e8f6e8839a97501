"""
Event Processor Module

Handles everything after detection:
- Event routing/dispatching
- Consumers (JSONL log, CSV transit export)

Receives events via multiprocessing.Queue.
"""

from .csv_writer import csv_writer_consumer
from .dispatcher import dispatch_events
from .json_writer import json_writer_consumer

__all__ = [
    # Consumers
    "csv_writer_consumer",
    # Dispatcher
    "dispatch_events",
    "json_writer_consumer",
]
