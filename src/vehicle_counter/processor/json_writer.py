"""
JSON Writer Consumer

Appends every event to a JSONL log and echoes transits to the console.
"""

import json
import logging
import os
from collections import Counter
from datetime import datetime

from ..utils import SUMMARY_EVENT_INTERVAL
from ..utils.event_schema import (
    EVENT_TYPE_RUN_SUMMARY,
    EVENT_TYPE_TRANSIT_COMPLETED,
    get_event_summary,
)

logger = logging.getLogger(__name__)


def json_writer_consumer(event_queue, config: dict) -> None:
    """
    Consume events until the None sentinel and write them as JSON lines.

    Args:
        event_queue: Queue receiving events
        config: json_dir, console_enabled, console_level
    """
    json_dir = config.get("json_dir", "data")
    os.makedirs(json_dir, exist_ok=True)
    json_path = os.path.join(
        json_dir, f"events_{datetime.now().strftime('%Y%m%d_%H%M%S')}.jsonl"
    )

    level = config.get("console_level", "detailed")
    if not config.get("console_enabled", True):
        level = "silent"

    counts = Counter()
    speeds: dict[str, list[float]] = {}

    logger.info(f"JSON Writer started: {json_path} (console: {level})")

    try:
        with open(json_path, "w", encoding="utf-8") as out:
            for event in iter(event_queue.get, None):
                out.write(json.dumps(event) + "\n")
                out.flush()

                counts[event["event_type"]] += 1
                if event["event_type"] == EVENT_TYPE_TRANSIT_COMPLETED:
                    speeds.setdefault(event["vehicle_class"], []).append(
                        event["speed_kmh"]
                    )

                _echo(event, level, counts, speeds)

    except KeyboardInterrupt:
        logger.info("JSON Writer stopped by user")
    except Exception as e:
        logger.error(f"Error in JSON Writer: {e}", exc_info=True)
    finally:
        logger.info(f"JSON Writer complete: {sum(counts.values())} event(s) -> {json_path}")
        for event_type, count in sorted(counts.items()):
            logger.info(f"  {event_type}: {count}")


def _echo(event: dict, level: str, counts: Counter, speeds: dict[str, list[float]]) -> None:
    """Console output for one event at the given verbosity."""
    if level == "detailed" and event["event_type"] != EVENT_TYPE_RUN_SUMMARY:
        logger.info(get_event_summary(event))
    elif level == "summary" and sum(counts.values()) % SUMMARY_EVENT_INTERVAL == 0:
        logger.info(f"{sum(counts.values())} events so far")
        for vehicle_class, values in sorted(speeds.items()):
            logger.info(
                f"  {vehicle_class}: {len(values)} transit(s), "
                f"avg {sum(values) / len(values):.1f} km/h"
            )
