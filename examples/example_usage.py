"""Example: drive the engine directly (no Flask), memory backend.

Controllers are a thin layer; all rules live in the engine and its trackers.
"""

from datetime import datetime

from workshop_time.container import build_container
from workshop_time.intervals.model import CategoryTarget, OrderTarget


def main():
    container = build_container(
        store_backend="memory",
        memory_targets={"active_orders": [1], "activity_categories": {3: False}, "break_categories": [1]},
    )
    engine = container.engine
    day = datetime(2024, 3, 4)

    engine.clock_in(7, timestamp=day.replace(hour=8))
    engine.start_work(7, OrderTarget(1), timestamp=day.replace(hour=8, minute=10))
    print(engine.clock_out(7, timestamp=day.replace(hour=9)))  # refused: work session still open
    engine.stop_work(7, timestamp=day.replace(hour=11, minute=40))
    engine.start_break(7, 1, timestamp=day.replace(hour=11, minute=40))
    engine.stop_break(7, timestamp=day.replace(hour=12, minute=10))
    engine.start_work(7, CategoryTarget(3), timestamp=day.replace(hour=12, minute=10))
    engine.stop_work(7, timestamp=day.replace(hour=16))
    engine.clock_out(7, timestamp=day.replace(hour=16))

    print(engine.window_metrics(7, day, day.replace(hour=23, minute=59)).state)


if __name__ == "__main__":
    main()
