"""
Circuit Request Controller: Entry Point
=========================================
Run the request runtime against the simulated host.

Usage:
  python main.py                      # Run until Ctrl+C
  python main.py --ticks 600          # Run 600 ticks as fast as possible
  python main.py --legacy-sink        # Sink without maximum support
  python main.py --settings cfg.json  # Load settings from JSON
"""

import argparse
import logging
import signal
import sys

from crc.config.settings import Settings
from crc.core.runtime import RequestRuntime
from crc.drivers.simulator import HostSimulator, InMemorySink

DEMO_PLATFORM = 1


def parse_args():
    parser = argparse.ArgumentParser(
        description="Circuit-driven logistics request controller"
    )
    parser.add_argument(
        "--ticks", type=int,
        help="Run this many ticks without pacing, then exit"
    )
    parser.add_argument(
        "--legacy-sink", action="store_true",
        help="Simulate a sink that only accepts minimum quantities"
    )
    parser.add_argument(
        "--settings",
        help="Path to settings JSON file"
    )
    parser.add_argument(
        "--log-level", default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level"
    )
    parser.add_argument(
        "--log-file",
        help="Log to file instead of stderr"
    )
    return parser.parse_args()


def build_demo(runtime: RequestRuntime, host: HostSimulator):
    """One platform, one group, one controller with a few signals."""
    host.add_owner(DEMO_PLATFORM)
    group_id = runtime.create_group(DEMO_PLATFORM, "Demo Supplies")
    entity_id = host.build_entity()
    runtime.on_entity_built(entity_id)

    outcome = runtime.register_controller(entity_id, group_id)
    if not outcome:
        print(f"Failed to register demo controller: {outcome.reason}")
        sys.exit(1)

    host.set_signal(entity_id, "iron-plate", 500, channel="red")
    host.set_signal(entity_id, "iron-plate", 300, channel="green")
    host.set_signal(entity_id, "copper-plate", 200, channel="red")
    host.set_signal(entity_id, "signal-A", 7, channel="red", signal_type="virtual")
    return group_id


def print_report(runtime: RequestRuntime, sink: InMemorySink):
    print("Status:")
    for key, value in runtime.get_status().items():
        print(f"  {key:16s} {value}")
    print("Sink requests:")
    for owner, requests in sink.requests.items():
        for entry, (minimum, maximum) in sorted(requests.items()):
            shown = "-" if maximum is None else maximum
            print(f"  [{owner}] {entry:16s} min={minimum} max={shown}")


def main():
    args = parse_args()

    # Configure logging
    log_kwargs = {
        "level": getattr(logging, args.log_level),
        "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    }
    if args.log_file:
        log_kwargs["filename"] = args.log_file
    logging.basicConfig(**log_kwargs)

    settings = Settings.load(args.settings) if args.settings else Settings()

    host = HostSimulator()
    sink = InMemorySink(legacy=args.legacy_sink)
    runtime = RequestRuntime(host=host, sink=sink, settings=settings)
    runtime.on_init()
    build_demo(runtime, host)

    if args.ticks is not None:
        for _ in range(args.ticks):
            runtime.single_tick()
        print_report(runtime, sink)
        return

    def signal_handler(sig, frame):
        runtime.stop()
        print_report(runtime, sink)
        sys.exit(0)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    print("Request runtime running. Press Ctrl+C to stop.")
    runtime.start(blocking=True)


if __name__ == "__main__":
    main()
