#!/usr/bin/env python3
"""Live Local Hub probe for one YoLink motion sensor.

Connects to the hub configured through ``YOLINK_*`` environment
variables, performs a forced poll, listens for MQTT reports for a while,
and prints every attribute notification plus the final device state.

Required environment:
- YOLINK_DEVICE_ID, YOLINK_TOKEN
- YOLINK_HUB_HOST, YOLINK_CLIENT_ID, YOLINK_CLIENT_SECRET
- YOLINK_SUBNET_ID (for MQTT)
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

# Allow running from repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyyolink import Notification, YoLinkConfig, YoLinkError, YoLinkLocalClient  # noqa: E402


def _print_notification(notification: Notification) -> None:
    unit = f" {notification.unit}" if notification.unit else ""
    print(f"{notification.observed_at.isoformat()}  {notification.attribute:<16} {notification.value}{unit}")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--listen", type=float, default=30.0, help="Seconds to wait for MQTT reports (default: 30)")
    parser.add_argument("--scale", choices=("C", "F"), default=None, help="Temperature display scale")
    parser.add_argument("--no-mqtt", action="store_true", help="Poll only; do not subscribe to the hub broker")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


async def _run(args: argparse.Namespace) -> int:
    overrides: dict[str, object] = {"debug": args.debug}
    if args.scale:
        overrides["temperature_scale"] = args.scale
    if args.no_mqtt:
        overrides["mqtt_enabled"] = False

    try:
        config = YoLinkConfig.from_env(**overrides)
    except YoLinkError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    async with YoLinkLocalClient(config, sink=_print_notification) as client:
        await asyncio.sleep(max(config.poll_delay, 0.0) + 0.5)
        if args.listen > 0:
            print(f"Listening for reports for {args.listen:.0f}s (mqtt={'on' if client.mqtt_running else 'off'})")
            await asyncio.sleep(args.listen)
        state = client.sensor.snapshot()

    print(json.dumps(state.model_dump(mode="json", exclude={"token"}), indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return asyncio.run(_run(args))


if __name__ == "__main__":
    raise SystemExit(main())
