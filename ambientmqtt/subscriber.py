"""Subscriber that prints ambient readings from all publishers."""

from __future__ import annotations

import datetime
import logging
import sys
import threading
from typing import Any, Sequence

import paho.mqtt.client as mqtt

from ambientmqtt.userdefs import Ambient, QoS, StartArgs, process_arguments
from ambientmqtt.worker import Worker

SUBSCRIPTION_TOPIC = "home/+/ambient_data"
KEEPALIVE_SECONDS = 60
QUEUE_SIZE = 32

_log = logging.getLogger(__name__)


def format_reading(ambient: Ambient, when: datetime.datetime) -> str:
    """One line describing ``ambient`` stamped with ``when``."""
    stamp = when.strftime("%d.%b.%Y %H:%M:%S")
    return (
        f"{stamp} [{ambient.location}] "
        f"t = {ambient.temperature:.2f}[°C], "
        f"p = {ambient.pressure:.2f}[hPa], "
        f"H = {ambient.humidity:.2f}[%rH]"
    )


def process_message(ambient: Ambient) -> str:
    """Print a reading with the current local time and return the line."""
    line = format_reading(ambient, datetime.datetime.now())
    print(line, flush=True)
    return line


def on_message(client: Any, userdata: Worker, message: Any) -> None:
    """Decode a received payload and queue it on the worker in ``userdata``."""
    try:
        ambient = Ambient.from_bytes(message.payload)
    except ValueError:
        _log.warning("dropping malformed payload on %s", getattr(message, "topic", "?"))
        return
    userdata.add(ambient)


def _new_client(userdata: Any = None) -> Any:
    if hasattr(mqtt, "CallbackAPIVersion"):
        return mqtt.Client(mqtt.CallbackAPIVersion.VERSION2, userdata=userdata)
    return mqtt.Client(userdata=userdata)


def main(argv: Sequence[str] | None = None) -> int:
    """Subscribe to all ambient topics and print readings until interrupted."""
    if argv is None:
        argv = sys.argv[1:]
    args = process_arguments(argv, StartArgs())

    worker = Worker(QUEUE_SIZE, process_message)
    client = _new_client(userdata=worker)
    client.on_message = on_message

    try:
        client.connect(args.broker_hostname, args.broker_port, KEEPALIVE_SECONDS)
    except OSError:
        print("Error: connecting to MQTT broker failed")
        worker.stop()
        return -1

    client.subscribe(SUBSCRIPTION_TOPIC, int(QoS.QOS_0))

    try:
        client.loop_start()
        threading.Event().wait()
    except KeyboardInterrupt:
        pass
    finally:
        client.loop_stop()
        worker.stop()
        client.disconnect()
    return 0


if __name__ == "__main__":
    sys.exit(main())