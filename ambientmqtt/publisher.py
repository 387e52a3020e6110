"""Publisher that sends dummy ambient readings to an MQTT broker."""

from __future__ import annotations

import sys
import time
from typing import Any, Sequence

import paho.mqtt.client as mqtt

from ambientmqtt.userdefs import Ambient, QoS, StartArgs, process_arguments

KEEPALIVE_SECONDS = 60
PUBLISH_INTERVAL_SECONDS = 1.0


def topic_for(location: str) -> str:
    """Topic on which readings for ``location`` are published."""
    return f"home/{location}/ambient_data"


def dummy_ambient(location: str) -> Ambient:
    """Fixed environment readings used as the published payload."""
    return Ambient(location=location, temperature=25.3, pressure=995.3, humidity=33.0)


def publish_forever(
    client: Any,
    topic: str,
    ambient: Ambient,
    interval: float = PUBLISH_INTERVAL_SECONDS,
    count: int | None = None,
) -> int:
    """Publish ``ambient`` every ``interval`` seconds.

    Runs until interrupted when ``count`` is None, otherwise stops after
    ``count`` messages. Returns the number of messages published.
    """
    if count is not None and count < 0:
        raise ValueError("count must not be negative")
    payload = ambient.pack()
    published = 0
    while count is None or published < count:
        client.publish(topic, payload=payload, qos=int(QoS.QOS_0), retain=False)
        published += 1
        time.sleep(interval)
    return published


def _new_client(userdata: Any = None) -> Any:
    if hasattr(mqtt, "CallbackAPIVersion"):
        return mqtt.Client(mqtt.CallbackAPIVersion.VERSION2, userdata=userdata)
    return mqtt.Client(userdata=userdata)


def main(argv: Sequence[str] | None = None) -> int:
    """Publish dummy readings until interrupted."""
    if argv is None:
        argv = sys.argv[1:]
    args = process_arguments(argv, StartArgs(location="location"))

    client = _new_client()
    try:
        client.connect(args.broker_hostname, args.broker_port, KEEPALIVE_SECONDS)
    except OSError:
        print("Error: connecting to MQTT broker failed")

    ambient = dummy_ambient(args.location)
    topic = topic_for(args.location)

    client.loop_start()
    try:
        publish_forever(client, topic, ambient)
    except KeyboardInterrupt:
        pass
    finally:
        client.loop_stop()
        client.disconnect()
    return 0


if __name__ == "__main__":
    sys.exit(main())