# ambientmqtt

A small pair of MQTT clients for sharing ambient readings (temperature,
pressure and relative humidity) between places in a home.

- `ambientmqtt-pub` publishes a fixed reading for one location every second
  on the topic `home/<location>/ambient_data`, at QoS 0 and not retained.
- `ambientmqtt-sub` subscribes to `home/+/ambient_data` and prints each
  reading it receives, with a local timestamp, as it arrives. Received
  readings are queued and printed in order by a background worker thread.

Readings travel as a fixed-size binary record: a 256-byte, NUL-padded
location name followed by three little-endian doubles (temperature, pressure,
humidity).

## Installation

```
pip install .
```

This installs the `paho-mqtt` client library as well.

## Usage

Both commands take the same options:

| Option | Meaning | Default |
| ------ | ------- | ------- |
| `-b HOST` | hostname or IP address of the MQTT broker | `localhost` |
| `-p PORT` | port the broker listens on | `1883` |
| `-l NAME` | location name used in the topic and payload | `location_<pid>` |

Options may be clustered or given their value directly (`-lkitchen`).
Unknown options are reported on standard error and ignored. Hostnames are
cut to 127 bytes and location names to 63 bytes.

Start a subscriber:

```
ambientmqtt-sub -b broker.local
```

and one or more publishers, each with its own location:

```
ambientmqtt-pub -b broker.local -l kitchen
ambientmqtt-pub -b broker.local -l bedroom
```

The subscriber prints lines such as:

```
03.Mar.2025 18:42:07 [kitchen] t = 25.30[°C], p = 995.30[hPa], H = 33.00[%rH]
```

Both commands run until interrupted with Ctrl-C. If the broker cannot be
reached, the subscriber prints an error and exits with status -1; the
publisher prints an error and keeps running.

## Library use

The building blocks are importable:

- `ambientmqtt.userdefs.Ambient` holds one reading. `pack()` encodes the
  wire record; `Ambient.from_bytes()` decodes one, zero-filling a short
  payload and raising `ValueError` for one longer than the record.
  `as_json()` renders a compact JSON document of the three readings with at
  most two decimal places, e.g.
  `{"humidity":33.0,"pressure":995.3,"temperature":25.3}`.
- `ambientmqtt.userdefs.QoS` lists the MQTT quality of service levels.
- `ambientmqtt.userdefs.process_arguments()` parses the command line options
  above into a `StartArgs`.
- `ambientmqtt.worker.Worker` is a bounded FIFO queue (at most 128 entries)
  served by a background thread. `add()` blocks while the queue is full and
  raises `RuntimeError` once the worker is stopped; `stop()` waits for the
  queue to drain before ending the thread. Used as a context manager it
  stops on exit:

```python
from ambientmqtt.worker import Worker

with Worker(32, print) as worker:
    worker.add("first")
    worker.add("second")
```

- `ambientmqtt.publisher.topic_for()` gives the topic for a location,
  `dummy_ambient()` the fixed reading the publisher sends, and
  `publish_forever()` publishes a reading on a client at an interval,
  optionally a set number of times.
- `ambientmqtt.subscriber.format_reading()` renders a reading as the
  subscriber prints it, and `on_message()` is the message callback that
  decodes a payload and queues it on the `Worker` given as user data.

## What it does not do

The publisher does not read any sensor: it always sends the same values
(25.3 °C, 995.3 hPa, 33 %rH). No command publishes the JSON form from
`as_json()`, and neither client supports broker authentication or TLS.

## Running the tests

```
pip install .[test]
pytest
```