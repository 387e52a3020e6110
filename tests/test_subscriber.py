import datetime
import re
from types import SimpleNamespace
from unittest import mock

import pytest

from ambientmqtt.subscriber import format_reading, main, on_message, process_message
from ambientmqtt.userdefs import Ambient
from ambientmqtt.worker import Worker

LINE_PATTERN = re.compile(
    r"^\d{2}\.\w+\.\d{4} \d{2}:\d{2}:\d{2} \[(?P<loc>[^\]]*)\] "
    r"t = (?P<t>-?\d+\.\d{2})\[°C\], p = (?P<p>-?\d+\.\d{2})\[hPa\], "
    r"H = (?P<h>-?\d+\.\d{2})\[%rH\]$"
)


class FakeClient:
    instances = []
    fail_connect = False
    deliver = []

    def __init__(self, *args, userdata=None, **kwargs):
        self.userdata = userdata
        self.on_message = None
        self.connected = None
        self.subscriptions = []
        self.stopped = False
        FakeClient.instances.append(self)

    def connect(self, host, port, keepalive):
        self.connected = (host, port, keepalive)
        if FakeClient.fail_connect:
            raise ConnectionRefusedError("refused")

    def subscribe(self, topic, qos=0):
        self.subscriptions.append((topic, qos))

    def loop_start(self):
        for payload in FakeClient.deliver:
            message = SimpleNamespace(topic="home/x/ambient_data", payload=payload)
            self.on_message(self, self.userdata, message)
        raise KeyboardInterrupt

    def loop_stop(self):
        self.stopped = True

    def disconnect(self):
        pass


@pytest.fixture
def fake_client():
    FakeClient.instances = []
    FakeClient.fail_connect = False
    FakeClient.deliver = []
    with mock.patch("paho.mqtt.client.Client", FakeClient):
        yield FakeClient


def test_format_reading_example():
    ambient = Ambient("kitchen", 25.3, 995.3, 33.0)
    when = datetime.datetime(2020, 2, 25, 13, 5, 9)
    assert format_reading(ambient, when) == (
        "25.Feb.2020 13:05:09 [kitchen] t = 25.30[°C], p = 995.30[hPa], H = 33.00[%rH]"
    )


def test_format_reading_shape():
    ambient = Ambient("attic", -4.125, 1013.0, 61.5)
    line = format_reading(ambient, datetime.datetime(2021, 7, 1, 0, 0, 0))
    match = LINE_PATTERN.match(line)
    assert match is not None
    assert match["loc"] == "attic"
    assert float(match["p"]) == pytest.approx(1013.0)
    assert float(match["h"]) == pytest.approx(61.5)


def test_process_message_prints_line(capsys):
    ambient = Ambient("hall", 20.0, 1000.0, 40.0)
    line = process_message(ambient)
    assert capsys.readouterr().out == line + "\n"
    assert LINE_PATTERN.match(line)["loc"] == "hall"


def test_on_message_queues_decoded_payload():
    collected = []
    ambient = Ambient("cellar", 12.5, 990.0, 80.0)
    with Worker(4, collected.append) as worker:
        on_message(None, worker, SimpleNamespace(topic="t", payload=ambient.pack()))
    assert collected == [ambient]


def test_on_message_short_payload_zero_filled():
    collected = []
    with Worker(4, collected.append) as worker:
        on_message(None, worker, SimpleNamespace(topic="t", payload=b"den"))
    assert collected == [Ambient("den", 0.0, 0.0, 0.0)]


def test_on_message_drops_oversized_payload():
    collected = []
    with Worker(4, collected.append) as worker:
        payload = b"\x00" * (Ambient.SIZE + 1)
        on_message(None, worker, SimpleNamespace(topic="t", payload=payload))
    assert collected == []


def test_main_connect_failure(fake_client, capsys):
    fake_client.fail_connect = True
    assert main(["-b", "broker.example.com"]) == -1
    assert "Error: connecting to MQTT broker failed" in capsys.readouterr().out
    assert fake_client.instances[0].connected[0] == "broker.example.com"


def test_main_subscribes_and_prints(fake_client, capsys):
    readings = [Ambient("porch", 18.0, 1001.0, 55.0), Ambient("roof", 9.5, 998.0, 70.0)]
    fake_client.deliver = [ambient.pack() for ambient in readings]
    rc = main(["-p", "1885"])
    assert rc == 0
    client = fake_client.instances[0]
    assert client.connected[:2] == ("localhost", 1885)
    assert client.subscriptions == [("home/+/ambient_data", 0)]
    assert client.stopped
    lines = capsys.readouterr().out.splitlines()
    assert [LINE_PATTERN.match(line)["loc"] for line in lines] == ["porch", "roof"]