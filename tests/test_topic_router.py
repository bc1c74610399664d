"""Tests del router de topics."""

import pytest

from temperature_exporter.core.errors import TopicParseError
from temperature_exporter.core.routing.topic_router import TopicRouter


@pytest.fixture
def router() -> TopicRouter:
    return TopicRouter("sensors")


class TestTopicMatch:

    def test_temperature_topic_yields_node_id(self, router):
        assert router.match("sensors/1A2B3C/temperature") == 0x1A2B3C

    def test_lowercase_hex_ignored(self, router):
        assert router.match("sensors/1a2b3c/temperature") is None

    def test_mac_sized_node_id(self, router):
        assert router.match("sensors/5CCF7F0A1B2C/temperature") == 0x5CCF7F0A1B2C

    @pytest.mark.parametrize(
        "topic",
        [
            "sensors/1A2B3C/rescan_temperature",
            "sensors/1A2B3C/temperature/extra",
            "sensors/1A2B3C",
            "other/1A2B3C/temperature",
            "prefix/sensors/1A2B3C/temperature",
            "sensors//temperature",
            "sensorsX/1A2B3C/temperature",
            "sensors/NOTHEX/temperature",
            "sensors/0x1A/temperature",
            "sensors/1_A/temperature",
            "sensors/-1A/temperature",
            "sensors/+1A/temperature",
            "sensors/1A 2B/temperature",
        ],
    )
    def test_non_matching_topics_return_none(self, router, topic):
        assert router.match(topic) is None

    def test_prefix_is_literal(self):
        router = TopicRouter("home.lab+")

        assert router.match("home.lab+/AB/temperature") == 0xAB
        assert router.match("homeXlab+/AB/temperature") is None

    def test_multi_level_prefix(self):
        router = TopicRouter("site/garage/")

        assert router.prefix == "site/garage"
        assert router.match("site/garage/FF/temperature") == 0xFF


class TestTopicParseError:

    def test_node_id_wider_than_64_bits_raises(self, router):
        with pytest.raises(TopicParseError) as exc_info:
            router.match("sensors/1FFFFFFFFFFFFFFFF/temperature")

        assert exc_info.value.segment == "1FFFFFFFFFFFFFFFF"

    def test_max_64_bit_node_id_accepted(self, router):
        assert router.match("sensors/FFFFFFFFFFFFFFFF/temperature") == (1 << 64) - 1


def test_subscription_covers_prefix(router):
    assert router.subscription == "sensors/#"
