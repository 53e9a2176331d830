"""Minimal example shipping log records to a local Logstash UDP input."""

from __future__ import annotations

import time

import logstash_udp
from logstash_udp import mdc


def main() -> None:
    logstash_udp.configure(
        {
            "logstash": {
                "host": "localhost",
                "port": 5959,
                "application": "orders",
                "environment": "dev",
                "mdc_keys": "request_id, order_id",
                "parameters": "team=checkout&tier=backend",
                "append_class_information": True,
                "stacktrace_length": 2000,
            },
            "console": {"enabled": True, "level": "INFO"},
        }
    )

    logger = logstash_udp.get_logger("examples.orders")
    for order_id in range(1, 4):
        with mdc.bind(request_id=f"req-{order_id}", order_id=order_id):
            logger.info("processed order")
        time.sleep(0.1)

    try:
        raise RuntimeError("payment gateway timeout")
    except RuntimeError:
        logger.exception("order failed")

    logstash_udp.shutdown()


if __name__ == "__main__":
    main()
