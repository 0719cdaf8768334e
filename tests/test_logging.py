"""JSON log records carry the checkout's correlation fields."""

import io
import json
import logging

import pytest

from paylink.common.logging import configure_logging, external_reference_ctx, log_context, trace_id_ctx


def test_log_context_binds_and_restores():
    with log_context(trace_id="t-1", external_reference="REF-1"):
        assert trace_id_ctx.get() == "t-1"
        assert external_reference_ctx.get() == "REF-1"
        with log_context(external_reference="REF-2"):
            assert external_reference_ctx.get() == "REF-2"
        assert external_reference_ctx.get() == "REF-1"

    assert trace_id_ctx.get() == ""
    assert external_reference_ctx.get() == ""


def test_log_context_rejects_unknown_fields():
    with pytest.raises(KeyError):
        with log_context(customer_id="cus_1"):
            pass


def test_records_are_json_with_context():
    stream = io.StringIO()
    configure_logging(stream)
    try:
        with log_context(trace_id="t-9", external_reference="SLAP-CHCKOUT-1"):
            logging.getLogger("paylink").warning("charge rejected status=%s", 400)
    finally:
        configure_logging()

    record = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert record["message"] == "charge rejected status=400"
    assert record["trace_id"] == "t-9"
    assert record["external_reference"] == "SLAP-CHCKOUT-1"
    assert record["levelname"] == "WARNING"
