import pytest

from alteran.core.logging import REDACTED, redact_secrets

pytestmark = pytest.mark.unit


def test_redacts_credentials():
    event = redact_secrets(None, "info", {"event": "x", "password": "hunter2", "authorization": "Bearer sk"})
    assert event == {"event": "x", "password": REDACTED, "authorization": REDACTED}


def test_leaves_other_fields_and_empty_values():
    event = redact_secrets(None, "info", {"event": "x", "path": "/admin", "token": ""})
    assert event == {"event": "x", "path": "/admin", "token": ""}
