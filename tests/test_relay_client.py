"""SummaryRelayClient tests with a mocked requests session"""

from unittest.mock import MagicMock

import pytest
import requests

from src.journal.models import JournalEntry
from src.summary_relay.client import SummaryRelayClient
from src.summary_relay.exceptions import RelayBusyError, RelayError


def make_response(status_code=200, data=None, json_error=False):
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    if json_error:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = data
    return response


def test_summarize_posts_entries():
    entry = JournalEntry.new(mood="good", highlights="Walk")
    session = MagicMock()
    session.post.return_value = make_response(data={"weekly_summary": "Nice"})
    client = SummaryRelayClient(base_url="http://relay:3001/", timeout=30, session=session)

    result = client.summarize([entry])

    assert result == {"weekly_summary": "Nice"}
    args, kwargs = session.post.call_args
    assert args[0] == "http://relay:3001/api/summary"
    assert kwargs["json"] == [entry.to_dict()]
    assert kwargs["timeout"] == 30


def test_chat_returns_reply():
    session = MagicMock()
    session.post.return_value = make_response(data={"reply": "Breathe"})
    client = SummaryRelayClient(session=session)

    assert client.chat("stressed") == "Breathe"
    assert session.post.call_args.kwargs["json"] == {"message": "stressed"}


def test_error_body_is_surfaced():
    session = MagicMock()
    session.post.return_value = make_response(500, {"error": "Invalid JSON response from AI"})
    client = SummaryRelayClient(session=session)

    with pytest.raises(RelayError) as excinfo:
        client.summarize([JournalEntry.new(mood="okay")])

    assert str(excinfo.value) == "Invalid JSON response from AI"
    assert excinfo.value.status_code == 500


def test_unparseable_response():
    session = MagicMock()
    session.post.return_value = make_response(502, json_error=True)
    client = SummaryRelayClient(session=session)

    with pytest.raises(RelayError) as excinfo:
        client.chat("hello")

    assert excinfo.value.status_code == 502


def test_connection_error():
    session = MagicMock()
    session.post.side_effect = requests.exceptions.ConnectionError("refused")
    client = SummaryRelayClient(session=session)

    with pytest.raises(RelayError, match="Could not reach"):
        client.summarize([JournalEntry.new(mood="okay")])
    assert not client.is_busy("/api/summary")


def test_duplicate_request_is_rejected_while_in_flight():
    entries = [JournalEntry.new(mood="good")]
    session = MagicMock()
    client = SummaryRelayClient(session=session)
    observed = {}

    def post(url, json, timeout):
        observed["busy"] = client.is_busy("/api/summary")
        with pytest.raises(RelayBusyError):
            client.summarize(entries)
        # other endpoints are independent
        observed["chat"] = client.chat("still here")
        return make_response(data={"weekly_summary": "done"})

    def dispatch(url, json, timeout):
        if url.endswith("/api/chat"):
            return make_response(data={"reply": "yes"})
        return post(url, json, timeout)

    session.post.side_effect = dispatch

    assert client.summarize(entries) == {"weekly_summary": "done"}
    assert observed == {"busy": True, "chat": "yes"}
    assert not client.is_busy("/api/summary")
