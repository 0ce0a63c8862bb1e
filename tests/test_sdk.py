"""
Tests for the HTTP client SDK.
The requests session is replaced by a mock so no server is needed.
"""
from unittest.mock import Mock

import pytest
import requests

from prompt_storage.sdk.prompt_client import PromptClient


def make_response(text="", json_data=None, error=None):
    response = Mock(spec=requests.Response)
    response.text = text
    response.json.return_value = json_data
    if error is not None:
        response.raise_for_status.side_effect = error
    return response


@pytest.fixture
def client(monkeypatch):
    prompt_client = PromptClient(base_url="http://prompts.test/")
    prompt_client.session = Mock()
    # no real backoff between retries
    monkeypatch.setattr(PromptClient._request.retry, "sleep", lambda seconds: None)
    return prompt_client


def test_create_prompt_omits_unset_fields(client):
    client.session.request.return_value = make_response(text="new-id")

    assert client.create_prompt("Hello", category="greeting") == "new-id"

    client.session.request.assert_called_once_with(
        "POST",
        "http://prompts.test/prompt",
        timeout=30.0,
        json={"content": "Hello", "category": "greeting"},
    )


def test_update_prompt(client):
    client.session.request.return_value = make_response(text="v2-id")

    assert client.update_prompt("root", "v2", branched=True) == "v2-id"

    _, kwargs = client.session.request.call_args
    assert kwargs["json"] == {"id": "root", "content": "v2", "branched": True}


def test_get_prompt_passes_metadata_flag(client):
    client.session.request.return_value = make_response(json_data={"id": "abc"})

    assert client.get_prompt("abc", metadata=True) == {"id": "abc"}

    args, kwargs = client.session.request.call_args
    assert args == ("GET", "http://prompts.test/prompt/abc")
    assert kwargs["params"] == {"metadata": "true"}


def test_get_prompt_content_latest(client):
    client.session.request.return_value = make_response(json_data="latest content")

    assert client.get_prompt_content("root", latest=True) == "latest content"

    _, kwargs = client.session.request.call_args
    assert kwargs["params"] == {"latest": "true"}


def test_list_prompts_params(client):
    client.session.request.return_value = make_response(json_data=[])

    client.list_prompts()
    assert client.session.request.call_args.kwargs["params"] == {"offset": 0, "limit": 10}

    client.list_prompts(category="react", offset=5, limit=2)
    assert client.session.request.call_args.kwargs["params"] == {
        "offset": 5, "limit": 2, "category": "react"
    }


def test_update_metadata_sends_every_field(client):
    client.session.request.return_value = make_response(text="abc")

    assert client.update_metadata("abc", name="n") == "abc"

    assert client.session.request.call_args.kwargs["json"] == {
        "id": "abc",
        "name": "n",
        "description": None,
        "category": None,
        "tags": None,
    }


def test_http_errors_are_not_retried(client):
    client.session.request.return_value = make_response(
        error=requests.exceptions.HTTPError("404 Client Error")
    )

    with pytest.raises(requests.exceptions.HTTPError):
        client.get_prompt("missing")

    assert client.session.request.call_count == 1


def test_connection_errors_are_retried(client):
    client.session.request.side_effect = [
        requests.exceptions.ConnectionError("refused"),
        make_response(json_data=["react"]),
    ]

    assert client.get_categories() == ["react"]
    assert client.session.request.call_count == 2


def test_connection_errors_give_up_after_three_attempts(client):
    client.session.request.side_effect = requests.exceptions.ConnectionError("refused")

    with pytest.raises(requests.exceptions.ConnectionError):
        client.delete_prompt("abc")

    assert client.session.request.call_count == 3
