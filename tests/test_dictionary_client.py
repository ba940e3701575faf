from unittest import mock

import pytest
import requests

from dictionary_client import (
    DictionaryFetchError,
    DictionaryNotFoundError,
    dictionary_url,
    fetch_dict_with_solver,
    fetch_dictionary,
)


def make_response(status_code=200, payload=None, reason="OK"):
    response = mock.Mock()
    response.status_code = status_code
    response.reason = reason
    response.json.return_value = payload
    return response


PAYLOAD = {"id": "ubuntu-wamerican", "name": "Ubuntu", "words": ["pinwheel", "wheel", "whine"]}


def test_dictionary_url_uses_environment(monkeypatch):
    monkeypatch.setenv("PUBLIC_SITE_URL", "https://bee.example.com/")
    assert dictionary_url("ubuntu-wamerican") == "https://bee.example.com/api/v1/dictionaries/ubuntu-wamerican"


def test_dictionary_url_requires_base_url(monkeypatch):
    monkeypatch.delenv("PUBLIC_SITE_URL", raising=False)
    with pytest.raises(DictionaryFetchError):
        dictionary_url("ubuntu-wamerican")


def test_fetch_dictionary():
    with mock.patch("dictionary_client.requests.get", return_value=make_response(payload=PAYLOAD)) as get:
        dictionary = fetch_dictionary("ubuntu-wamerican", base_url="http://localhost:5000")
    get.assert_called_once_with("http://localhost:5000/api/v1/dictionaries/ubuntu-wamerican", timeout=30)
    assert dictionary.id == "ubuntu-wamerican"
    assert dictionary.name == "Ubuntu"
    assert dictionary.words == ("pinwheel", "wheel", "whine")


def test_fetch_dictionary_not_found():
    with mock.patch("dictionary_client.requests.get", return_value=make_response(404, reason="Not Found")):
        with pytest.raises(DictionaryNotFoundError) as excinfo:
            fetch_dictionary("missing", base_url="http://localhost:5000")
    assert excinfo.value.status_code == 404


def test_fetch_dictionary_server_error():
    with mock.patch("dictionary_client.requests.get", return_value=make_response(503, reason="Unavailable")):
        with pytest.raises(DictionaryFetchError) as excinfo:
            fetch_dictionary("ubuntu-wamerican", base_url="http://localhost:5000")
    assert excinfo.value.status_code == 503
    assert not isinstance(excinfo.value, DictionaryNotFoundError)


@pytest.mark.parametrize("error", [
    requests.exceptions.ConnectionError("refused"),
    requests.exceptions.Timeout("slow"),
    requests.exceptions.TooManyRedirects("loop"),
])
def test_fetch_dictionary_wraps_request_errors(error):
    with mock.patch("dictionary_client.requests.get", side_effect=error):
        with pytest.raises(DictionaryFetchError):
            fetch_dictionary("ubuntu-wamerican", base_url="http://localhost:5000")


def test_fetch_dictionary_rejects_bad_payload():
    with mock.patch("dictionary_client.requests.get", return_value=make_response(payload={"id": "x"})):
        with pytest.raises(DictionaryFetchError):
            fetch_dictionary("x", base_url="http://localhost:5000")


def test_fetch_dictionary_with_session():
    session = mock.Mock()
    session.get.return_value = make_response(payload=PAYLOAD)
    fetch_dictionary("ubuntu-wamerican", base_url="http://localhost:5000", session=session)
    session.get.assert_called_once()


def test_fetch_dict_with_solver():
    with mock.patch("dictionary_client.requests.get", return_value=make_response(payload=PAYLOAD)):
        entry = fetch_dict_with_solver("ubuntu-wamerican", base_url="http://localhost:5000")
    assert entry.id == "ubuntu-wamerican"
    assert entry.index.words == ("pinwheel", "wheel", "whine")
