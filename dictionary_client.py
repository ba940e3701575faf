#!/usr/bin/env python3
"""
Fetch a dictionary served by another instance of the puzzle server.
"""

import os
from typing import Optional

import requests

from dictionary_registry import DictionaryWithIndex
from index_mask_dictionary import Dictionary, build_solver_index


TIMEOUT = 30
API_VERSION = 1


class DictionaryFetchError(RuntimeError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class DictionaryNotFoundError(DictionaryFetchError):
    pass


def dictionary_url(dictionary_id: str, base_url: Optional[str] = None) -> str:
    base_url = base_url or os.environ.get("PUBLIC_SITE_URL")
    if not base_url:
        raise DictionaryFetchError("PUBLIC_SITE_URL is not set and no base URL was given")
    return f"{base_url.rstrip('/')}/api/v{API_VERSION}/dictionaries/{dictionary_id}"


def fetch_dictionary(
    dictionary_id: str,
    base_url: Optional[str] = None,
    timeout: float = TIMEOUT,
    session: Optional[requests.Session] = None
) -> Dictionary:
    """GET a dictionary as {"id", "name", "words"} and return it as a Dictionary."""
    url = dictionary_url(dictionary_id, base_url)
    http = session or requests

    try:
        response = http.get(url, timeout=timeout)
    except requests.exceptions.ConnectionError:
        raise DictionaryFetchError(f"Could not connect to {url}")
    except requests.exceptions.Timeout:
        raise DictionaryFetchError(f"Request to {url} timed out after {timeout} seconds.")
    except requests.exceptions.RequestException as e:
        raise DictionaryFetchError(f"Error fetching dictionary: {e}")

    if response.status_code == 404:
        raise DictionaryNotFoundError(f"Invalid dictionary ID: {dictionary_id}", 404)
    if response.status_code != 200:
        raise DictionaryFetchError(
            f"Dictionary fetching failed: {response.status_code} {response.reason}",
            response.status_code
        )

    try:
        data = response.json()
    except ValueError:
        raise DictionaryFetchError(f"Invalid dictionary JSON from {url}")

    if (
        not isinstance(data, dict)
        or not isinstance(data.get("id"), str)
        or not isinstance(data.get("name"), str)
        or not isinstance(data.get("words"), list)
    ):
        raise DictionaryFetchError(f"Invalid dictionary payload from {url}")

    return Dictionary(id=data["id"], name=data["name"], words=tuple(str(w) for w in data["words"]))


def fetch_dict_with_solver(dictionary_id: str, base_url: Optional[str] = None, **kwargs) -> DictionaryWithIndex:
    dictionary = fetch_dictionary(dictionary_id, base_url, **kwargs)
    return DictionaryWithIndex(dictionary=dictionary, index=build_solver_index(dictionary.words))
