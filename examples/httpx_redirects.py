#!/usr/bin/env uv run
# /// script
# requires-python = ">=3.9"
# dependencies = [
#     "verdict[httpx]",
# ]
#
# [tool.uv.sources]
# verdict = { path = "../", editable = true }
# ///

import logging

import httpx

from verdict import classify
from verdict.httpx import HttpxFetcher

logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

with httpx.Client() as client:
    fetcher = HttpxFetcher(client)
    response = classify(fetcher("http://github.com"), fetcher=fetcher).follow()

    print(f"Status:            {response.code}")
    print(f"Cacheable:         {response.is_cacheable()}")
    print(f"Freshness lifetime {response.freshness_lifetime()}")
    print(f"Current age:       {response.current_age()}")
    print(f"Can be validated:  {response.can_be_validated}")
