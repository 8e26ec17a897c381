# AKCM Default Configuration
# Full default configuration as Python dict and YAML generator

import copy
from typing import Any

import yaml

DEFAULT_CONFIG: dict[str, Any] = {
    "policy": {
        "mode": "disable",
        "content_types": None,
        "keywords": None,
        "exclude_keywords": None,
        "keyword_case_sensitive": False,
        "concurrency": 5,
        "batch_delay_ms": 150,
        "page_delay_ms": 100,
        "max_retries": 3,
        "backoff_base_ms": 500,
        "dry_run": False,
    },
    "timing": {
        "verify_timeout_ms": 3000,
        "verify_poll_ms": 50,
        "new_items_timeout_ms": 15000,
        "new_items_poll_ms": 150,
        "loading_poll_ms": 1000,
        "page_load_timeout_ms": 15000,
        "panel_timeout_ms": 3000,
        "max_backoff_ms": 60000,
    },
    "host": {
        "url_patterns": ["parentdashboard", "parents.amazon"],
        "start_url": "https://parents.amazon.com/explore",
        "cdp_endpoint": "http://localhost:9222",
        "child_name": None,
    },
    "direct_call": {
        "endpoint": None,
        "method": "POST",
        "headers": {},
        "timeout_seconds": 10.0,
    },
    "output": {
        "log_level": "normal",
        "colored": True,
    },
}

_HEADER = """\
# AKCM Configuration
# Amazon Kids Content Manager - bulk enable/disable dashboard content
#
# policy.mode            'disable' = turn off content, 'enable' = turn on content
# policy.content_types   null = all types. Valid: APP, EBOOK, VIDEO, AUDIBLE, SKILL
# policy.keywords        null = all items. Titles must contain ANY keyword
# policy.exclude_keywords  titles containing ANY of these are skipped
# host.child_name        null = auto-detect (no-child-selected view only)
# output.log_level       quiet, normal or verbose
#
# Start Chromium with --remote-debugging-port=9222, open host.start_url,
# set the child's age range to 2-2 and clear all content-type filters.

"""


def default_config() -> dict[str, Any]:
    """Return a deep copy of the default configuration dict."""
    return copy.deepcopy(DEFAULT_CONFIG)


def generate_default_config() -> str:
    """
    Generate the default configuration as commented YAML.

    Returns:
        YAML document text.
    """
    body = yaml.dump(default_config(), default_flow_style=False, sort_keys=False, allow_unicode=True)
    return _HEADER + body
