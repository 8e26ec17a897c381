# AKCM Policy Filter
# Pure selection predicate over item attributes and policy

from enum import Enum
from typing import Optional

from akcm.config.schema import Policy
from akcm.reconcile.item import Item


class FilterVerdict(str, Enum):
    """Why an item was or was not selected."""

    SELECTED = "selected"
    ALREADY_SATISFIED = "already_satisfied"
    CATEGORY_EXCLUDED = "category_excluded"
    NO_KEYWORD_MATCH = "no_keyword_match"
    KEYWORD_EXCLUDED = "keyword_excluded"


def _normalize(text: Optional[str], case_sensitive: bool) -> str:
    text = text or ""
    return text if case_sensitive else text.casefold()


def _matches_any(title: str, keywords: list[str], case_sensitive: bool) -> bool:
    return any(_normalize(kw, case_sensitive) in title for kw in keywords)


def _scope_verdict(item: Item, policy: Policy) -> FilterVerdict:
    """Category, include and exclude checks, in that order."""
    if policy.content_types:
        allowed = {ct.value for ct in policy.content_types}
        if item.category.value.upper() not in allowed:
            return FilterVerdict.CATEGORY_EXCLUDED

    title = _normalize(item.title, policy.keyword_case_sensitive)

    if policy.keywords:
        if not _matches_any(title, policy.keywords, policy.keyword_case_sensitive):
            return FilterVerdict.NO_KEYWORD_MATCH

    if policy.exclude_keywords:
        if _matches_any(title, policy.exclude_keywords, policy.keyword_case_sensitive):
            return FilterVerdict.KEYWORD_EXCLUDED

    return FilterVerdict.SELECTED


def evaluate(item: Item, policy: Policy) -> FilterVerdict:
    """
    Evaluate an item against a policy.

    Checks mode, category, include keywords and exclude keywords in that
    order and stops at the first failing check.

    Args:
        item: Item to evaluate.
        policy: Selection policy.

    Returns:
        FilterVerdict.SELECTED or the first failing reason.
    """
    if item.current_state == policy.desired_state:
        return FilterVerdict.ALREADY_SATISFIED
    return _scope_verdict(item, policy)


def should_process(item: Item, policy: Policy) -> bool:
    """True if the item needs a state change under this policy."""
    return evaluate(item, policy) == FilterVerdict.SELECTED


def in_scope(item: Item, policy: Policy) -> bool:
    """True if the item passes every check except the state check."""
    return _scope_verdict(item, policy) == FilterVerdict.SELECTED
