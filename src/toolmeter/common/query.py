# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Query string and form body helpers.

Everything here is pure: no state, no I/O, and no exceptions for well-typed input.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import NamedTuple
from urllib.parse import quote


type QueryParameters = Mapping[str, object] | Iterable[tuple[str, object]]


class ReportUrl(NamedTuple):
    """A report URL split into its path, query and anchor components.

    `query` excludes the leading `?`. `anchor` includes the leading `#`.
    """

    path: str
    query: str | None
    anchor: str | None


def concatenate_query_strings(first: str | None, second: str | None) -> str | None:
    """Join two optional query strings with `&`.

    A leading `?` and trailing `&` are stripped from `first` (and a leading `?` or `&`
    from `second`) so the result never contains a doubled separator. If either side
    is empty the other is returned unchanged; if both are empty, returns None.
    """
    if not first:
        return second or None
    if not second:
        return first
    head = first.removeprefix("?").rstrip("&")
    tail = second.lstrip("?&")
    if not head:
        return tail or None
    if not tail:
        return head
    return f"{head}&{tail}"


def _iter_pairs(parameters: QueryParameters) -> Iterable[tuple[str, object]]:
    if isinstance(parameters, Mapping):
        return parameters.items()
    return parameters


def encode_query_parameters(parameters: QueryParameters | None) -> str | None:
    """Render parameters as `key=value&...`, preserving order; None when there are none."""
    if parameters is None:
        return None
    encoded = "&".join(
        f"{quote(str(key), safe='')}={quote(str(value), safe='/:')}"
        for key, value in _iter_pairs(parameters)
    )
    return encoded or None


def build_form_body(fields: QueryParameters) -> str:
    """Join ordered `key=value` pairs with newlines."""
    return "\n".join(f"{key}={value}" for key, value in _iter_pairs(fields))


def split_report_url(url: str) -> ReportUrl:
    """Split a report URL into path, query and anchor.

    The anchor starts at the first `#`. The query starts at the first `?` that comes
    before the anchor; a `?` inside the anchor belongs to the anchor.
    """
    remainder, hash_sign, fragment = url.partition("#")
    anchor = f"#{fragment}" if hash_sign else None
    path, question_mark, query = remainder.partition("?")
    return ReportUrl(path=path, query=query if question_mark and query else None, anchor=anchor)


__all__ = (
    "QueryParameters",
    "ReportUrl",
    "build_form_body",
    "concatenate_query_strings",
    "encode_query_parameters",
    "split_report_url",
)
