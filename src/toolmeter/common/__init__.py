# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Shared helpers: query codec, logging and filesystem locations."""

from __future__ import annotations

from toolmeter.common.filesystem import get_project_root, get_user_config_dir
from toolmeter.common.logging import setup_logger
from toolmeter.common.query import (
    ReportUrl,
    build_form_body,
    concatenate_query_strings,
    encode_query_parameters,
    split_report_url,
)


TOOLMETER_PREFIX = "[dark orange]toolmeter[/dark orange]"

__all__ = (
    "TOOLMETER_PREFIX",
    "ReportUrl",
    "build_form_body",
    "concatenate_query_strings",
    "encode_query_parameters",
    "get_project_root",
    "get_user_config_dir",
    "setup_logger",
    "split_report_url",
)
