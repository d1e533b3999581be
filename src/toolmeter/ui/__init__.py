# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Terminal dialog and browser capabilities for hosts without a GUI."""

from toolmeter.ui.dialogs import ConsoleDialog, open_in_browser


__all__ = ("ConsoleDialog", "open_in_browser")
