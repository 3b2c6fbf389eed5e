# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Work time tracking with review workflows and balance reconciliation."""

__version__ = "0.1.0"
