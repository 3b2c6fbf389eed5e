# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Entry lifecycle and reconciliation engine.

Everything in this package works on in-memory objects only. Loading, persisting
and broadcasting changes is done by worktime.services.
"""
