# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Main API router for v1 endpoints."""

from fastapi import APIRouter

from worktime.api.v1 import absences, adjustments, balances, entries, quotas, users

api_router = APIRouter()

# Time entry routes
api_router.include_router(entries.router, prefix="/entries", tags=["entries"])

# Absence routes
api_router.include_router(absences.router, prefix="/absences", tags=["absences"])

# Balance routes
api_router.include_router(balances.router, prefix="/balances", tags=["balances"])

# Manual adjustment routes
api_router.include_router(
    adjustments.router, prefix="/adjustments", tags=["adjustments"]
)

# Quota routes
api_router.include_router(quotas.router, prefix="/quotas", tags=["quotas"])

# User settings routes
api_router.include_router(users.router, prefix="/users", tags=["users"])
