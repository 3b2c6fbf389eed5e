# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Common schema types."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response."""

    status: str


class MessageResponse(BaseModel):
    """Simple message response."""

    message: str


class ErrorResponse(BaseModel):
    """Typed error returned for every guard violation."""

    code: str
    detail: str


class TransitionRequest(BaseModel):
    """Base for state transitions.

    expected_version is the entry version the client last saw; the transition
    fails with concurrent_modification if the entry changed since.
    """

    expected_version: int | None = None
