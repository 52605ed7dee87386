# ═══════════════════════════════════════════════════════════════════════════════
# EcoCredits Platform — Engine Exceptions
# © 2026 Aparajita Parihar. All rights reserved.
#
# None of these is fatal to the hosting process. Callers either recover by
# keeping their current state or surface the message to the user once.
# ═══════════════════════════════════════════════════════════════════════════════

from __future__ import annotations


class EcoCreditsError(Exception):
    """Base class for all errors raised by the impact engine."""


class UnknownCountry(EcoCreditsError, LookupError):
    """Raised when a country code is not in the parameter registry."""

    def __init__(self, code: object):
        self.code = code
        super().__init__(f"Unsupported country code: {code!r}")


class ImportFailed(EcoCreditsError, ValueError):
    """Raised when a state payload cannot be imported at all.

    Per-field problems inside a well-formed payload never raise; they are
    skipped and the current value is kept.
    """
