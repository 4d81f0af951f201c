"""
Error Taxonomy

Exceptions for conditions that abort control flow. Per-attempt failures
(insufficient balance, below minimum, failed settlement, network error)
are not exceptions: they travel as FailureReason values on results.
"""


class PingPongError(Exception):
    """Base class for all ping-pong transfer errors"""


class ConfigurationError(PingPongError):
    """Missing or mismatched configuration / credentials. Always fatal."""


class LedgerError(PingPongError):
    """Transport or RPC level failure reported by the ledger client"""


class PreflightError(PingPongError):
    """Run refused before any transfer was attempted"""
