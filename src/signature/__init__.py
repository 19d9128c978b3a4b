"""
Signature Gate - электронная подпись для state-mutating действий калькулятора.
"""

from .gate import (
    IdentityProvider,
    PendingAction,
    PendingConfirmation,
    SignatureGate,
    StaticIdentity,
)

__all__ = [
    "IdentityProvider",
    "PendingAction",
    "PendingConfirmation",
    "SignatureGate",
    "StaticIdentity",
]
