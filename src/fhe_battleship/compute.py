# Area: Compute
"""
fhe_battleship.compute — Confidential computation capability
============================================================

The game never sees plaintext. Every value it stores is a ciphertext
handle, and every computation on those values goes through an object
implementing ``ConfidentialCompute``. The capability also owns the
access-control list that the decryption gateway consults.

A production deployment injects an implementation backed by real
homomorphic encryption; tests and the demo use ``PlaintextCompute``
from ``fhe_battleship.mock``.

Handle typing
-------------
    euint128  board bitmasks (bit i = cell i)
    ebool     comparison results
    eaddress  encrypted identities (the winner)

Binary operations require operands of the same type. ``select`` takes
an ebool condition and two operands of the same type.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional

from .types import CipherType


class ConfidentialCompute(ABC):
    """
    Abstract base class for the confidential computation capability.

    All methods returning ``str`` return a fresh ciphertext handle.
    """

    # ──────────────────────────────────────────────────────────────
    # Constants (trivial encryptions)
    # ──────────────────────────────────────────────────────────────
    @abstractmethod
    def as_euint128(self, value: int) -> str:
        """Encrypt a public 128-bit constant."""

    @abstractmethod
    def as_ebool(self, value: bool) -> str:
        """Encrypt a public boolean."""

    @abstractmethod
    def as_eaddress(self, address: str) -> str:
        """Encrypt a public address."""

    # ──────────────────────────────────────────────────────────────
    # Arithmetic
    # ──────────────────────────────────────────────────────────────
    @abstractmethod
    def and_(self, a: str, b: str) -> str:
        """Bitwise AND of two euint128 values, or logical AND of two ebools."""

    @abstractmethod
    def or_(self, a: str, b: str) -> str:
        """Bitwise OR of two euint128 values, or logical OR of two ebools."""

    @abstractmethod
    def not_(self, a: str) -> str:
        """Bitwise NOT of a euint128 (within 128 bits), or logical NOT of an ebool."""

    @abstractmethod
    def popcount_ge(self, a: str, threshold: int) -> str:
        """
        Compare the population count of a euint128 against a public threshold.

        Returns:
            An ebool handle, true iff at least ``threshold`` bits are set
        """

    @abstractmethod
    def select(self, condition: str, if_true: str, if_false: str) -> str:
        """Oblivious choice between two handles of the same type."""

    # ──────────────────────────────────────────────────────────────
    # Access control
    # ──────────────────────────────────────────────────────────────
    @abstractmethod
    def allow(self, handle: str, identity: str) -> None:
        """
        Record a persistent decrypt permission. Grants are never revoked.

        Raises:
            AclGrantError: If the grant cannot be recorded
        """

    @abstractmethod
    def is_allowed(self, handle: str, identity: str) -> bool:
        """Check whether an identity holds a grant on a handle."""

    # ──────────────────────────────────────────────────────────────
    # Client inputs
    # ──────────────────────────────────────────────────────────────
    @abstractmethod
    def verify_input(
        self,
        handle: str,
        proof: bytes,
        contract: str,
        user: str,
        expected_type: CipherType = CipherType.EUINT128,
    ) -> str:
        """
        Validate a client-submitted ciphertext and its proof.

        The proof binds the ciphertext to the contract it is submitted to
        and to the user submitting it.

        Returns:
            A handle the contract may compute on

        Raises:
            ProofVerificationFailed: If the ciphertext or proof is malformed
        """

    # ──────────────────────────────────────────────────────────────
    # Transactions
    # ──────────────────────────────────────────────────────────────
    @abstractmethod
    def transaction(self) -> AbstractContextManager:
        """
        Scope the calling thread's ciphertexts and grants to one operation.

        Everything created inside the block is discarded if the block
        raises. Nested blocks fold into the enclosing one.
        """

    def type_of(self, handle: str) -> Optional[CipherType]:
        """Ciphertext type of a handle, if the capability tracks it."""
        return None
