# Area: Compute
"""
fhe_battleship.mock — Plaintext-backed confidential computation
===============================================================

A drop-in ``ConfidentialCompute`` for tests and demos. Handles are
random-looking 32-byte references into a private plaintext store and
every operation is plain integer arithmetic on 128-bit values. The
access-control list is enforced on decryption exactly as a gateway
would enforce it, so the game's permission logic is testable without
homomorphic cryptography.

Usage:
    compute = PlaintextCompute()
    handle, proof = compute.encrypt_input(game.address, alice, 0x108421)
    game.place_ships(alice, handle, proof)
    compute.user_decrypt(game.get_ship_placement(alice), game.address, alice)
"""

import hashlib
import hmac
import logging
import secrets
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple, Union

from .acl import AccessControlList
from .board import CIPHERTEXT_MASK, popcount
from .compute import ConfidentialCompute
from .errors import AclGrantError, DecryptionDenied, ProofVerificationFailed
from .types import CipherType, ZERO_ADDRESS, is_handle, normalize_address

logger = logging.getLogger("fhe_battleship.mock")

Plaintext = Union[int, bool, str]


@dataclass
class _Journal:
    """Ciphertexts and grants created by one operation."""
    handles: List[str] = field(default_factory=list)
    grants: List[Tuple[str, str]] = field(default_factory=list)


class PlaintextCompute(ConfidentialCompute):
    """
    Plaintext mock of the confidential computation capability.

    Attributes:
        acl: The append-only access-control list
    """

    def __init__(self, proof_key: Optional[bytes] = None):
        """
        Initialize the mock.

        Args:
            proof_key: Key used to sign input proofs. Random if omitted.
        """
        self.acl = AccessControlList()
        self._proof_key = proof_key or secrets.token_bytes(32)
        self._store: Dict[str, Tuple[CipherType, int]] = {}
        self._inputs: Dict[str, Tuple[str, str]] = {}
        self._counter = 0
        self._lock = threading.RLock()
        self._local = threading.local()

    # ──────────────────────────────────────────────────────────────
    # Store
    # ──────────────────────────────────────────────────────────────
    def _new_handle(self, cipher_type: CipherType, value: int) -> str:
        with self._lock:
            self._counter += 1
            digest = hashlib.sha256(
                self._proof_key + self._counter.to_bytes(16, "big") + cipher_type.value.encode()
            ).hexdigest()
            handle = "0x" + digest
            self._store[handle] = (cipher_type, value)
        journal = self._journal()
        if journal is not None:
            journal.handles.append(handle)
        return handle

    def _load(self, handle: str) -> Tuple[CipherType, int]:
        with self._lock:
            try:
                return self._store[handle]
            except KeyError:
                raise ValueError(f"Unknown ciphertext handle: {handle}") from None

    def type_of(self, handle: str) -> Optional[CipherType]:
        with self._lock:
            entry = self._store.get(handle)
        return entry[0] if entry else None

    # ──────────────────────────────────────────────────────────────
    # Constants
    # ──────────────────────────────────────────────────────────────
    def as_euint128(self, value: int) -> str:
        if not 0 <= value <= CIPHERTEXT_MASK:
            raise ValueError(f"Value does not fit in 128 bits: {value}")
        return self._new_handle(CipherType.EUINT128, value)

    def as_ebool(self, value: bool) -> str:
        return self._new_handle(CipherType.EBOOL, int(bool(value)))

    def as_eaddress(self, address: str) -> str:
        return self._new_handle(CipherType.EADDRESS, int(normalize_address(address), 16))

    # ──────────────────────────────────────────────────────────────
    # Arithmetic
    # ──────────────────────────────────────────────────────────────
    def _binary_operands(self, a: str, b: str, op: str) -> Tuple[CipherType, int, int]:
        type_a, value_a = self._load(a)
        type_b, value_b = self._load(b)
        if type_a != type_b or type_a == CipherType.EADDRESS:
            raise TypeError(f"{op} not defined for {type_a.value} and {type_b.value}")
        return type_a, value_a, value_b

    def and_(self, a: str, b: str) -> str:
        cipher_type, x, y = self._binary_operands(a, b, "and")
        return self._new_handle(cipher_type, x & y)

    def or_(self, a: str, b: str) -> str:
        cipher_type, x, y = self._binary_operands(a, b, "or")
        return self._new_handle(cipher_type, x | y)

    def not_(self, a: str) -> str:
        cipher_type, x = self._load(a)
        if cipher_type == CipherType.EBOOL:
            return self._new_handle(cipher_type, 1 - x)
        if cipher_type == CipherType.EUINT128:
            return self._new_handle(cipher_type, ~x & CIPHERTEXT_MASK)
        raise TypeError(f"not not defined for {cipher_type.value}")

    def popcount_ge(self, a: str, threshold: int) -> str:
        cipher_type, x = self._load(a)
        if cipher_type != CipherType.EUINT128:
            raise TypeError(f"popcount not defined for {cipher_type.value}")
        return self._new_handle(CipherType.EBOOL, int(popcount(x) >= threshold))

    def select(self, condition: str, if_true: str, if_false: str) -> str:
        cond_type, cond = self._load(condition)
        if cond_type != CipherType.EBOOL:
            raise TypeError(f"select condition must be ebool, got {cond_type.value}")
        type_t, value_t = self._load(if_true)
        type_f, value_f = self._load(if_false)
        if type_t != type_f:
            raise TypeError(f"select branches differ: {type_t.value} and {type_f.value}")
        return self._new_handle(type_t, value_t if cond else value_f)

    # ──────────────────────────────────────────────────────────────
    # Access control
    # ──────────────────────────────────────────────────────────────
    def allow(self, handle: str, identity: str) -> None:
        if self.type_of(handle) is None:
            raise AclGrantError(handle, identity, "unknown handle")
        try:
            identity = normalize_address(identity)
        except ValueError as e:
            raise AclGrantError(handle, str(identity), str(e)) from e
        if self.acl.grant(handle, identity):
            journal = self._journal()
            if journal is not None:
                journal.grants.append((handle, identity))

    def is_allowed(self, handle: str, identity: str) -> bool:
        return self.acl.is_allowed(handle, identity)

    # ──────────────────────────────────────────────────────────────
    # Client side
    # ──────────────────────────────────────────────────────────────
    def encrypt_input(
        self,
        contract: str,
        user: str,
        value: int,
        cipher_type: CipherType = CipherType.EUINT128,
    ) -> Tuple[str, bytes]:
        """
        Encrypt a value for submission to a contract, as a client SDK would.

        Returns:
            (handle, proof) bound to the contract and the user
        """
        contract = normalize_address(contract)
        user = normalize_address(user)
        if cipher_type == CipherType.EADDRESS:
            raw = int(normalize_address(value), 16)
        elif cipher_type == CipherType.EBOOL:
            raw = int(bool(value))
        else:
            if not 0 <= value <= CIPHERTEXT_MASK:
                raise ValueError(f"Value does not fit in 128 bits: {value}")
            raw = value
        # Client inputs live outside any contract transaction
        with self._lock:
            self._counter += 1
            digest = hashlib.sha256(
                b"input" + self._proof_key + self._counter.to_bytes(16, "big")
            ).hexdigest()
            handle = "0x" + digest
            self._store[handle] = (cipher_type, raw)
            self._inputs[handle] = (contract, user)
        return handle, self._sign(handle, contract, user)

    def _sign(self, handle: str, contract: str, user: str) -> bytes:
        message = f"{handle}|{contract}|{user}".encode()
        return hmac.new(self._proof_key, message, hashlib.sha256).digest()

    def verify_input(
        self,
        handle: str,
        proof: bytes,
        contract: str,
        user: str,
        expected_type: CipherType = CipherType.EUINT128,
    ) -> str:
        if not is_handle(handle):
            raise ProofVerificationFailed(str(handle), "malformed handle")
        if not isinstance(proof, (bytes, bytearray)):
            raise ProofVerificationFailed(handle, "proof must be bytes")
        with self._lock:
            binding = self._inputs.get(handle)
            entry = self._store.get(handle)
        if binding is None or entry is None:
            raise ProofVerificationFailed(handle, "unknown input ciphertext")
        expected = self._sign(handle, contract.lower(), user.lower())
        if not hmac.compare_digest(expected, bytes(proof)):
            raise ProofVerificationFailed(handle, "proof does not match contract and user")
        if entry[0] != expected_type:
            raise ProofVerificationFailed(
                handle, f"expected {expected_type.value}, got {entry[0].value}"
            )
        return handle

    def user_decrypt(self, handle: str, contract: str, user: str) -> Plaintext:
        """
        Return the plaintext of a handle for an authorised user.

        Both the user and the contract the handle belongs to must hold a
        grant, as the gateway requires.

        Raises:
            DecryptionDenied: If either grant is missing
        """
        if not (self.acl.is_allowed(handle, user) and self.acl.is_allowed(handle, contract)):
            raise DecryptionDenied(handle, user, contract)
        return self._reveal(handle)

    def _reveal(self, handle: str) -> Plaintext:
        cipher_type, value = self._load(handle)
        if cipher_type == CipherType.EBOOL:
            return bool(value)
        if cipher_type == CipherType.EADDRESS:
            if value == 0:
                return ZERO_ADDRESS
            return "0x" + format(value, "040x")
        return value

    # ──────────────────────────────────────────────────────────────
    # Transactions
    # ──────────────────────────────────────────────────────────────
    def _journal(self) -> Optional[_Journal]:
        stack = getattr(self._local, "stack", None)
        return stack[-1] if stack else None

    @contextmanager
    def transaction(self) -> Iterator[None]:
        stack = getattr(self._local, "stack", None)
        if stack is None:
            stack = self._local.stack = []
        journal = _Journal()
        stack.append(journal)
        try:
            yield
        except BaseException:
            stack.pop()
            self._discard(journal)
            raise
        stack.pop()
        if stack:
            stack[-1].handles.extend(journal.handles)
            stack[-1].grants.extend(journal.grants)

    def _discard(self, journal: _Journal) -> None:
        self.acl.discard_uncommitted(journal.grants)
        with self._lock:
            for handle in journal.handles:
                self._store.pop(handle, None)
        if journal.handles or journal.grants:
            logger.debug(
                f"Rolled back {len(journal.handles)} ciphertexts and "
                f"{len(journal.grants)} grants"
            )
