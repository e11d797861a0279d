# Area: Gateway
"""
fhe_battleship.gateway — Off-chain user decryption (mock)
=========================================================

Models the protocol a client follows to read its plaintexts. The game
never calls any of this; it only produces the ACL the gateway consults.

1. The client generates an ephemeral keypair.
2. The user signs an authorization bound to a set of contract
   addresses and a validity window (start timestamp + duration in days).
3. The client submits (handle, contract) pairs with the authorization;
   the gateway returns plaintexts for the handles the user may read.

Signatures are HMAC-SHA256 under a per-wallet key the gateway knows,
standing in for typed-data wallet signatures.

Usage:
    gateway = DecryptionGateway(compute)
    alice = Wallet.create()
    gateway.register_wallet(alice)
    client = DecryptionClient(alice, gateway)
    plain = client.decrypt([(game.get_move_mask(bob), game.address)])
"""

import hashlib
import hmac
import json
import logging
import secrets
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import AuthorizationError
from .mock import PlaintextCompute, Plaintext
from .types import normalize_address

logger = logging.getLogger("fhe_battleship.gateway")

SECONDS_PER_DAY = 86400
DEFAULT_DURATION_DAYS = 1


@dataclass(frozen=True)
class EphemeralKeypair:
    """Throwaway keypair the gateway would re-encrypt results under."""
    public_key: str
    private_key: str

    @classmethod
    def generate(cls) -> "EphemeralKeypair":
        private_key = secrets.token_hex(32)
        public_key = hashlib.sha256(bytes.fromhex(private_key)).hexdigest()
        return cls(public_key=public_key, private_key=private_key)


class DecryptionAuthorization(BaseModel):
    """Signed, time-bounded, contract-scoped permission to request plaintexts."""

    model_config = ConfigDict(frozen=True)

    user: str
    public_key: str
    contract_addresses: List[str] = Field(min_length=1)
    start_timestamp: int = Field(ge=0)
    duration_days: int = Field(ge=1, le=365)
    signature: str = ""

    @field_validator("user")
    @classmethod
    def _normalize_user(cls, value: str) -> str:
        return normalize_address(value)

    @field_validator("contract_addresses")
    @classmethod
    def _normalize_contracts(cls, value: List[str]) -> List[str]:
        return [normalize_address(v) for v in value]

    @property
    def expires_at(self) -> int:
        return self.start_timestamp + self.duration_days * SECONDS_PER_DAY

    def is_valid_at(self, now: float) -> bool:
        return self.start_timestamp <= now < self.expires_at

    def covers(self, contract: str) -> bool:
        return contract.lower() in self.contract_addresses

    def signing_payload(self) -> bytes:
        body = self.model_dump(exclude={"signature"})
        body["contract_addresses"] = sorted(body["contract_addresses"])
        return json.dumps(body, sort_keys=True).encode()


class Wallet:
    """
    A user identity able to sign decryption authorizations.

    Attributes:
        address: The user's address
    """

    def __init__(self, address: str, signing_key: bytes):
        self.address = normalize_address(address)
        self._signing_key = signing_key

    @classmethod
    def create(cls) -> "Wallet":
        key = secrets.token_bytes(32)
        address = "0x" + hashlib.sha3_256(key).digest()[-20:].hex()
        return cls(address, key)

    @property
    def verification_key(self) -> bytes:
        return self._signing_key

    def sign(self, payload: bytes) -> str:
        return hmac.new(self._signing_key, payload, hashlib.sha256).hexdigest()

    def authorize(
        self,
        keypair: EphemeralKeypair,
        contract_addresses: Iterable[str],
        start_timestamp: Optional[int] = None,
        duration_days: int = DEFAULT_DURATION_DAYS,
    ) -> DecryptionAuthorization:
        """Build and sign an authorization for the given contracts."""
        unsigned = DecryptionAuthorization(
            user=self.address,
            public_key=keypair.public_key,
            contract_addresses=list(contract_addresses),
            start_timestamp=int(time.time()) if start_timestamp is None else start_timestamp,
            duration_days=duration_days,
        )
        return unsigned.model_copy(update={"signature": self.sign(unsigned.signing_payload())})


class DecryptionGateway:
    """
    Mock gateway returning plaintexts to authorised users.

    A request is served only if the authorization's signature verifies,
    it is inside its validity window, every requested contract is in its
    scope, and both the user and the contract hold an ACL grant on every
    requested handle. Requests are all-or-nothing.
    """

    def __init__(self, compute: PlaintextCompute, clock: Callable[[], float] = time.time):
        self._compute = compute
        self._clock = clock
        self._keys: Dict[str, bytes] = {}

    def register_wallet(self, wallet: Wallet) -> None:
        """Make a wallet's signatures verifiable by this gateway."""
        self._keys[wallet.address] = wallet.verification_key

    def user_decrypt(
        self,
        requests: Iterable[Tuple[str, str]],
        authorization: DecryptionAuthorization,
    ) -> Dict[str, Plaintext]:
        """
        Decrypt (handle, contract) pairs for the authorization's user.

        Returns:
            Mapping from handle to plaintext

        Raises:
            AuthorizationError: If the authorization is forged, expired or
                does not cover a requested contract
            DecryptionDenied: If the user or contract lacks a grant
        """
        user = authorization.user
        self._verify(authorization)
        pairs = [(handle, normalize_address(contract)) for handle, contract in requests]
        for _, contract in pairs:
            if not authorization.covers(contract):
                raise AuthorizationError(user, f"contract {contract} is not in scope")

        results = {handle: self._compute.user_decrypt(handle, contract, user)
                   for handle, contract in pairs}
        logger.debug(f"Decrypted {len(results)} handles for {user}")
        return results

    def _verify(self, authorization: DecryptionAuthorization) -> None:
        user = authorization.user
        key = self._keys.get(user)
        if key is None:
            raise AuthorizationError(user, "unknown wallet")
        expected = hmac.new(key, authorization.signing_payload(), hashlib.sha256).hexdigest()
        if not hmac.compare_digest(expected, authorization.signature):
            raise AuthorizationError(user, "bad signature")
        if not authorization.is_valid_at(self._clock()):
            raise AuthorizationError(user, "outside validity window")


class DecryptionClient:
    """
    Client-side helper that caches one authorization per contract set.

    A cached authorization is reused until its window closes, then a new
    keypair is generated and a new authorization signed.
    """

    def __init__(
        self,
        wallet: Wallet,
        gateway: DecryptionGateway,
        clock: Callable[[], float] = time.time,
        duration_days: int = DEFAULT_DURATION_DAYS,
    ):
        self.wallet = wallet
        self._gateway = gateway
        self._clock = clock
        self._duration_days = duration_days
        self._cache: Dict[Tuple[str, ...], Tuple[EphemeralKeypair, DecryptionAuthorization]] = {}

    def authorization_for(
        self, contracts: Iterable[str], force_refresh: bool = False
    ) -> DecryptionAuthorization:
        key = tuple(sorted({normalize_address(c) for c in contracts}))
        now = self._clock()
        cached = self._cache.get(key)
        if cached and not force_refresh and cached[1].is_valid_at(now):
            return cached[1]
        keypair = EphemeralKeypair.generate()
        authorization = self.wallet.authorize(
            keypair, key, start_timestamp=int(now), duration_days=self._duration_days
        )
        self._cache[key] = (keypair, authorization)
        return authorization

    def decrypt(self, requests: Iterable[Tuple[str, str]]) -> Dict[str, Any]:
        """Decrypt (handle, contract) pairs, signing an authorization if needed."""
        pairs = list(requests)
        if not pairs:
            return {}
        authorization = self.authorization_for(contract for _, contract in pairs)
        return self._gateway.user_decrypt(pairs, authorization)
