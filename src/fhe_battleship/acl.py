# Area: Compute
"""
fhe_battleship.acl — Append-only access-control list
====================================================

Maps ciphertext handles to the identities allowed to obtain their
plaintext. Grants are additive: the only way an entry disappears is the
rollback of the operation that created it, before that operation
commits.
"""

import logging
import threading
from typing import Dict, FrozenSet, List, Set, Tuple

logger = logging.getLogger("fhe_battleship.acl")


class AccessControlList:
    """
    Thread-safe append-only permission set per handle.

    Attributes:
        grant_count: Total number of distinct (handle, identity) grants
    """

    def __init__(self):
        self._grants: Dict[str, Set[str]] = {}
        self._log: List[Tuple[str, str]] = []
        self._lock = threading.Lock()

    def grant(self, handle: str, identity: str) -> bool:
        """
        Allow an identity to decrypt a handle.

        Returns:
            True if the grant is new, False if it already existed
        """
        identity = identity.lower()
        with self._lock:
            holders = self._grants.setdefault(handle, set())
            if identity in holders:
                return False
            holders.add(identity)
            self._log.append((handle, identity))
            return True

    def is_allowed(self, handle: str, identity: str) -> bool:
        with self._lock:
            return identity.lower() in self._grants.get(handle, ())

    def holders(self, handle: str) -> FrozenSet[str]:
        """Identities allowed to decrypt a handle."""
        with self._lock:
            return frozenset(self._grants.get(handle, ()))

    @property
    def grant_count(self) -> int:
        with self._lock:
            return len(self._log)

    def discard_uncommitted(self, grants: List[Tuple[str, str]]) -> None:
        """
        Remove grants recorded by an operation that is being rolled back.

        Only grants returned as new by ``grant`` may be passed here.
        """
        with self._lock:
            for handle, identity in grants:
                holders = self._grants.get(handle)
                if holders is not None:
                    holders.discard(identity)
                    if not holders:
                        del self._grants[handle]
                try:
                    self._log.remove((handle, identity))
                except ValueError:
                    logger.warning(f"Rollback of unknown grant {handle} -> {identity}")
