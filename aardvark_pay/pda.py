"""Program-derived address derivation."""
from __future__ import annotations

import hashlib
import logging
from typing import Sequence, Tuple

from solders.pubkey import Pubkey

from .curve import is_on_curve
from .errors import InvalidSeeds, NoValidBump
from .keys import ASSOCIATED_TOKEN_PROGRAM_ID, TOKEN_PROGRAM_ID, KeyLike, to_key_bytes

logger = logging.getLogger(__name__)

PDA_MARKER = b"ProgramDerivedAddress"
MAX_SEEDS = 16
MAX_SEED_LEN = 32


def _check_seeds(seeds: Sequence[bytes]) -> list:
    if len(seeds) > MAX_SEEDS:
        raise InvalidSeeds(f"at most {MAX_SEEDS} seeds allowed, got {len(seeds)}")
    checked = []
    for idx, seed in enumerate(seeds):
        if not isinstance(seed, (bytes, bytearray, memoryview, Pubkey)):
            raise InvalidSeeds(f"seed {idx} must be bytes, got {type(seed).__name__}")
        raw = bytes(seed)
        if len(raw) > MAX_SEED_LEN:
            raise InvalidSeeds(f"seed {idx} is {len(raw)} bytes; limit is {MAX_SEED_LEN}")
        checked.append(raw)
    return checked


def _hash_candidate(seeds: Sequence[bytes], program_id: bytes) -> bytes:
    hasher = hashlib.sha256()
    for seed in seeds:
        hasher.update(seed)
    hasher.update(program_id)
    hasher.update(PDA_MARKER)
    return hasher.digest()


def create_program_address(seeds: Sequence[bytes], program_id: KeyLike) -> bytes:
    """Hash ``seeds`` (bump already included) into an address owned by ``program_id``.

    Raises InvalidSeeds if the result is a valid curve point, since such an
    address could have a private key.
    """
    program = to_key_bytes(program_id, "program id")
    candidate = _hash_candidate(_check_seeds(seeds), program)
    if is_on_curve(candidate):
        raise InvalidSeeds("derived address lies on the ed25519 curve")
    return candidate


def find_program_address(seeds: Sequence[bytes], program_id: KeyLike) -> Tuple[bytes, int]:
    """Return the canonical (highest bump) program-derived address and its bump."""
    program = to_key_bytes(program_id, "program id")
    base = _check_seeds(seeds)
    if len(base) >= MAX_SEEDS:
        raise InvalidSeeds(f"at most {MAX_SEEDS - 1} seeds allowed before the bump")
    for bump in range(255, -1, -1):
        candidate = _hash_candidate(base + [bytes([bump])], program)
        if not is_on_curve(candidate):
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("pda_found bump=%s seeds=%s", bump, len(base))
            return candidate, bump
    raise NoValidBump("no off-curve address for any bump in 255..0")


def get_associated_token_address(
    wallet: KeyLike,
    mint: KeyLike,
    token_program_id: KeyLike = TOKEN_PROGRAM_ID,
) -> bytes:
    owner = to_key_bytes(wallet, "wallet")
    mint_key = to_key_bytes(mint, "mint")
    token_program = to_key_bytes(token_program_id, "token program id")
    address, _ = find_program_address([owner, token_program, mint_key], ASSOCIATED_TOKEN_PROGRAM_ID)
    return address
