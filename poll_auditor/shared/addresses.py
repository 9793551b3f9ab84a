"""
Address normalization rules.

Every address that is used as a mapping key or compared against a vote
address goes through one of these helpers first:

- Stacks addresses (c32check) are case-insensitive and canonically
  upper-case: whitespace is stripped and the address upper-cased. For a
  contract principal (ADDRESS.contract-name) only the address part is
  upper-cased; contract names are case-sensitive.
- Bitcoin bech32/bech32m addresses (bc1, tb1, bcrt1) are case-insensitive
  and canonically lower-case. Base58 addresses (P2PKH, P2SH) are
  case-sensitive and only have whitespace stripped.
"""

from typing import Optional

BECH32_PREFIXES = ("bc1", "tb1", "bcrt1")


def normalize_stacks_address(address: Optional[str]) -> str:
    if not address:
        return ""
    principal, dot, contract_name = address.strip().partition(".")
    return principal.upper() + dot + contract_name


def normalize_btc_address(address: Optional[str]) -> str:
    if not address:
        return ""
    stripped = address.strip()
    if stripped.lower().startswith(BECH32_PREFIXES):
        return stripped.lower()
    return stripped

