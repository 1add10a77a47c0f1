"""
Target and explorer configuration.

- ETHERSCAN_APIKEY / POLYGONSCAN_APIKEY: API key for each chain's explorer
- ETHERSCAN_BASE_URL / POLYGONSCAN_BASE_URL: optional endpoint overrides
- CONTRACT_FETCH_OUTPUT_DIR: output root (default: ./contracts)

A `.env` in the working directory is loaded when no explicit env mapping is given.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

from dotenv import load_dotenv

from .errors import ConfigError
from .paths import DEFAULT_OUTPUT_ROOT

ETHEREUM = "ethereum"
POLYGON = "polygon"


@dataclass(frozen=True)
class Explorer:
    chain_id: int
    endpoint: str
    endpoint_env: str
    api_key_env: str


@dataclass(frozen=True)
class ContractTarget:
    chain: str
    address: str


@dataclass(frozen=True)
class FetchConfig:
    target: str
    chain: str
    address: str
    endpoint: str
    api_key: str
    output_root: Path


EXPLORERS: Dict[str, Explorer] = {
    ETHEREUM: Explorer(1, "https://api.etherscan.io/", "ETHERSCAN_BASE_URL", "ETHERSCAN_APIKEY"),
    POLYGON: Explorer(137, "https://api.polygonscan.com/", "POLYGONSCAN_BASE_URL", "POLYGONSCAN_APIKEY"),
}

TARGETS: Dict[str, ContractTarget] = {
    "cryp_toadz":       ContractTarget(ETHEREUM, "0x1cb1a5e65610aeff2551a50f76a87a7d3fb649c6"),
    "generative_masks": ContractTarget(ETHEREUM, "0x80416304142fa37929f8a4eee83ee7d2dac12d7c"),
    "gal_verse":        ContractTarget(ETHEREUM, "0x582048C4077a34E7c3799962F1F8C5342a3F4b12"),
    "beefy":            ContractTarget(ETHEREUM, "0x18a20abeba0086ac0c564B2bA3a7BaF18568667D"),
    "beefy_strategy":   ContractTarget(ETHEREUM, "0xBaBaC5560Aa4CA3C5290DfcC5C159EdC0a51c316"),
    "beefy_chef":       ContractTarget(ETHEREUM, "0x0769fd68dFb93167989C6f7254cd0D766Fb2841F"),
    "convex_booster":   ContractTarget(ETHEREUM, "0xF403C135812408BFbE8713b5A23a04b3D48AAE31"),
    "pooltogether":     ContractTarget(ETHEREUM, "0xbc82221e131c082336cf698f0ca3ebd18afd4ce7"),
    "moonbirds":        ContractTarget(ETHEREUM, "0x23581767a106ae21c074b2276d25e5c3e136a68b"),
    "v1punks":          ContractTarget(ETHEREUM, "0x282bdd42f4eb70e7a9d9f40c8fea0825b7f68c5d"),
    "space_doodles":    ContractTarget(ETHEREUM, "0x620b70123fb810f6c653da7644b5dd0b6312e4d8"),
}

DEFAULT_TARGET = "v1punks"


def _resolve_target(target: Optional[str], address: Optional[str], chain: Optional[str]) -> tuple:
    if address:
        chain = (chain or ETHEREUM).strip().lower()
        return (target or address.lower()), ContractTarget(chain, address)
    name = target or DEFAULT_TARGET
    if name not in TARGETS:
        raise ConfigError(f"Unknown target {name!r} (known: {', '.join(sorted(TARGETS))})")
    found = TARGETS[name]
    if chain and chain.strip().lower() != found.chain:
        raise ConfigError(f"Target {name!r} lives on {found.chain}, not {chain}")
    return name, found


def load_config(
    target: Optional[str] = None,
    address: Optional[str] = None,
    chain: Optional[str] = None,
    output_root: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
) -> FetchConfig:
    if env is None:
        load_dotenv()
        env = os.environ

    name, contract = _resolve_target(target, address, chain)
    explorer = EXPLORERS.get(contract.chain)
    if explorer is None:
        raise ConfigError(f"Unknown chain {contract.chain!r} (known: {', '.join(sorted(EXPLORERS))})")

    api_key = (env.get(explorer.api_key_env) or "").strip()
    if not api_key:
        raise ConfigError(f"{explorer.api_key_env} not set (put it in your environment or .env)")

    endpoint = (env.get(explorer.endpoint_env) or "").strip() or explorer.endpoint
    root = output_root or env.get("CONTRACT_FETCH_OUTPUT_DIR") or DEFAULT_OUTPUT_ROOT

    return FetchConfig(
        target=name,
        chain=contract.chain,
        address=contract.address,
        endpoint=endpoint,
        api_key=api_key,
        output_root=Path(root),
    )
