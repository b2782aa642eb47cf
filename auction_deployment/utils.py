import json
import os
from pathlib import Path
from typing import List

import yaml
from ape import networks, project
from ape.contracts import ContractContainer, ContractInstance

from auction_deployment.networks import is_local_network


def _load_yaml(filepath: Path) -> dict:
    """Loads a YAML file."""
    with open(filepath, "r") as file:
        return yaml.safe_load(file)


def _load_json(filepath: Path) -> dict:
    """Loads a JSON file."""
    with open(filepath, "r") as file:
        return json.load(file)


def check_chain_id(chain_id: int) -> None:
    """Checks that the params file targets the chain of the connected provider."""
    provider_chain_id = networks.provider.network.chain_id
    if chain_id != provider_chain_id and not is_local_network():
        raise ValueError(
            f"chain_id in params file ({chain_id}) does not match "
            f"chain_id of current network ({provider_chain_id})."
        )


def check_registry(registry_filepath: Path, chain_id: int) -> None:
    """
    Checks that the deployment has not already been published for
    the chain_id specified in the params file.
    """
    if not registry_filepath.exists():
        return

    registry_chain_ids = map(int, _load_json(registry_filepath).keys())
    if chain_id in registry_chain_ids:
        raise ValueError(
            f"Deployment is already published for chain_id {chain_id} in {registry_filepath}."
        )


def check_etherscan_plugin() -> None:
    """
    Checks that the ape-etherscan plugin is installed and that
    the appropriate API key environment variable is set.
    """
    if is_local_network():
        # unnecessary for local deployment
        return
    try:
        from ape_etherscan.utils import API_KEY_ENV_KEY_MAP
    except ImportError:
        raise ImportError("Please install the ape-etherscan plugin to verify contracts.")
    ecosystem_name = networks.provider.network.ecosystem.name
    explorer_envvar = API_KEY_ENV_KEY_MAP.get(ecosystem_name)
    if not os.environ.get(explorer_envvar):
        raise ValueError(f"{explorer_envvar} is not set.")


def check_infura_plugin() -> None:
    """Checks that the ape-infura plugin is installed."""
    if is_local_network():
        return  # unnecessary for local deployment
    if networks.provider.name != "infura":
        return  # unnecessary when using a provider different than infura
    try:
        from ape_infura.provider import _ENVIRONMENT_VARIABLE_NAMES
    except ImportError:
        raise ImportError("Please install the ape-infura plugin to use this script.")
    for envvar in _ENVIRONMENT_VARIABLE_NAMES:
        if os.environ.get(envvar):
            break
    else:
        raise ValueError(
            f"No Infura API key found in "
            f"environment variables: {', '.join(_ENVIRONMENT_VARIABLE_NAMES)}"
        )


def check_plugins(verify: bool) -> None:
    print("Checking plugins...")
    if verify:
        check_etherscan_plugin()
    check_infura_plugin()


def verify_contracts(contracts: List[ContractInstance]) -> None:
    explorer = networks.provider.network.explorer
    for instance in contracts:
        print(f"(i) Verifying {instance.contract_type.name}...")
        explorer.publish_contract(instance.address)


def get_contract_container(contract: str) -> ContractContainer:
    try:
        return getattr(project, contract)
    except AttributeError:
        raise ValueError(f"No contract found with name '{contract}'.")


def check_network(network_choice: str) -> None:
    """Checks that the connected provider serves the network named in the params file."""
    connected_choice = networks.provider.network_choice
    if not connected_choice.startswith(network_choice):
        raise ValueError(
            f"network in params file ({network_choice}) does not match "
            f"the connected network ({connected_choice})."
        )
