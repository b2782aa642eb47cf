from pathlib import Path

import click
from ape import networks
from ape.cli import ConnectedProviderCommand, network_option

from auction_deployment.registry import contracts_from_registry
from auction_deployment.utils import check_etherscan_plugin, verify_contracts


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@click.option(
    "--contract-name",
    "-c",
    "contract_names",
    help="Contract to verify",
    type=click.STRING,
    required=True,
    multiple=True,
)
@click.option(
    "--registry-filepath",
    "-f",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    help="Registry filepath of the deployment",
    required=True,
)
def cli(network, contract_names, registry_filepath):
    """Verify deployed contracts."""
    check_etherscan_plugin()
    chain_id = networks.active_provider.chain_id
    contracts = contracts_from_registry(registry_filepath, chain_id=chain_id)

    contract_instances = []
    for contract_name in contract_names:
        try:
            contract_instances.append(contracts[contract_name])
        except KeyError:
            raise ValueError(
                f"Contract '{contract_name}' not found in registry, '{registry_filepath}', "
                f"for chain {chain_id}"
            )

    verify_contracts(contract_instances)


if __name__ == "__main__":
    cli()
