#!/usr/bin/python3

import click
from ape.cli import ConnectedProviderCommand, network_option

from auction_deployment.config import DeploymentConfig
from auction_deployment.options import (
    autosign_option,
    link_policy_option,
    params_filepath_option,
    required_confirmations_option,
    verify_option,
)
from auction_deployment.sequencer import DeploymentSequencer
from auction_deployment.transactor import Deployer


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@params_filepath_option
@link_policy_option
@required_confirmations_option
@autosign_option
@verify_option
def cli(network, params_filepath, link_policy, required_confirmations, autosign, verify):
    """
    Deploys AssetReview, then ERC1155Auction bound to the AssetReview address,
    then records the ERC1155Auction address on AssetReview.
    """
    config = DeploymentConfig.from_yaml(filepath=params_filepath)
    if link_policy is not None:
        config.link_policy = link_policy
    if required_confirmations is not None:
        config.required_confirmations = required_confirmations

    deployer = Deployer(config=config, verify=verify, autosign=autosign)
    sequencer = DeploymentSequencer.from_config(deployer=deployer, config=config)
    result = sequencer.run_and_finalize()

    if not result.linked:
        print(
            f"WARNING: {config.review_contract} is not linked to {config.auction_contract}; "
            f"run scripts/link_contracts.py against {config.registry_filepath}."
        )


if __name__ == "__main__":
    cli()
