#!/usr/bin/python3

import click
from ape import networks
from ape.cli import ConnectedProviderCommand, account_option, network_option

from auction_deployment.constants import LinkPolicy
from auction_deployment.options import (
    auction_contract_option,
    autosign_option,
    link_policy_option,
    registry_filepath_option,
    review_contract_option,
)
from auction_deployment.registry import deployment_from_registry
from auction_deployment.sequencer import DeploymentSequencer
from auction_deployment.transactor import Transactor
from auction_deployment.utils import get_contract_container


@click.command(cls=ConnectedProviderCommand, name="link-contracts")
@account_option()
@network_option(required=True)
@registry_filepath_option
@review_contract_option
@auction_contract_option
@link_policy_option
@autosign_option
def cli(
    account,
    network,
    registry_filepath,
    review_contract,
    auction_contract,
    link_policy,
    autosign,
):
    """
    Records the registry's auction contract address on the registry's review contract.
    Used to repair a deployment whose cross-link transaction never landed.
    """
    chain_id = networks.active_provider.chain_id
    try:
        review, auction = deployment_from_registry(
            filepath=registry_filepath,
            chain_id=chain_id,
            review_contract=review_contract,
            auction_contract=auction_contract,
        )
    except ValueError as e:
        raise click.ClickException(str(e))

    transactor = Transactor(account=account, autosign=autosign)
    sequencer = DeploymentSequencer(
        deployer=transactor,
        review_container=get_contract_container(review_contract),
        auction_container=get_contract_container(auction_contract),
        link_policy=link_policy or LinkPolicy.CHECKED,
    )
    try:
        sequencer.link(review=review, auction=auction)
    except DeploymentSequencer.LinkFailed as e:
        raise click.ClickException(str(e))


if __name__ == "__main__":
    cli()
