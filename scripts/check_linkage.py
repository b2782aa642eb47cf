#!/usr/bin/python3

import click
from ape import networks
from ape.cli import ConnectedProviderCommand, network_option

from auction_deployment.constants import LINK_GETTER
from auction_deployment.options import (
    auction_contract_option,
    registry_filepath_option,
    review_contract_option,
)
from auction_deployment.registry import deployment_from_registry
from auction_deployment.sequencer import DeploymentSequencer, verify_linkage


@click.command(cls=ConnectedProviderCommand, name="check-linkage")
@network_option(required=True)
@registry_filepath_option
@review_contract_option
@auction_contract_option
@click.option(
    "--getter",
    "-g",
    help="Review contract view function returning the stored auction address",
    default=LINK_GETTER,
    show_default=True,
)
def cli(network, registry_filepath, review_contract, auction_contract, getter):
    """Checks that the registry's review contract points at the registry's auction contract."""
    chain_id = networks.active_provider.chain_id
    try:
        review, auction = deployment_from_registry(
            filepath=registry_filepath,
            chain_id=chain_id,
            review_contract=review_contract,
            auction_contract=auction_contract,
        )
        verify_linkage(review=review, auction=auction, getter=getter)
    except (ValueError, DeploymentSequencer.LinkFailed) as e:
        raise click.ClickException(str(e))
    print(f"(i) {review_contract} at {review.address} is linked to {auction.address}")


if __name__ == "__main__":
    cli()
