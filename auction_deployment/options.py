from pathlib import Path

import click

from auction_deployment.constants import AUCTION_CONTRACT, REVIEW_CONTRACT
from auction_deployment.types import LinkPolicyChoice, MinInt

params_filepath_option = click.option(
    "--params-filepath",
    "-f",
    help="Deployment params YAML filepath",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    required=True,
)

registry_filepath_option = click.option(
    "--registry-filepath",
    "-r",
    help="Registry filepath of an existing deployment",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    required=True,
)

link_policy_option = click.option(
    "--link-policy",
    "-l",
    help="Override the params file policy for awaiting the cross-link transaction.",
    type=LinkPolicyChoice(),
    required=False,
    default=None,
)

autosign_option = click.option(
    "--autosign",
    help="Automatically sign transactions.",
    is_flag=True,
)

verify_option = click.option(
    "--verify",
    help="Publish contract sources to the block explorer after deployment.",
    is_flag=True,
)

required_confirmations_option = click.option(
    "--required-confirmations",
    "-c",
    help="Override the params file number of confirmations awaited per transaction.",
    type=MinInt(0),
    required=False,
    default=None,
)

review_contract_option = click.option(
    "--review-contract",
    help="Registry name of the review contract",
    default=REVIEW_CONTRACT,
    show_default=True,
)

auction_contract_option = click.option(
    "--auction-contract",
    help="Registry name of the auction contract",
    default=AUCTION_CONTRACT,
    show_default=True,
)
