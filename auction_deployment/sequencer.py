from typing import List, NamedTuple, Optional

from ape.api import ReceiptAPI
from ape.contracts.base import ContractContainer, ContractInstance
from ape.exceptions import ApeException
from ape.utils import ZERO_ADDRESS
from eth_utils import to_checksum_address

from auction_deployment.config import DeploymentConfig
from auction_deployment.constants import LINK_GETTER, LINK_METHOD, LinkPolicy
from auction_deployment.utils import get_contract_container


class DeploymentResult(NamedTuple):
    review: ContractInstance
    auction: ContractInstance
    link_receipt: Optional[ReceiptAPI]
    linked: bool


class DeploymentSequencer:
    """
    Deploys the review contract, then the auction contract bound to the review
    contract's address, then records the auction contract's address on the
    review contract.

    Each step waits on the previous one; a failure in either deployment
    aborts the sequence before the review contract is called.
    """

    class Failed(Exception):
        """Raised when the deployment sequence cannot complete"""

    class OrderingViolation(Failed):
        """Raised when the auction contract would be deployed without a review address"""

    class LinkFailed(Failed):
        """Raised when the review contract does not hold the auction contract's address"""

    def __init__(
        self,
        deployer,
        review_container: ContractContainer,
        auction_container: ContractContainer,
        link_policy: LinkPolicy = LinkPolicy.CHECKED,
        link_getter: Optional[str] = LINK_GETTER,
    ):
        self.deployer = deployer
        self.review_container = review_container
        self.auction_container = auction_container
        self.link_policy = LinkPolicy(link_policy)
        self.link_getter = link_getter
        self.deployments: List[ContractInstance] = []

    @classmethod
    def from_config(cls, deployer, config: DeploymentConfig) -> "DeploymentSequencer":
        return cls(
            deployer=deployer,
            review_container=get_contract_container(config.review_contract),
            auction_container=get_contract_container(config.auction_contract),
            link_policy=config.link_policy,
            link_getter=config.link_getter,
        )

    def run(self) -> DeploymentResult:
        self.deployments = []
        review = self.deploy_review()
        auction = self.deploy_auction(review)
        link_receipt = self.link(review, auction)
        linked = link_receipt is not None and not link_receipt.failed
        if linked:
            print(f"(i) {_name(review)} linked to {_name(auction)} at {auction.address}")
        return DeploymentResult(
            review=review, auction=auction, link_receipt=link_receipt, linked=linked
        )

    def run_and_finalize(self) -> DeploymentResult:
        """
        Runs the sequence and writes the registry for every contract deployed,
        including when the sequence aborts after a deployment.
        """
        try:
            return self.run()
        finally:
            if self.deployments:
                self.deployer.finalize(deployments=list(self.deployments))

    def deploy_review(self) -> ContractInstance:
        review = self.deployer.deploy(self.review_container)
        self.deployments.append(review)
        return review

    def deploy_auction(self, review: ContractInstance) -> ContractInstance:
        review_address = getattr(review, "address", None)
        if not review_address or review_address == ZERO_ADDRESS:
            raise self.OrderingViolation(
                f"Cannot deploy {self.auction_container.contract_type.name}: "
                f"review contract address is unknown ({review_address!r})."
            )
        auction = self.deployer.deploy(self.auction_container, review_address)
        self.deployments.append(auction)
        return auction

    def link(self, review: ContractInstance, auction: ContractInstance) -> Optional[ReceiptAPI]:
        """Records the auction contract's address on the review contract."""
        link_method = getattr(review, LINK_METHOD)

        if self.link_policy == LinkPolicy.UNCHECKED:
            try:
                return self.deployer.transact(
                    link_method, auction.address, required_confirmations=0
                )
            except ApeException as e:
                print(f"WARNING: {LINK_METHOD}({auction.address}) failed and was not retried: {e}")
                return None

        receipt = self.deployer.transact(link_method, auction.address)
        receipt.await_confirmations()
        if receipt.failed:
            raise self.LinkFailed(
                f"{_name(review)}.{LINK_METHOD}({auction.address}) failed "
                f"in transaction {receipt.txn_hash}."
            )
        self.verify_linkage(review, auction)
        return receipt

    def verify_linkage(self, review: ContractInstance, auction: ContractInstance) -> None:
        verify_linkage(review=review, auction=auction, getter=self.link_getter)


def verify_linkage(
    review: ContractInstance, auction: ContractInstance, getter: Optional[str] = LINK_GETTER
) -> None:
    """Checks that the review contract's stored auction reference is the auction contract."""
    if not getter:
        print(f"(i) Skipping read-back of {_name(review)} auction reference.")
        return

    try:
        getter_method = getattr(review, getter)
    except AttributeError:
        raise DeploymentSequencer.LinkFailed(f"{_name(review)} has no '{getter}' getter.")

    stored_address = getter_method()
    if to_checksum_address(stored_address) != to_checksum_address(auction.address):
        raise DeploymentSequencer.LinkFailed(
            f"{_name(review)}.{getter}() returned {stored_address}; expected {auction.address}."
        )


def _name(instance: ContractInstance) -> str:
    return instance.contract_type.name
