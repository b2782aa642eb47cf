from types import SimpleNamespace

import pytest
from ape.exceptions import ApeException
from eth_utils import to_checksum_address

from auction_deployment.constants import AUCTION_CONTRACT, LINK_METHOD, REVIEW_CONTRACT


class Revert(ApeException):
    """Stands in for a reverted transaction raised by the provider"""


class Receipt:
    def __init__(self, txn_hash, failed=False):
        self.txn_hash = txn_hash
        self.failed = failed
        self.confirmations_awaited = False

    def await_confirmations(self):
        self.confirmations_awaited = True
        return self


class LinkMethod:
    """Review contract entry point recording the auction address."""

    name = LINK_METHOD

    def __init__(self, review):
        self.contract = review
        self.revert = False
        self.fail_receipt = False
        self.calls = []

    def __call__(self, auction_address, **kwargs):
        self.calls.append((auction_address, kwargs))
        if self.revert:
            raise Revert(f"{LINK_METHOD} reverted")
        receipt = Receipt(txn_hash=f"0x{len(self.calls):064x}", failed=self.fail_receipt)
        if not self.fail_receipt:
            self.contract.stored_auction = auction_address
        return receipt


class ReviewInstance:
    def __init__(self, address):
        self.address = address
        self.contract_type = SimpleNamespace(name=REVIEW_CONTRACT)
        self.stored_auction = to_checksum_address("0x" + "0" * 40)
        self.setAuctionContract = LinkMethod(self)

    def auctionContract(self):
        return self.stored_auction


class AuctionInstance:
    def __init__(self, address, review_address=None):
        self.address = address
        self.contract_type = SimpleNamespace(name=AUCTION_CONTRACT)
        self.review_address = review_address


class Container:
    def __init__(self, name, factory):
        self.contract_type = SimpleNamespace(name=name)
        self.factory = factory
        self.revert = False
        self.on_deploy = []

    def at(self, address):
        return self.factory(address)


class Chain:
    """In-memory ledger handing out sequential contract addresses."""

    def __init__(self):
        self.nonce = 0
        self.instances = []

    def next_address(self):
        self.nonce += 1
        return to_checksum_address(f"0x{self.nonce:040x}")


class FakeDeployer:
    """Records every deployment and transaction in submission order."""

    def __init__(self, chain):
        self.chain = chain
        self.events = []
        self.finalized = []

    def deploy(self, container, *args):
        self.events.append(("deploy", container.contract_type.name, args))
        if container.revert:
            raise Revert(f"{container.contract_type.name} constructor reverted")
        instance = container.factory(self.chain.next_address(), *args)
        for hook in container.on_deploy:
            hook(instance)
        self.chain.instances.append(instance)
        return instance

    def transact(self, method, *args, **overrides):
        self.events.append(("transact", method.name, args, overrides))
        return method(*args, **overrides)

    def finalize(self, deployments):
        self.finalized.append(deployments)


@pytest.fixture
def chain():
    return Chain()


@pytest.fixture
def deployer(chain):
    return FakeDeployer(chain)


@pytest.fixture
def review_container():
    return Container(REVIEW_CONTRACT, ReviewInstance)


@pytest.fixture
def auction_container():
    return Container(AUCTION_CONTRACT, AuctionInstance)


@pytest.fixture
def revert_error():
    return Revert
