import importlib.util
from pathlib import Path
from types import SimpleNamespace

import click
import pytest

from auction_deployment.constants import AUCTION_CONTRACT, REVIEW_CONTRACT
from auction_deployment.registry import RegistryEntry, deployment_from_registry, write_registry
from auction_deployment.sequencer import DeploymentSequencer, verify_linkage

REVIEW_ADDRESS = "0x0000000000000000000000000000000000000001"
AUCTION_ADDRESS = "0x0000000000000000000000000000000000000002"
SCRIPTS_DIR = Path(__file__).parent.parent / "scripts"


def _entry(name, address, chain_id=1337):
    return RegistryEntry(
        chain_id=chain_id,
        name=name,
        address=address,
        abi=[],
        tx_hash="0x" + "ab" * 32,
        block_number=1,
        deployer="0x0000000000000000000000000000000000000009",
    )


@pytest.fixture
def registry(tmp_path, monkeypatch, review_container, auction_container):
    containers = {REVIEW_CONTRACT: review_container, AUCTION_CONTRACT: auction_container}
    monkeypatch.setattr(
        "auction_deployment.registry.get_contract_container", lambda name: containers[name]
    )
    filepath = tmp_path / "registry.json"
    write_registry(
        entries=[_entry(REVIEW_CONTRACT, REVIEW_ADDRESS), _entry(AUCTION_CONTRACT, AUCTION_ADDRESS)],
        filepath=filepath,
    )
    return filepath


def _load(registry, chain_id=1337):
    return deployment_from_registry(
        filepath=registry,
        chain_id=chain_id,
        review_contract=REVIEW_CONTRACT,
        auction_contract=AUCTION_CONTRACT,
    )


def test_unlinked_deployment_detected(registry):
    review, auction = _load(registry)

    assert (review.address, auction.address) == (REVIEW_ADDRESS, AUCTION_ADDRESS)
    with pytest.raises(DeploymentSequencer.LinkFailed, match="expected " + AUCTION_ADDRESS):
        verify_linkage(review=review, auction=auction)


def test_relink_from_registry(registry, deployer, review_container, auction_container):
    review, auction = _load(registry)
    sequencer = DeploymentSequencer(
        deployer=deployer,
        review_container=review_container,
        auction_container=auction_container,
    )

    receipt = sequencer.link(review=review, auction=auction)

    assert not receipt.failed
    assert [event[0] for event in deployer.events] == ["transact"]
    verify_linkage(review=review, auction=auction)


def test_missing_contract_in_registry(registry):
    with pytest.raises(ValueError, match="ReviewV2 not found in registry"):
        deployment_from_registry(
            filepath=registry,
            chain_id=1337,
            review_contract="ReviewV2",
            auction_contract=AUCTION_CONTRACT,
        )


def test_other_chain_not_loaded(registry):
    with pytest.raises(ValueError, match=f"{REVIEW_CONTRACT}, {AUCTION_CONTRACT} not found"):
        _load(registry, chain_id=1)


def _load_script(name):
    spec = importlib.util.spec_from_file_location(name, SCRIPTS_DIR / f"{name}.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def connected(monkeypatch):
    def connect(module):
        provider = SimpleNamespace(active_provider=SimpleNamespace(chain_id=1337))
        monkeypatch.setattr(module, "networks", provider)
        return module

    return connect


def test_link_contracts_command(registry, connected, deployer, monkeypatch):
    link_contracts = connected(_load_script("link_contracts"))
    containers = {REVIEW_CONTRACT: None, AUCTION_CONTRACT: None}
    monkeypatch.setattr(link_contracts, "get_contract_container", containers.get)
    monkeypatch.setattr(link_contracts, "Transactor", lambda account, autosign: deployer)

    link_contracts.cli.callback(
        account=None,
        network=None,
        registry_filepath=registry,
        review_contract=REVIEW_CONTRACT,
        auction_contract=AUCTION_CONTRACT,
        link_policy=None,
        autosign=True,
    )

    (event,) = deployer.events
    assert event[:3] == ("transact", "setAuctionContract", (AUCTION_ADDRESS,))


def test_link_contracts_command_missing_contract(registry, connected):
    link_contracts = connected(_load_script("link_contracts"))

    with pytest.raises(click.ClickException, match="ReviewV2 not found"):
        link_contracts.cli.callback(
            account=None,
            network=None,
            registry_filepath=registry,
            review_contract="ReviewV2",
            auction_contract=AUCTION_CONTRACT,
            link_policy=None,
            autosign=True,
        )


def test_check_linkage_command_reports_unlinked(registry, connected):
    check_linkage = connected(_load_script("check_linkage"))

    with pytest.raises(click.ClickException, match="expected " + AUCTION_ADDRESS):
        check_linkage.cli.callback(
            network=None,
            registry_filepath=registry,
            review_contract=REVIEW_CONTRACT,
            auction_contract=AUCTION_CONTRACT,
            getter="auctionContract",
        )


def test_check_linkage_command_missing_contract(registry, connected):
    check_linkage = connected(_load_script("check_linkage"))

    with pytest.raises(click.ClickException, match="AuctionV2 not found"):
        check_linkage.cli.callback(
            network=None,
            registry_filepath=registry,
            review_contract=REVIEW_CONTRACT,
            auction_contract="AuctionV2",
            getter="auctionContract",
        )
