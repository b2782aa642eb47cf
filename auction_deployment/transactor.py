import typing
from collections import OrderedDict
from typing import Any, Dict, List, Optional

from ape import accounts, networks
from ape.api import AccountAPI, ReceiptAPI
from ape.cli.choices import select_account
from ape.contracts.base import ContractContainer, ContractInstance, ContractTransactionHandler
from ethpm_types import MethodABI
from web3.auto import w3

from auction_deployment.config import DeploymentConfig
from auction_deployment.confirm import _confirm_deployment, _continue
from auction_deployment.registry import registry_from_ape_deployments
from auction_deployment.utils import (
    check_chain_id,
    check_network,
    check_plugins,
    check_registry,
    verify_contracts,
)


class InvalidArguments(ValueError):
    """Raised when call or constructor arguments do not match the contract ABI"""


def _validate_method_args(
    method_abis: List[MethodABI], args: typing.Sequence[Any]
) -> typing.Dict[str, Any]:
    """Validates the transaction arguments against the function ABI."""
    if len(method_abis) == 0:
        raise InvalidArguments("No method abis provided for validation of args")

    abis_matching_args_length = [abi for abi in method_abis if len(abi.inputs) == len(args)]
    for abi in abis_matching_args_length:
        named_args = {}
        for arg, abi_input in zip(args, abi.inputs):
            if not w3.is_encodable(abi_input.type, arg):
                break
            named_args[abi_input.name] = arg
        else:
            return named_args
    raise InvalidArguments(
        f"Could not find ABI for '{method_abis[0].name}' with {len(args)} arg(s) and given type(s)"
    )


def _validate_constructor_args(
    contract_name: str, abi_inputs: List[Any], args: typing.Sequence[Any]
) -> OrderedDict:
    """Validates positional constructor arguments against the constructor ABI."""
    if len(args) != len(abi_inputs):
        raise InvalidArguments(
            f"Constructor parameters length mismatch - "
            f"{contract_name} ABI requires {len(abi_inputs)}, Got {len(args)}."
        )

    named_params = OrderedDict()
    for position, (abi_input, value) in enumerate(zip(abi_inputs, args)):
        if not w3.is_encodable(abi_input.type, value):
            raise InvalidArguments(
                f"Constructor param name '{abi_input.name}' at position {position} has a value "
                f"'{value}' whose type does not match expected ABI type '{abi_input.type}'"
            )
        named_params[abi_input.name] = value
    return named_params


class Transactor:
    """
    Represents an ape account plus validated/annotated transaction execution.
    """

    def __init__(
        self,
        account: Optional[AccountAPI] = None,
        autosign: bool = False,
        transaction_kwargs: Optional[Dict[str, Any]] = None,
    ):
        if account is None:
            self._account = select_account()
        else:
            self._account = account
        if autosign:
            print("WARNING: Autosign is enabled. Transactions will be signed automatically.")
        self._autosign = autosign
        self._account.set_autosign(autosign)
        self._transaction_kwargs = dict(transaction_kwargs or {})

    def get_account(self) -> AccountAPI:
        """Returns the transactor account."""
        return self._account

    def transact(self, method: ContractTransactionHandler, *args, **overrides) -> ReceiptAPI:
        named_args = _validate_method_args(method_abis=method.abis, args=args)
        base_message = (
            f"\nTransacting {method.contract.contract_type.name}"
            f"[{method.contract.address[:10]}].{method}"
        )
        if named_args:
            pretty_args = "\n\t".join(f"{k}={v}" for k, v in named_args.items())
            message = f"{base_message} with arguments:\n\t{pretty_args}"
        else:
            message = f"{base_message} with no arguments"
        print(message)
        if not self._autosign:
            _continue()

        kwargs = {**self._transaction_kwargs, **overrides}
        return method(*args, sender=self._account, **kwargs)


class Deployer(Transactor):
    """
    Represents an ape account plus the deployment context of a single
    run, plus validated/annotated execution.
    """

    def __init__(
        self,
        config: DeploymentConfig,
        verify: bool,
        account: Optional[AccountAPI] = None,
        autosign: bool = False,
    ):
        if account is None and config.account:
            account = accounts.load(config.account)
        super().__init__(
            account=account,
            autosign=autosign,
            transaction_kwargs=config.transaction_kwargs(),
        )
        self.config = config
        self.verify = verify

        check_plugins(verify=verify)
        if config.network:
            check_network(config.network)
        check_chain_id(config.chain_id)
        check_registry(config.registry_filepath, config.chain_id)
        self._print_deployment_info()

        if not self._autosign:
            # Confirms the start of the deployment.
            _continue()

    def deploy(self, container: ContractContainer, *args) -> ContractInstance:
        """Deploys a contract and returns the instance once its creation is confirmed."""
        contract_name = container.contract_type.name
        resolved_params = _validate_constructor_args(
            contract_name=contract_name,
            abi_inputs=container.constructor.abi.inputs,
            args=args,
        )
        if not self._autosign:
            _confirm_deployment(contract_name, resolved_params)

        instance = self._account.deploy(container, *args, **self._transaction_kwargs)
        print(f"(i) {contract_name} deployed at {instance.address}")
        return instance

    def finalize(self, deployments: List[ContractInstance]) -> None:
        """
        Publishes the deployments to the registry and optionally to block explorers.
        """
        registry_from_ape_deployments(
            deployments=deployments,
            output_filepath=self.config.registry_filepath,
        )
        if self.verify:
            verify_contracts(contracts=deployments)

    def _print_deployment_info(self):
        print(
            f"Deployment: {self.config.name}",
            f"Account: {self.get_account().address}",
            f"Config: {self.config.path}",
            f"Registry: {self.config.registry_filepath}",
            f"Verify: {self.verify}",
            f"Link Policy: {self.config.link_policy.value}",
            f"Required Confirmations: {self.config.required_confirmations}",
            f"Ecosystem: {networks.provider.network.ecosystem.name}",
            f"Network: {networks.provider.network.name}",
            f"Chain ID: {networks.provider.network.chain_id}",
            f"Gas Price: {networks.provider.gas_price}",
            sep="\n",
        )
