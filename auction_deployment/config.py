import typing
from pathlib import Path
from typing import Any, Dict, Optional

from auction_deployment.constants import (
    ARTIFACTS_DIR,
    AUCTION_CONTRACT,
    DEFAULT_REQUIRED_CONFIRMATIONS,
    LINK_GETTER,
    REVIEW_CONTRACT,
    LinkPolicy,
)
from auction_deployment.utils import _load_yaml

# params file keys passed through verbatim as ape transaction kwargs
GAS_PARAMETER_KEYS = ("max_fee", "max_priority_fee", "gas_limit")


class DeploymentConfig:
    """
    Explicit deployment context for one run: target chain, signing account,
    contract names, cross-link policy, transaction parameters and registry location.
    """

    class Invalid(ValueError):
        """Raised when the params file is malformed"""

    def __init__(
        self,
        name: str,
        chain_id: int,
        registry_filepath: Path,
        network: Optional[str] = None,
        account: Optional[str] = None,
        review_contract: str = REVIEW_CONTRACT,
        auction_contract: str = AUCTION_CONTRACT,
        link_policy: LinkPolicy = LinkPolicy.CHECKED,
        link_getter: Optional[str] = LINK_GETTER,
        required_confirmations: int = DEFAULT_REQUIRED_CONFIRMATIONS,
        gas: Optional[Dict[str, Any]] = None,
        path: Optional[Path] = None,
    ):
        self.name = name
        self.chain_id = chain_id
        self.registry_filepath = registry_filepath
        self.network = network
        self.account = account
        self.review_contract = review_contract
        self.auction_contract = auction_contract
        self.link_policy = link_policy
        self.link_getter = link_getter
        self.required_confirmations = required_confirmations
        self.gas = gas or dict()
        self.path = path

    @classmethod
    def from_yaml(cls, filepath: Path) -> "DeploymentConfig":
        config = _load_yaml(filepath)
        if not isinstance(config, dict):
            raise cls.Invalid(f"Malformed params file {filepath}.")
        return cls.from_dict(config, path=filepath)

    @classmethod
    def from_dict(cls, config: typing.Dict, path: Optional[Path] = None) -> "DeploymentConfig":
        print("Validating parameters YAML...")

        deployment = config.get("deployment")
        if not deployment:
            raise cls.Invalid("deployment is not set in params file.")
        if not isinstance(deployment, dict):
            raise cls.Invalid("deployment must be a mapping in params file.")

        chain_id = deployment.get("chain_id")
        if chain_id is None:
            raise cls.Invalid("chain_id is not set in params file.")
        try:
            chain_id = int(chain_id)
        except (TypeError, ValueError):
            raise cls.Invalid(f"chain_id must be an integer, got '{chain_id}'.")

        contracts = cls._section(config, "contracts")
        link = cls._section(config, "link")
        transactions = cls._section(config, "transactions")

        try:
            link_policy = LinkPolicy(link.get("policy", LinkPolicy.CHECKED.value))
        except ValueError:
            choices = ", ".join(p.value for p in LinkPolicy)
            raise cls.Invalid(f"link policy must be one of: {choices}; got '{link['policy']}'.")

        required_confirmations = transactions.get(
            "required_confirmations", DEFAULT_REQUIRED_CONFIRMATIONS
        )
        if not isinstance(required_confirmations, int) or required_confirmations < 0:
            raise cls.Invalid(
                f"required_confirmations must be a non-negative integer, "
                f"got '{required_confirmations}'."
            )

        unknown_keys = set(transactions) - set(GAS_PARAMETER_KEYS) - {"required_confirmations"}
        if unknown_keys:
            raise cls.Invalid(f"Unknown transaction parameters: {', '.join(sorted(unknown_keys))}")
        gas = {key: transactions[key] for key in GAS_PARAMETER_KEYS if key in transactions}

        return cls(
            name=deployment.get("name", "auction"),
            chain_id=chain_id,
            registry_filepath=get_artifact_filepath(config),
            network=deployment.get("network"),
            account=deployment.get("account"),
            review_contract=contracts.get("review", REVIEW_CONTRACT),
            auction_contract=contracts.get("auction", AUCTION_CONTRACT),
            link_policy=link_policy,
            link_getter=link.get("getter", LINK_GETTER),
            required_confirmations=required_confirmations,
            gas=gas,
            path=path,
        )

    @classmethod
    def _section(cls, config: typing.Dict, key: str) -> typing.Dict:
        section = config.get(key) or dict()
        if not isinstance(section, dict):
            raise cls.Invalid(f"{key} must be a mapping in params file.")
        return section

    def transaction_kwargs(self) -> Dict[str, Any]:
        """Returns the ape kwargs applied to every deployment and transaction."""
        kwargs = dict(self.gas)
        kwargs["required_confirmations"] = self.required_confirmations
        return kwargs


def get_artifact_filepath(config: Dict) -> Path:
    """Returns the filepath of the registry file the deployment is published to."""
    artifact_config = DeploymentConfig._section(config, "artifacts")
    artifact_dir = Path(artifact_config.get("dir", ARTIFACTS_DIR))
    filename = artifact_config.get("filename")
    if not filename:
        raise DeploymentConfig.Invalid("artifact filename is not set in params file.")
    return artifact_dir / filename
