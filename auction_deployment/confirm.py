from collections import OrderedDict


def _abort() -> None:
    print("Aborting deployment!")
    exit(-1)


def _continue() -> None:
    """Asks the user to continue."""
    answer = input("Continue Y/N? ")
    if answer.lower().strip() == "n":
        _abort()


def _confirm_deployment(contract_name: str, named_params: OrderedDict) -> None:
    """Shows the constructor arguments of a contract and asks the user to deploy it."""
    if named_params:
        pretty_params = "\n\t".join(f"{name}={value}" for name, value in named_params.items())
        print(f"\nDeploying {contract_name} with constructor arguments:\n\t{pretty_params}")
    else:
        print(f"\nDeploying {contract_name} with no constructor arguments")
    answer = input(f"Deploy {contract_name} Y/N? ")
    if answer.lower().strip() == "n":
        _abort()
