from ape import networks

from auction_deployment.constants import FORK_NETWORK_SUFFIX, LOCAL_NETWORK_NAMES


def is_local_network() -> bool:
    """Returns True if the connected network is a local (or forked) development network."""
    network_name = networks.provider.network.name
    return network_name in LOCAL_NETWORK_NAMES or network_name.endswith(FORK_NETWORK_SUFFIX)
