from enum import Enum
from pathlib import Path

import auction_deployment

#
# Filesystem
#

DEPLOYMENT_DIR = Path(auction_deployment.__file__).parent
PARAMS_DIR = DEPLOYMENT_DIR / "params"
ARTIFACTS_DIR = DEPLOYMENT_DIR / "artifacts"

#
# Networks
#

LOCAL_NETWORK_NAMES = ["local"]
FORK_NETWORK_SUFFIX = "-fork"

#
# Contracts
#

REVIEW_CONTRACT = "AssetReview"
AUCTION_CONTRACT = "ERC1155Auction"

# AssetReview entry point recording the auction contract, and its getter
LINK_METHOD = "setAuctionContract"
LINK_GETTER = "auctionContract"

DEFAULT_REQUIRED_CONFIRMATIONS = 1


class LinkPolicy(str, Enum):
    """How the cross-link transaction on the review contract is awaited."""

    CHECKED = "checked"  # await confirmation and read back the stored reference
    UNCHECKED = "unchecked"  # fire-and-forget; failures are reported, not raised
