"""
Contract ABI definitions.

HelpNet contract events, views and owner functions, plus the ERC20 subset
used for the USDT and HELP tokens. Event argument order is part of the
contract interface.
"""


def _event(name: str, *inputs: tuple[str, str, bool]) -> dict:
    return {
        "anonymous": False,
        "inputs": [
            {"indexed": indexed, "name": arg, "type": typ}
            for arg, typ, indexed in inputs
        ],
        "name": name,
        "type": "event",
    }


def _function(
    name: str,
    inputs: list[tuple[str, str]],
    outputs: list[tuple[str, str]],
    mutability: str = "view",
) -> dict:
    return {
        "inputs": [{"name": arg, "type": typ} for arg, typ in inputs],
        "name": name,
        "outputs": [{"name": arg, "type": typ} for arg, typ in outputs],
        "stateMutability": mutability,
        "type": "function",
    }


HELPNET_EVENTS = [
    _event("UserRegistered", ("user", "address", True), ("sponsor", "address", True)),
    _event(
        "DonationReceived",
        ("user", "address", True),
        ("amount", "uint256", False),
        ("level", "uint256", False),
        ("newBalance", "uint256", False),
    ),
    _event(
        "VoluntaryDonation",
        ("user", "address", True),
        ("amount", "uint256", False),
        ("reservePool", "uint256", False),
    ),
    _event(
        "Withdrawal",
        ("user", "address", True),
        ("amountUsdt", "uint256", False),
        ("amountHelp", "uint256", False),
        ("remainingBalance", "uint256", False),
    ),
    _event(
        "IncentiveGranted",
        ("user", "address", True),
        ("amount", "uint256", False),
        ("unlockTimestamp", "uint256", False),
    ),
    _event("IncentiveClaimed", ("user", "address", True), ("amount", "uint256", False)),
    _event(
        "LevelUp",
        ("user", "address", True),
        ("newLevel", "uint256", False),
        ("remainingBalance", "uint256", False),
    ),
]

HELPNET_VIEWS = [
    _function("ENTRY_FEE", [], [("", "uint256")]),
    _function("getHelpPrice", [], [("", "uint256")]),
    _function("levelAmounts", [("", "uint256")], [("", "uint256")]),
    _function(
        "getUserQueueAndIncentiveInfo",
        [("user", "address")],
        [
            ("isInQueue", "bool"),
            ("queuePosition", "uint256"),
            ("lockedAmount", "uint256"),
            ("unlockTimestamp", "uint256"),
        ],
    ),
    _function("usdt", [], [("", "address")]),
    _function("helpToken", [], [("", "address")]),
]

HELPNET_OWNER_FUNCTIONS = [
    _function("injectFunds", [("amount", "uint256")], [], "nonpayable"),
    _function("injectHelp", [("amount", "uint256")], [], "nonpayable"),
    _function("resetQueue", [], [], "nonpayable"),
    _function(
        "withdrawFromReserve",
        [("to", "address"), ("amount", "uint256")],
        [],
        "nonpayable",
    ),
    _function(
        "recoverTokens",
        [("tokenAddress", "address"), ("amount", "uint256")],
        [],
        "nonpayable",
    ),
    _function("updateHelpPrice", [("newPrice", "uint256")], [], "nonpayable"),
]

HELPNET_ABI = HELPNET_EVENTS + HELPNET_VIEWS + HELPNET_OWNER_FUNCTIONS

# Minimal ERC20 ABI
ERC20_ABI = [
    _function("balanceOf", [("account", "address")], [("", "uint256")]),
    _function(
        "allowance",
        [("owner", "address"), ("spender", "address")],
        [("", "uint256")],
    ),
    _function(
        "approve",
        [("spender", "address"), ("amount", "uint256")],
        [("", "bool")],
        "nonpayable",
    ),
    _function("decimals", [], [("", "uint8")]),
]

EVENT_NAMES = tuple(event["name"] for event in HELPNET_EVENTS)
