"""
Minimal contract ABIs for the pool manager, position manager, swap router
and ERC20 tokens. Only the functions the client reads or prepares are listed.
"""

from typing import Any, Dict, List


def _param(name: str, type_: str, components: List[Dict[str, Any]] = None) -> Dict[str, Any]:
    param = {"internalType": type_, "name": name, "type": type_}
    if components is not None:
        param["components"] = components
    return param


def _function(
    name: str,
    inputs: List[Dict[str, Any]],
    outputs: List[Dict[str, Any]],
    state_mutability: str = "view",
) -> Dict[str, Any]:
    return {
        "inputs": inputs,
        "name": name,
        "outputs": outputs,
        "stateMutability": state_mutability,
        "type": "function",
    }


# Field order of PoolInfo as returned by getAllPools
POOL_INFO_FIELDS = [
    _param("pool", "address"),
    _param("token0", "address"),
    _param("token1", "address"),
    _param("index", "uint32"),
    _param("fee", "uint24"),
    _param("feeProtocol", "uint8"),
    _param("tickLower", "int24"),
    _param("tickUpper", "int24"),
    _param("tick", "int24"),
    _param("sqrtPriceX96", "uint160"),
    _param("liquidity", "uint128"),
]

PAIR_FIELDS = [
    _param("token0", "address"),
    _param("token1", "address"),
]

# Field order of PositionInfo as returned by getAllPositions
POSITION_INFO_FIELDS = [
    _param("id", "uint256"),
    _param("owner", "address"),
    _param("token0", "address"),
    _param("token1", "address"),
    _param("index", "uint32"),
    _param("fee", "uint24"),
    _param("liquidity", "uint128"),
    _param("tickLower", "int24"),
    _param("tickUpper", "int24"),
    _param("tokensOwed0", "uint128"),
    _param("tokensOwed1", "uint128"),
    _param("feeGrowthInside0LastX128", "uint256"),
    _param("feeGrowthInside1LastX128", "uint256"),
]

ERC20_ABI = [
    _function("symbol", [], [_param("", "string")]),
    _function("decimals", [], [_param("", "uint8")]),
    _function("balanceOf", [_param("account", "address")], [_param("", "uint256")]),
    _function(
        "approve",
        [_param("spender", "address"), _param("value", "uint256")],
        [_param("", "bool")],
        "nonpayable",
    ),
]

# Testnet tokens with an open mint, used by the faucet
TEST_TOKEN_ABI = ERC20_ABI + [
    _function("mint", [_param("to", "address"), _param("amount", "uint256")], [], "nonpayable"),
]

POOL_MANAGER_ABI = [
    _function("getAllPools", [], [_param("poolsInfo", "tuple[]", POOL_INFO_FIELDS)]),
    _function("getPairs", [], [_param("", "tuple[]", PAIR_FIELDS)]),
    _function(
        "createAndInitializePoolIfNecessary",
        [
            _param(
                "params",
                "tuple",
                [
                    _param("token0", "address"),
                    _param("token1", "address"),
                    _param("fee", "uint24"),
                    _param("tickLower", "int24"),
                    _param("tickUpper", "int24"),
                    _param("sqrtPriceX96", "uint160"),
                ],
            )
        ],
        [_param("pool", "address")],
        "payable",
    ),
]

POSITION_MANAGER_ABI = [
    _function("getAllPositions", [], [_param("positionInfo", "tuple[]", POSITION_INFO_FIELDS)]),
    _function(
        "mint",
        [
            _param(
                "params",
                "tuple",
                [
                    _param("token0", "address"),
                    _param("token1", "address"),
                    _param("index", "uint32"),
                    _param("amount0Desired", "uint256"),
                    _param("amount1Desired", "uint256"),
                    _param("recipient", "address"),
                    _param("deadline", "uint256"),
                ],
            )
        ],
        [
            _param("positionId", "uint256"),
            _param("liquidity", "uint128"),
            _param("amount0", "uint256"),
            _param("amount1", "uint256"),
        ],
        "payable",
    ),
    _function(
        "burn",
        [_param("positionId", "uint256")],
        [_param("amount0", "uint256"), _param("amount1", "uint256")],
        "nonpayable",
    ),
    _function(
        "collect",
        [_param("positionId", "uint256"), _param("recipient", "address")],
        [_param("amount0", "uint256"), _param("amount1", "uint256")],
        "nonpayable",
    ),
]

_QUOTE_EXACT_INPUT_PARAMS = [
    _param("tokenIn", "address"),
    _param("tokenOut", "address"),
    _param("indexPath", "uint32[]"),
    _param("amountIn", "uint256"),
    _param("sqrtPriceLimitX96", "uint160"),
]

_QUOTE_EXACT_OUTPUT_PARAMS = [
    _param("tokenIn", "address"),
    _param("tokenOut", "address"),
    _param("indexPath", "uint32[]"),
    _param("amountOut", "uint256"),
    _param("sqrtPriceLimitX96", "uint160"),
]

_EXACT_INPUT_PARAMS = [
    _param("tokenIn", "address"),
    _param("tokenOut", "address"),
    _param("indexPath", "uint32[]"),
    _param("recipient", "address"),
    _param("deadline", "uint256"),
    _param("amountIn", "uint256"),
    _param("amountOutMinimum", "uint256"),
    _param("sqrtPriceLimitX96", "uint160"),
]

_EXACT_OUTPUT_PARAMS = [
    _param("tokenIn", "address"),
    _param("tokenOut", "address"),
    _param("indexPath", "uint32[]"),
    _param("recipient", "address"),
    _param("deadline", "uint256"),
    _param("amountOut", "uint256"),
    _param("amountInMaximum", "uint256"),
    _param("sqrtPriceLimitX96", "uint160"),
]

# The quote functions simulate a swap and revert internally, so they are
# nonpayable but only ever invoked with eth_call.
SWAP_ROUTER_ABI = [
    _function(
        "quoteExactInput",
        [_param("params", "tuple", _QUOTE_EXACT_INPUT_PARAMS)],
        [_param("amountOut", "uint256")],
        "nonpayable",
    ),
    _function(
        "quoteExactOutput",
        [_param("params", "tuple", _QUOTE_EXACT_OUTPUT_PARAMS)],
        [_param("amountIn", "uint256")],
        "nonpayable",
    ),
    _function(
        "exactInput",
        [_param("params", "tuple", _EXACT_INPUT_PARAMS)],
        [_param("amountOut", "uint256")],
        "payable",
    ),
    _function(
        "exactOutput",
        [_param("params", "tuple", _EXACT_OUTPUT_PARAMS)],
        [_param("amountIn", "uint256")],
        "payable",
    ),
]
