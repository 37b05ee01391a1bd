"""ABI encoding of proxy initialization arguments."""

from typing import Any, Sequence

from eth_abi import encode
from eth_abi.exceptions import EncodingError, ParseError

from .exceptions import InitArgsError


def encode_init_args(init_types: Sequence[str], init_values: Sequence[Any]) -> bytes:
    """
    ABI-encode initialization arguments as a raw parameter tuple.

    No function selector is prepended; the proxy forwards the bytes to the
    logic contract, which decodes them itself.

    Args:
        init_types: ABI type names, e.g. ["uint256", "address"]
        init_values: Values matching init_types one-to-one

    Returns:
        Encoded bytes (empty for an empty argument list)

    Raises:
        InitArgsError: If the lengths differ or a value does not fit its type
    """
    init_types = list(init_types)
    init_values = list(init_values)

    if len(init_types) != len(init_values):
        raise InitArgsError(
            f"Got {len(init_values)} init values for {len(init_types)} types: {init_types}"
        )

    try:
        return encode(init_types, init_values)
    except (EncodingError, ParseError, TypeError, ValueError) as e:
        raise InitArgsError(f"Cannot encode {init_values} as {init_types}: {e}") from e
