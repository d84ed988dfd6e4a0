"""
Tests for the argument encoder.

Tests cover:
- Integer widths, ranges and decimal-string input
- bool/string/symbol/address encoding
- vec with nested items and the absent-optional case
- Rejection of values that cannot be represented
- Decoding of return values
"""

import pytest
from stellar_sdk import Address, scval, xdr

from flashonstellar.errors import EncodingError
from flashonstellar.protocol.encoder import decode_value, encode_arg, encode_args
from flashonstellar.types import ContractArg

from .conftest import CONTRACT_ID, SOURCE


def arg(value, type_):
    return ContractArg(value=value, type=type_)


# =============================================================================
# Integers
# =============================================================================


class TestIntegerEncoding:
    """Tests for the six integer types."""

    @pytest.mark.parametrize(
        "type_,value,expected",
        [
            ("u32", 7, xdr.SCValType.SCV_U32),
            ("i32", -7, xdr.SCValType.SCV_I32),
            ("u64", 2**64 - 1, xdr.SCValType.SCV_U64),
            ("i64", -(2**63), xdr.SCValType.SCV_I64),
            ("u128", 2**100, xdr.SCValType.SCV_U128),
            ("i128", -(2**100), xdr.SCValType.SCV_I128),
        ],
    )
    def test_encodes_in_range(self, type_, value, expected) -> None:
        """Test each width encodes to its SCVal type and decodes back."""
        encoded = encode_arg(arg(value, type_))

        assert encoded.type == expected
        assert decode_value(encoded) == value

    def test_negative_u32_rejected(self) -> None:
        """Test a negative value cannot be a u32."""
        with pytest.raises(EncodingError) as exc_info:
            encode_arg(arg(-1, "u32"), method="get_providers")

        assert exc_info.value.arg_type == "u32"
        assert exc_info.value.method == "get_providers"
        assert exc_info.value.code == "ENCODING_ERROR"

    @pytest.mark.parametrize(
        "type_,value",
        [
            ("u32", 2**32),
            ("i32", 2**31),
            ("u64", -1),
            ("i64", 2**63),
            ("u128", 2**128),
            ("i128", -(2**127) - 1),
        ],
    )
    def test_out_of_range_rejected(self, type_, value) -> None:
        """Test values just outside each range are rejected."""
        with pytest.raises(EncodingError):
            encode_arg(arg(value, type_))

    def test_decimal_string_accepted(self) -> None:
        """Test 128-bit values may be given as decimal strings."""
        encoded = encode_arg(arg("340282366920938463463374607431768211455", "u128"))

        assert decode_value(encoded) == 2**128 - 1

    def test_non_numeric_string_rejected(self) -> None:
        """Test a non-decimal string is rejected."""
        with pytest.raises(EncodingError):
            encode_arg(arg("12abc", "i64"))

    def test_bool_is_not_an_integer(self) -> None:
        """Test True is not silently encoded as 1."""
        with pytest.raises(EncodingError):
            encode_arg(arg(True, "u32"))

    def test_float_rejected(self) -> None:
        """Test floats are rejected for integer types."""
        with pytest.raises(EncodingError):
            encode_arg(arg(1.5, "i32"))


# =============================================================================
# Scalars
# =============================================================================


class TestScalarEncoding:
    """Tests for bool, string, symbol and address."""

    def test_bool(self) -> None:
        encoded = encode_arg(arg(False, "bool"))
        assert encoded.type == xdr.SCValType.SCV_BOOL
        assert decode_value(encoded) is False

    def test_bool_rejects_int(self) -> None:
        with pytest.raises(EncodingError):
            encode_arg(arg(1, "bool"))

    def test_string(self) -> None:
        encoded = encode_arg(arg("EU region", "string"))
        assert encoded.type == xdr.SCValType.SCV_STRING
        assert decode_value(encoded) == "EU region"

    def test_symbol(self) -> None:
        encoded = encode_arg(arg("transfer", "symbol"))
        assert encoded.type == xdr.SCValType.SCV_SYMBOL
        assert decode_value(encoded) == "transfer"

    def test_symbol_rejects_non_string(self) -> None:
        with pytest.raises(EncodingError):
            encode_arg(arg(42, "symbol"))

    def test_symbol_limits(self) -> None:
        assert decode_value(encode_arg(arg("A_z9" * 8, "symbol"))) == "A_z9" * 8
        assert decode_value(encode_arg(arg("", "symbol"))) == ""

    @pytest.mark.parametrize(
        "value", ["has space!", "dash-ed", "ünï", "trailing\n", "x" * 33]
    )
    def test_symbol_rejects_outside_charset(self, value) -> None:
        """Test values the ledger cannot hold as a symbol fail locally."""
        with pytest.raises(EncodingError) as exc_info:
            encode_arg(arg(value, "symbol"), method="set_tag")

        assert exc_info.value.details["type"] == "symbol"
        assert exc_info.value.method == "set_tag"

    def test_account_address(self) -> None:
        """Test account strkeys decode back to the same string."""
        encoded = encode_arg(arg(SOURCE, "address"))

        assert encoded.type == xdr.SCValType.SCV_ADDRESS
        assert decode_value(encoded) == SOURCE

    def test_contract_address(self) -> None:
        encoded = encode_arg(arg(CONTRACT_ID, "address"))
        assert decode_value(encoded) == CONTRACT_ID

    def test_address_object_accepted(self) -> None:
        encoded = encode_arg(arg(Address(SOURCE), "address"))
        assert decode_value(encoded) == SOURCE

    @pytest.mark.parametrize("value", ["not-an-address", "", None, 12])
    def test_invalid_address_rejected(self, value) -> None:
        with pytest.raises(EncodingError):
            encode_arg(arg(value, "address"))


# =============================================================================
# Vectors
# =============================================================================


class TestVecEncoding:
    """Tests for vec values."""

    def test_none_is_void(self) -> None:
        """Test an absent optional encodes as void, not an empty vec."""
        encoded = encode_arg(arg(None, "vec"))

        assert encoded.type == xdr.SCValType.SCV_VOID
        assert decode_value(encoded) is None

    def test_empty_list_is_empty_vec(self) -> None:
        encoded = encode_arg(arg([], "vec"))

        assert encoded.type == xdr.SCValType.SCV_VEC
        assert decode_value(encoded) == []

    def test_nested_items(self) -> None:
        """Test each element is encoded by its own declared type."""
        value = [
            {"value": 1, "type": "u32"},
            {"value": "a", "type": "symbol"},
            {"value": [{"value": True, "type": "bool"}], "type": "vec"},
        ]
        encoded = encode_arg(arg(value, "vec"))

        assert decode_value(encoded) == [1, "a", [True]]

    def test_untyped_item_rejected(self) -> None:
        with pytest.raises(EncodingError):
            encode_arg(arg([1, 2], "vec"))

    def test_non_list_rejected(self) -> None:
        with pytest.raises(EncodingError):
            encode_arg(arg("abc", "vec"))


# =============================================================================
# Sequences and decoding
# =============================================================================


class TestEncodeArgs:
    def test_preserves_order(self) -> None:
        encoded = encode_args([arg(1, "u32"), arg("x", "string"), arg(True, "bool")])

        assert [decode_value(v) for v in encoded] == [1, "x", True]

    def test_empty(self) -> None:
        assert encode_args([]) == []


class TestDecodeValue:
    def test_map_with_address_values(self) -> None:
        """Test addresses nested in maps decode to strkeys."""
        value = scval.to_map({scval.to_symbol("owner"): scval.to_address(SOURCE)})

        assert decode_value(value) == {"owner": SOURCE}

    def test_void(self) -> None:
        assert decode_value(scval.to_void()) is None
