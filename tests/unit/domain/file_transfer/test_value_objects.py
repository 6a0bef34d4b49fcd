"""
Unit tests for the transfer token value object and generator.
"""

from unittest.mock import patch

import pytest

from filedrop.domain.errors import EntropySourceError
from filedrop.domain.file_transfer.value_objects import (
    InvalidTransferTokenError,
    TransferToken,
    generate_token,
)


class TestTransferToken:
    def test_accepts_lowercase_hex(self):
        token = TransferToken("deadbeef00000000")
        assert str(token) == "deadbeef00000000"

    @pytest.mark.parametrize(
        "value",
        ["", "abc", "DEADBEEF", "xyz0", "dead beef", "../etc", None],
    )
    def test_rejects_malformed_values(self, value):
        with pytest.raises(InvalidTransferTokenError):
            TransferToken(value)

    def test_is_well_formed_never_raises(self):
        assert TransferToken.is_well_formed("00ff")
        assert not TransferToken.is_well_formed("../../passwd")
        assert not TransferToken.is_well_formed("")

    def test_is_well_formed_checks_length(self):
        assert TransferToken.is_well_formed("a" * 16, byte_length=8)
        assert not TransferToken.is_well_formed("a" * 14, byte_length=8)

    def test_tokens_are_immutable(self):
        token = TransferToken("abcd")
        with pytest.raises(Exception):
            token.value = "ef01"


class TestGenerateToken:
    def test_default_token_is_16_hex_chars(self):
        token = generate_token()
        assert len(token.value) == 16
        assert TransferToken.is_well_formed(token.value, byte_length=8)

    def test_length_follows_byte_count(self):
        assert len(generate_token(32).value) == 64

    def test_successive_tokens_differ(self):
        tokens = {generate_token().value for _ in range(200)}
        assert len(tokens) == 200

    def test_rejects_non_positive_length(self):
        with pytest.raises(ValueError):
            generate_token(0)

    def test_entropy_failure_is_reported(self):
        with patch(
            "filedrop.domain.file_transfer.value_objects.secrets.token_bytes",
            side_effect=OSError("no entropy"),
        ):
            with pytest.raises(EntropySourceError) as exc_info:
                generate_token()

        assert isinstance(exc_info.value.original_error, OSError)
