"""
Tests for strict identifiers.

Strict identifiers fail loudly: decoding an unknown value raises
DecodeInvalidError and encoding one raises EncodeInvalidError.
"""
import xml.etree.ElementTree as ET
from typing import Optional

import pytest
from pydantic import BaseModel, ValidationError

from refdata.exceptions import (
    DecodeInvalidError,
    DecodeMalformedError,
    EncodeInvalidError,
    UnsupportedLookupError,
)
from refdata.tables import CreditCard, State


class Quote(BaseModel):
    """Document with strict identifier fields."""
    state: Optional[State.ID] = None
    card: Optional[CreditCard.ID] = None


# =============================================================================
# Identity
# =============================================================================

class TestIdentity:
    """Validity, normalization and copies."""

    def test_valid(self):
        assert State.ID("VA").valid()
        assert State.ID("va").valid()
        assert not State.ID("xyz").valid()
        assert not State.ID("").valid()

    def test_id_returns_copy_or_none(self):
        va = State.ID("VA")
        copy = va.id()
        assert copy == va
        assert copy is not va
        assert State.ID("xyz").id() is None

    def test_to_id_string(self):
        assert State.ID("VA").to_id_string() == "VA"
        assert State.ID("xyz").to_id_string() == ""

    def test_equals(self):
        va = State.ID("VA")
        assert va.equals(State.ID("VA"))
        assert not va.equals(State.ID("va"))
        assert not va.equals(None)

    def test_clone_keeps_type(self):
        clone = State.ID("VA").clone()
        assert isinstance(clone, State.ID)
        assert clone == "VA"

    def test_member(self):
        assert State.ID("va").member() is State.Virginia
        assert State.ID("xyz").member() is None

    def test_validated_id(self):
        validated = State.ID("va").validated_id()
        assert isinstance(validated, State.ValidatedID)
        assert validated.valid()
        assert validated.to_id_string() == "VA"
        assert not State.ID("xyz").validated_id().valid()

    def test_repr(self):
        assert repr(State.ID("VA")) == "StateID('VA')"


# =============================================================================
# Format A (JSON)
# =============================================================================

class TestJSON:
    """Object-notation encoding and decoding."""

    def test_state_round_trip(self):
        va = State.ID.from_json(b'"VA"')
        assert va == "VA"
        assert va.to_id_string() == "VA"
        assert State.by_id_string("va").name == "Virginia"
        assert State.by_id_string("va").display_name == "Virginia"

    def test_decode_folds_to_canonical(self):
        visa = CreditCard.ID.from_json('"VISA"')
        assert visa == "visa"
        assert visa.to_json() == '"visa"'

    def test_encode_emits_canonical_spelling(self):
        assert State.ID("va").to_json() == '"VA"'

    def test_decode_unknown(self):
        with pytest.raises(DecodeInvalidError) as exc_info:
            State.ID.from_json('"no_such_state"')
        assert exc_info.value.code == "RD_DECODE_INVALID"
        assert exc_info.value.details["value"] == "no_such_state"
        assert exc_info.value.enumeration == "EnumState"

    def test_encode_unknown(self):
        with pytest.raises(EncodeInvalidError) as exc_info:
            State.ID("xyz").to_json()
        assert str(exc_info.value.message) == "attempted to marshal invalid enumeration ID value"

    def test_empty_encodes_null(self):
        assert State.ID("").to_json() == "null"

    def test_null_and_empty_decode_to_none(self):
        assert State.ID.from_json("null") is None
        assert State.ID.from_json('""') is None

    def test_malformed(self):
        with pytest.raises(DecodeMalformedError):
            State.ID.from_json("{")
        with pytest.raises(DecodeMalformedError):
            State.ID.from_json("42")

    def test_codec_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            State.ID.from_json('"xyz"')


# =============================================================================
# Format B (XML)
# =============================================================================

class TestXML:
    """Element-notation encoding and decoding."""

    def test_encode(self):
        assert State.ID("va").to_xml_string() == "<Value>VA</Value>"
        assert State.ID("VA").to_xml_string("State") == "<State>VA</State>"

    def test_encode_empty(self):
        assert State.ID("").to_xml_string() == "<Value></Value>"

    def test_encode_unknown(self):
        with pytest.raises(EncodeInvalidError):
            State.ID("xyz").to_xml()

    def test_decode(self):
        assert State.ID.from_xml("<State>va</State>") == "VA"
        assert State.ID.from_xml(b"<State>TX</State>") == "TX"

    def test_decode_element(self):
        element = ET.Element("State")
        element.text = "md"
        assert State.ID.from_xml(element) == "MD"

    def test_decode_empty(self):
        assert State.ID.from_xml("<State></State>") is None
        assert State.ID.from_xml("<State/>") is None

    def test_decode_unknown(self):
        with pytest.raises(DecodeInvalidError):
            State.ID.from_xml("<State>xyz</State>")

    def test_decode_malformed(self):
        with pytest.raises(DecodeMalformedError):
            State.ID.from_xml("<State>VA")


# =============================================================================
# Hierarchy
# =============================================================================

class TestParent:
    """Convenience parent lookup on identifiers."""

    def test_root_returns_itself(self, widget):
        assert widget.ID("george_jetson").parent() == "george_jetson"

    def test_child_returns_parent(self, widget):
        parent = widget.ID("ELROY_JETSON").parent()
        assert parent == "george_jetson"
        assert isinstance(parent, widget.ID)

    def test_unresolved(self, widget):
        assert widget.ID("fred_jetson").parent() is None

    def test_not_hierarchical(self):
        with pytest.raises(UnsupportedLookupError):
            State.ID("VA").parent()


# =============================================================================
# pydantic Integration
# =============================================================================

class TestPydantic:
    """Strict identifiers as model fields."""

    def test_decode(self):
        quote = Quote.model_validate_json('{"state": "va", "card": "VISA"}')
        assert quote.state == "VA"
        assert isinstance(quote.state, State.ID)
        assert quote.card == "visa"

    def test_null_and_missing(self):
        quote = Quote.model_validate_json('{"state": null}')
        assert quote.state is None
        assert quote.card is None

    def test_unknown_fails_model(self):
        with pytest.raises(ValidationError) as exc_info:
            Quote.model_validate_json('{"state": "no_such_state"}')
        assert exc_info.value.errors()[0]["loc"] == ("state",)

    def test_wrong_type_fails_model(self):
        with pytest.raises(ValidationError):
            Quote.model_validate({"state": 42})

    def test_serialize(self):
        quote = Quote(state="tx", card="amex")
        assert quote.model_dump() == {"state": "TX", "card": "amex"}
        assert quote.model_dump_json() == '{"state":"TX","card":"amex"}'
