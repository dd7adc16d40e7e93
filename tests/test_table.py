"""
Tests for enumeration tables and member records.

Covers lookups by ID, position, name and alternative key, aliases,
subsets, typed metadata fields, hierarchy and member documents.
"""
import pytest

from refdata.exceptions import CatalogValidationError, UnsupportedLookupError
from refdata.models import EnumerationTable, Member, by_id, by_id_string, by_index


# =============================================================================
# ID Lookups
# =============================================================================

class TestByIdString:
    """Case-insensitive lookup by canonical ID."""

    def test_state_lookup_any_case(self, catalog):
        state = catalog["State"]
        virginia = state.by_id_string("VA")
        assert virginia is not None
        assert virginia.name == "Virginia"
        assert state.by_id_string("va") is virginia
        assert state.by_id_string("Va") is virginia

    def test_unknown_and_empty(self, catalog):
        state = catalog["State"]
        assert state.by_id_string("XX") is None
        assert state.by_id_string("") is None
        assert state.by_id_string(None) is None

    def test_non_us_is_a_member(self, catalog):
        state = catalog["State"]
        assert state.by_id_string("zz") is state.NonUS
        assert state.ValidatedID.from_json('"zz"').to_json() == '"ZZ"'

    def test_by_id_accepts_identifiers(self, catalog):
        state = catalog["State"]
        assert state.by_id(state.ID("va")) is state.Virginia
        assert state.by_id(state.ValidatedID("va")) is state.Virginia
        assert state.by_id(state.Virginia) is state.Virginia
        assert state.by_id("va") is state.Virginia

    def test_by_id_invalid_identifier(self, catalog):
        state = catalog["State"]
        assert state.by_id(state.ID("xyz")) is None
        assert state.by_id(state.ValidatedID("xyz")) is None
        assert state.by_id(None) is None

    def test_contains(self, catalog):
        state = catalog["State"]
        assert "va" in state
        assert state.ID("TX") in state
        assert state.Virginia in state
        assert "xyz" not in state
        assert 5 not in state

    def test_empty_table(self):
        table = EnumerationTable("EnumEmpty", "Empty")
        table.install([])
        assert table.by_id_string("anything") is None
        assert table.by_index(0) is None
        assert len(table) == 0


# =============================================================================
# Positional Lookups
# =============================================================================

class TestByIndex:
    """Positional lookup uses declaration order, not sort order."""

    def test_position_differs_from_sort_order(self, catalog):
        pc_error = catalog["PCError"]
        positional = [str(m.id) for m in pc_error.items]
        by_sort = [str(m.id) for m in pc_error.sorted_items()]
        assert positional != by_sort

        assert pc_error.by_index(0) is pc_error.items[0]
        assert str(pc_error.by_index(0).id) == "5003Year"

    def test_out_of_range(self, catalog):
        state = catalog["State"]
        assert state.by_index(-1) is None
        assert state.by_index(len(state)) is None
        assert state.by_index(len(state) - 1) is state.items[-1]

    def test_non_integer(self, catalog):
        state = catalog["State"]
        assert state.by_index("0") is None
        assert state.by_index(True) is None

    def test_sorted_items_ties_keep_declaration_order(self):
        table = EnumerationTable("EnumTie", "Tie")
        table.install([
            Member(id=table.ID("b"), name="B", sort_order=1, table=table),
            Member(id=table.ID("a"), name="A", sort_order=1, table=table),
            Member(id=table.ID("c"), name="C", sort_order=0, table=table),
        ])
        assert [m.name for m in table.sorted_items()] == ["C", "B", "A"]


# =============================================================================
# Named Accessors
# =============================================================================

class TestNamedAccessors:
    """Members are reachable as attributes named after them."""

    def test_attribute_matches_lookup(self, catalog):
        state = catalog["State"]
        assert state.Virginia is state.by_id_string("VA")
        assert state.by_name("Virginia") is state.Virginia

    def test_unknown_attribute(self, catalog):
        with pytest.raises(AttributeError):
            catalog["State"].Atlantis

    def test_shadowed_member_name(self, catalog):
        header = catalog["TXHeader"]
        assert header.shadowed_names() == ["ID"]
        assert str(header.by_name("ID").id) == "txid"
        assert isinstance(header.ID, type)

    def test_ids_and_iteration(self, catalog):
        credit_card = catalog["CreditCard"]
        assert credit_card.ids() == ["visa", "mastercard", "discover", "amex"]
        assert [m.name for m in credit_card] == [m.name for m in credit_card.items]


# =============================================================================
# Alternative Keys
# =============================================================================

class TestAlternativeKeys:
    """Lookup by comma-separated alternative keys."""

    def test_years_with(self, catalog):
        years_with = catalog["YearsWith"]
        three = years_with.by_alternative_key("3")
        assert three == "3years"
        assert isinstance(three, years_with.ID)

    def test_trim_and_case(self, catalog):
        marital = catalog["MaritalStatus"]
        assert marital.by_alternative_key("  SINGLE ") == "S"
        assert marital.by_alternative_key("Unmarried") == "S"
        assert marital.by_alternative_key("union") == "MCU"

    def test_canonical_id_is_a_key(self, catalog):
        marital = catalog["MaritalStatus"]
        assert marital.by_alternative_key("m") == "M"
        assert marital.by_alternative_key("mcu") == "MCU"

    def test_missing(self, catalog):
        marital = catalog["MaritalStatus"]
        assert marital.by_alternative_key("engaged") is None
        assert marital.by_alternative_key("") is None
        assert marital.by_alternative_key(None) is None

    def test_returns_fresh_identifier(self, catalog):
        years_with = catalog["YearsWith"]
        first = years_with.by_alternative_key("3")
        second = years_with.by_alternative_key("3")
        assert first == second
        assert first is not second

    def test_index_is_idempotent(self, catalog):
        marital = catalog["MaritalStatus"]
        assert marital.build_alternative_key_index() == marital.build_alternative_key_index()

    def test_unsupported(self, catalog):
        state = catalog["State"]
        assert not state.has_alternative_keys
        with pytest.raises(UnsupportedLookupError) as exc_info:
            state.by_alternative_key("Virginia")
        assert exc_info.value.code == "RD_UNSUPPORTED_LOOKUP"


# =============================================================================
# Aliases and Subsets
# =============================================================================

class TestAliases:
    """Decode-only spellings for incident members."""

    def test_alias_resolves(self, catalog):
        incident = catalog["Incident"]
        assert incident.by_id_string("atfault") is incident.AccidentAtFault
        assert incident.by_id_string("NOTATFAULT") is incident.AccidentNotAtFault

    def test_alias_decodes_to_canonical(self, catalog):
        incident = catalog["Incident"]
        decoded = incident.ID.from_json('"atfault"')
        assert decoded == "AtFaultAccident"
        assert decoded.to_json() == '"AtFaultAccident"'

    def test_alias_is_not_an_id(self, catalog):
        incident = catalog["Incident"]
        assert "atfault" not in [i.lower() for i in incident.ids()]


class TestSubsets:
    """Named sub-collections of current insurance statuses."""

    def test_basic_subset(self, catalog):
        status = catalog["CurrentInsuranceStatus"]
        basic = status.subset("CurrentInsuranceStatusBasic")
        assert [m.name for m in basic] == ["OwnPolicy", "AnothersPolicy"]
        assert basic.OwnPolicy is status.OwnPolicy

    def test_reason_subset(self, catalog):
        reason = catalog["CurrentInsuranceReason"]
        assert [m.name for m in reason] == [
            "DeployedOverseas",
            "ExpiredWithin30Days",
            "ExpiredOver30Days",
            "NoInsuranceRequired",
        ]
        assert reason.by_id_string("own_policy") is None

    def test_subset_shares_identifier_types(self, catalog):
        status = catalog["CurrentInsuranceStatus"]
        reason = catalog["CurrentInsuranceReason"]
        assert reason.ID is status.ID
        assert reason.ValidatedID is status.ValidatedID

    def test_unknown_subset_member(self, color):
        with pytest.raises(CatalogValidationError):
            color.add_subset("Warm", "EnumWarm", ["Red", "Orange"])


# =============================================================================
# Members
# =============================================================================

class TestMember:
    """Typed metadata fields and member documents."""

    def test_typed_fields(self, catalog):
        virginia = catalog["State"].Virginia
        assert virginia.typed_field("DisplayName") == "Virginia"
        assert virginia.display_name == "Virginia"
        assert virginia.full_name == virginia.meta["FullName"]

    def test_undeclared_field(self, catalog):
        virginia = catalog["State"].Virginia
        with pytest.raises(KeyError):
            virginia.typed_field("Capital")
        with pytest.raises(AttributeError):
            virginia.capital

    def test_meta_is_read_only(self, catalog):
        virginia = catalog["State"].Virginia
        with pytest.raises(TypeError):
            virginia.meta["FullName"] = "Old Dominion"

    def test_cross_enumeration_join(self, catalog):
        service = catalog["MilitaryService"].by_id_string("1")
        branch = catalog["MilitaryBranch"].by_id_string("AirForce")
        rank = catalog["MilitaryRank"].by_id_string("E1")

        assert service.branch is branch
        assert service.rank is rank
        assert rank.name == "EnlistedE1"
        assert service.meta["Branch"] == str(branch.id)

    def test_to_dict(self, catalog):
        assert catalog["State"].Virginia.to_dict() == {
            "Value": "VA",
            "Description": "VA",
            "Meta": {"FullName": "Virginia", "DisplayName": "Virginia"},
            "Name": "Virginia",
            "SortOrder": 46,
            "FullName": "Virginia",
            "DisplayName": "Virginia",
        }

    def test_to_dict_suppresses_references(self, catalog):
        document = catalog["MilitaryService"].by_id_string("1").to_dict()
        assert "Branch" not in document
        assert "Rank" not in document
        assert document["Meta"]["Branch"] == "AirForce"

    def test_to_dict_omits_empty(self, catalog):
        document = catalog["LogLevel"].Panic.to_dict()
        assert "Meta" not in document
        assert document["Value"] == "PANIC"

    def test_table_to_dict(self, color):
        document = color.to_dict()
        assert document["Name"] == "EnumColor"
        assert [item["Value"] for item in document["Items"]] == ["red", "green", "blue"]


# =============================================================================
# Hierarchy
# =============================================================================

class TestHierarchy:
    """Parent links within one enumeration."""

    def test_parent_or_self(self, widget):
        assert widget.Elroy.parent is widget.George
        assert widget.Elroy.parent_or_self() is widget.George
        assert widget.George.parent_or_self() is widget.George

    def test_ancestors(self, widget):
        assert widget.Judy.ancestors() == [widget.George]
        assert widget.George.ancestors() == []

    def test_has_parents(self, widget, catalog):
        assert widget.has_parents
        assert catalog["Service"].has_parents
        assert not catalog["State"].has_parents


# =============================================================================
# Construction
# =============================================================================

class TestInstall:
    """Tables are populated once."""

    def test_install_twice(self, color):
        with pytest.raises(CatalogValidationError):
            color.install([])

    def test_duplicate_ids(self):
        table = EnumerationTable("EnumDup", "Dup")
        with pytest.raises(CatalogValidationError) as exc_info:
            table.install([
                Member(id=table.ID("a"), name="A", table=table),
                Member(id=table.ID("A"), name="B", table=table),
            ])
        assert "Duplicate ID" in exc_info.value.details["errors"][0]


class TestTotalHelpers:
    """Module-level lookups accept a missing table."""

    def test_missing_table(self):
        assert by_id(None, "va") is None
        assert by_id_string(None, "va") is None
        assert by_index(None, 0) is None

    def test_present_table(self, catalog):
        state = catalog["State"]
        assert by_id_string(state, "va") is state.Virginia
        assert by_id(state, state.ID("VA")) is state.Virginia
        assert by_index(state, 0) is state.items[0]
