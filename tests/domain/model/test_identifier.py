from __future__ import annotations

from bundlemint.domain.model import BatchEntry, Identifier, Verb, is_uri_id


def test_identifiers_equal_regardless_of_origin() -> None:
    a = Identifier(record_type="Patient", record_id="1", origin="https://a.test")
    b = Identifier(record_type="Patient", record_id="1", origin="https://b.test")

    assert a == b
    assert hash(a) == hash(b)


def test_version_only_compared_when_both_present() -> None:
    unversioned = Identifier(record_type="Patient", record_id="1")
    v1 = Identifier(record_type="Patient", record_id="1", version_id="1")
    v2 = Identifier(record_type="Patient", record_id="1", version_id="2")

    assert unversioned == v1
    assert unversioned == v2
    assert v1 != v2


def test_record_type_is_part_of_identity() -> None:
    assert Identifier(record_type="Patient", record_id="1") != Identifier(
        record_type="Observation", record_id="1"
    )


def test_uri_ids_ignore_record_type() -> None:
    declared = Identifier(record_type="Patient", record_id="urn:uuid:61ebe359-bfdc")
    referenced = Identifier(record_type="", record_id="urn:uuid:61ebe359-bfdc")

    assert declared == referenced
    assert {declared: "x"}[referenced] == "x"


def test_without_origin_returns_origin_less_copy() -> None:
    original = Identifier(
        record_type="Patient", record_id="42", version_id="3", origin="https://server.test"
    )

    stripped = original.without_origin()

    assert stripped.origin is None
    assert stripped.version_id == "3"
    assert original.origin == "https://server.test"


def test_to_locator_renders_relative_and_absolute_forms() -> None:
    identifier = Identifier(record_type="Patient", record_id="42", version_id="3")

    assert identifier.to_locator() == "Patient/42/_history/3"
    assert identifier.without_version().to_locator() == "Patient/42"
    assert (
        identifier.with_origin("https://server.test/fhir/").to_locator()
        == "https://server.test/fhir/Patient/42/_history/3"
    )
    assert Identifier(record_type="Patient", record_id="urn:uuid:abc").to_locator() == (
        "urn:uuid:abc"
    )


def test_is_uri_id_recognises_placeholder_schemes() -> None:
    assert is_uri_id("urn:uuid:1234")
    assert is_uri_id("URN:OID:1.2.3")
    assert is_uri_id("cid:part1")
    assert not is_uri_id("Patient/1")
    assert not is_uri_id("42")


def test_batch_entry_deletion_flag_follows_verb() -> None:
    identifier = Identifier(record_type="Patient", record_id="1")

    assert BatchEntry(verb=Verb.DELETE, identifier=identifier).is_deletion is True
    assert BatchEntry(verb=Verb.UPDATE, identifier=identifier).is_deletion is False
    assert (
        BatchEntry(verb=Verb.UPDATE, identifier=identifier, deletion=True).is_deletion is True
    )
    assert Verb.UPDATE.updates_in_place
    assert not Verb.CREATE.updates_in_place
