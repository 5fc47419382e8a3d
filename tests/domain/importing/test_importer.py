from __future__ import annotations

import logging
from http import HTTPStatus

import pytest

from bundlemint.domain.importing import (
    BatchImporter,
    MalformedIdentifierError,
    UnresolvedReferenceError,
    internalize,
)
from bundlemint.domain.model import (
    Identifier,
    NarrativeField,
    Record,
    ReferenceField,
    Verb,
)
from tests.support.batches import (
    BASE_URL,
    FOREIGN_URL,
    RecordingGenerator,
    StubClassifier,
    create,
    delete,
    foreign,
    local,
    observation,
    patient,
    temporary,
    update,
)


def _subject(payload: Record | None) -> str | None:
    assert payload is not None
    subject = payload.fields["subject"]
    assert isinstance(subject, ReferenceField)
    return subject.reference


def test_forward_reference_resolves_to_entry_later_in_batch() -> None:
    entries = [
        create(temporary("Observation", "o1"), observation("urn:uuid:p1")),
        create(temporary("Patient", "p1"), patient(active=True)),
    ]

    result = internalize(entries, classifier=StubClassifier(), generator=RecordingGenerator())

    assert entries[1].identifier == Identifier(record_type="Patient", record_id="1", version_id="1")
    assert _subject(entries[0].payload) == "Patient/1"
    assert result.entries == entries
    assert result.report.rewritten == 1


def test_local_update_advances_version_and_local_reference_is_relativized() -> None:
    entries = [
        update(local("Patient", "42", version_id="3"), patient(active=False)),
        create(
            temporary("Observation", "o1"),
            observation(f"{BASE_URL}/Patient/42/_history/3"),
        ),
    ]

    internalize(entries, classifier=StubClassifier(), generator=RecordingGenerator())

    assert entries[0].identifier.to_locator() == "Patient/42/_history/4"
    assert entries[0].identifier.origin is None
    assert _subject(entries[1].payload) == "Patient/42/_history/3"


def test_local_reference_without_entry_is_canonicalized() -> None:
    entries = [create(temporary("Observation", "o1"), observation(f"{BASE_URL}/Patient/99"))]

    internalize(entries, classifier=StubClassifier(), generator=RecordingGenerator())

    assert _subject(entries[0].payload) == "Patient/99"


def test_foreign_entry_is_remapped_while_foreign_reference_stays_external() -> None:
    entries = [
        update(foreign("Patient", "abc"), patient()),
        create(temporary("Observation", "o1"), observation(f"{FOREIGN_URL}/Patient/abc")),
    ]

    internalize(entries, classifier=StubClassifier(), generator=RecordingGenerator())

    assert entries[0].identifier.to_locator() == "Patient/1/_history/1"
    assert _subject(entries[1].payload) == f"{FOREIGN_URL}/Patient/abc"


def test_unresolved_temporary_reference_rejects_the_batch() -> None:
    entries = [create(temporary("Observation", "o1"), observation("urn:uuid:nowhere"))]

    with pytest.raises(UnresolvedReferenceError) as excinfo:
        internalize(entries, classifier=StubClassifier(), generator=RecordingGenerator())

    assert excinfo.value.status_code is HTTPStatus.CONFLICT
    assert "urn:uuid:nowhere" in str(excinfo.value)


def test_malformed_entry_identifier_rejects_before_references() -> None:
    entries = [
        create(temporary("Observation", "o1"), observation("urn:uuid:nowhere")),
        update(Identifier(record_type="Patient", record_id="5"), patient()),
    ]

    with pytest.raises(MalformedIdentifierError):
        internalize(entries, classifier=StubClassifier(), generator=RecordingGenerator())


def test_external_references_are_unchanged() -> None:
    external = "https://terminology.test/CodeSystem/loinc"
    entries = [create(temporary("Observation", "o1"), observation(external))]

    result = internalize(entries, classifier=StubClassifier(), generator=RecordingGenerator())

    assert _subject(entries[0].payload) == external
    assert result.report.external == 1


def test_deletions_are_unchanged() -> None:
    doomed = local("Patient", "7", version_id="2")
    entries = [
        delete(doomed),
        create(temporary("Patient", "p1"), patient()),
    ]
    generator = RecordingGenerator()

    internalize(entries, classifier=StubClassifier(), generator=generator)

    assert entries[0].identifier is doomed
    assert entries[0].verb is Verb.DELETE
    assert [call[1] for call in generator.calls] == [temporary("Patient", "p1")]


def test_every_remapped_entry_is_origin_less_and_distinct() -> None:
    entries = [
        create(temporary("Patient", "p1"), patient()),
        create(temporary("Patient", "p2"), patient()),
        update(foreign("Patient", "abc"), patient()),
        update(local("Patient", "42"), patient()),
    ]

    internalize(entries, classifier=StubClassifier(), generator=RecordingGenerator())

    identifiers = [entry.identifier for entry in entries]
    assert all(identifier.origin is None for identifier in identifiers)
    assert len({identifier.to_locator() for identifier in identifiers}) == len(identifiers)


def test_narrative_links_follow_entry_remapping() -> None:
    narrative = (
        '<div xmlns="http://www.w3.org/1999/xhtml">'
        '<a href="urn:uuid:p1">Ada</a><a href="https://elsewhere.test/x">more</a>'
        "</div>"
    )
    entries = [
        create(temporary("Observation", "o1"), observation("urn:uuid:p1", narrative=narrative)),
        create(temporary("Patient", "p1"), patient()),
    ]

    result = internalize(entries, classifier=StubClassifier(), generator=RecordingGenerator())

    payload = entries[0].payload
    assert payload is not None
    text = payload.fields["text"]
    assert isinstance(text, NarrativeField)
    assert 'href="Patient/1"' in text.div
    assert 'href="https://elsewhere.test/x"' in text.div
    assert text.status == "generated"
    assert result.report.narratives_rewritten == 1


def test_unparseable_narrative_does_not_fail_the_batch() -> None:
    broken = "<div><b>bold</div>"
    entries = [
        create(
            temporary("Observation", "o1"),
            observation(f"{BASE_URL}/Patient/1", narrative=broken),
        )
    ]

    result = internalize(entries, classifier=StubClassifier(), generator=RecordingGenerator())

    assert result.report.unparseable_narratives == [broken]
    assert _subject(entries[0].payload) == "Patient/1"


def test_internalize_logs_a_summary(caplog: pytest.LogCaptureFixture) -> None:
    entries = [create(temporary("Patient", "p1"), patient())]

    with caplog.at_level(logging.INFO, logger="bundlemint.domain.importing.importer"):
        internalize(entries, classifier=StubClassifier(), generator=RecordingGenerator())

    assert "Internalized batch: entries=1, remapped=1" in caplog.text


def test_batch_importer_stages_entries_and_clears_after_run() -> None:
    importer = BatchImporter(classifier=StubClassifier(), generator=RecordingGenerator())
    importer.add(create(temporary("Observation", "o1"), observation("urn:uuid:p1")))
    importer.add_range([create(temporary("Patient", "p1"), patient())])

    assert len(importer.staged) == 2

    result = importer.internalize()

    assert importer.staged == ()
    assert [entry.identifier.record_type for entry in result.entries] == ["Observation", "Patient"]
    assert _subject(result.entries[0].payload) == "Patient/1"


def test_batch_importer_does_not_leak_entries_between_runs() -> None:
    importer = BatchImporter(classifier=StubClassifier(), generator=RecordingGenerator())
    importer.internalize([create(temporary("Patient", "p1"), patient())])

    # p1 belonged to the previous batch only
    with pytest.raises(UnresolvedReferenceError):
        importer.internalize([create(temporary("Observation", "o1"), observation("urn:uuid:p1"))])

    assert importer.staged == ()
