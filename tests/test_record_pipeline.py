"""
Tests for the record pipeline (batch processing).

Tests cover:
- Happy path: extracted vitals merged, gaps synthesized, record classified
- Batch fault isolation: one bad file -> one notice, the rest still processed
- Drag-and-drop filtering vs file picker pass-through
- Strict validation
- Per-session serialization of overlapping batches
"""
import asyncio

import pytest

from medpanel.core.exceptions import ExtractionError
from medpanel.models import Provenance, VitalKind
from medpanel.schemas.upload import GENERIC_ERROR_MESSAGE, UploadSource
from medpanel.services.document_loader import DocumentLoader
from medpanel.services.health_classifier import classify
from medpanel.services.record_pipeline import RecordPipelineService
from medpanel.services.session_store import SessionStore

from conftest import make_pdf, make_upload


@pytest.fixture
def session(session_store):
    return session_store.create()


# =============================================================================
# HAPPY PATH
# =============================================================================

class TestProcessBatch:

    @pytest.mark.asyncio
    async def test_single_document(self, pipeline, session, checkup_pdf):
        result = await pipeline.process_batch(session, [make_upload("checkup.pdf", checkup_pdf)])

        assert result.notices == []
        assert result.processed_count == 1
        doc = result.documents[0]
        assert doc.status == "processed"
        assert doc.extracted == ["blood_pressure", "cholesterol", "glucose", "bmi"]
        assert doc.synthesized == []
        assert doc.cardiovascular_risk == "Medium"

        record = session.record
        assert (record.blood_pressure.systolic, record.blood_pressure.diastolic) == (130, 85)
        assert record.cholesterol.total == 210
        assert record.glucose.value == 98
        assert record.bmi.value == 24.5
        assert all(r.provenance is Provenance.EXTRACTED for r in record.vitals.values())
        assert record.blood_pressure.source_document == "checkup.pdf"

    @pytest.mark.asyncio
    async def test_no_vitals_all_synthesized(self, pipeline, session, blank_pdf):
        result = await pipeline.process_batch(session, [make_upload("notes.pdf", blank_pdf)])

        assert result.documents[0].synthesized == ["blood_pressure", "cholesterol", "glucose", "bmi"]
        record = session.record
        assert 85 <= record.glucose.value <= 114
        assert 120 <= record.blood_pressure.systolic <= 139
        assert all(r.provenance is Provenance.SYNTHESIZED for r in record.vitals.values())
        for name in ("blood_pressure", "weight", "labs"):
            assert len(record.trends.get(name).samples) == 6

    @pytest.mark.asyncio
    async def test_medications_accumulate_across_files(self, pipeline, session, medications_pdf):
        other = make_pdf(["Medications: Aspirin 81mg"])
        await pipeline.process_batch(session, [
            make_upload("discharge.pdf", medications_pdf),
            make_upload("followup.pdf", other),
        ])
        assert session.record.medications == ["Lisinopril 10mg", "Atorvastatin 20mg", "Aspirin 81mg"]

    @pytest.mark.asyncio
    async def test_medication_lists_on_one_page(self, pipeline, session):
        data = make_pdf([
            "Medications: Lisinopril, Metformin",
            "Follow up in three months",
            "medication: Aspirin",
        ])
        await pipeline.process_batch(session, [make_upload("summary.pdf", data)])
        assert session.record.medications == ["Lisinopril", "Metformin", "Aspirin"]

    @pytest.mark.asyncio
    async def test_medication_list_ends_at_its_line(self, pipeline, session):
        data = make_pdf(["Medications: Aspirin", "Blood Pressure: 130/85"])
        await pipeline.process_batch(session, [make_upload("visit.pdf", data)])

        assert session.record.medications == ["Aspirin"]
        assert session.record.blood_pressure.systolic == 130
        assert session.record.blood_pressure.provenance is Provenance.EXTRACTED

    @pytest.mark.asyncio
    async def test_results_report_file_size(self, pipeline, session, checkup_pdf, corrupt_pdf):
        result = await pipeline.process_batch(session, [
            make_upload("checkup.pdf", checkup_pdf),
            make_upload("broken.pdf", corrupt_pdf),
        ])
        assert [d.size_bytes for d in result.documents] == [len(checkup_pdf), len(corrupt_pdf)]

    @pytest.mark.asyncio
    async def test_extracted_value_replaces_synthesized(self, pipeline, session, blank_pdf):
        await pipeline.process_batch(session, [make_upload("notes.pdf", blank_pdf)])
        assert session.record.cholesterol.provenance is Provenance.SYNTHESIZED

        later = make_pdf(["Cholesterol: 250"])
        await pipeline.process_batch(session, [make_upload("labs.pdf", later)])
        assert session.record.cholesterol.total == 250
        assert session.record.cholesterol.provenance is Provenance.EXTRACTED


# =============================================================================
# FAULT ISOLATION
# =============================================================================

class TestFaultIsolation:

    @pytest.mark.asyncio
    async def test_corrupt_middle_file(self, pipeline, session, checkup_pdf, corrupt_pdf, medications_pdf):
        result = await pipeline.process_batch(session, [
            make_upload("first.pdf", checkup_pdf),
            make_upload("second.pdf", corrupt_pdf),
            make_upload("third.pdf", medications_pdf),
        ])

        assert [d.status for d in result.documents] == ["processed", "failed", "processed"]
        assert len(result.notices) == 1
        notice = result.notices[0]
        assert notice.filename == "second.pdf"
        assert notice.message == GENERIC_ERROR_MESSAGE
        assert notice.error_type == "ExtractionError"

        # First and third still reached classification and the record
        assert session.record.blood_pressure.systolic == 130
        assert session.record.medications == ["Lisinopril 10mg", "Atorvastatin 20mg"]
        assert classify(session.record.vitals).blood_pressure.label == "Elevated"

    @pytest.mark.asyncio
    async def test_failing_file_leaves_record_unchanged(self, session):
        calls = []

        def extractor(data):
            calls.append(data)
            if data == b"bad":
                raise ExtractionError(reason="no objects found")
            return ["Glucose: 101"]

        pipeline = RecordPipelineService(loader=DocumentLoader(page_extractor=extractor, timeout=5))
        result = await pipeline.process_batch(session, [make_upload("bad.pdf", b"bad")])

        assert calls == [b"bad"]
        assert result.processed_count == 0
        assert session.record.vitals == {}
        assert session.record.trends is None

    @pytest.mark.asyncio
    async def test_empty_and_oversized_files(self, session, checkup_pdf):
        pipeline = RecordPipelineService(max_size=len(checkup_pdf))
        result = await pipeline.process_batch(session, [
            make_upload("empty.pdf", b""),
            make_upload("big.pdf", checkup_pdf + b"padding"),
            make_upload("ok.pdf", checkup_pdf),
        ])
        assert [n.error_type for n in result.notices] == ["EmptyFileError", "FileTooLargeError"]
        assert result.processed_count == 1

    @pytest.mark.asyncio
    async def test_notices_kept_on_session(self, pipeline, session, corrupt_pdf):
        await pipeline.process_batch(session, [make_upload("broken.pdf", corrupt_pdf)])
        assert [n.filename for n in session.notices] == ["broken.pdf"]

    @pytest.mark.asyncio
    async def test_unexpected_errors_propagate(self, session):
        def extractor(data):
            raise KeyError("engine bug")

        pipeline = RecordPipelineService(loader=DocumentLoader(page_extractor=extractor, timeout=5))
        with pytest.raises(KeyError):
            await pipeline.process_batch(session, [make_upload("a.pdf", b"%PDF")])


# =============================================================================
# SOURCE FILTERING
# =============================================================================

class TestSourceFiltering:

    @pytest.mark.asyncio
    async def test_drop_skips_non_pdf_silently(self, pipeline, session, checkup_pdf):
        result = await pipeline.process_batch(
            session,
            [make_upload("checkup.pdf", checkup_pdf), make_upload("notes.txt", b"hello", "text/plain")],
            source=UploadSource.DROP,
        )
        assert result.skipped == ["notes.txt"]
        assert result.notices == []
        assert [d.filename for d in result.documents] == ["checkup.pdf"]

    @pytest.mark.asyncio
    async def test_picker_non_pdf_gets_notice(self, pipeline, session):
        result = await pipeline.process_batch(
            session,
            [make_upload("notes.txt", b"hello world", "text/plain")],
            source=UploadSource.PICKER,
        )
        assert result.skipped == []
        assert len(result.notices) == 1
        assert result.notices[0].filename == "notes.txt"


# =============================================================================
# STRICT VALIDATION
# =============================================================================

class TestStrictValidation:

    @pytest.mark.asyncio
    async def test_strict_rejects_implausible(self, session):
        pipeline = RecordPipelineService(strict_validation=True)
        data = make_pdf(["Blood Pressure: 999/85", "Glucose: 90"])
        result = await pipeline.process_batch(session, [make_upload("typo.pdf", data)])

        assert result.notices[0].error_type == "InvalidVitalError"
        assert session.record.vitals == {}

    @pytest.mark.asyncio
    async def test_lenient_accepts_as_written(self, session):
        pipeline = RecordPipelineService(strict_validation=False)
        data = make_pdf(["Blood Pressure: 999/85"])
        result = await pipeline.process_batch(session, [make_upload("typo.pdf", data)])

        assert result.notices == []
        assert session.record.blood_pressure.systolic == 999
        assert VitalKind.GLUCOSE in session.record.vitals


# =============================================================================
# CONCURRENCY
# =============================================================================

class TestConcurrency:

    @pytest.mark.asyncio
    async def test_batches_for_one_session_do_not_interleave(self, session):
        events = []

        def extractor(data):
            name = data.decode()
            events.append(f"start {name}")
            events.append(f"end {name}")
            return [f"Medications: {name}"]

        pipeline = RecordPipelineService(loader=DocumentLoader(page_extractor=extractor, timeout=5))
        await asyncio.gather(
            pipeline.process_batch(session, [make_upload("a1.pdf", b"a1"), make_upload("a2.pdf", b"a2")]),
            pipeline.process_batch(session, [make_upload("b1.pdf", b"b1"), make_upload("b2.pdf", b"b2")]),
        )

        assert session.record.medications in (["a1", "a2", "b1", "b2"], ["b1", "b2", "a1", "a2"])

    @pytest.mark.asyncio
    async def test_sessions_are_isolated(self, pipeline, checkup_pdf, blank_pdf):
        store = SessionStore(max_sessions=5, seed=99)
        first, second = store.create(), store.create()

        await pipeline.process_batch(first, [make_upload("checkup.pdf", checkup_pdf)])
        await pipeline.process_batch(second, [make_upload("notes.pdf", blank_pdf)])

        assert first.record.blood_pressure.provenance is Provenance.EXTRACTED
        assert second.record.blood_pressure.provenance is Provenance.SYNTHESIZED
        assert first.record is not second.record
