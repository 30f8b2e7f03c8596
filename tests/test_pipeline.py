"""
Tests for the conversion driver and ConversionJob.
"""

import io
from collections import Counter
from typing import List
from unittest.mock import MagicMock, patch

import pytest

from rdf2rdf.core import ConversionJob, ConversionResult, convert, convert_file
from rdf2rdf.exceptions import DecodeError, EncodeError, FormatResolutionError, PolicyError
from rdf2rdf.formats import (
    NQuadsDecoder,
    NTriplesDecoder,
    NTriplesEncoder,
    RDFFormat,
    Statement,
)

from fixtures import INTERLEAVED_NT, MALFORMED_AT_LINE_2_NT, MULTI_GRAPH_NQ, generate_ntriples

EX = "http://example.org/"


class RecordingEncoder:
    """Encoder fake recording calls."""

    def __init__(self, fail_on: int = -1):
        self.encoded: List[Statement] = []
        self.batches: List[List[Statement]] = []
        self.close_calls = 0
        self.fail_on = fail_on

    def encode(self, statement):
        if len(self.encoded) == self.fail_on:
            raise EncodeError("boom")
        self.encoded.append(statement)

    def encode_all(self, statements):
        self.batches.append(list(statements))

    def close(self):
        self.close_calls += 1


class RecordingReporter:
    def __init__(self):
        self.progress: List[int] = []
        self.results: List[ConversionResult] = []

    def on_progress(self, statements):
        self.progress.append(statements)

    def on_complete(self, result):
        self.results.append(result)


def _nt_decoder(text: str) -> NTriplesDecoder:
    return NTriplesDecoder(io.BytesIO(text.encode("utf-8")))


# =============================================================================
# Driver
# =============================================================================

@pytest.mark.unit
class TestConvertStreaming:

    def test_statements_pass_through_in_order(self):
        encoder = RecordingEncoder()
        count = convert(_nt_decoder(INTERLEAVED_NT), encoder)
        assert count == 5
        assert [str(s.object) for s in encoder.encoded] == ["1", "2", "3", "4", "5"]
        assert encoder.batches == []
        assert encoder.close_calls == 1

    def test_drop_context(self):
        encoder = RecordingEncoder()
        decoder = NQuadsDecoder(io.BytesIO(MULTI_GRAPH_NQ.encode()))
        count = convert(decoder, encoder, drop_context=True)
        assert count == 4
        assert all(not s.has_context for s in encoder.encoded)
        # The triple present in two graphs is written twice
        assert encoder.encoded[0] == encoder.encoded[1]

    def test_contexts_kept_without_drop(self):
        encoder = RecordingEncoder()
        convert(NQuadsDecoder(io.BytesIO(MULTI_GRAPH_NQ.encode())), encoder)
        assert encoder.encoded[0].has_context

    def test_decode_error_aborts_without_close(self):
        encoder = RecordingEncoder()
        with pytest.raises(DecodeError):
            convert(_nt_decoder(MALFORMED_AT_LINE_2_NT), encoder)
        assert len(encoder.encoded) == 1
        assert encoder.close_calls == 0

    def test_encode_error_aborts(self):
        encoder = RecordingEncoder(fail_on=2)
        with pytest.raises(EncodeError):
            convert(_nt_decoder(INTERLEAVED_NT), encoder)
        assert len(encoder.encoded) == 2
        assert encoder.close_calls == 0

    def test_progress_callback(self):
        progress = MagicMock()
        convert(_nt_decoder(generate_ntriples(5, 5)), RecordingEncoder(), progress=progress, progress_interval=10)
        assert [c.args[0] for c in progress.call_args_list] == [10, 20, 25]

    def test_empty_input(self):
        encoder = RecordingEncoder()
        assert convert(_nt_decoder(""), encoder) == 0
        assert encoder.close_calls == 1


@pytest.mark.unit
class TestConvertBatch:

    def test_whole_collection_handed_over_once(self):
        encoder = RecordingEncoder()
        count = convert(_nt_decoder(INTERLEAVED_NT), encoder, stream=False)
        assert count == 5
        assert encoder.encoded == []
        assert len(encoder.batches) == 1
        assert encoder.close_calls == 1

    def test_multiset_preserved(self):
        source = INTERLEAVED_NT + INTERLEAVED_NT
        out = io.BytesIO()
        count = convert(_nt_decoder(source), NTriplesEncoder(out), stream=False)
        written = NTriplesDecoder(io.BytesIO(out.getvalue())).decode_all()
        assert count == 10
        assert Counter(written) == Counter(_nt_decoder(source).decode_all())

    def test_decode_error_writes_nothing(self):
        encoder = RecordingEncoder()
        with pytest.raises(DecodeError):
            convert(_nt_decoder(MALFORMED_AT_LINE_2_NT), encoder, stream=False)
        assert encoder.batches == []
        assert encoder.close_calls == 0

    def test_drop_context(self):
        encoder = RecordingEncoder()
        convert(NQuadsDecoder(io.BytesIO(MULTI_GRAPH_NQ.encode())), encoder, stream=False, drop_context=True)
        assert len(encoder.batches[0]) == 4
        assert not any(s.has_context for s in encoder.batches[0])

    def test_progress_reported_once(self):
        progress = MagicMock()
        convert(_nt_decoder(INTERLEAVED_NT), RecordingEncoder(), stream=False, progress=progress)
        progress.assert_called_once_with(5)


# =============================================================================
# Conversion job
# =============================================================================

@pytest.mark.unit
class TestConversionJobConstruction:

    def test_from_paths_resolves_formats(self, tmp_path):
        job = ConversionJob.from_paths(tmp_path / "a.nq", tmp_path / "b.ttl")
        assert job.input_format == RDFFormat.NQUADS
        assert job.output_format == RDFFormat.TURTLE
        assert job.context_dropping
        assert job.stream

    def test_identical_formats_rejected(self, tmp_path):
        with pytest.raises(PolicyError):
            ConversionJob.from_paths(tmp_path / "a.ttl", tmp_path / "b.ttl")

    def test_unknown_extension(self, tmp_path):
        with pytest.raises(FormatResolutionError):
            ConversionJob.from_paths(tmp_path / "a.nt", tmp_path / "b.json")

    def test_nquads_output_rejected(self, tmp_path):
        with pytest.raises(PolicyError, match="N-Quads"):
            ConversionJob.from_paths(tmp_path / "a.nt", tmp_path / "b.nq")

    def test_resolution_happens_before_file_access(self, tmp_path):
        """Nothing is opened or created while validating."""
        with pytest.raises(PolicyError):
            ConversionJob.from_paths(tmp_path / "missing.nt", tmp_path / "out.nq")
        assert not (tmp_path / "out.nq").exists()


@pytest.mark.integration
class TestConversionJobRun:

    def test_single_triple_scenario(self, single_nt_file, tmp_path):
        """a.nt with one triple converted to b.ttl in streaming mode."""
        output = tmp_path / "b.ttl"
        reporter = RecordingReporter()
        result = ConversionJob.from_paths(single_nt_file, output).run(reporter=reporter)

        assert result.statement_count == 1
        assert result.streamed
        assert reporter.results == [result]
        assert reporter.progress == [1]
        text = output.read_text(encoding="utf-8")
        assert '<http://x/s> <http://x/p> "o" .' in text

    def test_run_twice_raises(self, single_nt_file, tmp_path):
        job = ConversionJob.from_paths(single_nt_file, tmp_path / "b.ttl")
        job.run()
        with pytest.raises(RuntimeError, match="already been executed"):
            job.run()

    def test_missing_input(self, tmp_path):
        job = ConversionJob.from_paths(tmp_path / "missing.nt", tmp_path / "b.ttl")
        with pytest.raises(FileNotFoundError):
            job.run()

    def test_malformed_mid_stream_leaves_prefix(self, write_file, tmp_path):
        source = write_file("bad.nq", MALFORMED_AT_LINE_2_NT)
        output = tmp_path / "out.nt"
        with pytest.raises(DecodeError) as exc_info:
            ConversionJob.from_paths(source, output).run()
        assert exc_info.value.line == 2
        assert output.read_text(encoding="utf-8") == f'<{EX}s1> <{EX}p> "1" .\n'

    def test_files_closed_on_error(self, write_file, tmp_path):
        source = write_file("bad.nt", MALFORMED_AT_LINE_2_NT)
        opened = []
        real_open = open

        def tracking_open(*args, **kwargs):
            handle = real_open(*args, **kwargs)
            opened.append(handle)
            return handle

        with patch("builtins.open", side_effect=tracking_open):
            with pytest.raises(DecodeError):
                ConversionJob.from_paths(source, tmp_path / "out.ttl").run()
        assert len(opened) == 2
        assert all(handle.closed for handle in opened)

    def test_batch_mode_checks_memory(self, simple_nt_file, tmp_path):
        with patch("rdf2rdf.core.pipeline.MemoryManager.ensure_batch_fits") as guard:
            result = ConversionJob.from_paths(simple_nt_file, tmp_path / "b.ttl", stream=False).run(force_memory=True)
        guard.assert_called_once()
        assert guard.call_args.kwargs == {"force": True}
        assert not result.streamed
        assert result.statement_count == 6

    def test_streaming_skips_memory_check(self, simple_nt_file, tmp_path):
        with patch("rdf2rdf.core.pipeline.MemoryManager.ensure_batch_fits") as guard:
            ConversionJob.from_paths(simple_nt_file, tmp_path / "b.ttl").run()
        guard.assert_not_called()

    def test_memory_guard_failure_creates_no_output(self, simple_nt_file, tmp_path):
        output = tmp_path / "b.ttl"
        with patch("rdf2rdf.core.pipeline.MemoryManager.ensure_batch_fits", side_effect=MemoryError("too big")):
            with pytest.raises(MemoryError):
                ConversionJob.from_paths(simple_nt_file, output, stream=False).run()
        assert not output.exists()

    def test_convert_file(self, multi_graph_nq_file, tmp_path):
        output = tmp_path / "out.nt"
        result = convert_file(multi_graph_nq_file, output)
        assert result.context_dropped
        assert result.statement_count == 4
        assert len(output.read_text(encoding="utf-8").splitlines()) == 4


@pytest.mark.unit
class TestConversionResult:

    def test_summary(self):
        result = ConversionResult(3, 0.5, RDFFormat.NTRIPLES, RDFFormat.TURTLE)
        assert result.get_summary() == "Done. Converted 3 statements in 0.500s."

    def test_to_dict(self):
        result = ConversionResult(3, 0.5, RDFFormat.NQUADS, RDFFormat.TURTLE, streamed=False, context_dropped=True)
        assert result.to_dict() == {
            "statementCount": 3,
            "elapsedSeconds": 0.5,
            "inputFormat": "nquads",
            "outputFormat": "turtle",
            "mode": "batch",
            "contextDropped": True,
        }
