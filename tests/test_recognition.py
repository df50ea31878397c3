"""Tests for recognition engines."""

import asyncio
from unittest.mock import patch

import pytest
import pytesseract

from fuelscan.preprocessing import preprocess
from fuelscan.recognition import (
    RecognitionEngineError,
    RecognitionJob,
    RecognitionResult,
    StaticEngine,
    TesseractEngine,
)
from fuelscan.recognition.tesseract import confidence_from_data, text_from_data

# pytesseract.image_to_data(output_type=Output.DICT) for two lines of text
SAMPLE_TESSERACT_DATA = {
    "level": [1, 5, 5, 5, 5],
    "block_num": [0, 1, 1, 1, 1],
    "par_num": [0, 1, 1, 1, 1],
    "line_num": [0, 1, 1, 2, 2],
    "word_num": [0, 1, 2, 1, 2],
    "text": ["", "14.5", "km/L", "120", "km"],
    "conf": [-1, 90, 80, 70, 60],
}


class TestRecognitionResult:
    """Tests for RecognitionResult."""

    def test_confidence_clamped(self):
        assert RecognitionResult(text="", confidence=140).confidence == 100.0
        assert RecognitionResult(text="", confidence=-3).confidence == 0.0


class TestRecognitionJob:
    """Tests for the recognition job handle."""

    @pytest.mark.asyncio
    async def test_progress_then_result(self, image_bytes):
        """Progress stream ends and the result resolves."""
        engine = StaticEngine(text="12 km", confidence=88, progress_steps=(10, 50, 100))
        job = engine.recognize(preprocess(image_bytes))

        updates = [percent async for percent in job.progress()]
        result = await job.result()

        assert updates == [10, 50, 100]
        assert result == RecognitionResult(text="12 km", confidence=88)
        assert engine.calls == 1

    @pytest.mark.asyncio
    async def test_progress_non_decreasing(self, image_bytes):
        """Lower values after a higher one are dropped."""
        engine = StaticEngine(progress_steps=(40, 20, 60, 60, 150))
        job = engine.recognize(preprocess(image_bytes))

        updates = [percent async for percent in job.progress()]

        assert updates == [40, 60, 60, 100]
        assert job.percent == 100

    @pytest.mark.asyncio
    async def test_no_progress(self, image_bytes):
        """An engine may report no progress at all."""
        job = StaticEngine(text="x").recognize(preprocess(image_bytes))

        assert [percent async for percent in job.progress()] == []
        assert (await job.result()).text == "x"

    @pytest.mark.asyncio
    async def test_engine_exception_wrapped(self, image_bytes):
        """Any engine exception surfaces as RecognitionEngineError."""
        engine = StaticEngine(error=RuntimeError("engine crashed"))
        job = engine.recognize(preprocess(image_bytes))

        with pytest.raises(RecognitionEngineError, match="engine crashed"):
            await job.result()

    @pytest.mark.asyncio
    async def test_progress_ends_on_failure(self, image_bytes):
        """The progress stream terminates even when the engine fails."""
        engine = StaticEngine(progress_steps=(30,), error=ValueError("boom"))
        job = engine.recognize(preprocess(image_bytes))

        assert [percent async for percent in job.progress()] == [30]
        with pytest.raises(RecognitionEngineError):
            await job.result()

    @pytest.mark.asyncio
    async def test_cancel_in_flight(self, image_bytes):
        """Cancelling stops the engine call and ends the progress stream."""
        engine = StaticEngine(text="12 km", progress_steps=(10, 20, 30))
        job = engine.recognize(preprocess(image_bytes))
        await asyncio.sleep(0)

        job.cancel()

        assert [percent async for percent in job.progress()] == [10]
        with pytest.raises(asyncio.CancelledError):
            await job.result()

    @pytest.mark.asyncio
    async def test_cancel_after_finish_is_noop(self, image_bytes):
        job = StaticEngine(text="x").recognize(preprocess(image_bytes))
        result = await job.result()

        job.cancel()

        assert await job.result() == result

    @pytest.mark.asyncio
    async def test_unstarted_job(self):
        with pytest.raises(RecognitionEngineError):
            await RecognitionJob().result()


class TestTesseractData:
    """Tests for parsing image_to_data output."""

    def test_text_from_data(self):
        assert text_from_data(SAMPLE_TESSERACT_DATA) == "14.5 km/L\n120 km"

    def test_confidence_from_data(self):
        """Mean of word confidences, ignoring -1 entries."""
        assert confidence_from_data(SAMPLE_TESSERACT_DATA) == pytest.approx(75.0)

    def test_string_confidences(self):
        """Older Tesseract versions report confidences as strings."""
        data = {**SAMPLE_TESSERACT_DATA, "conf": ["-1", "90", "80", "70", "60"]}
        assert confidence_from_data(data) == pytest.approx(75.0)

    def test_no_words(self):
        data = {"text": ["", " "], "conf": [-1, -1], "block_num": [0, 1], "par_num": [0, 1], "line_num": [0, 1]}

        assert text_from_data(data) == ""
        assert confidence_from_data(data) == 0.0


class TestTesseractEngine:
    """Tests for the Tesseract engine (pytesseract patched)."""

    @pytest.mark.asyncio
    async def test_recognize(self, image_bytes):
        engine = TesseractEngine()

        with patch(
            "fuelscan.recognition.tesseract.pytesseract.image_to_data",
            return_value=SAMPLE_TESSERACT_DATA,
        ) as image_to_data:
            job = engine.recognize(preprocess(image_bytes))
            updates = [percent async for percent in job.progress()]
            result = await job.result()

        assert updates == [0, 100]
        assert result.text == "14.5 km/L\n120 km"
        assert result.confidence == pytest.approx(75.0)

        kwargs = image_to_data.call_args.kwargs
        assert kwargs["lang"] == "eng"
        assert kwargs["config"] == "--oem 3 --psm 6"
        assert image_to_data.call_count == 1

    @pytest.mark.asyncio
    async def test_tesseract_error(self, image_bytes):
        engine = TesseractEngine()

        with patch(
            "fuelscan.recognition.tesseract.pytesseract.image_to_data",
            side_effect=pytesseract.TesseractError(1, "bad image"),
        ):
            job = engine.recognize(preprocess(image_bytes))
            with pytest.raises(RecognitionEngineError):
                await job.result()

    @pytest.mark.asyncio
    async def test_binary_missing(self, image_bytes):
        engine = TesseractEngine()

        with patch(
            "fuelscan.recognition.tesseract.pytesseract.image_to_data",
            side_effect=pytesseract.TesseractNotFoundError(),
        ):
            job = engine.recognize(preprocess(image_bytes))
            with pytest.raises(RecognitionEngineError, match="not found"):
                await job.result()

    @pytest.mark.asyncio
    async def test_no_data(self, image_bytes):
        """An empty response is treated as an engine failure."""
        engine = TesseractEngine()

        with patch(
            "fuelscan.recognition.tesseract.pytesseract.image_to_data",
            return_value={},
        ):
            job = engine.recognize(preprocess(image_bytes))
            with pytest.raises(RecognitionEngineError, match="no data"):
                await job.result()

    def test_is_available(self):
        with patch(
            "fuelscan.recognition.tesseract.pytesseract.get_tesseract_version",
            side_effect=pytesseract.TesseractNotFoundError(),
        ):
            assert not TesseractEngine().is_available()

        with patch(
            "fuelscan.recognition.tesseract.pytesseract.get_tesseract_version",
            return_value="5.3.0",
        ):
            assert TesseractEngine().is_available()
