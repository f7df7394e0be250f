"""Tests for the answer engine and its PDF number-sum strategy."""

from __future__ import annotations

import pytest

from quizsolver.pipeline.answer import (
    AnswerEngine,
    AnswerStrategy,
    NumberSumStrategy,
    extract_pdf_text,
    find_numbers,
    round_half_up,
)
from quizsolver.pipeline.errors import UnsupportedResourceKind
from quizsolver.pipeline.models import Answer, FetchedResource, ResourceKind


def _resource(content: bytes, kind: ResourceKind = ResourceKind.PDF) -> FetchedResource:
    return FetchedResource(
        url="https://h/doc.pdf",
        content=content,
        content_type="application/pdf",
        kind=kind,
    )


class TestFindNumbers:
    def test_signed_and_fractional(self) -> None:
        assert find_numbers("total 3.5 and -2 plus 10") == [3.5, -2.0, 10.0]

    def test_leading_dot_and_plus(self) -> None:
        assert find_numbers("x .5 y +4") == [0.5, 4.0]

    def test_no_numbers(self) -> None:
        assert find_numbers("no digits here") == []


class TestRoundHalfUp:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(11.5, 12), (2.5, 3), (-2.5, -2), (-2.6, -3), (0.49, 0), (3.0, 3)],
    )
    def test_ties_round_towards_positive_infinity(self, value: float, expected: int) -> None:
        assert round_half_up(value) == expected


class TestExtractPdfText:
    def test_reads_generated_pdf(self, make_pdf) -> None:
        text = extract_pdf_text(make_pdf("Q 1 2"))
        assert find_numbers(text) == [1.0, 2.0]


class TestAnswerEngine:
    async def test_sums_numbers_in_pdf(self, make_pdf) -> None:
        answer = await AnswerEngine().compute_answer(_resource(make_pdf("total 3.5 and -2 plus 10")))

        assert answer.value == 12
        assert answer.total == pytest.approx(11.5)
        assert answer.numbers_found == 3
        assert answer.resource_url == "https://h/doc.pdf"

    async def test_pdf_without_numbers_answers_zero(self, make_pdf) -> None:
        answer = await AnswerEngine().compute_answer(_resource(make_pdf("nothing to add")))
        assert answer.value == 0
        assert answer.numbers_found == 0

    async def test_unknown_kind_raises(self) -> None:
        engine = AnswerEngine()
        assert not engine.supports(ResourceKind.UNKNOWN)
        with pytest.raises(UnsupportedResourceKind):
            await engine.compute_answer(_resource(b"{}", kind=ResourceKind.UNKNOWN))

    async def test_custom_strategy_registration(self) -> None:
        class ConstantStrategy(AnswerStrategy):
            kind = ResourceKind.UNKNOWN

            async def compute(self, resource: FetchedResource) -> Answer:
                return Answer(value=7, resource_url=resource.url)

        engine = AnswerEngine([NumberSumStrategy(), ConstantStrategy()])
        assert engine.supports(ResourceKind.UNKNOWN)
        answer = await engine.compute_answer(_resource(b"", kind=ResourceKind.UNKNOWN))
        assert answer.value == 7
