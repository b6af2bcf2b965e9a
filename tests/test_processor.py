"""Test batch processing."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from news_analysis.common.errors import (
    ContentError,
    ErrorKind,
    FetchError,
    InferenceError,
    PersistenceError,
)
from news_analysis.connectors.memory import MemoryConnector
from news_analysis.inference import InferenceClient, InferenceConfig, SentimentProbabilities
from news_analysis.model import BatchRequest, ContentSource, SentimentLabel
from news_analysis.processor import BatchProcessor, ProcessorConfig

from .conftest import (
    ARABIC_BODY,
    ARABIC_DESCRIPTION,
    PAYWALL,
    PROJECT_ID,
    USER_ID,
    StubProvider,
    make_article,
)

FAILING_BODY = ARABIC_BODY + " رقم أربعة"


def seed_batch(connector: MemoryConnector) -> None:
    """Five articles: 1, 2 and 5 succeed, 3 has no content, 4 fails inference."""
    connector.add_articles(
        [
            make_article("1"),
            make_article("2", body=PAYWALL, description=ARABIC_DESCRIPTION),
            make_article("3", title="Breaking news", body=PAYWALL),
            make_article("4", body=FAILING_BODY),
            make_article("5"),
        ]
    )


@pytest.mark.asyncio
async def test_batch_isolates_failures(connector, request_model):
    """Test failed articles neither abort the batch nor get marked analyzed."""
    seed_batch(connector)
    provider = StubProvider(fail_on=("رقم أربعة",))
    processor = BatchProcessor(ProcessorConfig(), connector=connector, provider=provider)

    report = await processor.run(request_model)

    assert report.success
    assert (report.processed, report.errors, report.total) == (3, 2, 5)
    assert report.message == "تم تحليل 3 مقال بنجاح من أصل 5"
    assert [r.article_id for r in report.results] == ["1", "2", "3", "4", "5"]

    no_content, failed = report.results[2], report.results[3]
    assert no_content.error_kind is ErrorKind.CONTENT
    assert no_content.error == "لا يوجد محتوى مناسب للتحليل"
    assert no_content.content_source is ContentSource.NONE
    assert no_content.quality_score == 0
    assert failed.error_kind is ErrorKind.TRANSPORT
    assert failed.error == "فشل في تحليل النص"
    assert failed.details == "Service Unavailable"

    assert set(connector.analyses) == {"1", "2", "5"}
    assert not connector.articles["3"].is_analyzed
    assert not connector.articles["4"].is_analyzed
    assert connector.articles["1"].is_analyzed
    assert connector.articles["2"].sentiment == "positive"

    # no inference call is spent on an article without content
    assert len(provider.calls) == 4


@pytest.mark.asyncio
async def test_failure_keeps_prior_state(connector):
    """Test a failed re-analysis leaves the earlier analysis on the article."""
    connector.add_articles(
        [make_article("4", body=FAILING_BODY, is_analyzed=True, sentiment="negative")]
    )
    processor = BatchProcessor(
        ProcessorConfig(), connector=connector, provider=StubProvider(fail_on=("رقم أربعة",))
    )

    report = await processor.run(
        BatchRequest(project_id=PROJECT_ID, user_id=USER_ID, article_ids=["4"])
    )

    assert report.errors == 1
    assert connector.articles["4"].is_analyzed
    assert connector.articles["4"].sentiment == "negative"
    assert connector.analyses == {}


@pytest.mark.asyncio
async def test_item_result_fields(processor, connector, request_model):
    connector.add_articles([make_article("1")])

    report = await processor.run(request_model)
    (result,) = report.results

    assert result.success
    assert result.sentiment is SentimentLabel.POSITIVE
    assert result.confidence == pytest.approx(0.8)
    assert result.emotion == "تفاؤل"
    assert result.content_source is ContentSource.BODY
    assert result.quality_score == 74
    assert result.dialect == "other"
    assert result.error_kind is None

    record = connector.analyses["1"]
    assert record.input_text == ARABIC_BODY
    assert record.analysis_type == "batch_auto"
    assert record.project_id == PROJECT_ID
    assert record.model_response["content_source"] == "body"
    assert record.positive_prob + record.negative_prob == pytest.approx(1.0)


@pytest.mark.asyncio
async def test_rerun_is_idempotent(processor, connector):
    connector.add_articles([make_article("1"), make_article("2", body=None)])
    request = BatchRequest(project_id=PROJECT_ID, user_id=USER_ID, article_ids=["1", "2"])

    await processor.run(request)
    first = {k: v.model_dump(exclude={"analyzed_at"}) for k, v in connector.analyses.items()}
    await processor.run(request)
    second = {k: v.model_dump(exclude={"analyzed_at"}) for k, v in connector.analyses.items()}

    assert first == second
    assert len(connector.analyses) == 2


@pytest.mark.asyncio
async def test_analyzed_articles_not_picked_again(processor, connector, request_model):
    connector.add_articles([make_article("1")])

    first = await processor.run(request_model)
    second = await processor.run(request_model)

    assert first.processed == 1
    assert second.total == 0
    assert second.message == "No articles to analyze"


@pytest.mark.asyncio
async def test_empty_page(processor, request_model):
    report = await processor.run(request_model)

    assert report.success
    assert (report.processed, report.errors, report.total) == (0, 0, 0)
    assert report.results == []
    assert report.message == "No articles to analyze"


@pytest.mark.asyncio
async def test_fetch_error_propagates(provider, request_model):
    connector = MemoryConnector()
    connector.read_articles = AsyncMock(side_effect=FetchError("listing failed"))
    processor = BatchProcessor(ProcessorConfig(), connector=connector, provider=provider)

    with pytest.raises(FetchError):
        await processor.run(request_model)


@pytest.mark.asyncio
async def test_page_size_limits_batch(connector, provider, request_model):
    connector.add_articles([make_article(str(i)) for i in range(5)])
    processor = BatchProcessor(ProcessorConfig(page_size=2), connector=connector, provider=provider)

    report = await processor.run(request_model)
    assert report.total == 2


@pytest.mark.asyncio
async def test_results_ordered_by_article_id(request_model):
    """Test results are keyed by id whatever the listing or completion order."""

    class SlowFirstProvider(StubProvider):
        async def infer(self, text):
            await asyncio.sleep(0.05 if "الأول" in text else 0)
            return await super().infer(text)

    connector = MemoryConnector()
    connector.read_articles = AsyncMock(
        return_value=[
            make_article("c"),
            make_article("a", body=ARABIC_BODY + " الأول"),
            make_article("b"),
        ]
    )
    processor = BatchProcessor(
        ProcessorConfig(workers=3), connector=connector, provider=SlowFirstProvider()
    )

    report = await processor.run(request_model)
    assert [r.article_id for r in report.results] == ["a", "b", "c"]


@pytest.mark.asyncio
async def test_cancel_skips_unstarted_articles(connector, request_model):
    cancel = asyncio.Event()

    class CancellingProvider(StubProvider):
        async def infer(self, text):
            cancel.set()
            return await super().infer(text)

    connector.add_articles([make_article(str(i)) for i in range(1, 4)])
    processor = BatchProcessor(
        ProcessorConfig(workers=1), connector=connector, provider=CancellingProvider()
    )

    report = await processor.run(request_model, cancel=cancel)

    assert report.cancelled
    assert (report.processed, report.errors, report.total) == (1, 0, 3)
    assert [r.article_id for r in report.results] == ["1"]
    assert report.to_response()["cancelled"] is True


@pytest.mark.asyncio
async def test_persistence_failure(provider, request_model):
    """Test a failed write is a per-article persistence error."""
    connector = MemoryConnector()
    connector.add_articles([make_article("1"), make_article("2")])
    upsert = connector.upsert_analysis

    async def failing_upsert(record):
        if record.article_id == "1":
            raise PersistenceError("Error writing analysis: disk full")
        await upsert(record)

    connector.upsert_analysis = failing_upsert
    processor = BatchProcessor(ProcessorConfig(), connector=connector, provider=provider)

    report = await processor.run(request_model)

    assert report.processed == 1
    assert report.results[0].error_kind is ErrorKind.PERSISTENCE
    assert report.results[0].error == "فشل في حفظ التحليل"
    assert "disk full" in report.results[0].details
    assert not connector.articles["1"].is_analyzed
    # inference was spent before the write failed
    assert len(provider.calls) == 2


@pytest.mark.asyncio
async def test_unexpected_write_error_is_persistence(provider, request_model):
    connector = MemoryConnector()
    connector.add_articles([make_article("1")])
    connector.upsert_analysis = AsyncMock(side_effect=OSError("socket closed"))
    processor = BatchProcessor(ProcessorConfig(), connector=connector, provider=provider)

    report = await processor.run(request_model)
    assert report.results[0].error_kind is ErrorKind.PERSISTENCE


@pytest.mark.asyncio
async def test_article_update_failure_still_succeeds(provider, request_model):
    connector = MemoryConnector()
    connector.add_articles([make_article("1")])
    connector.update_article = AsyncMock(side_effect=PersistenceError("timeout"))
    processor = BatchProcessor(ProcessorConfig(), connector=connector, provider=provider)

    report = await processor.run(request_model)

    assert report.processed == 1
    assert "1" in connector.analyses


@pytest.mark.asyncio
async def test_provider_crash_is_transport(connector, request_model):
    connector.add_articles([make_article("1")])
    provider = MagicMock()
    provider.infer = AsyncMock(side_effect=RuntimeError("event loop closed"))
    processor = BatchProcessor(ProcessorConfig(), connector=connector, provider=provider)

    report = await processor.run(request_model)

    assert report.results[0].error_kind is ErrorKind.TRANSPORT
    assert report.results[0].details == "event loop closed"


@pytest.mark.asyncio
async def test_internal_error(connector, provider, request_model):
    connector.add_articles([make_article("1"), make_article("2")])
    detector = MagicMock()
    detector.detect.side_effect = KeyError("indicators")
    processor = BatchProcessor(
        ProcessorConfig(), connector=connector, provider=provider, detector=detector
    )

    report = await processor.run(request_model)

    assert report.results[0].error_kind is ErrorKind.INTERNAL
    assert report.results[0].error == "خطأ في معالجة المقال"
    assert (report.errors, report.total) == (2, 2)


@pytest.mark.asyncio
async def test_min_quality_floor(connector, provider, request_model):
    connector.add_articles([make_article("1", body=None)])
    processor = BatchProcessor(
        ProcessorConfig(min_quality=50), connector=connector, provider=provider
    )

    report = await processor.run(request_model)

    (result,) = report.results
    assert result.error_kind is ErrorKind.CONTENT
    assert result.quality_score == 35
    assert result.content_source is ContentSource.TITLE_ONLY
    assert provider.calls == []


@pytest.mark.asyncio
async def test_end_to_end_dialect_article(connector, request_model):
    """Test a colloquial headline through the real client and a mocked endpoint."""

    def handler(request):
        return httpx.Response(200, json=[{"label": "LABEL_1", "score": 0.8}])

    config = InferenceConfig(
        endpoint="https://inference.test", token="hf_test", requests_per_minute=None
    )
    connector.add_articles([make_article("1", title="يلا يا زلمة الوضع تمام", body=None)])

    async with InferenceClient(config, transport=httpx.MockTransport(handler)) as provider:
        processor = BatchProcessor(ProcessorConfig(), connector=connector, provider=provider)
        report = await processor.run(request_model)

    (result,) = report.results
    assert result.success
    assert result.sentiment is SentimentLabel.POSITIVE
    assert result.confidence == pytest.approx(0.8)
    assert result.dialect == "jordanian"
    assert result.emotion == "سعادة"
    assert result.content_source is ContentSource.TITLE_ONLY

    record = connector.analyses["1"]
    assert record.dialect_confidence > 20
    assert {"يلا", "زلمة", "تمام"} <= set(record.dialect_indicators)
    assert record.emotional_markers == ["يا زلمة"]

    article = connector.articles["1"]
    assert article.is_analyzed
    assert article.dialect == "jordanian"
    assert article.emotion == "سعادة"


@pytest.mark.asyncio
async def test_lexicon_path(tmp_path, connector, provider, request_model):
    path = tmp_path / "lexicon.yaml"
    path.write_text("name: test\nindicators:\n  - {term: \"الحكومة\"}\n", encoding="utf-8")
    connector.add_articles([make_article("1")])
    processor = BatchProcessor(
        ProcessorConfig(lexicon_path=str(path), dialect_threshold=10),
        connector=connector,
        provider=provider,
    )

    await processor.run(request_model)
    assert connector.analyses["1"].dialect_indicators == ["الحكومة"]


# Single text


@pytest.mark.asyncio
async def test_analyze_text(processor):
    analysis = await processor.analyze_text(text="شو يا زلمة، الوضع تمام والله")

    assert analysis.sentiment.label is SentimentLabel.POSITIVE
    assert analysis.dialect.is_match
    assert analysis.emotion == "سعادة"
    assert analysis.content_source is ContentSource.BODY
    assert analysis.analyzed_text == "شو يا زلمة، الوضع تمام والله"


@pytest.mark.asyncio
async def test_analyze_text_from_title(processor):
    analysis = await processor.analyze_text(title="ارتفاع أسعار الوقود", text=PAYWALL)
    assert analysis.content_source is ContentSource.TITLE_ONLY


@pytest.mark.asyncio
async def test_analyze_text_rejects_unusable(processor, provider):
    with pytest.raises(ContentError):
        await processor.analyze_text(text="hello world")
    with pytest.raises(ContentError):
        await processor.analyze_text()
    assert provider.calls == []


@pytest.mark.asyncio
async def test_analyze_text_inference_error(connector):
    provider = StubProvider(fail_on=("خبر",))
    processor = BatchProcessor(ProcessorConfig(), connector=connector, provider=provider)

    with pytest.raises(InferenceError):
        await processor.analyze_text(text="خبر عاجل من العاصمة")


@pytest.mark.asyncio
async def test_negative_probabilities(connector, request_model):
    connector.add_articles([make_article("1")])
    provider = StubProvider(positive_prob=0.1, negative_prob=0.9)
    processor = BatchProcessor(ProcessorConfig(), connector=connector, provider=provider)

    report = await processor.run(request_model)

    assert report.results[0].sentiment is SentimentLabel.NEGATIVE
    assert report.results[0].emotion == "استياء"
    assert connector.analyses["1"].model_response["probabilities"] == (
        SentimentProbabilities(positive_prob=0.1, negative_prob=0.9).model_dump()
    )
