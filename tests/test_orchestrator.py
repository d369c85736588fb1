"""
Test Suite for the Content Test Orchestrator

Tests the content run pipeline:
- Configuration checks before any call
- Fan-out over prompts x chunks x models
- Failure isolation
- Prompt generation and quick test
- Dispatch throttling
"""

import asyncio

import pytest

from discoverability.errors import ConfigurationError, PromptGenerationError
from discoverability.orchestrator import ProviderDispatcher, ProviderThrottle, TestOrchestrator, ThrottleLimits
from discoverability.providers.config import LLMConfig, ModelSelection
from discoverability.utils.cancellation import CancellationToken


def make_orchestrator(config, client):
    return TestOrchestrator(config, client, concurrency=2, spacing_seconds=0)


class TestConfigurationChecks:
    """A run without providers fails before any call."""

    @pytest.mark.asyncio
    async def test_no_providers_raises_without_calls(self, empty_config, fake_client):
        orchestrator = make_orchestrator(empty_config, fake_client)

        with pytest.raises(ConfigurationError):
            await orchestrator.test_industry_content("fintech", ["chunk"], ["What does it cost?"])

        assert fake_client.query.await_count == 0

    @pytest.mark.asyncio
    async def test_redacted_key_counts_as_unconfigured(self, fake_client):
        config = LLMConfig().with_provider("openai", api_key="[REDACTED]", models=["gpt-4"])
        orchestrator = make_orchestrator(config, fake_client)

        with pytest.raises(ConfigurationError):
            await orchestrator.test_industry_content("fintech", ["chunk"], ["q?"])

        assert fake_client.query.await_count == 0


class TestContentRun:
    """Test the prompts x chunks x models fan-out."""

    @pytest.mark.asyncio
    async def test_every_pair_hits_every_model(self, llm_config, fake_client):
        orchestrator = make_orchestrator(llm_config, fake_client)

        report = await orchestrator.test_industry_content(
            "fintech", ["chunk a", "chunk b"], ["q1?", "q2?", "q3?"],
        )

        assert fake_client.query.await_count == 3 * 2 * 2
        assert len(report.test_results) == 6
        assert report.total_prompts == 3
        assert report.total_responses == 12
        assert report.overall_success_rate == 1.0

    @pytest.mark.asyncio
    async def test_results_in_prompt_major_order(self, llm_config, fake_client):
        orchestrator = make_orchestrator(llm_config, fake_client)

        report = await orchestrator.test_industry_content("fintech", ["a", "b"], ["q1?", "q2?"])

        assert [(r.prompt, r.content_chunk) for r in report.test_results] == [
            ("q1?", "a"), ("q1?", "b"), ("q2?", "a"), ("q2?", "b"),
        ]
        for test_result in report.test_results:
            assert [r.provider for r in test_result.results] == ["openai", "anthropic"]

    @pytest.mark.asyncio
    async def test_content_sent_as_context(self, llm_config, fake_client):
        orchestrator = make_orchestrator(llm_config, fake_client)

        await orchestrator.test_industry_content("fintech", ["Plans from $99."], ["What does it cost?"])

        assert {call["context"] for call in fake_client.calls} == {"Plans from $99."}

    @pytest.mark.asyncio
    async def test_selected_models_override_config(self, llm_config, fake_client):
        orchestrator = make_orchestrator(llm_config, fake_client)

        report = await orchestrator.test_industry_content(
            "fintech", ["chunk"], ["q?"],
            selected_models=[ModelSelection("openai", "gpt-4")],
        )

        assert fake_client.query.await_count == 1
        assert report.provider_performance[0].provider == "openai"


class TestFailureIsolation:
    """Per-call failures never abort a run."""

    @pytest.mark.asyncio
    async def test_one_provider_failing(self, llm_config, make_client):
        def answer(provider, model, prompt, context):
            if provider == "anthropic":
                return RuntimeError("HTTP 500: overloaded")
            return "according to the content, plans start at $99."

        orchestrator = make_orchestrator(llm_config, make_client(answer))
        report = await orchestrator.test_industry_content("fintech", ["chunk"], ["q?"])

        test_result = report.test_results[0]
        assert test_result.overall_success is True
        assert test_result.average_confidence == pytest.approx(0.4)
        assert test_result.best_performer.provider == "openai"
        assert report.overall_success_rate == 0.5

    @pytest.mark.asyncio
    async def test_all_failing_still_reports(self, llm_config, make_client):
        client = make_client(lambda *args: RuntimeError("connection refused"))
        orchestrator = make_orchestrator(llm_config, client)

        report = await orchestrator.test_industry_content("fintech", ["chunk"], ["q1?", "q2?"])

        assert report.overall_success_rate == 0.0
        assert report.total_responses == 4
        assert all(r.error_message == "connection refused" for t in report.test_results for r in t.results)
        assert report.content_gaps[0].failed_prompts == ("q1?", "q2?")

    @pytest.mark.asyncio
    async def test_unavailable_answers_become_gaps(self, llm_config, make_client):
        client = make_client(lambda *args: "Information not available in provided content.")
        orchestrator = make_orchestrator(llm_config, client)

        report = await orchestrator.test_industry_content("fintech", ["chunk"], ["q?"])

        assert report.content_gaps[0].priority.value == "Low"
        assert report.recommendations[0].title == "Improve Content Coverage"


class TestPromptGeneration:
    """Test LLM-backed industry prompt generation."""

    @pytest.mark.asyncio
    async def test_keeps_question_lines(self, llm_config, make_client):
        text = "Here you go:\nWhat does it cost?\n\n  How do I get support?  \nNot a question\nIs there an API?"
        client = make_client(lambda *args: text)
        orchestrator = make_orchestrator(llm_config, client)

        prompts = await orchestrator.generate_industry_prompts("fintech", prompt_count=2)

        assert prompts == ["What does it cost?", "How do I get support?"]
        assert client.calls[0]["provider"] == "openai"
        assert client.calls[0]["model"] == "gpt-4"
        assert client.calls[0]["context"] == "This is for the fintech industry."
        assert "Generate 2 realistic" in client.calls[0]["prompt"]

    @pytest.mark.asyncio
    async def test_no_providers(self, empty_config, fake_client):
        orchestrator = make_orchestrator(empty_config, fake_client)

        with pytest.raises(ConfigurationError):
            await orchestrator.generate_industry_prompts("fintech")
        assert fake_client.query.await_count == 0

    @pytest.mark.asyncio
    async def test_failed_call_raises(self, llm_config, make_client):
        orchestrator = make_orchestrator(llm_config, make_client(lambda *args: RuntimeError("HTTP 401")))

        with pytest.raises(PromptGenerationError):
            await orchestrator.generate_industry_prompts("fintech")


class TestQuickTest:
    """Test the built-in sample run."""

    @pytest.mark.asyncio
    async def test_sample_size(self, llm_config, fake_client):
        orchestrator = make_orchestrator(llm_config, fake_client)

        report = await orchestrator.quick_test("fintech", sample_size=2)

        assert report.total_prompts == 2
        # 2 prompts x 3 sample chunks x 2 models
        assert report.total_responses == 12


class TestCancellation:
    """Cancelled runs still produce a report."""

    @pytest.mark.asyncio
    async def test_cancelled_token_fails_calls(self, llm_config):
        from discoverability.providers.client import ProviderClient

        token = CancellationToken()
        token.cancel()

        async with ProviderClient(llm_config) as client:
            orchestrator = make_orchestrator(llm_config, client)
            report = await orchestrator.test_industry_content("fintech", ["chunk"], ["q?"], cancel_token=token)

        assert report.total_responses == 2
        assert all(r.error_message == "Run cancelled" for t in report.test_results for r in t.results)


class TestDispatch:
    """Test per-provider throttling."""

    @pytest.mark.asyncio
    async def test_concurrency_bounded_per_provider(self, make_client):
        in_flight = {"now": 0, "peak": 0}

        class SlowClient:
            async def query(self, provider, model, prompt, context, cancel_token=None):
                in_flight["now"] += 1
                in_flight["peak"] = max(in_flight["peak"], in_flight["now"])
                await asyncio.sleep(0.01)
                in_flight["now"] -= 1
                return await make_client()._query(provider, model, prompt, context)

        dispatcher = ProviderDispatcher(SlowClient(), concurrency=2, spacing_seconds=0)
        selection = ModelSelection("openai", "gpt-4")

        await asyncio.gather(*[dispatcher.dispatch(selection, f"q{i}?", "ctx") for i in range(6)])

        assert in_flight["peak"] == 2
        assert dispatcher.accumulator.snapshot().calls == 6

    @pytest.mark.asyncio
    async def test_spacing_between_call_starts(self):
        throttle = ProviderThrottle(concurrency=5, spacing_seconds=0.05)
        loop = asyncio.get_running_loop()
        starts = []

        async def call():
            async with throttle:
                starts.append(loop.time())

        await asyncio.gather(*[call() for _ in range(3)])

        gaps = [b - a for a, b in zip(starts, starts[1:])]
        assert all(gap >= 0.045 for gap in gaps)

    @pytest.mark.asyncio
    async def test_aliases_share_a_throttle(self, fake_client):
        dispatcher = ProviderDispatcher(fake_client)

        assert dispatcher.throttle_for("claude") is dispatcher.throttle_for("anthropic")

    def test_invalid_concurrency(self):
        with pytest.raises(ValueError):
            ProviderThrottle(concurrency=0)

    @pytest.mark.asyncio
    async def test_limits_differ_per_provider(self, make_client):
        in_flight = {}
        peak = {}

        class SlowClient:
            async def query(self, provider, model, prompt, context, cancel_token=None):
                in_flight[provider] = in_flight.get(provider, 0) + 1
                peak[provider] = max(peak.get(provider, 0), in_flight[provider])
                await asyncio.sleep(0.01)
                in_flight[provider] -= 1
                return await make_client()._query(provider, model, prompt, context)

        dispatcher = ProviderDispatcher(
            SlowClient(),
            concurrency=2,
            spacing_seconds=0,
            provider_limits={
                "openai": ThrottleLimits(concurrency=3, spacing_seconds=0),
                "llama": ThrottleLimits(concurrency=1, spacing_seconds=0),
            },
        )
        selections = [
            ModelSelection("openai", "gpt-4"),
            ModelSelection("replicate", "llama-2-70b-chat"),
            ModelSelection("together", "meta-llama/Llama-2-70b-chat-hf"),
        ]

        await asyncio.gather(*[
            dispatcher.dispatch(selection, f"q{i}?", "ctx")
            for selection in selections
            for i in range(6)
        ])

        assert peak == {"openai": 3, "replicate": 1, "together": 2}

    def test_limits_fall_back_to_defaults(self, fake_client):
        dispatcher = ProviderDispatcher(
            fake_client,
            concurrency=4,
            spacing_seconds=0.5,
            provider_limits={"claude": ThrottleLimits(concurrency=1, spacing_seconds=1.0)},
        )

        assert dispatcher.limits_for("anthropic") == ThrottleLimits(1, 1.0)
        assert dispatcher.limits_for("openai") == ThrottleLimits(4, 0.5)


class TestRunTotals:
    """Run totals are kept per run."""

    @pytest.mark.asyncio
    async def test_content_run_snapshot(self, llm_config, fake_client):
        orchestrator = make_orchestrator(llm_config, fake_client)

        await orchestrator.test_industry_content("fintech", ["chunk"], ["q1?", "q2?"])

        snapshot = orchestrator.last_snapshot
        assert snapshot.calls == 4
        assert snapshot.total_cost == pytest.approx(0.004)
