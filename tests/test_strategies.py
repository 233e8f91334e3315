"""Tests for the field recovery strategies.

Fetching is replaced by a canned fetcher and the language model by a
scripted provider, so each test controls both the page and the reply.
"""

from __future__ import annotations

import json

import pytest

from jobdraft.config import Settings
from jobdraft.errors import ModelError, ParseFailure, QuotaFailure
from jobdraft.extract.schema import ExtractionRequest, ExtractionResult
from jobdraft.extract.strategies import (
    HeuristicStrategy,
    ModelAssistedStrategy,
    ModelWithFallbackStrategy,
    build_strategy,
)

REQUEST = ExtractionRequest("https://careers.example.com/jobs/42")

SCENARIO_HTML = (
    "<html><body><h1>Backend Engineer</h1><p>About the job</p>"
    "<p>Build scalable systems.</p></body></html>"
)


def _reply(title: str = "", company: str = "", description: str = "") -> str:
    return json.dumps({"jobTitle": title, "companyName": company, "jobDescription": description})


# Heuristic strategy


def test_heuristic_scenario(make_fetcher) -> None:
    strategy = HeuristicStrategy(fetcher=make_fetcher(SCENARIO_HTML))
    result = strategy.extract(REQUEST)
    assert result.job_title == "Backend Engineer"
    assert "Build scalable systems." in result.job_description
    assert result.company_name == ""


def test_heuristic_full_posting(make_fetcher, posting_html: str) -> None:
    result = HeuristicStrategy(fetcher=make_fetcher(posting_html)).extract(REQUEST)
    assert result == ExtractionResult(
        job_title="Senior Data Engineer",
        company_name="Acme Robotics",
        job_description="You will design and operate streaming pipelines.",
    )


def test_heuristic_labels_when_no_h1(make_fetcher) -> None:
    html = (
        "<body><p>Job Title: Staff Designer</p><p>Company: Northwind Traders</p>"
        "<p>Responsibilities</p><p>Lead design reviews.</p></body>"
    )
    result = HeuristicStrategy(fetcher=make_fetcher(html)).extract(REQUEST)
    assert result.job_title == "Staff Designer"
    assert result.company_name == "Northwind Traders"
    assert result.job_description == "Lead design reviews."


@pytest.mark.parametrize(
    "html",
    [
        "<p><b>Job Title:</b> Staff Designer</p><p><strong>Company:</strong> Northwind Traders</p>",
        "<dl><dt>Job Title:</dt> <dd>Staff Designer</dd><dt>Company:</dt> <dd>Northwind Traders</dd></dl>",
    ],
)
def test_heuristic_labels_in_separate_elements(make_fetcher, html: str) -> None:
    result = HeuristicStrategy(fetcher=make_fetcher(html)).extract(REQUEST)
    assert result.job_title == "Staff Designer"
    assert result.company_name == "Northwind Traders"


def test_heuristic_title_ignores_site_chrome(make_fetcher) -> None:
    html = (
        "<body><header><h1>Acme Careers</h1><nav><h1>Menu</h1></nav></header>"
        "<aside><h1>Similar jobs</h1></aside>"
        "<main><h1>Backend Engineer</h1><p>About the job</p><p>Build APIs.</p></main></body>"
    )
    result = HeuristicStrategy(fetcher=make_fetcher(html)).extract(REQUEST)
    assert result.job_title == "Backend Engineer"


def test_heuristic_at_company_skips_common_words(make_fetcher) -> None:
    html = (
        "<body><p>At The Moment we are growing fast.</p>"
        "<p>Work at Our own pace.</p>"
        "<p>Come build the future at Initech.</p></body>"
    )
    result = HeuristicStrategy(fetcher=make_fetcher(html)).extract(REQUEST)
    assert result.company_name == "Initech"


def test_heuristic_anchor_priority(make_fetcher) -> None:
    html = (
        "<body><p>Responsibilities</p><p>Ship features.</p>"
        "<p>About the job</p><p>We are hiring.</p></body>"
    )
    result = HeuristicStrategy(fetcher=make_fetcher(html)).extract(REQUEST)
    assert result.job_description == "We are hiring."


def test_heuristic_inline_anchor(make_fetcher) -> None:
    html = "<body><p>Job description: Maintain the billing service.</p><p>Perks</p></body>"
    result = HeuristicStrategy(fetcher=make_fetcher(html)).extract(REQUEST)
    assert result.job_description == "Maintain the billing service."


def test_heuristic_description_falls_back_to_content(make_fetcher) -> None:
    html = "<body><p>We make widgets.</p><p>Apply today.</p></body>"
    result = HeuristicStrategy(fetcher=make_fetcher(html)).extract(REQUEST)
    assert result.job_title == ""
    assert result.company_name == ""
    assert result.job_description == "We make widgets.\n\nApply today."


def test_heuristic_partial_result_uses_empty_strings(make_fetcher) -> None:
    result = HeuristicStrategy(fetcher=make_fetcher("<body></body>")).extract(REQUEST)
    assert result == ExtractionResult("", "", "")
    assert all(value is not None for value in result.to_dict().values())


def test_heuristic_is_deterministic(make_fetcher, posting_html: str) -> None:
    strategy = HeuristicStrategy(fetcher=make_fetcher(posting_html))
    assert strategy.extract(REQUEST) == strategy.extract(REQUEST)


def test_heuristic_fetch_failure_degrades(make_fetcher) -> None:
    fetcher = make_fetcher("<h1>ignored</h1>", status_code=404)
    result = HeuristicStrategy(fetcher=fetcher).extract(REQUEST)
    assert result == ExtractionResult("", "", "")


def test_description_respects_cap(make_fetcher) -> None:
    html = "<body><p>" + "y" * 500 + "</p></body>"
    result = HeuristicStrategy(fetcher=make_fetcher(html), max_chars=100).extract(REQUEST)
    assert len(result.job_description) == 100


# Model assisted strategy


def test_model_returns_parsed_fields(make_fetcher, make_provider) -> None:
    provider = make_provider(_reply("Backend Engineer", "Globex", "Build systems."))
    strategy = ModelAssistedStrategy(provider, fetcher=make_fetcher(SCENARIO_HTML))
    result = strategy.extract(REQUEST)
    assert result == ExtractionResult("Backend Engineer", "Globex", "Build systems.")
    call = provider.calls[0]
    assert call["json_mode"] is True
    assert "Build scalable systems." in call["user"]
    assert "<h1>" not in call["user"]
    assert "jobTitle" in call["system"]


def test_model_non_json_raises_parse_failure(make_fetcher, make_provider) -> None:
    provider = make_provider("Sorry, I could not find a job posting on that page.")
    strategy = ModelAssistedStrategy(provider, fetcher=make_fetcher(SCENARIO_HTML))
    with pytest.raises(ParseFailure):
        strategy.extract(REQUEST)


def test_model_empty_reply_raises_parse_failure(make_fetcher, make_provider) -> None:
    strategy = ModelAssistedStrategy(make_provider(""), fetcher=make_fetcher(SCENARIO_HTML))
    with pytest.raises(ParseFailure):
        strategy.extract(REQUEST)


@pytest.mark.parametrize(
    "reply",
    [
        json.dumps({"jobTitle": "A", "companyName": "B"}),
        json.dumps({"jobTitle": None, "companyName": "B", "jobDescription": "C"}),
        json.dumps(["Backend Engineer"]),
    ],
)
def test_model_schema_mismatch_raises_parse_failure(make_fetcher, make_provider, reply: str) -> None:
    strategy = ModelAssistedStrategy(make_provider(reply), fetcher=make_fetcher(SCENARIO_HTML))
    with pytest.raises(ParseFailure):
        strategy.extract(REQUEST)


def test_model_accepts_fenced_json(make_fetcher, make_provider) -> None:
    reply = "```json\n" + _reply("QA Lead", "", "") + "\n```"
    strategy = ModelAssistedStrategy(make_provider(reply), fetcher=make_fetcher(SCENARIO_HTML))
    assert strategy.extract(REQUEST).job_title == "QA Lead"


def test_model_skipped_when_fetch_fails(make_fetcher, make_provider) -> None:
    provider = make_provider()
    strategy = ModelAssistedStrategy(provider, fetcher=make_fetcher(status_code=None, error="timeout"))
    assert strategy.extract(REQUEST) == ExtractionResult()
    assert provider.calls == []


def test_model_skipped_for_blank_page(make_fetcher, make_provider) -> None:
    provider = make_provider()
    strategy = ModelAssistedStrategy(provider, fetcher=make_fetcher("<body><script>x()</script></body>"))
    assert strategy.extract(REQUEST).is_empty()
    assert provider.calls == []


def test_model_quota_is_not_retried_without_fallback(make_fetcher, make_provider) -> None:
    provider = make_provider(QuotaFailure("primary-model"))
    strategy = ModelAssistedStrategy(provider, fetcher=make_fetcher(SCENARIO_HTML))
    with pytest.raises(QuotaFailure):
        strategy.extract(REQUEST)
    assert len(provider.calls) == 1


# Model with fallback strategy


def test_fallback_after_rate_limit(make_fetcher, make_provider) -> None:
    provider = make_provider(
        QuotaFailure("primary-model"),
        _reply("Backend Engineer", "Initech", "Build scalable systems."),
    )
    strategy = ModelWithFallbackStrategy(
        provider, fallback_model="backup-model", fetcher=make_fetcher(SCENARIO_HTML)
    )
    result = strategy.extract(REQUEST)
    assert result == ExtractionResult("Backend Engineer", "Initech", "Build scalable systems.")
    assert [call["model"] for call in provider.calls] == ["primary-model", "backup-model"]
    assert all(call["json_mode"] for call in provider.calls)


def test_fallback_attempted_only_once(make_fetcher, make_provider) -> None:
    provider = make_provider(QuotaFailure("primary-model"), QuotaFailure("backup-model"))
    strategy = ModelWithFallbackStrategy(
        provider, fallback_model="backup-model", fetcher=make_fetcher(SCENARIO_HTML)
    )
    with pytest.raises(QuotaFailure) as excinfo:
        strategy.extract(REQUEST)
    assert excinfo.value.model == "backup-model"
    assert len(provider.calls) == 2


def test_fallback_not_used_for_other_errors(make_fetcher, make_provider) -> None:
    provider = make_provider(ModelError("boom"))
    strategy = ModelWithFallbackStrategy(
        provider, fallback_model="backup-model", fetcher=make_fetcher(SCENARIO_HTML)
    )
    with pytest.raises(ModelError):
        strategy.extract(REQUEST)
    assert len(provider.calls) == 1


def test_fallback_not_used_on_success(make_fetcher, make_provider) -> None:
    provider = make_provider(_reply("Backend Engineer"))
    strategy = ModelWithFallbackStrategy(
        provider, fallback_model="backup-model", fetcher=make_fetcher(SCENARIO_HTML)
    )
    assert strategy.extract(REQUEST).job_title == "Backend Engineer"
    assert len(provider.calls) == 1


def test_fallback_parse_failure_propagates(make_fetcher, make_provider) -> None:
    provider = make_provider(QuotaFailure("primary-model"), "not json")
    strategy = ModelWithFallbackStrategy(
        provider, fallback_model="backup-model", fetcher=make_fetcher(SCENARIO_HTML)
    )
    with pytest.raises(ParseFailure):
        strategy.extract(REQUEST)


# Factory


def test_build_heuristic_needs_no_provider() -> None:
    strategy = build_strategy(Settings(strategy="heuristic", max_content_chars=1234, fetch_timeout=3.0))
    assert isinstance(strategy, HeuristicStrategy)
    assert strategy.max_chars == 1234
    assert strategy.fetcher.timeout == 3.0


def test_build_model_strategies(make_provider) -> None:
    provider = make_provider()
    model = build_strategy(Settings(strategy="model"), provider=provider)
    assert type(model) is ModelAssistedStrategy
    fallback = build_strategy(
        Settings(strategy="model_fallback", llm_fallback_model="backup-model"), provider=provider
    )
    assert isinstance(fallback, ModelWithFallbackStrategy)
    assert fallback.fallback_model == "backup-model"
    assert fallback.provider is provider


def test_build_model_strategy_without_keys_fails() -> None:
    with pytest.raises(ModelError):
        build_strategy(Settings(strategy="model"))


def test_build_fallback_for_substituted_provider_uses_its_own_model() -> None:
    settings = Settings(strategy="model_fallback", llm_provider="groq", openai_api_key="sk-test")
    strategy = build_strategy(settings)
    assert strategy.provider.name == "openai"
    assert strategy.fallback_model == strategy.provider.fallback_model == "gpt-3.5-turbo"


def test_build_fallback_for_configured_provider_uses_setting() -> None:
    settings = Settings(
        strategy="model_fallback", llm_provider="groq", groq_api_key="gsk-test", llm_fallback_model="backup-model"
    )
    assert build_strategy(settings).fallback_model == "backup-model"
