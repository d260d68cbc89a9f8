"""Unit tests for prompt assembly and generation error mapping."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from app.core.config import ChatSettings
from app.core.errors import ValidationAppError
from app.schemas.chat import (
    ChatContext,
    ChatIntent,
    EvaluationResult,
    EvaluationScores,
    EvidenceSource,
    IntentClassificationResult,
)
from app.services.response_composer import (
    AUTH_ERROR_MESSAGE,
    EMPTY_RESPONSE_MESSAGE,
    GENERATION_ERROR_RULES,
    GENERIC_ERROR_MESSAGE,
    QUOTA_MESSAGE,
    RATE_LIMIT_MESSAGE,
    SYSTEM_PROMPT,
    ResponseComposer,
    build_context_summary,
    build_evidence_block,
    build_user_message,
    map_generation_error,
)

INTENT = IntentClassificationResult(
    intent=ChatIntent.EVALUATION_CHALLENGE,
    confidence=0.8,
    entities={},
)

EVIDENCE = [
    EvidenceSource(content="Led a team of 6 engineers", relevance_score=1.0, location="Sentence 2"),
    EvidenceSource(content="Deployed services on AWS", relevance_score=0.5, location="Sentence 3"),
]


def _composer(client: MagicMock) -> ResponseComposer:
    return ResponseComposer(
        client_provider=lambda: client,
        chat_settings=ChatSettings(temperature=0.2, top_p=0.9, max_tokens=4096),
        model_name="gpt-4o-mini",
    )


class TestContextSummary:
    """Test the context lines included in the user message."""

    def test_all_fields_in_fixed_order(self, sample_context: ChatContext) -> None:
        summary = build_context_summary(sample_context)

        assert summary.split("\n") == [
            "Candidate: Jane Doe",
            "Job Description: Senior Python engineer for a payments platform....",
            "Must-Have Attributes: Python, AWS, team leadership",
            "Evaluation Score: 82",
            "Tier: Top Tier",
            "Evaluation Summary: Strong backend background with leadership.",
        ]

    @pytest.mark.parametrize("length", [10, 500])
    def test_short_job_description_still_gets_ellipsis(self, length: int) -> None:
        job = "J" * length

        summary = build_context_summary(ChatContext(job_description=job))

        assert summary == f"Job Description: {job}..."

    def test_long_job_description_is_cut_to_preview(self) -> None:
        job = "A" * 500 + "B" * 100

        summary = build_context_summary(ChatContext(job_description=job))

        assert summary == f"Job Description: {'A' * 500}..."

    def test_custom_preview_length(self) -> None:
        summary = build_context_summary(ChatContext(job_description="abcdefgh"), job_preview_chars=3)

        assert summary == "Job Description: abc..."

    def test_absent_fields_are_omitted(self) -> None:
        summary = build_context_summary(ChatContext(candidate_name="Bob", must_have_attributes=""))

        assert summary == "Candidate: Bob"

    def test_empty_context_is_empty_string(self) -> None:
        assert build_context_summary(ChatContext()) == ""

    @pytest.mark.parametrize(
        ("overall", "rendered"),
        [(None, "N/A"), (0, "N/A"), (75.0, "75"), (72.5, "72.5")],
    )
    def test_evaluation_score_rendering(self, overall, rendered: str) -> None:
        context = ChatContext(
            evaluation_result=EvaluationResult(scores=EvaluationScores(overall=overall))
        )

        assert build_context_summary(context) == f"Evaluation Score: {rendered}"


class TestUserMessage:
    """Test evidence block and full user message assembly."""

    def test_evidence_bullets(self) -> None:
        block = build_evidence_block(EVIDENCE)

        assert block == (
            "\nRelevant Evidence:\n- Led a team of 6 engineers\n- Deployed services on AWS"
        )

    def test_no_evidence_sentence(self) -> None:
        assert build_evidence_block([]) == "\nNo specific evidence found in resume."

    def test_user_message_layout(self) -> None:
        message = build_user_message(
            "Why was she qualified?",
            ChatContext(candidate_name="Jane Doe"),
            INTENT,
            EVIDENCE[:1],
        )

        assert message == (
            "Context:\nCandidate: Jane Doe\n\n"
            "Query: Why was she qualified?\n\n"
            "Intent: evaluation_challenge (confidence: 0.8)\n"
            "Relevant Evidence:\n- Led a team of 6 engineers\n\n"
            "Please provide a helpful, evidence-based response."
        )


class TestErrorMapping:
    """Test the ordered error-text table."""

    @pytest.mark.parametrize(
        ("error_text", "expected"),
        [
            ("Error code: 401 - unauthorized", AUTH_ERROR_MESSAGE),
            ("Incorrect API key provided: sk-abc", AUTH_ERROR_MESSAGE),
            ("Error code: 429 - Too Many Requests", RATE_LIMIT_MESSAGE),
            ("insufficient_quota", QUOTA_MESSAGE),
            ("You exceeded your current quota", QUOTA_MESSAGE),
            (
                "The model `gpt-4o-mini` does not exist",
                "Model access error. The API key may not have access to gpt-4o-mini.",
            ),
            ("Connection reset by peer", GENERIC_ERROR_MESSAGE),
        ],
    )
    def test_known_signatures(self, error_text: str, expected: str) -> None:
        assert map_generation_error(RuntimeError(error_text), "gpt-4o-mini") == expected

    def test_auth_takes_priority_over_rate_limit(self) -> None:
        exc = RuntimeError("Error code: 401 after 429 retries")

        assert map_generation_error(exc, "gpt-4o-mini") == AUTH_ERROR_MESSAGE

    def test_rate_limit_takes_priority_over_quota(self) -> None:
        exc = RuntimeError("Error code: 429 - insufficient_quota")

        assert map_generation_error(exc, "gpt-4o-mini") == RATE_LIMIT_MESSAGE

    def test_model_message_names_configured_model(self) -> None:
        message = map_generation_error(RuntimeError("model not found"), "hr-deployment")

        assert message.endswith("access to hr-deployment.")

    def test_rule_order(self) -> None:
        assert [rule.category for rule in GENERATION_ERROR_RULES] == [
            "authentication",
            "rate_limit",
            "quota",
            "model_access",
        ]


class TestGenerateResponse:
    """Test the single generation call and its outcomes."""

    @pytest.mark.asyncio
    async def test_success_returns_generated_text(
        self, sample_context: ChatContext, mock_llm_client: MagicMock
    ) -> None:
        composer = _composer(mock_llm_client)

        answer = await composer.generate_response("Why?", sample_context, INTENT, EVIDENCE)

        assert answer == "Jane led a team of 6 engineers."
        mock_llm_client.complete.assert_awaited_once()
        args = mock_llm_client.complete.call_args
        assert args.args[0] == SYSTEM_PROMPT
        assert "Query: Why?" in args.args[1]
        assert "Candidate: Jane Doe" in args.args[1]
        assert args.kwargs == {"temperature": 0.2, "top_p": 0.9, "max_tokens": 4096}

    @pytest.mark.asyncio
    async def test_empty_generation_returns_apology(self, mock_llm_client: MagicMock) -> None:
        mock_llm_client.complete = AsyncMock(return_value="")
        composer = _composer(mock_llm_client)

        answer = await composer.generate_response("Why?", ChatContext(), INTENT, [])

        assert answer == EMPTY_RESPONSE_MESSAGE

    @pytest.mark.asyncio
    async def test_rate_limit_error_is_returned_not_raised(self, mock_llm_client: MagicMock) -> None:
        mock_llm_client.complete = AsyncMock(side_effect=RuntimeError("Error code: 429"))
        composer = _composer(mock_llm_client)

        answer = await composer.generate_response("Why?", ChatContext(), INTENT, [])

        assert answer == RATE_LIMIT_MESSAGE
        mock_llm_client.complete.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_client_construction_failure_yields_generic_message(self) -> None:
        def provider():
            raise ValidationAppError(
                code="llm_missing_api_key",
                message="OpenAI provider requires LLM_API_KEY environment variable",
            )

        composer = ResponseComposer(client_provider=provider)

        answer = await composer.generate_response("Why?", ChatContext(), INTENT, [])

        assert answer == GENERIC_ERROR_MESSAGE

    @pytest.mark.asyncio
    async def test_failure_is_logged_without_prompt(
        self, mock_llm_client: MagicMock, caplog: pytest.LogCaptureFixture
    ) -> None:
        mock_llm_client.complete = AsyncMock(side_effect=RuntimeError("Error code: 401"))
        composer = _composer(mock_llm_client)

        with caplog.at_level("ERROR", logger="app.services.response_composer"):
            await composer.generate_response("secret question", ChatContext(), INTENT, [])

        record = next(r for r in caplog.records if r.message == "chat.generation_failed")
        assert record.error_category == "authentication"
        assert "secret question" not in caplog.text

    @pytest.mark.asyncio
    async def test_start_log_records_deployment_mode(
        self, mock_llm_client: MagicMock, caplog: pytest.LogCaptureFixture
    ) -> None:
        composer = ResponseComposer(
            client_provider=lambda: mock_llm_client,
            model_name="hr-deployment",
            provider="azure",
        )

        with caplog.at_level("DEBUG", logger="app.services.response_composer"):
            await composer.generate_response("Why?", ChatContext(), INTENT, [])

        record = next(r for r in caplog.records if r.message == "chat.generation_started")
        assert record.provider == "azure"
        assert record.model == "hr-deployment"

    def test_system_prompt_formatting_rules(self) -> None:
        assert "HR Copilot" in SYSTEM_PROMPT
        assert "Never use asterisks" in SYSTEM_PROMPT
        assert '"quotation marks"' in SYSTEM_PROMPT
