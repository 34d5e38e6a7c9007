"""
Concept generation and remixing.

ConceptGenerationService ties the pipeline together: audience description,
prompt, one LLM call, response parsing and placeholder substitution. It
never raises to its caller. When the LLM call fails (network error,
timeout, non-2xx response, empty completion) it returns a deterministic
fallback concept built from the inputs, marked ``degraded``.
"""

from typing import Any, List, Optional

from conceptlab.audience2concept.audience_description import build_audience_description
from conceptlab.audience2concept.llm_client import ChatCompletionClient
from conceptlab.audience2concept.llm_templates import generate_concept_prompt
from conceptlab.audience2concept.models import (
    Audience,
    CampaignParameters,
    GeneratedConcept,
    RemixParameters,
)
from conceptlab.audience2concept.response_parser import parse_llm_response, finalize_concept
from conceptlab.core.config import get_config_value
from conceptlab.core.constants import (
    DEFAULT_LLM_MODEL,
    OPENAI_API_ENDPOINT,
    DEFAULT_GENERATE_TEMPERATURE,
    DEFAULT_REMIX_TEMPERATURE,
    DEFAULT_MAX_TOKENS,
    DEFAULT_LLM_TIMEOUT,
    VARIANT_GENERATE,
    VARIANT_REMIX,
    DEFAULT_CAMPAIGN_TYPE,
    DEFAULT_TONE,
    DEFAULT_ADDITIONAL_CONTEXT,
    DEFAULT_REMIX_INSTRUCTIONS,
)
from conceptlab.core.error_handler import APIError, ConfigurationError, log_api_error
from conceptlab.core.logging_config import get_logger

# Initialize logger
logger = get_logger(__name__)

GENERATE_FALLBACK_DESCRIPTION = (
    "A targeted marketing campaign designed for {audience_description}. "
    "This concept focuses on reaching the audience through their preferred channels "
    "and addressing their specific interests and pain points."
)
REMIX_FALLBACK_NOTE = (
    "This is a remixed version incorporating fresh ideas and approaches for the target audience."
)


def multi_audience_context(audiences: List[Audience], additional_context: Optional[str] = None) -> str:
    """
    Append the names of every targeted audience when there is more than one.

    Args:
        audiences (List[Audience]): Selected audiences, primary first
        additional_context (str, optional): Caller supplied context

    Returns:
        str: Context to send with the primary audience
    """
    context = additional_context or DEFAULT_ADDITIONAL_CONTEXT
    if len(audiences) < 2:
        return context
    names = ", ".join(audience.name for audience in audiences)
    line = f"Target multiple audiences: {names}"
    return f"{context}\n\n{line}" if context else line


class GenerationConfig:
    """
    Model and sampling settings for concept generation.

    Remix runs at a higher temperature than generation so variations drift
    further from the original.
    """

    def __init__(
        self,
        model: str = DEFAULT_LLM_MODEL,
        api_base: str = OPENAI_API_ENDPOINT,
        generate_temperature: float = DEFAULT_GENERATE_TEMPERATURE,
        remix_temperature: float = DEFAULT_REMIX_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        timeout: float = DEFAULT_LLM_TIMEOUT
    ):
        self.model = model
        self.api_base = api_base
        self.generate_temperature = generate_temperature
        self.remix_temperature = remix_temperature
        self.max_tokens = max_tokens
        self.timeout = timeout

    @classmethod
    def from_config(cls) -> "GenerationConfig":
        """
        Build settings from the ``llm`` configuration section.

        Raises:
            ConfigurationError: If the timeout or token ceiling is not a positive number
        """
        config = cls(
            model=get_config_value("llm.model", DEFAULT_LLM_MODEL),
            api_base=get_config_value("llm.api_base", OPENAI_API_ENDPOINT),
            generate_temperature=get_config_value("llm.temperature.generate", DEFAULT_GENERATE_TEMPERATURE),
            remix_temperature=get_config_value("llm.temperature.remix", DEFAULT_REMIX_TEMPERATURE),
            max_tokens=get_config_value("llm.max_tokens", DEFAULT_MAX_TOKENS),
            timeout=get_config_value("llm.timeout", DEFAULT_LLM_TIMEOUT)
        )

        invalid_keys = []
        # Every LLM call must be bounded
        if isinstance(config.timeout, bool) or not isinstance(config.timeout, (int, float)) or config.timeout <= 0:
            invalid_keys.append("llm.timeout")
        if isinstance(config.max_tokens, bool) or not isinstance(config.max_tokens, int) or config.max_tokens <= 0:
            invalid_keys.append("llm.max_tokens")
        if invalid_keys:
            raise ConfigurationError(
                message="LLM settings must be positive numbers",
                component="llm",
                missing_keys=invalid_keys
            )

        return config

    def temperature_for(self, variant: str) -> float:
        if variant == VARIANT_REMIX:
            return self.remix_temperature
        return self.generate_temperature

    def __repr__(self) -> str:
        return (
            f"GenerationConfig(model={self.model!r}, generate_temperature={self.generate_temperature}, "
            f"remix_temperature={self.remix_temperature}, max_tokens={self.max_tokens}, "
            f"timeout={self.timeout})"
        )


class ConceptGenerationService:
    """
    Generates and remixes marketing concepts for an audience.

    Audience ownership is checked by the caller before either operation
    runs. The service itself keeps no per-request state, so one instance
    can serve concurrent requests.
    """

    def __init__(self, llm_client: Any, config: Optional[GenerationConfig] = None):
        """
        Initialize the service.

        Args:
            llm_client: Object with a ``complete(system_prompt, user_prompt, temperature, max_tokens)``
                method returning raw text (see ChatCompletionClient)
            config (GenerationConfig, optional): Sampling settings; read from configuration if omitted
        """
        self.llm_client = llm_client
        self.config = config or GenerationConfig.from_config()
        logger.info(f"Initialized ConceptGenerationService with {self.config!r}")

    def generate(
        self,
        audience: Audience,
        campaign_type: Optional[str] = None,
        tone: Optional[str] = None,
        additional_context: Optional[str] = None
    ) -> GeneratedConcept:
        """
        Generate a new concept for an audience.

        Args:
            audience (Audience): Target audience
            campaign_type (str, optional): Defaults to "general marketing campaign"
            tone (str, optional): Defaults to "engaging and persuasive"
            additional_context (str, optional): Defaults to no extra context

        Returns:
            GeneratedConcept: The parsed concept, or the fallback concept on failure
        """
        params = CampaignParameters(
            campaign_type=campaign_type or DEFAULT_CAMPAIGN_TYPE,
            tone=tone or DEFAULT_TONE,
            additional_context=additional_context or DEFAULT_ADDITIONAL_CONTEXT
        )
        audience_description = build_audience_description(audience)
        logger.info(f"Generating {params.campaign_type} concept for audience '{audience.name}'")

        prompts = generate_concept_prompt(
            VARIANT_GENERATE,
            audience_description,
            campaign_type=params.campaign_type,
            tone=params.tone,
            additional_context=params.additional_context
        )

        concept = self._run(VARIANT_GENERATE, prompts)
        if concept is None:
            return self.generation_fallback(audience, audience_description)
        return concept

    def remix(
        self,
        original_concept: GeneratedConcept,
        audience: Audience,
        remix_instructions: Optional[str] = None
    ) -> GeneratedConcept:
        """
        Create a variation of an existing concept for an audience.

        Args:
            original_concept (GeneratedConcept): Concept being remixed
            audience (Audience): Target audience
            remix_instructions (str, optional): Defaults to "Create a variation with a fresh perspective"

        Returns:
            GeneratedConcept: The remixed concept, or the fallback concept on failure
        """
        params = RemixParameters(
            original_concept=original_concept,
            remix_instructions=remix_instructions or DEFAULT_REMIX_INSTRUCTIONS
        )
        audience_description = build_audience_description(audience)
        logger.info(f"Remixing concept '{original_concept.title}' for audience '{audience.name}'")

        prompts = generate_concept_prompt(
            VARIANT_REMIX,
            audience_description,
            original_concept=params.original_concept,
            remix_instructions=params.remix_instructions
        )

        concept = self._run(VARIANT_REMIX, prompts)
        if concept is None:
            return self.remix_fallback(params.original_concept)
        return concept

    def _run(self, variant: str, prompts: dict) -> Optional[GeneratedConcept]:
        """
        Call the LLM once and parse the result; None means use the fallback.
        """
        try:
            raw = self.llm_client.complete(
                prompts["system_prompt"],
                prompts["user_prompt"],
                temperature=self.config.temperature_for(variant),
                max_tokens=self.config.max_tokens
            )
            if not raw or not str(raw).strip():
                raise APIError(message="Empty completion")
        except APIError as e:
            log_api_error(e)
            logger.warning(f"Concept {variant} degraded to fallback: {e.message}")
            return None
        except Exception as e:
            logger.warning(f"Concept {variant} degraded to fallback: {type(e).__name__}: {e}")
            return None

        try:
            return finalize_concept(parse_llm_response(raw))
        except Exception as e:
            logger.error(f"Unexpected error parsing {variant} response: {e}")
            return None

    @staticmethod
    def generation_fallback(audience: Audience, audience_description: Optional[str] = None) -> GeneratedConcept:
        """
        Deterministic concept used when generation fails.
        """
        if audience_description is None:
            audience_description = build_audience_description(audience)
        return GeneratedConcept(
            title=f"Campaign for {audience.name}",
            description=GENERATE_FALLBACK_DESCRIPTION.format(audience_description=audience_description),
            degraded=True
        )

    @staticmethod
    def remix_fallback(original_concept: GeneratedConcept) -> GeneratedConcept:
        """
        Deterministic concept used when a remix fails.
        """
        return GeneratedConcept(
            title=f"{original_concept.title} - Remix",
            description=f"{original_concept.description}\n\n{REMIX_FALLBACK_NOTE}",
            degraded=True
        )


def create_concept_service(log_file: Optional[str] = None) -> ConceptGenerationService:
    """
    Build a service with a ChatCompletionClient from configuration.

    Args:
        log_file (str, optional): File for LLM request/response traces

    Returns:
        ConceptGenerationService: Ready-to-use service

    Raises:
        ValueError: If the API key for the configured provider is not set
    """
    config = GenerationConfig.from_config()
    client = ChatCompletionClient(
        model=config.model,
        api_base=config.api_base,
        timeout=config.timeout,
        log_file=log_file
    )
    return ConceptGenerationService(client, config)
