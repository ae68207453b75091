from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # LLM Provider settings (OpenRouter or OpenAI compatible)
    # For OpenRouter: https://openrouter.ai/api/v1
    # For OpenAI: https://api.openai.com/v1
    llm_api_key: str = ""
    llm_base_url: str = "https://api.openai.com/v1"

    # ReAct agent model - requests may override it with modelName
    model_react: str = "gpt-4o-mini"

    # Generation settings
    llm_temperature: float = 0.7
    react_max_tokens: int = 800

    # Fallback answer synthesis (runs only when the step budget is exhausted)
    react_synthesis_temperature: float = 0.3
    react_synthesis_max_tokens: int = 500

    # Step budget
    react_default_max_steps: int = 5
    react_max_steps_limit: int = 20

    # Values substituted when the model output is missing a labelled field
    react_default_thought: str = "Continue analyzing the problem."
    react_default_action: str = "search"
    react_default_action_input: str = ""

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    return Settings()
