"""Application settings loaded from environment variables via pydantic-settings.

Values are read from (highest priority first):

  1. **Environment variables** -- e.g. ``OPENAI_API_KEY=sk-abc123``
  2. **.env file** -- key=value lines in the project root ``.env`` file
  3. The defaults declared below.

Field ``openai_api_key`` maps to env var ``OPENAI_API_KEY``; pydantic-settings
upper-cases and matches automatically.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """paperloom settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # === Embedding Providers ===
    # Empty string = "not configured" -> the provider selection in the CLI
    # skips providers with empty keys and falls through to the next.
    openai_api_key: str = ""
    openai_base_url: str = ""  # OpenAI-compatible APIs (TogetherAI, etc.)
    openai_embedding_model: str = ""  # Empty -> text-embedding-3-large
    ollama_base_url: str = "http://localhost:11434"

    # === Vector Store ===
    chromadb_persist_dir: str = "./data/chromadb"
    chromadb_collection: str = "pdfs"

    # === Object Store ===
    object_store_root: str = "./data/objects"
    default_bucket: str = ""  # Used when a bare key is given instead of s3://bucket/key
    archive_bucket: str = ""  # Empty -> chunk/image archiving disabled

    # === Layout inference ===
    line_tolerance: float = Field(default=5.0, gt=0)
    space_threshold: float = Field(default=1.0, ge=0)

    # === Chunking ===
    max_chunk_chars: int = Field(default=200, gt=0)
    chunk_window_sentences: int = Field(default=10, ge=2)
    upsert_batch_size: int = Field(default=10, gt=0)

    # === App Config ===
    app_env: str = "development"
    log_level: str = "INFO"

    def get_available_embedding_providers(self) -> list[str]:
        """Return embedding provider names that are configured."""
        providers: list[str] = []
        if self.openai_api_key:
            providers.append("openai")
        if self.ollama_base_url:
            providers.append("ollama")
        return providers
