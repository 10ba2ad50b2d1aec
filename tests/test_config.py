import json

import pytest

from cigar_lens.config import ExtractionConfig
from cigar_lens.exceptions import ConfigurationError

ENV_VARS = (
    "CIGAR_LENS_PROVIDER",
    "CIGAR_LENS_MODEL",
    "CIGAR_LENS_STRATEGY",
    "CIGAR_LENS_MAX_TOKENS",
    "CIGAR_LENS_TEMPERATURE",
    "CIGAR_LENS_VOCABULARY_VERSION",
    "CIGAR_LENS_VOCABULARY_PATH",
    "CIGAR_LENS_MIGRATE_LEGACY",
    "CIGAR_LENS_MAX_CONTENT_LENGTH",
    "CIGAR_LENS_RETRIES",
    "UNKNOWN_QUEUE_PATH",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults_from_empty_env(clean_env):
    config = ExtractionConfig.from_env()

    assert config == ExtractionConfig()
    assert config.provider == "gemini"
    assert config.strategy == "markdown-with-image"
    assert config.vocabulary_version == "v2"
    assert config.migrate_legacy is False
    assert config.unknown_queue_path is None


def test_from_env_reads_settings(clean_env):
    clean_env.setenv("CIGAR_LENS_PROVIDER", " OpenAI ")
    clean_env.setenv("CIGAR_LENS_MODEL", "gpt-4o-mini")
    clean_env.setenv("CIGAR_LENS_STRATEGY", "html-only")
    clean_env.setenv("CIGAR_LENS_MAX_TOKENS", "8000")
    clean_env.setenv("CIGAR_LENS_TEMPERATURE", "0.2")
    clean_env.setenv("CIGAR_LENS_VOCABULARY_VERSION", "v1")
    clean_env.setenv("CIGAR_LENS_MIGRATE_LEGACY", "yes")
    clean_env.setenv("CIGAR_LENS_RETRIES", "5")
    clean_env.setenv("UNKNOWN_QUEUE_PATH", "/tmp/unknown.jsonl")

    config = ExtractionConfig.from_env()

    assert config.provider == "openai"
    assert config.model == "gpt-4o-mini"
    assert config.strategy == "html-only"
    assert config.max_tokens == 8000
    assert config.temperature == 0.2
    assert config.vocabulary_version == "v1"
    assert config.migrate_legacy is True
    assert config.retries == 5
    assert config.unknown_queue_path == "/tmp/unknown.jsonl"


def test_from_env_ignores_unparseable_numbers(clean_env):
    clean_env.setenv("CIGAR_LENS_MAX_TOKENS", "lots")
    clean_env.setenv("CIGAR_LENS_TEMPERATURE", "warm")
    clean_env.setenv("CIGAR_LENS_RETRIES", "-2")

    config = ExtractionConfig.from_env()

    assert config.max_tokens == 4096
    assert config.temperature == 0.0
    assert config.retries == 0


def test_unknown_strategy_is_rejected(clean_env):
    clean_env.setenv("CIGAR_LENS_STRATEGY", "pdf-only")

    with pytest.raises(ConfigurationError, match="pdf-only"):
        ExtractionConfig.from_env()


def test_empty_system_prompt_is_rejected():
    with pytest.raises(ConfigurationError):
        ExtractionConfig(system_prompt="   ")


def test_vocabulary_from_version():
    vocabulary = ExtractionConfig(vocabulary_version="v1").load_vocabulary()

    assert vocabulary.version == "v1"
    assert "tin" not in vocabulary


def test_vocabulary_from_terms():
    vocabulary = ExtractionConfig(package_types=("single", "box", "other")).load_vocabulary()

    assert vocabulary.terms == ("single", "box", "other")


def test_vocabulary_file_takes_precedence(tmp_path):
    path = tmp_path / "shop.json"
    path.write_text(json.dumps({"package_types": ["single", "jar", "other"]}), encoding="utf-8")

    config = ExtractionConfig(vocabulary_path=str(path), package_types=("single", "other"))

    assert config.load_vocabulary().terms == ("single", "jar", "other")


def test_normalization_config_carries_queue_path():
    config = ExtractionConfig(vocabulary_version="v1", unknown_queue_path="queue.jsonl")

    normalization = config.normalization_config()

    assert normalization.vocabulary_version == "v1"
    assert normalization.unknown_queue_path == "queue.jsonl"
