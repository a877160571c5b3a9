"""
Model selection for the inference providers.

Each capability has a small enumeration of supported models instead of a
free-form model string. ``model_id`` gives the Hugging Face repository used
for the remote call.
"""

from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SummarizationModel(str, Enum):
    """Available summarization models."""

    BART_LARGE_CNN = "bart-large-cnn"
    DISTILBART_CNN = "distilbart-cnn"

    @property
    def model_id(self) -> str:
        return {
            SummarizationModel.BART_LARGE_CNN: "facebook/bart-large-cnn",
            SummarizationModel.DISTILBART_CNN: "sshleifer/distilbart-cnn-12-6",
        }[self]


class EmbeddingModel(str, Enum):
    """Available sentence embedding models."""

    MINILM = "minilm"
    MPNET = "mpnet"

    @property
    def model_id(self) -> str:
        return {
            EmbeddingModel.MINILM: "sentence-transformers/all-MiniLM-L6-v2",
            EmbeddingModel.MPNET: "sentence-transformers/all-mpnet-base-v2",
        }[self]


class TranslationModel(str, Enum):
    """Available translation models."""

    NLLB_600M = "nllb-600m"

    @property
    def model_id(self) -> str:
        return "facebook/nllb-200-distilled-600M"


class SentimentModel(str, Enum):
    """Available sentiment classifiers."""

    DISTILBERT_SST2 = "distilbert-sst2"

    @property
    def model_id(self) -> str:
        return "distilbert/distilbert-base-uncased-finetuned-sst-2-english"


class EntityModel(str, Enum):
    """Available named-entity recognizers."""

    DISTILBERT_NER = "distilbert-ner"

    @property
    def model_id(self) -> str:
        return "dslim/distilbert-NER"


class ProvidersConfig(BaseSettings):
    """
    Default model per capability and translation generation parameters.

    Settings can be overridden via environment variables prefixed with PROVIDERS_.

    Example:
        PROVIDERS_SUMMARIZATION_MODEL=distilbart-cnn
    """

    model_config = SettingsConfigDict(
        env_prefix="PROVIDERS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    summarization_model: SummarizationModel = Field(
        default=SummarizationModel.BART_LARGE_CNN,
        description="Default summarization model",
    )
    embedding_model: EmbeddingModel = Field(
        default=EmbeddingModel.MINILM,
        description="Sentence embedding model used for topic clustering",
    )
    translation_model: TranslationModel = Field(
        default=TranslationModel.NLLB_600M,
        description="Translation model",
    )
    sentiment_model: SentimentModel = Field(
        default=SentimentModel.DISTILBERT_SST2,
        description="Sentiment classification model",
    )
    entity_model: EntityModel = Field(
        default=EntityModel.DISTILBERT_NER,
        description="Named entity recognition model",
    )

    # Translation generation parameters
    translation_max_length: int = Field(default=512, ge=16, le=4096)
    translation_num_beams: int = Field(default=4, ge=1, le=16)

    # Ask the inference API to load cold models instead of failing fast
    wait_for_model: bool = Field(default=True)
