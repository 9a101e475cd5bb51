import logging
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.errors import MalformedReferenceError
from .model.reference import EntityType


class Settings(BaseSettings):
    # Naming conventions of the wiki model. A document named
    # `default_document` is the home page of its space.
    default_wiki: str = "xwiki"
    default_space: str = "Main"
    default_document: str = "WebHome"

    # Kinds below the document have no conventional default name
    default_attachment: Optional[str] = None
    default_object: Optional[str] = None
    default_property: Optional[str] = None

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="WIKI_INDEX_",
        env_file=".env",
        extra="ignore"
    )

    def default_name(self, entity_type: EntityType) -> str:
        """Return the conventional name used when a segment of `entity_type` is omitted."""
        names = {
            EntityType.WIKI: self.default_wiki,
            EntityType.SPACE: self.default_space,
            EntityType.DOCUMENT: self.default_document,
            EntityType.ATTACHMENT: self.default_attachment,
            EntityType.OBJECT: self.default_object,
            EntityType.OBJECT_PROPERTY: self.default_property,
        }
        name = names[entity_type]
        if not name:
            raise MalformedReferenceError(
                f"No default name is configured for {entity_type.value} references"
            )
        return name


def configure_logging(level: Optional[str] = None) -> None:
    """
    Attach a stream handler to the package's `refs` logger hierarchy.

    Safe to call more than once; existing handlers are reused.
    """
    logger = logging.getLogger("refs")
    logger.setLevel((level or settings.log_level).upper())

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        )
        logger.addHandler(handler)


settings = Settings()
