from injector import Injector

from embedder.core.config.settings import EmbedderSettings
from embedder.dependencies.dependency_injection import Dependencies


def create_injector(settings: EmbedderSettings) -> Injector:
    return Injector([Dependencies(settings)])
