from .entities import EntityExtractor, extract_entities, extract_parameters

__all__ = ["EntityExtractor", "extract_entities", "extract_parameters"]
