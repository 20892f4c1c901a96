class MapConverterError(Exception):
    """Bazowy wyjątek konwertera mapy."""


class OSMParseError(MapConverterError):
    """
    Błąd krytyczny – nie da się odczytać / sparsować dokumentu OSM.
    Przerywa całą konwersję (nie zapisujemy częściowego wyniku).
    """

    def __init__(self, source: str, reason: str):
        super().__init__(f"Nie udało się wczytać dokumentu OSM {source}: {reason}")
        self.source = source
        self.reason = reason


class OutputWriteError(MapConverterError):
    """Nie da się zapisać pliku wynikowego."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Nie udało się zapisać pliku {path}: {reason}")
        self.path = path


class ConfigError(MapConverterError):
    """Nieprawidłowa wartość w konfiguracji (.env / zmienne środowiskowe)."""
