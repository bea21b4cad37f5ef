from __future__ import annotations


class WeightWatcherError(Exception):
    """Base class for all errors raised by weightwatcher."""


class InvalidParameter(WeightWatcherError, ValueError):
    """A report parameter (e.g. the window size) is out of range."""


class ConfigError(WeightWatcherError):
    """The config file does not parse or holds invalid settings."""


class StoreError(WeightWatcherError):
    """Base class for data file and measurement errors."""


class NoDataFile(StoreError):
    def __init__(self) -> None:
        super().__init__("no data file specified (use --file or set data_file in the config file)")


class DataFileNotFound(StoreError):
    def __init__(self, path: object) -> None:
        super().__init__(f"data file {path} does not exist (run 'init' first)")
        self.path = path


class DataFileExists(StoreError):
    def __init__(self, path: object) -> None:
        super().__init__(f"data file {path} already exists")
        self.path = path


class MalformedDataFile(StoreError):
    """The data file exists but its contents cannot be used."""


class MeasurementNotFound(StoreError):
    def __init__(self, measurement_id: int) -> None:
        super().__init__(f"measurement with id {measurement_id} does not exist")
        self.measurement_id = measurement_id
