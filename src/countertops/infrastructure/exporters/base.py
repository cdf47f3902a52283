"""Base exporter framework with Protocol, Registry, and Manager."""

from __future__ import annotations

import logging
from abc import abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar, Protocol, runtime_checkable

if TYPE_CHECKING:
    from countertops.domain import Configuration


logger = logging.getLogger(__name__)


@runtime_checkable
class Exporter(Protocol):
    """Protocol for all exporters.

    Exporters convert a countertop Configuration to a specific format. Each
    exporter must define its format name and file extension, and implement at
    least the export method.

    Attributes:
        format_name: Registry key for the export format (e.g., "dxf", "json").
        file_extension: File extension without leading dot (e.g., "dxf").
    """

    format_name: ClassVar[str]
    file_extension: ClassVar[str]

    @abstractmethod
    def export(self, configuration: Configuration, path: Path) -> None:
        """Export a configuration to a file.

        Args:
            configuration: The countertop design to export.
            path: Path where the file will be saved.
        """
        ...

    def export_string(self, configuration: Configuration) -> str:
        """Export a configuration as a string.

        Raises:
            NotImplementedError: If the format does not support string export.
        """
        raise NotImplementedError(
            f"Format '{self.format_name}' does not support string export"
        )


class ExporterRegistry:
    """Registry for exporter classes.

    Exporters register themselves with the @ExporterRegistry.register
    decorator when their module is imported.

    Example:
        @ExporterRegistry.register("json")
        class JsonExporter:
            format_name = "json"
            file_extension = "json"
            ...
    """

    _exporters: ClassVar[dict[str, type[Exporter]]] = {}

    @classmethod
    def register(cls, format_name: str) -> Any:
        """Decorator to register an exporter class under a format name."""

        def decorator(exporter_class: type[Exporter]) -> type[Exporter]:
            if format_name in cls._exporters:
                logger.warning(
                    f"Overwriting existing exporter for format '{format_name}'"
                )
            cls._exporters[format_name] = exporter_class
            logger.debug(f"Registered exporter '{format_name}': {exporter_class.__name__}")
            return exporter_class

        return decorator

    @classmethod
    def get(cls, format_name: str) -> type[Exporter]:
        """Get an exporter class by format name.

        Raises:
            KeyError: If no exporter is registered for the format.
        """
        if format_name not in cls._exporters:
            available = ", ".join(sorted(cls._exporters.keys()))
            raise KeyError(
                f"No exporter registered for format '{format_name}'. "
                f"Available formats: {available or 'none'}"
            )
        return cls._exporters[format_name]

    @classmethod
    def available_formats(cls) -> list[str]:
        return sorted(cls._exporters.keys())

    @classmethod
    def is_registered(cls, format_name: str) -> bool:
        return format_name in cls._exporters

    @classmethod
    def unregister(cls, format_name: str) -> None:
        """Remove a format; unknown names are ignored. Mostly useful in tests."""
        cls._exporters.pop(format_name, None)


class ExportManager:
    """Exports one configuration to several formats in an output directory.

    Attributes:
        output_dir: Directory where exported files will be saved.
        exporter_options: Per-format keyword arguments for exporter constructors.
    """

    def __init__(
        self,
        output_dir: Path,
        exporter_options: dict[str, dict[str, Any]] | None = None,
    ) -> None:
        self.output_dir = Path(output_dir)
        self.exporter_options = exporter_options or {}

    def export_all(
        self,
        formats: list[str],
        configuration: Configuration,
        project_name: str = "countertop",
    ) -> dict[str, Path]:
        """Export a configuration to multiple formats.

        Files are named ``{project_name}.{ext}``.

        Returns:
            Dictionary mapping format names to output file paths.

        Raises:
            KeyError: If any format is not registered.
            OSError: If file operations fail.
        """
        if not formats:
            logger.warning("No export formats requested; nothing written")
            return {}

        # Resolve every format before writing anything
        exporter_classes = [(name, ExporterRegistry.get(name)) for name in formats]
        self.output_dir.mkdir(parents=True, exist_ok=True)

        results: dict[str, Path] = {}
        for format_name, exporter_class in exporter_classes:
            exporter = exporter_class(**self.exporter_options.get(format_name, {}))
            filepath = self.output_dir / f"{project_name}.{exporter.file_extension}"

            logger.info(f"Exporting to {format_name}: {filepath}")
            exporter.export(configuration, filepath)
            results[format_name] = filepath

        return results

    def export_single(
        self,
        format_name: str,
        configuration: Configuration,
        project_name: str = "countertop",
    ) -> Path:
        """Convenience wrapper around export_all for one format."""
        return self.export_all([format_name], configuration, project_name)[format_name]
