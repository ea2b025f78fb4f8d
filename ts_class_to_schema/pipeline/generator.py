"""
Schema generation pipeline.

Runs every mapping of a configuration:

1. Discover source files (FileMatcher)
2. Parse each file (TypeScriptSource) and extract its exported classes
3. Render the schemas of all classes sharing an output path as one module
4. Write the modules atomically (AtomicWriter)

A class that cannot be extracted or rendered is recorded as a failure and
skipped; other classes of the same file are still generated.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from .analyzer.extractor import ClassExtractor
from .analyzer.ir_nodes import ParsedClass
from .backends import SchemaBackend, get_backend
from .config import MappingRule, SchemaGenConfig
from .errors import SchemaGenError
from .output import AtomicWriter, FileMatcher, PathResolver, WriteStatus, validate_typescript
from .source import TypeScriptProject

log = structlog.get_logger("ts_class_to_schema.generator")


@dataclass
class SchemaGenerationResult:
    """Result of generating one schema."""

    source_path: str
    output_path: str
    schema_name: str
    status: WriteStatus


@dataclass
class GenerationFailure:
    """A class or file that could not be generated."""

    source_location: str
    message: str
    class_name: str | None = None


@dataclass
class GenerateResult:
    """Complete result of a generation run."""

    schemas: list[SchemaGenerationResult] = field(default_factory=list)
    failures: list[GenerationFailure] = field(default_factory=list)
    files_processed: int = 0
    output_files: dict[str, WriteStatus] = field(default_factory=dict)

    @property
    def schemas_generated(self) -> int:
        return sum(1 for s in self.schemas if s.status != WriteStatus.SKIPPED)

    @property
    def files_created(self) -> int:
        return sum(1 for s in self.output_files.values() if s == WriteStatus.CREATED)

    @property
    def files_overwritten(self) -> int:
        return sum(1 for s in self.output_files.values() if s == WriteStatus.OVERWRITTEN)

    @property
    def files_skipped(self) -> int:
        return sum(1 for s in self.output_files.values() if s == WriteStatus.SKIPPED)


@dataclass
class ConvertedSource:
    """Classes of one source file, split into generated and failed."""

    source_path: str
    classes: list[ParsedClass] = field(default_factory=list)
    failures: list[GenerationFailure] = field(default_factory=list)


class SchemaGen:
    """Runs a schema generation configuration."""

    def __init__(self, config: SchemaGenConfig, root_dir: str | Path | None = None):
        self.config = config
        self.root_dir = Path(root_dir) if root_dir is not None else Path.cwd()
        self.backend: SchemaBackend = get_backend(config.generator)
        self.extractor = ClassExtractor()
        self.project = TypeScriptProject()
        self.path_resolver = PathResolver()
        self.writer = AtomicWriter(overwrite=config.overwrite)

    def run(self) -> GenerateResult:
        result = GenerateResult()
        processed: set[str] = set()

        for mapping in self.config.mappings:
            self._process_mapping(mapping, result, processed)

        result.files_processed = len(processed)
        log.info(
            "run_complete",
            files_processed=result.files_processed,
            schemas_generated=result.schemas_generated,
            files_created=result.files_created,
            files_overwritten=result.files_overwritten,
            failures=len(result.failures),
        )
        return result

    def _process_mapping(self, mapping: MappingRule, result: GenerateResult, processed: set[str]) -> None:
        files = FileMatcher(mapping.include, self.config.exclude, root_dir=str(self.root_dir)).find()
        log.info("run_started", include=mapping.include, total_files=len(files))

        # Output path -> (source path, class) in discovery order
        modules: dict[str, list[tuple[str, ParsedClass]]] = defaultdict(list)

        for index, file_path in enumerate(files, start=1):
            log.info("file_processing", path=file_path, current=index, total=len(files))
            processed.add(file_path)

            converted = self.convert_source(self.root_dir / file_path, display_path=file_path)
            result.failures.extend(converted.failures)

            output_path = self.path_resolver.resolve(file_path, mapping.output_pattern, mapping.variables)
            modules[output_path].extend((file_path, c) for c in converted.classes)
            log.info("file_complete", path=file_path, schemas=len(converted.classes), failures=len(converted.failures))

        for output_path, entries in modules.items():
            if not entries:
                continue
            code = self.backend.render_module([c for _, c in entries]) + "\n"
            try:
                status = self.writer.write(self.root_dir / output_path, code)
            except (SchemaGenError, OSError) as e:
                log.error("write_failed", path=output_path, error=str(e))
                result.failures.append(GenerationFailure(source_location=output_path, message=str(e)))
                continue
            result.output_files[output_path] = status
            for source_path, parsed_class in entries:
                result.schemas.append(
                    SchemaGenerationResult(
                        source_path=source_path,
                        output_path=output_path,
                        schema_name=self.backend.schema_identifier(parsed_class.name),
                        status=status,
                    )
                )

    def convert_source(self, path: str | Path, display_path: str | None = None) -> ConvertedSource:
        """
        Extract and check every exported class of one file.

        Classes that fail extraction or rendering are reported in
        ``failures``; the others are returned ready to be rendered.
        """
        display_path = display_path or str(path)
        converted = ConvertedSource(source_path=display_path)

        try:
            source = self.project.load(path)
        except (SchemaGenError, OSError) as e:
            log.error("file_failed", path=display_path, error=str(e))
            converted.failures.append(GenerationFailure(source_location=display_path, message=str(e)))
            return converted

        for declaration in source.classes():
            if not declaration.is_exported():
                continue
            try:
                parsed_class = self.extractor.extract(declaration)
                # Render and parse once so backend and syntax failures surface here, per class
                validate_typescript(self.backend.render_module([parsed_class]))
            except SchemaGenError as e:
                log.error("class_failed", location=declaration.source_location, class_name=declaration.name, error=str(e))
                converted.failures.append(
                    GenerationFailure(source_location=declaration.source_location, message=str(e), class_name=declaration.name)
                )
                continue
            converted.classes.append(parsed_class)

        return converted
