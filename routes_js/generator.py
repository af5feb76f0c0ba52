"""Generation entry points: records in, generated files out."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, Optional, Sequence

from . import code_generator, resource_generator, type_generator
from .config import Configuration
from .extractor import extract_routes
from .models import GeneratedFile, Route

logger = logging.getLogger(__name__)

# called with the list of written paths after every write_files()
PostGenerationHook = Callable[[List[str]], Any]


@dataclass
class GenerationResult:
    files: List[GeneratedFile] = field(default_factory=list)
    routes: List[Route] = field(default_factory=list)

    @property
    def paths(self) -> List[str]:
        return [f.path for f in self.files]


def generate(records: Iterable[Any], config: Optional[Configuration] = None) -> str:
    """Classic-mode JavaScript source for `records`."""
    config = (config or Configuration()).validate()
    return code_generator.generate(extract_routes(records, config), config)


def definitions(records: Iterable[Any], config: Optional[Configuration] = None) -> str:
    """TypeScript declarations matching `generate`."""
    config = (config or Configuration()).validate()
    return type_generator.generate(extract_routes(records, config), config)


def generate_files(records: Iterable[Any], config: Optional[Configuration] = None) -> GenerationResult:
    """Every output file for the configured style.

    Classic paths are `output_file` and, when types are enabled, the types
    path. Resource paths are placed under `output_dir`.
    """
    config = (config or Configuration()).validate()
    routes = extract_routes(records, config)

    if config.is_resource_mode:
        files = [
            GeneratedFile(path=os.path.join(config.output_dir, f.path), content=f.content)
            for f in resource_generator.generate(routes, config)
        ]
    else:
        files = [GeneratedFile(path=config.output_file, content=code_generator.generate(routes, config))]
        if config.generate_types:
            files.append(GeneratedFile(path=config.types_path, content=type_generator.generate(routes, config)))

    logger.debug("Generated %d files for %d routes", len(files), len(routes))
    return GenerationResult(files=files, routes=routes)


def write_files(files: Sequence[GeneratedFile], hooks: Sequence[PostGenerationHook] = ()) -> List[str]:
    """Write generated files, creating parent directories, then run hooks.

    OSError propagates and aborts the run; hooks only run once every file
    has been written.
    """
    written = []
    for generated in files:
        directory = os.path.dirname(generated.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(generated.path, "w", encoding="utf-8") as f:
            f.write(generated.content)
        logger.debug("Wrote %s", generated.path)
        written.append(generated.path)

    for hook in hooks:
        hook(written)
    return written
