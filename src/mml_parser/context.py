"""
Run-scoped state shared by every file of one invocation.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Set

from mml_parser.columns import build_column_model, csv_header
from mml_parser.config_models import ParserConfig
from mml_parser.csv_writer import OutputRouter
from mml_parser.models import ColumnModel, ParsingStats
from mml_parser.observability import ObservabilityManager

logger = logging.getLogger(__name__)


@dataclass
class RunContext:
    """Owns the column models, output streams and stats of one run.

    Column models are built once per entity type and never recomputed,
    so later blocks and later files reuse the first header seen. ``router``
    is None in dry-run mode.
    """
    config: ParserConfig = field(default_factory=ParserConfig)
    router: Optional[OutputRouter] = None
    observability: ObservabilityManager = field(default_factory=ObservabilityManager)
    column_models: Dict[str, ColumnModel] = field(default_factory=dict)
    record_stats: Dict[str, ParsingStats] = field(default_factory=dict)
    disabled_entity_types: Set[str] = field(default_factory=set)
    # Entity types named by a banner in the file being parsed
    file_entity_types: Set[str] = field(default_factory=set)

    def begin_file(self) -> None:
        self.file_entity_types.clear()

    def stats_for(self, entity_type: str) -> ParsingStats:
        if entity_type not in self.record_stats:
            self.record_stats[entity_type] = ParsingStats()
        return self.record_stats[entity_type]

    def column_model_for(self, entity_type: str, header_line: str) -> ColumnModel:
        """Return the entity type's column model, building it on first use.

        Opens the entity type's output stream alongside a new model.

        Raises:
            MalformedHeaderError: If a first header has no column names
            UnwritableOutputError: If the output stream cannot be created
        """
        model = self.column_models.get(entity_type)
        if model is not None:
            return model

        model = build_column_model(entity_type, header_line)
        if self.router is not None:
            self.router.open_stream(entity_type, csv_header(model))
        self.column_models[entity_type] = model
        logger.info(f"New entity type {entity_type} with {len(model)} columns")
        return model
