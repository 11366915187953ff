"""
Configuration for column type tag overrides.

SQLite cursors carry no declared column types, so a column that stores
booleans or timestamps is seen as INTEGER or TEXT. A JSON file can pin the
tag of such columns by name or by name pattern:

    {"sqlite": {"columns": {"created_at": "DATETIME"},
                "patterns": {"^is_": "BOOLEAN"}}}
"""
import json
import logging
import pathlib
import re

logger = logging.getLogger(__name__)

DEFAULT_LOCATIONS = (
    '~/.config/dbpipe/type_tags.json',
    '/etc/dbpipe/type_tags.json',
    'type_tags.json',
    )


class TypeTagConfig:
    """Configuration for per-column type tag overrides"""

    _instance = None

    @classmethod
    def get_instance(cls):
        """Get singleton instance"""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls):
        """Drop the singleton so the next lookup reloads configuration"""
        cls._instance = None

    def __init__(self, config_file=None):
        self._tag_mappings = {
            'postgresql': {
                'patterns': {},
                'columns': {}
            },
            'sqlite': {
                'patterns': {},
                'columns': {}
            }
        }

        if config_file:
            self.load_config(config_file)
        else:
            for location in DEFAULT_LOCATIONS:
                path = pathlib.Path(location).expanduser()
                if path.exists():
                    self.load_config(path)
                    break

    def load_config(self, config_file):
        """Load configuration from file, merging over current mappings"""
        try:
            with pathlib.Path(config_file).open() as f:
                config = json.load(f)

            for dialect, mappings in config.items():
                if dialect not in self._tag_mappings:
                    self._tag_mappings[dialect] = {'patterns': {}, 'columns': {}}

                if 'patterns' in mappings:
                    self._tag_mappings[dialect]['patterns'].update(
                        {k: v.upper() for k, v in mappings['patterns'].items()})

                if 'columns' in mappings:
                    self._tag_mappings[dialect]['columns'].update(
                        {k.lower(): v.upper() for k, v in mappings['columns'].items()})

            logger.info(f'Loaded type tag configuration from {config_file}')
        except (OSError, ValueError, AttributeError) as e:
            logger.warning(f'Failed to load type tag config {config_file}: {e}')

    def get_tag_for_column(self, dialect, column_name):
        """Get the configured type tag for a column, or None"""
        if dialect not in self._tag_mappings or not column_name:
            return None

        columns = self._tag_mappings[dialect]['columns']
        if column_name.lower() in columns:
            return columns[column_name.lower()]

        for pattern, tag in self._tag_mappings[dialect]['patterns'].items():
            if re.search(pattern, column_name.lower()):
                return tag

        return None

    def add_column_mapping(self, dialect, column_name, type_tag):
        """Add a specific column mapping"""
        if dialect not in self._tag_mappings:
            self._tag_mappings[dialect] = {'patterns': {}, 'columns': {}}
        self._tag_mappings[dialect]['columns'][column_name.lower()] = type_tag.upper()

    def add_pattern_mapping(self, dialect, pattern, type_tag):
        """Add a column name pattern mapping"""
        if dialect not in self._tag_mappings:
            self._tag_mappings[dialect] = {'patterns': {}, 'columns': {}}
        self._tag_mappings[dialect]['patterns'][pattern] = type_tag.upper()
