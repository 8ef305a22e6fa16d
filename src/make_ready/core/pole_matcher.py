import logging

from .path_accessor import PathAccessor
from .field_paths import (
    STRUCTURAL_LOCATIONS_PATH,
    SURVEY_ATTRIBUTES_PATH,
    SURVEY_POLE_NUMBER_ATTRIBUTE,
    SURVEY_POLE_NUMBER_KEYS,
    SURVEY_POLE_TAG_ATTRIBUTE,
    SURVEY_POLE_TAG_KEYS,
)
from .utils import Utils, STRUCTURAL_SOURCE, SURVEY_SOURCE, UNKNOWN_POLE
from .errors import UnmatchedPoleWarning
from ..models.data_models import MatchedPole

DUPLICATE_POLICIES = ('last', 'first')


def _blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


class PoleMatcher:
    """Pairs structural locations with survey nodes by canonical pole id"""

    def __init__(self, config=None):
        self.config = config or {}
        self.duplicate_policy = self.config.get('duplicate_pole_policy', 'last')
        if self.duplicate_policy not in DUPLICATE_POLICIES:
            logging.warning(f"Unknown duplicate_pole_policy '{self.duplicate_policy}', using 'last'")
            self.duplicate_policy = 'last'
        self.index = {}
        self.collisions = []
        self.warnings = []

    @staticmethod
    def pole_number_for(node):
        """Raw pole number of a survey node, or None when none is recorded"""
        attributes = PathAccessor.as_dict(node, SURVEY_ATTRIBUTES_PATH)

        value = PathAccessor.first_present(attributes.get(SURVEY_POLE_NUMBER_ATTRIBUTE), SURVEY_POLE_NUMBER_KEYS)
        if _blank(value):
            value = PathAccessor.first_present(attributes.get(SURVEY_POLE_TAG_ATTRIBUTE), SURVEY_POLE_TAG_KEYS)
        if _blank(value):
            # pole_tag is usually keyed by a generated id: {"-Nx..": {"tagtext": "PL1"}}
            value = PathAccessor.first_present(attributes, (SURVEY_POLE_TAG_ATTRIBUTE,))

        if isinstance(value, dict):
            value = PathAccessor.get(value, 'tagtext', str(value))

        return None if _blank(value) else value

    @staticmethod
    def canonical_id_for(node):
        """Canonical pole id of a survey node, or None when it has no pole number"""
        raw = PoleMatcher.pole_number_for(node)
        if raw is None:
            return None
        canonical = Utils.canonicalize_pole_id(raw, SURVEY_SOURCE)
        return None if canonical == UNKNOWN_POLE else canonical

    def build_index(self, survey):
        """
        Build the canonical id -> (node id, node) lookup over all survey nodes

        Args:
            survey (dict): Parsed survey export

        Returns:
            dict: Canonical pole id to (node_id, node) tuples
        """
        self.index = {}
        self.collisions = []
        nodes = PathAccessor.as_dict(survey, 'nodes')

        for node_id, node in nodes.items():
            canonical = self.canonical_id_for(node)
            if canonical is None:
                logging.debug(f"Survey node {node_id} has no pole number; excluded from matching")
                continue

            if canonical in self.index:
                kept_id = self.index[canonical][0]
                self.collisions.append((canonical, kept_id, node_id))
                if self.duplicate_policy == 'first':
                    logging.warning(f"Survey nodes {kept_id} and {node_id} both normalize to '{canonical}'; keeping {kept_id}")
                    continue
                logging.warning(f"Survey nodes {kept_id} and {node_id} both normalize to '{canonical}'; keeping {node_id}")

            self.index[canonical] = (node_id, node)

        logging.info(f"Indexed {len(self.index)} survey poles out of {len(nodes)} nodes ({len(self.collisions)} duplicate ids)")
        return self.index

    def match(self, structural, survey):
        """
        Pair every structural location with its survey counterpart

        Returns:
            list: MatchedPole objects in structural order. Unmatched poles carry an empty survey record.
        """
        self.build_index(survey)
        self.warnings = []
        matched = []

        for location in PathAccessor.as_list(structural, STRUCTURAL_LOCATIONS_PATH):
            label = PathAccessor.get(location, 'label')
            canonical = Utils.canonicalize_pole_id(label, STRUCTURAL_SOURCE)
            node_id, node = self.index.get(canonical, (None, {}))

            if node_id is None:
                warning = UnmatchedPoleWarning(canonical)
                self.warnings.append(warning)
                logging.warning(str(warning))

            matched.append(MatchedPole(location, node, node_id, canonical))

        matched_count = sum(1 for pole in matched if pole.is_matched())
        logging.info(f"Matched {matched_count} of {len(matched)} structural poles to survey nodes")
        return matched
