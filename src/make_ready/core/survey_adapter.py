import logging

from .path_accessor import PathAccessor
from .field_paths import (
    SURVEY_ATTACHMENT_MAP_PATHS,
    SURVEY_ATTACHMENT_OWNER_PATHS,
    SURVEY_ATTACHMENT_TYPE_PATHS,
    SURVEY_ATTACHMENT_HEIGHT_FT_PATH,
    SURVEY_ATTACHMENT_HEIGHT_IN_PATH,
    SURVEY_ATTACHMENT_MOVE_PATHS,
    SURVEY_ATTACHMENT_TRACE_PATHS,
    SURVEY_PHOTOFIRST_GROUPS,
    SURVEY_TRACE_DATA_PATH,
)
from .utils import Utils
from ..models.data_models import SurveyAttachment


class SurveyAttachmentSource:
    """Reads the attachments recorded at one survey node.

    Survey exports store attachments in one of two shapes: a top-level
    "attachments" map per node, or photo measurements under
    photofirst_data.wire / photofirst_data.equipment. for_node() picks the
    variant that matches the node actually being read.
    """

    name = 'none'

    def __init__(self, survey=None):
        self.survey = survey or {}

    @classmethod
    def applies_to(cls, node):
        return False

    def read(self, node):
        return []

    @staticmethod
    def for_node(node, survey=None):
        """Return the attachment source matching the shape of node"""
        for source_cls in (AttachmentMapSource, PhotofirstSource):
            if source_cls.applies_to(node):
                return source_cls(survey)
        return SurveyAttachmentSource(survey)

    @staticmethod
    def read_node(node, survey=None):
        source = SurveyAttachmentSource.for_node(node, survey)
        attachments = source.read(node)
        logging.debug(f"Read {len(attachments)} survey attachment(s) using the '{source.name}' source")
        return attachments


class AttachmentMapSource(SurveyAttachmentSource):
    """Attachments stored as node['attachments'] (or attributes.attachments) keyed by id"""

    name = 'attachments'

    @staticmethod
    def _attachment_map(node):
        for path in SURVEY_ATTACHMENT_MAP_PATHS:
            records = PathAccessor.as_dict(node, path)
            if records:
                return records
        return {}

    @classmethod
    def applies_to(cls, node):
        return bool(cls._attachment_map(node))

    def read(self, node):
        attachments = []
        for item_id, record in self._attachment_map(node).items():
            if not isinstance(record, dict):
                logging.debug(f"Skipping survey attachment {item_id}: not an object")
                continue

            feet = Utils.to_number(PathAccessor.get(record, SURVEY_ATTACHMENT_HEIGHT_FT_PATH))
            inches = Utils.to_number(PathAccessor.get(record, SURVEY_ATTACHMENT_HEIGHT_IN_PATH))
            height_feet = None
            if feet is not None or inches is not None:
                height_feet = (feet or 0) + (inches or 0) / 12

            attachments.append(SurveyAttachment(
                item_id=item_id,
                owner=str(PathAccessor.first_of(record, SURVEY_ATTACHMENT_OWNER_PATHS, 'Unknown')),
                type_token=PathAccessor.first_of(record, SURVEY_ATTACHMENT_TYPE_PATHS),
                height_feet=height_feet,
                trace_id=PathAccessor.first_of(record, SURVEY_ATTACHMENT_TRACE_PATHS),
                move_inches=Utils.to_number(PathAccessor.first_of(record, SURVEY_ATTACHMENT_MOVE_PATHS)),
            ))
        return attachments


class PhotofirstSource(SurveyAttachmentSource):
    """Attachments measured in photos: photofirst_data.wire / .equipment with heights in inches"""

    name = 'photofirst'

    @classmethod
    def applies_to(cls, node):
        return any(PathAccessor.as_dict(node, f'photofirst_data.{group}') for group in SURVEY_PHOTOFIRST_GROUPS)

    def read(self, node):
        traces = PathAccessor.as_dict(self.survey, SURVEY_TRACE_DATA_PATH)
        attachments = []

        for group in SURVEY_PHOTOFIRST_GROUPS:
            for item_id, item in PathAccessor.as_dict(node, f'photofirst_data.{group}').items():
                if not isinstance(item, dict):
                    continue

                trace_id = item.get('_trace')
                trace = traces.get(trace_id, {}) if trace_id else {}
                owner = trace.get('company') or item.get('company') or 'Unknown'
                type_token = (trace.get('cable_type') or trace.get('equipment_type')
                              or item.get('cable_type') or item.get('equipment_type'))

                height_inches = Utils.to_number(item.get('_measured_height'))
                attachments.append(SurveyAttachment(
                    item_id=item_id,
                    owner=str(owner),
                    type_token=type_token,
                    height_feet=None if height_inches is None else height_inches / 12,
                    trace_id=trace_id,
                    move_inches=Utils.to_number(item.get('mr_move')),
                ))
        return attachments
