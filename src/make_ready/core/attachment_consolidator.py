import re
import logging

from .path_accessor import PathAccessor
from .field_paths import (
    STRUCTURAL_OWNER_PATH,
    STRUCTURAL_ATTACHMENT_HEIGHT_VALUE_PATH,
    STRUCTURAL_ATTACHMENT_HEIGHT_UNIT_PATH,
    STRUCTURAL_DEFAULT_UNIT,
    STRUCTURAL_WIRES_PATH,
    STRUCTURAL_EQUIPMENTS_PATH,
    SURVEY_WORK_TYPE_PATHS,
)
from .connection_processor import ConnectionProcessor
from .utils import Utils, STRUCTURAL_SOURCE, NOT_AVAILABLE
from ..models.data_models import ConsolidatedAttachment

INSTALLING = "Installing"
REMOVING = "Removing"
EXISTING = "Existing"
EXISTING_DENIED = "Existing (Denied)"

PRIMARY_SPAN = "Primary Span"
BACKSPAN = "Backspan"

_UNDERGROUND_PATTERN = re.compile(r'underground|\bug\b', re.IGNORECASE)


class AttachmentClassifier:
    """Builds a human-readable description for a structural wire or equipment item"""

    @staticmethod
    def describe_item(item):
        """
        Describe an attachment from its client item, usage group and owner

        Args:
            item (dict): Structural wire or equipment item

        Returns:
            str: Description such as "ACME Primary", "Neutral" or "Zayo Fiber Optic Com"
        """
        if not isinstance(item, dict):
            return "Unknown"

        client_description = PathAccessor.get(item, 'clientItem.description')
        if client_description:
            return str(client_description)

        usage_group = str(PathAccessor.get(item, 'usageGroup', '')).upper()
        size = str(PathAccessor.get(item, 'clientItem.size', ''))
        item_type = PathAccessor.get(item, 'clientItem.type')
        owner = str(PathAccessor.get(item, STRUCTURAL_OWNER_PATH, ''))
        owner_upper = owner.upper()

        if 'PRIMARY' in usage_group:
            return f"{owner} Primary" if owner else "Primary"
        if usage_group == 'NEUTRAL':
            return "Neutral"
        if usage_group in ('COMMUNICATION_BUNDLE', 'COMMUNICATIONS'):
            if 'CHARTER' in owner_upper or 'SPECTRUM' in owner_upper:
                return "Charter/Spectrum Fiber Optic"
            if 'AT&T' in owner_upper:
                return "AT&T Fiber Optic Com" if 'fiber' in size.lower() else "AT&T Telco Com"
            if 'CPS' in owner_upper:
                return "CPS Supply Fiber"
            return f"{owner} Fiber Optic Com" if owner else "Fiber Optic Com"
        if usage_group == 'COMMUNICATION_SERVICE':
            if 'AT&T' in owner_upper:
                return "AT&T Com Drop"
            return f"{owner} Com Drop" if owner else "Com Drop"
        if usage_group == 'UTILITY_SERVICE' and 'CPS' in owner_upper:
            return "CPS Secondary Drop Loop"
        if 'STREET_LIGHT' in usage_group:
            return f"{owner} Street Light Drop" if owner else "Street Light Drop"
        if usage_group == 'RISER_EQUIPMENT' or item_type == 'RISER':
            return f"{owner} Riser" if owner else "Riser"
        if usage_group == 'ANCHOR_GUY_EQUIPMENT' or item_type == 'GUY_ASSEMBLY':
            return f"{owner} Guy" if owner else "Guy"

        if owner and size:
            return f"{owner} {size}"
        if size:
            return size
        if owner:
            return f"{owner} Cable"
        return usage_group or "Unknown Attachment"


class AttachmentConsolidator:
    """Merges measured, recommended and surveyed attachment records for one pole"""

    def __init__(self, config=None):
        self.config = config or {}
        self.measured_names = self.config.get('measured_design_names', ["Measured Design"])
        self.recommended_names = self.config.get('recommended_design_names', ["Recommended Design"])

    @staticmethod
    def attachment_key(owner, description):
        return f"{str(owner).upper()}_{str(description).upper()}"

    @staticmethod
    def _find_design(designs, names, layer_type):
        for design in designs:
            if design.get('name') in names or design.get('label') in names:
                return design
            if str(design.get('layerType', '')).lower() == layer_type.lower():
                return design
        return None

    def select_designs(self, location):
        """
        Pick the as-measured and as-recommended designs of a structural location.

        Designs are found by name/label or layer type. Positional fallback
        (measured first, recommended second) only applies to designs not
        already claimed by the other state.

        Returns:
            tuple: (measured design, recommended design); {} where absent
        """
        designs = [design for design in PathAccessor.as_list(location, 'designs') if isinstance(design, dict)]
        measured = self._find_design(designs, self.measured_names, 'Measured')
        recommended = self._find_design(designs, self.recommended_names, 'Recommended')

        if recommended is measured:
            recommended = None
        if measured is None and designs and designs[0] is not recommended:
            measured = designs[0]
        if recommended is None and len(designs) > 1 and designs[1] is not measured:
            recommended = designs[1]

        return measured or {}, recommended or {}

    @staticmethod
    def design_items(design):
        """Wires followed by equipment of a design"""
        return PathAccessor.as_list(design, STRUCTURAL_WIRES_PATH) + PathAccessor.as_list(design, STRUCTURAL_EQUIPMENTS_PATH)

    @staticmethod
    def _item_height(item):
        value = PathAccessor.get(item, STRUCTURAL_ATTACHMENT_HEIGHT_VALUE_PATH)
        unit = str(PathAccessor.get(item, STRUCTURAL_ATTACHMENT_HEIGHT_UNIT_PATH, STRUCTURAL_DEFAULT_UNIT)).upper()
        return Utils.to_feet_inches(value, unit), Utils.to_decimal_feet(value, unit)

    @staticmethod
    def _item_id(item, design_label, index):
        item_id = item.get('id') if isinstance(item, dict) else None
        return item_id if item_id is not None else f"{design_label}-{index}"

    def _fold(self, item, design_label, index):
        owner = str(PathAccessor.get(item, STRUCTURAL_OWNER_PATH, 'Unknown'))
        description = AttachmentClassifier.describe_item(item)
        key = self.attachment_key(owner, description)
        height, feet = self._item_height(item)
        item_id = self._item_id(item, design_label, index)
        return key, owner, description, height, feet, item_id

    def consolidate(self, measured_design, recommended_design, survey_attachments=()):
        """
        Merge per-attachment records into one entry per owner + description

        Args:
            measured_design (dict): As-measured design
            recommended_design (dict): As-recommended design
            survey_attachments (list): SurveyAttachment records for the pole

        Returns:
            dict: Attachment key to ConsolidatedAttachment, in first-seen order
        """
        entries = {}

        for index, item in enumerate(self.design_items(measured_design)):
            key, owner, description, height, feet, item_id = self._fold(item, 'measured', index)
            entry = entries.get(key)
            if entry is None:
                entry = ConsolidatedAttachment(key, description, owner, ConsolidatedAttachment.MEASURED_ONLY)
                entries[key] = entry
            if item_id not in entry.item_ids:
                entry.item_ids.append(item_id)
            if entry.measured_height == NOT_AVAILABLE and height != NOT_AVAILABLE:
                entry.measured_height = height
                entry.measured_feet = feet

        for index, item in enumerate(self.design_items(recommended_design)):
            key, owner, description, height, feet, item_id = self._fold(item, 'recommended', index)
            entry = entries.get(key)
            if entry is None:
                entry = ConsolidatedAttachment(key, description, owner, ConsolidatedAttachment.RECOMMENDED_ONLY)
                entries[key] = entry
            elif entry.state == ConsolidatedAttachment.MEASURED_ONLY:
                if height != NOT_AVAILABLE and height != entry.measured_height:
                    entry.state = ConsolidatedAttachment.MODIFIED
                else:
                    entry.state = ConsolidatedAttachment.EXISTING
            if item_id not in entry.item_ids:
                entry.item_ids.append(item_id)
            if height != NOT_AVAILABLE or entry.recommended_height == NOT_AVAILABLE:
                entry.recommended_height = height
                entry.recommended_feet = feet

        for attachment in survey_attachments:
            self._apply_survey_attachment(entries, attachment)

        logging.debug(f"Consolidated {len(entries)} attachment(s): "
                      + ", ".join(f"{entry.description} [{entry.state}]" for entry in entries.values()))
        return entries

    @staticmethod
    def _apply_survey_attachment(entries, attachment):
        """Fill survey measurements into the last entry with the same owner whose description contains the survey type"""
        prefix = f"{str(attachment.owner).upper()}_"
        token = str(attachment.type_token or '').strip().lower()

        target = None
        for entry in entries.values():
            if entry.key.startswith(prefix) and (not token or token in entry.description.lower()):
                target = entry

        if target is None:
            logging.debug(f"Survey attachment {attachment.item_id} ({attachment.owner} {attachment.type_token}) "
                          f"has no structural counterpart; dropped")
            return

        if attachment.height_feet is not None:
            target.survey_height = Utils.to_feet_inches(attachment.height_feet, 'ft')
        if attachment.trace_id and attachment.trace_id not in target.trace_ids:
            target.trace_ids.append(attachment.trace_id)
        if attachment.move_inches is not None and target.move_inches is None:
            target.move_inches = attachment.move_inches

    @staticmethod
    def derive_action(consolidated, survey_node=None):
        """
        Classify the pole's attachment action

        Returns:
            str: "Installing", "Removing", "Existing", or "Existing (Denied)" when the survey denied the work
        """
        states = [entry.state for entry in consolidated.values()]
        if ConsolidatedAttachment.RECOMMENDED_ONLY in states:
            action = INSTALLING
        elif states and all(state == ConsolidatedAttachment.MEASURED_ONLY for state in states):
            action = REMOVING
        else:
            action = EXISTING

        work_type = PathAccessor.first_of(survey_node or {}, SURVEY_WORK_TYPE_PATHS, '')
        if str(work_type).strip().lower() == 'denied':
            logging.info(f"Survey work type is denied; overriding attachment action '{action}'")
            action = EXISTING_DENIED

        return action

    @staticmethod
    def format_span_header(end_point):
        """Label a wire end point as "Backspan" or "Ref (<direction>) to <pole>" """
        if not end_point:
            return PRIMARY_SPAN

        if end_point.get('type') == 'PREVIOUS_POLE':
            return BACKSPAN

        degrees = Utils.to_number(end_point.get('direction'))
        if degrees is None:
            direction = end_point.get('direction') or 'Unknown Direction'
        else:
            direction = Utils.compass_direction(degrees)

        label = end_point.get('structureLabel') or 'Unknown Target'
        if Utils.looks_like_pole_number(label):
            label = Utils.canonicalize_pole_id(label, STRUCTURAL_SOURCE)

        return f"Ref ({direction}) to {label}"


class MidSpanResolver:
    """Works out the proposed mid-span height of an attachment on one span"""

    def __init__(self, connection_processor=None):
        self.connection_processor = connection_processor or ConnectionProcessor({})

    def get_mid_span_data(self, attachment, connection=None, candidates=()):
        """
        Proposed mid-span value for an attachment

        Args:
            attachment (ConsolidatedAttachment): Attachment on the span
            connection (dict, optional): Survey connection for this span
            candidates (list, optional): Connections searched when no single span connection is known

        Returns:
            str: "UG" for underground routing, a F'-I" height, or "NA"
        """
        if connection is not None and ConnectionProcessor.is_underground(connection):
            return "UG"

        search = [connection] if connection is not None else list(candidates)
        for conn in search:
            measured = self.connection_processor.midspan_height_inches(conn, attachment.trace_ids)
            if measured is not None:
                proposed = measured + attachment.effective_move_inches()
                return Utils.to_feet_inches(Utils.inches_to_decimal_feet(proposed), 'ft')

        if _UNDERGROUND_PATTERN.search(attachment.description or ''):
            return "UG"
        return NOT_AVAILABLE
