import logging

from .path_accessor import PathAccessor
from .connection_processor import ConnectionProcessor
from .attachment_consolidator import AttachmentConsolidator, MidSpanResolver, PRIMARY_SPAN
from .utils import Utils, STRUCTURAL_SOURCE, NOT_AVAILABLE
from ..models.data_models import ConsolidatedAttachment, ReportRow, MergeSpan

# Report columns (0-based)
COL_DESCRIPTION = 11
COL_EXISTING = 12
COL_PROPOSED = 13
COL_MID_SPAN = 14
SUMMARY_COLUMNS = 11

HEADER_ROW_COUNT = 3

NO_ATTACHMENTS = "No attachments on this span"
FROM_POLE = "From Pole"
TO_POLE = "To Pole"


class ReportBuilder:
    """Lays out the report: the fixed header, then one block of rows per pole"""

    def __init__(self, connection_processor=None, resolver=None):
        self.connection_processor = connection_processor or ConnectionProcessor({})
        self.resolver = resolver or MidSpanResolver(self.connection_processor)

    @staticmethod
    def header_rows():
        """The three header rows, with top-level groups on row 1 and sub-headers below"""
        first = [
            "Operation Number",
            "Attachment Action:\n( I )nstalling\n( R )emoving\n( E )xisting",
            "Pole Owner",
            "Pole #",
            "Pole Structure",
            "Proposed Riser (Yes/No) &",
            "Proposed Guy (Yes/No) &",
            "PLA (%) with proposed attachment",
            "Construction Grade of Analysis",
            "Existing Mid-Span Data", None,
            "Make Ready Data", None, None, None,
        ]
        second = [None] * 9 + [
            "Height Lowest Com",
            "Height Lowest CPS Electrical",
            "Attachment Height", None, None,
            "Mid-Span\n(same span as existing)",
        ]
        third = [None] * 11 + [
            "Attacher Description",
            "Existing",
            "Proposed",
            "Proposed",
        ]
        return [ReportRow(ReportRow.HEADER, row) for row in (first, second, third)]

    @staticmethod
    def header_merges():
        merges = [MergeSpan(0, col, 2, col) for col in range(9)]
        merges.extend([
            MergeSpan(0, 9, 0, 10),     # J1:K1
            MergeSpan(0, 11, 0, 14),    # L1:O1
            MergeSpan(1, 9, 2, 9),      # J2:J3
            MergeSpan(1, 10, 2, 10),    # K2:K3
            MergeSpan(1, 11, 1, 13),    # L2:N2
        ])
        return merges

    @staticmethod
    def _text_row(role, label, value=None):
        row = ReportRow(role)
        row[COL_DESCRIPTION] = label
        if value is not None:
            row[COL_EXISTING] = value
        return row

    def _attachment_row(self, entry, connection=None, candidates=()):
        row = ReportRow(ReportRow.ATTACHMENT)
        row[COL_DESCRIPTION] = entry.description
        row[COL_EXISTING] = entry.existing_height()
        row[COL_PROPOSED] = entry.recommended_height
        entry.proposed_mid_span = self.resolver.get_mid_span_data(entry, connection, candidates)
        row[COL_MID_SPAN] = entry.proposed_mid_span
        return row

    @staticmethod
    def _span_wire_ids(end_point):
        wires = end_point.get('wires') if isinstance(end_point, dict) else None
        if not isinstance(wires, list):
            return []
        return [wire for wire in wires if isinstance(wire, (str, int))]

    def _span_rows(self, consolidated, matched, end_points):
        visible = [entry for entry in consolidated.values() if entry.state in ConsolidatedAttachment.REPORTED_STATES]
        rows = []

        if not end_points:
            rows.append(self._text_row(ReportRow.SPAN_HEADER, PRIMARY_SPAN))
            candidates = self.connection_processor.span_connections(matched.survey_node_id)
            for entry in visible:
                rows.append(self._attachment_row(entry, candidates=candidates))
            if len(rows) == 1:
                rows.append(self._text_row(ReportRow.PLACEHOLDER, NO_ATTACHMENTS))
            return rows

        for end_point in end_points:
            rows.append(self._text_row(ReportRow.SPAN_HEADER, AttachmentConsolidator.format_span_header(end_point)))

            target = Utils.canonicalize_pole_id(PathAccessor.get(end_point, 'structureLabel'), STRUCTURAL_SOURCE)
            connection = self.connection_processor.connection_to(matched.survey_node_id, target)
            wire_ids = self._span_wire_ids(end_point)

            # Rows follow the order of the end point's wire list
            on_span = []
            for wire_id in wire_ids:
                for entry in visible:
                    if wire_id in entry.item_ids and entry not in on_span:
                        on_span.append(entry)
            for entry in on_span:
                rows.append(self._attachment_row(entry, connection=connection))
            if not on_span:
                rows.append(self._text_row(ReportRow.PLACEHOLDER, NO_ATTACHMENTS))

        return rows

    def resolve_to_pole(self, matched, end_points=()):
        """
        Canonical id of the neighbouring pole

        Survey connections are walked first; the first outbound structural
        end point is the fallback.
        """
        to_pole = self.connection_processor.resolve_to_pole(matched.survey_node_id)
        if to_pole:
            return to_pole

        for end_point in end_points:
            label = PathAccessor.get(end_point, 'structureLabel')
            if PathAccessor.get(end_point, 'type') != 'PREVIOUS_POLE' and label:
                return Utils.canonicalize_pole_id(label, STRUCTURAL_SOURCE)

        return NOT_AVAILABLE

    def build_pole_block(self, start_row, summary, consolidated, matched, end_points=()):
        """
        Rows and merges for one pole

        Args:
            start_row (int): Report row index of the block's first row
            summary (PoleSummary): Values for columns A-K
            consolidated (dict): Consolidated attachments of the pole
            matched (MatchedPole): The pole and its survey node
            end_points (list): Wire end points of the recommended design

        Returns:
            tuple: (list of ReportRow, list of MergeSpan)
        """
        end_points = [end_point for end_point in end_points if isinstance(end_point, dict)]
        rows = self._span_rows(consolidated, matched, end_points)

        first = rows[0]
        first.role = ReportRow.POLE_HEADER
        for col, value in enumerate(summary.as_columns()):
            first[col] = value

        body_length = len(rows)
        rows.append(self._text_row(ReportRow.FROM_POLE, FROM_POLE, matched.canonical_id))
        rows.append(self._text_row(ReportRow.TO_POLE, TO_POLE, self.resolve_to_pole(matched, end_points)))

        merges = []
        if body_length > 1:
            end_row = start_row + body_length - 1
            merges = [MergeSpan(start_row, col, end_row, col) for col in range(SUMMARY_COLUMNS)]

        logging.debug(f"Pole block {matched.canonical_id}: rows {start_row}-{start_row + len(rows) - 1}, "
                      f"{len(end_points) or 1} span(s)")
        return rows, merges
