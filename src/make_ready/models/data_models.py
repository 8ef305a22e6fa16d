# This file contains data models used throughout the application, defining structures for various data entities.

import pandas as pd

NUM_COLUMNS = 15

COLUMN_LABELS = [
    "Operation Number",
    "Attachment Action",
    "Pole Owner",
    "Pole #",
    "Pole Structure",
    "Proposed Riser",
    "Proposed Guy",
    "PLA%",
    "Construction Grade",
    "Height Lowest Com",
    "Height Lowest CPS Electrical",
    "Attacher Description",
    "Existing",
    "Proposed",
    "Mid-Span Proposed",
]


class SurveyAttachment:
    """An attachment measured at the pole by the field survey"""

    def __init__(self, item_id, owner, type_token, height_feet=None, trace_id=None, move_inches=None):
        self.item_id = item_id
        self.owner = owner
        self.type_token = type_token
        self.height_feet = height_feet
        self.trace_id = trace_id
        self.move_inches = move_inches

    def __repr__(self):
        return f"SurveyAttachment({self.item_id!r}, {self.owner!r}, {self.type_token!r}, {self.height_feet!r})"


class ConsolidatedAttachment:
    """One physical attachment merged across both design states and the survey"""

    MEASURED_ONLY = 'measured_only'
    RECOMMENDED_ONLY = 'recommended_only'
    EXISTING = 'existing'
    MODIFIED = 'modified'

    # States that still exist on the pole once make-ready is complete
    REPORTED_STATES = (RECOMMENDED_ONLY, EXISTING, MODIFIED)

    def __init__(self, key, description, owner, state):
        self.key = key
        self.description = description
        self.owner = owner
        self.state = state
        self.item_ids = []
        self.measured_height = "NA"
        self.recommended_height = "NA"
        self.survey_height = "NA"
        self.proposed_mid_span = "NA"
        self.measured_feet = None
        self.recommended_feet = None
        self.trace_ids = []
        self.move_inches = None

    def existing_height(self):
        """Height shown in the Existing column: survey first, then as-measured"""
        if self.state == self.RECOMMENDED_ONLY:
            return ''
        if self.survey_height != "NA":
            return self.survey_height
        return self.measured_height

    def effective_move_inches(self):
        """Proposed move of the attachment in inches (survey delta, else design delta)"""
        if self.move_inches is not None:
            return self.move_inches
        if self.measured_feet is not None and self.recommended_feet is not None:
            return (self.recommended_feet - self.measured_feet) * 12
        return 0.0

    def __repr__(self):
        return f"ConsolidatedAttachment({self.key!r}, state={self.state!r}, ids={self.item_ids!r})"


class MatchedPole:
    """A structural location paired with its survey node (or an empty record)"""

    def __init__(self, structural, survey, survey_node_id, canonical_id):
        self.structural = structural
        self.survey = survey if survey is not None else {}
        self.survey_node_id = survey_node_id
        self.canonical_id = canonical_id

    def is_matched(self):
        return self.survey_node_id is not None


class PoleSummary:
    """Pole-level values for report columns A-K"""

    def __init__(self, operation_number, attachment_action, pole_owner, pole_number, pole_structure,
                 proposed_riser, proposed_guy, pla, construction_grade, lowest_com, lowest_power):
        self.operation_number = operation_number
        self.attachment_action = attachment_action
        self.pole_owner = pole_owner
        self.pole_number = pole_number
        self.pole_structure = pole_structure
        self.proposed_riser = proposed_riser
        self.proposed_guy = proposed_guy
        self.pla = pla
        self.construction_grade = construction_grade
        self.lowest_com = lowest_com
        self.lowest_power = lowest_power

    def as_columns(self):
        return [
            self.operation_number,
            self.attachment_action,
            self.pole_owner,
            self.pole_number,
            self.pole_structure,
            self.proposed_riser,
            self.proposed_guy,
            self.pla,
            self.construction_grade,
            self.lowest_com,
            self.lowest_power,
        ]


class ReportRow:
    HEADER = 'header'
    POLE_HEADER = 'pole-header'
    SPAN_HEADER = 'span-header'
    ATTACHMENT = 'attachment'
    FROM_POLE = 'from-pole'
    TO_POLE = 'to-pole'
    PLACEHOLDER = 'placeholder'

    def __init__(self, role, values=None):
        self.role = role
        self.values = list(values) if values is not None else [None] * NUM_COLUMNS
        if len(self.values) != NUM_COLUMNS:
            raise ValueError(f"A report row needs {NUM_COLUMNS} columns, got {len(self.values)}")

    def __getitem__(self, col):
        return self.values[col]

    def __setitem__(self, col, value):
        self.values[col] = value

    def __eq__(self, other):
        return isinstance(other, ReportRow) and self.role == other.role and self.values == other.values

    def __repr__(self):
        return f"ReportRow({self.role!r}, {self.values!r})"


class MergeSpan:
    """Inclusive, 0-based cell region that renders as one merged cell"""

    def __init__(self, start_row, start_col, end_row, end_col):
        self.start_row = start_row
        self.start_col = start_col
        self.end_row = end_row
        self.end_col = end_col

    def as_tuple(self):
        return (self.start_row, self.start_col, self.end_row, self.end_col)

    def __eq__(self, other):
        return isinstance(other, MergeSpan) and self.as_tuple() == other.as_tuple()

    def __hash__(self):
        return hash(self.as_tuple())

    def __repr__(self):
        return f"MergeSpan{self.as_tuple()}"


class Report:
    """Rows, merged regions and non-fatal warnings produced by one run"""

    def __init__(self, rows=None, merges=None, warnings=None, header_row_count=0):
        self.rows = rows if rows is not None else []
        self.merges = merges if merges is not None else []
        self.warnings = warnings if warnings is not None else []
        self.header_row_count = header_row_count

    def values(self):
        return [list(row.values) for row in self.rows]

    def data_rows(self):
        return self.rows[self.header_row_count:]

    def pole_count(self):
        return sum(1 for row in self.rows if row.role == ReportRow.POLE_HEADER)

    def to_dataframe(self):
        """Data rows as a DataFrame with one column per report column"""
        df = pd.DataFrame([row.values for row in self.data_rows()], columns=COLUMN_LABELS)
        df.insert(0, 'Row Role', [row.role for row in self.data_rows()])
        return df
